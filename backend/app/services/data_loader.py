"""
MedAI Backend — Content Data Loader
=====================================

What:  Reads a named collection from the backing store, parses it, validates
       every record and returns a uniform Envelope.
Why:   Routes, lookups and the search index all branch on `success` instead of
       each growing its own try/except around file access.
How:   aiofiles reads the collection file, json parses it, the collection's
       validator runs over every record (fail-fast). Any exception becomes
       `Envelope.failure(...)` carrying the matching ErrorKind.
Who:   Called by lookup operations, route adapters and the search index cache.
When:  Every request. Content is loaded fresh; only the search index caches.

Failure mapping:
    file or data root absent   → ContentStoreMissingError  (store_missing)
    unreadable / invalid JSON  → ParseError                (parse_error)
    top-level not a JSON array → ParseError                (parse_error)
    any record fails schema    → ValidationError           (validation_error)

The loader never raises. Concurrent loads of different collections share no
state and need no locks: the backing store is read-only here.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import aiofiles

from app.config import settings
from app.exceptions import ContentStoreMissingError, ParseError
from app.schemas.envelope import Envelope
from app.services.validators import (
    validate_application_info,
    validate_collection,
    validate_event,
    validate_faculty_member,
    validate_news_article,
    validate_program,
    validate_research_project,
)

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    """Named collections of the backing store."""

    FACULTY = "faculty"
    RESEARCH = "research"
    PROGRAMS = "programs"
    APPLICATIONS = "applications"
    NEWS = "news"
    EVENTS = "events"

    @property
    def relative_path(self) -> str:
        return COLLECTION_PATHS[self]


# ── Backing Store Layout ──────────────────────────────────────────────────
# Paths are relative to settings.data_root
COLLECTION_PATHS: Dict[Collection, str] = {
    Collection.FACULTY: "faculty/sample.json",
    Collection.RESEARCH: "research/sample.json",
    Collection.PROGRAMS: "programs/sample.json",
    Collection.APPLICATIONS: "programs/applications.json",
    Collection.NEWS: "news/sample.json",
    Collection.EVENTS: "events/sample.json",
}

COLLECTION_VALIDATORS: Dict[Collection, Callable[[Any], Any]] = {
    Collection.FACULTY: validate_faculty_member,
    Collection.RESEARCH: validate_research_project,
    Collection.PROGRAMS: validate_program,
    Collection.APPLICATIONS: validate_application_info,
    Collection.NEWS: validate_news_article,
    Collection.EVENTS: validate_event,
}


class ContentLoader:
    """
    Loads collections from a data root.

    The root defaults to `settings.data_root` and is resolved on every call,
    so tests (and the health check) can point a fresh loader anywhere.
    """

    def __init__(self, data_root: Optional[Union[str, Path]] = None):
        self._data_root = Path(data_root) if data_root is not None else None

    @property
    def data_root(self) -> Path:
        if self._data_root is not None:
            return self._data_root
        return settings.data_root_path

    def path_for(self, collection: Collection) -> Path:
        return self.data_root / collection.relative_path

    async def read_records(self, path: Path) -> List[Any]:
        """
        Read and parse one JSON array file.

        Raises:
            ContentStoreMissingError: File does not exist
            ParseError: File unreadable, not JSON, or not a JSON array
        """
        if not path.is_file():
            raise ContentStoreMissingError(
                message=f"Content file not found: {path.name}",
                context={"path": str(path)},
            )

        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                raw = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(
                message=f"Could not read {path.name}: {e}",
                context={"path": str(path)},
            ) from e

        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ParseError(
                message=f"Invalid JSON in {path.name} at line {e.lineno}: {e.msg}",
                context={"path": str(path)},
            ) from e

        if not isinstance(records, list):
            raise ParseError(
                message=f"{path.name} must contain a JSON array, got {type(records).__name__}",
                context={"path": str(path)},
            )
        return records

    async def load(self, collection: Collection) -> Envelope[List[Any]]:
        """
        Load, parse and validate every record of `collection`.

        Returns:
            Envelope with the full validated list, or a failed envelope naming
            the problem. Never raises.
        """
        collection = Collection(collection)
        path = self.path_for(collection)
        try:
            records = await self.read_records(path)
            items = validate_collection(records, COLLECTION_VALIDATORS[collection])
        except Exception as e:
            logger.error(
                "Failed to load collection '%s' from %s: %s: %s",
                collection.value,
                path,
                type(e).__name__,
                e,
            )
            return Envelope.from_exception(e)

        logger.debug("Loaded %d %s record(s) from %s", len(items), collection.value, path)
        return Envelope.ok(items)

    # ── Per-collection shortcuts ───────────────────────────────────────────

    async def load_faculty(self) -> Envelope[List[Any]]:
        return await self.load(Collection.FACULTY)

    async def load_research(self) -> Envelope[List[Any]]:
        return await self.load(Collection.RESEARCH)

    async def load_programs(self) -> Envelope[List[Any]]:
        return await self.load(Collection.PROGRAMS)

    async def load_applications(self) -> Envelope[List[Any]]:
        return await self.load(Collection.APPLICATIONS)

    async def load_news(self) -> Envelope[List[Any]]:
        return await self.load(Collection.NEWS)

    async def load_events(self) -> Envelope[List[Any]]:
        return await self.load(Collection.EVENTS)


# Singleton instance
content_loader = ContentLoader()
