"""
MedAI Backend — Content Health Check
======================================

What:  Walks the backing store and reports, per JSON file, whether it parses,
       holds an array, has unique ids and (for known collections) passes
       schema validation.
Why:   Editors change content files by hand; this surfaces a broken file
       before a page that depends on it starts answering 500.
How:   Every `*.json` under the data root is read through the loader's
       parser. Per-file problems land in the report; only an absent or
       unreadable data root fails the whole check.

Report semantics:
    validFiles    files with no error (warnings allowed)
    invalidFiles  files with at least one error
    warnings      number of warning entries (e.g. empty arrays)
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from app.exceptions import ContentError, ContentStoreMissingError, ParseError
from app.schemas.envelope import ContentHealthReport, Envelope, HealthIssue
from app.services.data_loader import COLLECTION_PATHS, COLLECTION_VALIDATORS, ContentLoader
from app.services.validators import validate_collection

logger = logging.getLogger(__name__)

# relative posix path → collection, for files the loader knows how to validate
_KNOWN_FILES = {path: collection for collection, path in COLLECTION_PATHS.items()}


class ContentHealthChecker:
    def __init__(self, data_root: Optional[Union[str, Path]] = None):
        self._loader = ContentLoader(data_root)

    @property
    def data_root(self) -> Path:
        return self._loader.data_root

    def _discover(self) -> List[Path]:
        root = self.data_root
        if not root.is_dir():
            raise ContentStoreMissingError(
                message=f"Data directory not found: {root}",
                context={"path": str(root)},
            )
        try:
            return sorted(p for p in root.rglob("*.json") if p.is_file())
        except OSError as e:
            raise ParseError(
                message=f"Failed to read directory: {e}",
                context={"path": str(root)},
            ) from e

    async def _check_file(self, path: Path) -> List[HealthIssue]:
        relative = path.relative_to(self.data_root).as_posix()
        issues: List[HealthIssue] = []

        try:
            records = await self._loader.read_records(path)
        except ContentError as e:
            return [HealthIssue(file=relative, type="error", message=e.message)]

        if not records:
            issues.append(HealthIssue(file=relative, type="warning", message="Array is empty"))

        ids = [r["id"] for r in records if isinstance(r, dict) and "id" in r]
        duplicates = [str(i) for i, n in Counter(map(str, ids)).items() if n > 1]
        if duplicates:
            issues.append(
                HealthIssue(
                    file=relative,
                    type="error",
                    message=f"Duplicate IDs found: {', '.join(duplicates)}",
                )
            )

        collection = _KNOWN_FILES.get(relative)
        if collection is not None and records:
            try:
                validate_collection(records, COLLECTION_VALIDATORS[collection])
            except ContentError as e:
                issues.append(HealthIssue(file=relative, type="error", message=e.message))

        return issues

    async def run(self) -> ContentHealthReport:
        """
        Raises:
            ContentStoreMissingError: data root does not exist
            ParseError: data root could not be listed
        """
        files = self._discover()
        report = ContentHealthReport(total_files=len(files))

        for path in files:
            issues = await self._check_file(path)
            if any(issue.type == "error" for issue in issues):
                report.invalid_files += 1
            else:
                report.valid_files += 1
            report.warnings += sum(1 for issue in issues if issue.type == "warning")
            report.errors.extend(issues)

        logger.info(
            "Content health check: %d files, %d valid, %d invalid, %d warnings",
            report.total_files,
            report.valid_files,
            report.invalid_files,
            report.warnings,
        )
        return report

    async def check(self) -> Envelope[Dict[str, Any]]:
        """run() folded into an envelope; never raises."""
        try:
            report = await self.run()
        except Exception as e:
            logger.error("Content health check failed: %s: %s", type(e).__name__, e)
            return Envelope.from_exception(e)
        return Envelope.ok(report.model_dump(mode="json", by_alias=True))
