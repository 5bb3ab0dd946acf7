"""
MedAI Backend — Lookup & Filter Operations
============================================

What:  Operations derived from the loaders: find-by-id, find-by-slug,
       related-item selection, field filtering, plus the list filters,
       sorting and pagination behind the collection endpoints.
Why:   Keeps query semantics out of the routers so they can be exercised
       directly, without HTTP.
How:   get_by_id / get_by_slug load through a ContentLoader and return an
       Envelope (never raise). Everything else is a pure function over an
       already-loaded list and returns a new list; inputs are never mutated.

Matching rules:
    - ids and slugs: exact string equality
    - related items: shared tag, source excluded, original order, capped
    - free-text filters: case-insensitive substring
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Sequence

from pydantic.alias_generators import to_camel, to_snake

from app.exceptions import NotFoundError
from app.schemas.envelope import Envelope, Page, Pagination
from app.services.data_loader import Collection, ContentLoader, content_loader

logger = logging.getLogger(__name__)

DEFAULT_RELATED_LIMIT = 3


def _field_value(item: Any, field_name: str) -> Any:
    """Reads `field_name` (snake_case or camelCase) from a model or a dict."""
    if isinstance(item, dict):
        for key in (field_name, to_camel(field_name), to_snake(field_name)):
            if key in item:
                return item[key]
        return None
    return getattr(item, to_snake(field_name), None)


def find_one(items: Sequence[Any], field_name: str, value: Any) -> Optional[Any]:
    """First item whose `field_name` equals `value`, or None."""
    for item in items:
        if _field_value(item, field_name) == value:
            return item
    return None


# ══════════════════════════════════════════════════════════════════════════
# Single-entity lookups
# ══════════════════════════════════════════════════════════════════════════


async def _find_one(
    collection: Collection,
    field_name: str,
    value: str,
    resource: str,
    loader: Optional[ContentLoader],
) -> Envelope[Any]:
    loader = loader or content_loader
    try:
        loaded = await loader.load(collection)
        if not loaded.success:
            return loaded

        item = find_one(loaded.data, field_name, value)
        if item is not None:
            return Envelope.ok(item)

        logger.info("%s with %s=%r not found in '%s'", resource, field_name, value, collection.value)
        return Envelope.from_exception(NotFoundError(resource=resource, resource_id=value))
    except Exception as e:
        logger.error("Lookup in '%s' failed: %s: %s", collection.value, type(e).__name__, e)
        return Envelope.from_exception(e)


async def get_by_id(
    collection: Collection,
    item_id: str,
    resource: str = "Item",
    loader: Optional[ContentLoader] = None,
) -> Envelope[Any]:
    """
    Return the single element of `collection` whose id equals `item_id`.

    A failed load is passed through unchanged (its kind decides the status);
    a successful load without a match yields a NOT_FOUND envelope.
    """
    return await _find_one(collection, "id", item_id, resource, loader)


async def get_by_slug(
    collection: Collection,
    slug: str,
    resource: str = "Item",
    loader: Optional[ContentLoader] = None,
) -> Envelope[Any]:
    """Same contract as get_by_id, matched on `slug`."""
    return await _find_one(collection, "slug", slug, resource, loader)


# ══════════════════════════════════════════════════════════════════════════
# Pure list operations
# ══════════════════════════════════════════════════════════════════════════


def related_items(
    items: Sequence[Any],
    item: Any,
    exclude_id: Optional[str] = None,
    tag_field: str = "tags",
    limit: int = DEFAULT_RELATED_LIMIT,
) -> List[Any]:
    """
    Items sharing at least one tag with `item`, in collection order.

    `exclude_id` defaults to the source item's id, so the source never
    appears in its own related list.
    """
    if limit <= 0:
        return []
    if exclude_id is None:
        exclude_id = _field_value(item, "id")

    source_tags = set(_field_value(item, tag_field) or ())
    if not source_tags:
        return []

    related: List[Any] = []
    for candidate in items:
        if _field_value(candidate, "id") == exclude_id:
            continue
        if source_tags.intersection(_field_value(candidate, tag_field) or ()):
            related.append(candidate)
            if len(related) >= limit:
                break
    return related


def filter_by_field(items: Sequence[Any], field_name: str, value: Any = None) -> List[Any]:
    """All items whose `field_name` equals `value`; an unset value keeps everything."""
    if value is None or value == "":
        return list(items)
    return [item for item in items if _field_value(item, field_name) == value]


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()


def _any_contains(values: Iterable[str], needle: str) -> bool:
    return any(needle in value.lower() for value in values)


def filter_faculty(
    members: Sequence[Any],
    query: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> List[Any]:
    """Free-text match over name/title/department/bio/research areas; tags match research areas."""
    filtered = list(members)
    if query:
        q = query.lower()
        filtered = [
            m for m in filtered
            if _contains(m.name, q)
            or _contains(m.title, q)
            or _contains(m.department, q)
            or _contains(m.bio, q)
            or _any_contains(m.research_areas, q)
        ]
    if tags:
        wanted = [t.lower() for t in tags if t]
        filtered = [
            m for m in filtered
            if any(_any_contains(m.research_areas, tag) for tag in wanted)
        ]
    return filtered


def filter_research(
    projects: Sequence[Any],
    query: Optional[str] = None,
    tags: Optional[List[str]] = None,
    status: Optional[str] = None,
) -> List[Any]:
    filtered = list(projects)
    if query:
        q = query.lower()
        filtered = [
            p for p in filtered
            if _contains(p.title, q)
            or _contains(p.description, q)
            or _contains(p.principal_investigator, q)
            or _any_contains(p.tags, q)
        ]
    if tags:
        wanted = [t.lower() for t in tags if t]
        filtered = [p for p in filtered if any(_any_contains(p.tags, tag) for tag in wanted)]
    if status:
        filtered = [p for p in filtered if p.status == status]
    return filtered


def filter_programs(
    programs: Sequence[Any],
    program_type: Optional[str] = None,
    level: Optional[str] = None,
    program_format: Optional[str] = None,
    featured: Optional[bool] = None,
    active: Optional[bool] = None,
) -> List[Any]:
    filtered = filter_by_field(programs, "type", program_type)
    filtered = filter_by_field(filtered, "level", level)
    filtered = filter_by_field(filtered, "format", program_format)
    if featured is not None:
        filtered = [p for p in filtered if p.featured is featured]
    if active is not None:
        filtered = [p for p in filtered if p.is_active is active]
    return filtered


def filter_news(
    articles: Sequence[Any],
    featured: Optional[bool] = None,
    tag: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Any]:
    """Newest first. A non-positive limit is ignored."""
    filtered = list(articles)
    if featured is not None:
        filtered = [a for a in filtered if a.featured is featured]
    if tag:
        needle = tag.lower()
        filtered = [a for a in filtered if _any_contains(a.tags, needle)]
    filtered.sort(key=lambda a: a.publish_date, reverse=True)
    if limit is not None and limit > 0:
        filtered = filtered[:limit]
    return filtered


def filter_events(
    events: Sequence[Any],
    event_type: Optional[str] = None,
    upcoming: Optional[bool] = None,
    month: Optional[str] = None,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[Any]:
    """
    Soonest first.

    upcoming=True keeps events starting after `now`; upcoming=False keeps
    events that ended (or, without an end date, started) before `now`.
    `month` is "YYYY-MM" compared against the UTC start date.
    """
    now = now or datetime.now(timezone.utc)
    filtered = filter_by_field(events, "event_type", event_type)
    if upcoming is True:
        filtered = [e for e in filtered if e.start_date > now]
    elif upcoming is False:
        filtered = [e for e in filtered if (e.end_date or e.start_date) < now]
    if month:
        filtered = [
            e for e in filtered
            if e.start_date.astimezone(timezone.utc).strftime("%Y-%m") == month
        ]
    filtered.sort(key=lambda e: e.start_date)
    if limit is not None and limit > 0:
        filtered = filtered[:limit]
    return filtered


def sort_items(items: Sequence[Any], field_name: str, direction: str = "asc") -> List[Any]:
    """
    Stable sort by `field_name`; strings compare case-insensitively.

    Items lacking the field keep their relative order after the others.
    An unknown field leaves the order unchanged.
    """
    present = [i for i in items if _field_value(i, field_name) is not None]
    missing = [i for i in items if _field_value(i, field_name) is None]

    def key(item: Any) -> Any:
        value = _field_value(item, field_name)
        if isinstance(value, str):
            return value.casefold()
        if isinstance(value, (list, tuple)):
            return str(value)
        return value

    try:
        present.sort(key=key, reverse=direction == "desc")
    except TypeError:
        # mixed value types: fall back to their string forms
        present.sort(key=lambda i: str(_field_value(i, field_name)), reverse=direction == "desc")
    return present + missing


def paginate(items: Sequence[Any], page: int = 1, limit: int = 10) -> Page[Any]:
    """Slice one 1-based page out of `items`."""
    page = max(page, 1)
    limit = max(limit, 1)
    total = len(items)
    start = (page - 1) * limit
    return Page[Any](
        items=list(items[start:start + limit]),
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


def paginate_offset(items: Sequence[Any], offset: int = 0, limit: int = 10) -> Page[Any]:
    """Offset-based variant; the reported page is derived from the offset."""
    offset = max(offset, 0)
    limit = max(limit, 1)
    total = len(items)
    return Page[Any](
        items=list(items[offset:offset + limit]),
        pagination=Pagination(
            page=offset // limit + 1,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )
