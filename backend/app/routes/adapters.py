"""
MedAI Backend — Route Adapters
================================

What:  Transport-independent handlers: plain request values in, a
       RouteResult (status code + JSON-ready body) out.
Why:   The status rules live here, in one testable place. The FastAPI routers
       only pull values off the request and marshal the result.
How:   Each adapter calls a loader / lookup / service, then maps the envelope:

           success                        → 200 {success: true, data}
           NOT_FOUND envelope             → 404 {success: false, error: "<Entity> not found", data: null}
           any other failure or exception → 500 {success: false, error: <generic>, data: null, details}

       Client-input problems (missing id, bad enum, short query, invalid
       contact form) are answered with 400 before any loader runs.

No adapter lets an exception escape: every body runs under `_guard()`.
"""

import functools
import logging
import re
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, get_args

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.config import settings
from app.exceptions import ValidationError
from app.middleware.request_id import request_id_var
from app.schemas.content import Event, Program
from app.schemas.envelope import Envelope, ErrorKind, SearchResponse
from app.services import lookup
from app.services.contact_service import contact_service, mask_ip
from app.services.content_health import ContentHealthChecker
from app.services.data_loader import Collection, ContentLoader, content_loader
from app.services.search_index import SearchIndexCache, sanitize_query, search_index_cache

logger = logging.getLogger(__name__)


class RouteResult(BaseModel):
    status_code: int = 200
    body: Dict[str, Any]

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.body)


# ══════════════════════════════════════════════════════════════════════════
# Envelope → RouteResult mapping
# ══════════════════════════════════════════════════════════════════════════


def to_json(value: Any) -> Any:
    """camelCase, JSON-safe rendition of models, datetimes and containers."""
    return jsonable_encoder(value, by_alias=True)


def ok(data: Any, **extra: Any) -> RouteResult:
    return RouteResult(status_code=200, body={"success": True, "data": to_json(data), **extra})


def bad_request(error: str, details: Any = None) -> RouteResult:
    body: Dict[str, Any] = {"success": False, "error": error, "data": None}
    if details is not None:
        body["details"] = details
    return RouteResult(status_code=400, body=body)


def not_found(error: str) -> RouteResult:
    return RouteResult(status_code=404, body={"success": False, "error": error, "data": None})


def server_error(error: str, details: Optional[str] = None) -> RouteResult:
    return RouteResult(
        status_code=500,
        body={"success": False, "error": error, "data": None, "details": details or "Unknown error"},
    )


def from_envelope(
    envelope: Envelope[Any],
    error: str,
    not_found_error: Optional[str] = None,
) -> RouteResult:
    """
    Map a loader/lookup envelope to a RouteResult.

    `error` is the generic message used for every failure except NOT_FOUND,
    whose body carries `not_found_error` (or the envelope's own message).
    """
    if envelope.success:
        return ok(envelope.data)
    if envelope.kind == ErrorKind.NOT_FOUND:
        return not_found(not_found_error or envelope.error)
    return server_error(error, envelope.error)


def _guard(error: str) -> Callable[[Callable[..., Awaitable[RouteResult]]], Callable[..., Awaitable[RouteResult]]]:
    """Turns any exception raised by the wrapped adapter into a 500 RouteResult."""

    def decorator(func: Callable[..., Awaitable[RouteResult]]) -> Callable[..., Awaitable[RouteResult]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> RouteResult:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "%s [%s]: %s: %s",
                    func.__name__,
                    request_id_var.get("-"),
                    type(e).__name__,
                    e,
                    exc_info=True,
                )
                return server_error(error, str(e) or type(e).__name__)

        return wrapper

    return decorator


def parse_flag(value: Optional[str]) -> Optional[bool]:
    """Maps the strings true/false to a bool; anything else disables the filter."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _choices(model: type, field_name: str) -> tuple:
    return get_args(model.model_fields[field_name].annotation)


PROGRAM_TYPES = _choices(Program, "type")
PROGRAM_LEVELS = _choices(Program, "level")
PROGRAM_FORMATS = _choices(Program, "format")
EVENT_TYPES = _choices(Event, "event_type")

_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


# ══════════════════════════════════════════════════════════════════════════
# Detail adapters
# ══════════════════════════════════════════════════════════════════════════


@_guard("Failed to load faculty member")
async def faculty_detail(member_id: str, loader: Optional[ContentLoader] = None) -> RouteResult:
    envelope = await lookup.get_by_id(Collection.FACULTY, member_id, "Faculty member", loader)
    return from_envelope(envelope, "Failed to load faculty member", "Faculty member not found")


@_guard("Failed to load research project")
async def research_detail(project_id: Optional[str], loader: Optional[ContentLoader] = None) -> RouteResult:
    if project_id is None or not project_id.strip():
        return bad_request("Research project ID is required")
    envelope = await lookup.get_by_id(Collection.RESEARCH, project_id, "Research project", loader)
    return from_envelope(envelope, "Failed to load research project", "Research project not found")


@_guard("Failed to fetch program")
async def program_detail(program_id: str, loader: Optional[ContentLoader] = None) -> RouteResult:
    envelope = await lookup.get_by_id(Collection.PROGRAMS, program_id, "Program", loader)
    return from_envelope(envelope, "Failed to fetch program", "Program not found")


@_guard("Failed to fetch application information")
async def program_applications(
    program_id: Optional[str] = None,
    loader: Optional[ContentLoader] = None,
) -> RouteResult:
    loaded = await (loader or content_loader).load_applications()
    if not loaded.success:
        return from_envelope(loaded, "Failed to fetch application information")
    return ok(lookup.filter_by_field(loaded.data, "program_id", program_id))


@_guard("Failed to fetch article")
async def news_detail(
    slug: str,
    loader: Optional[ContentLoader] = None,
    related_limit: Optional[int] = None,
) -> RouteResult:
    loaded = await (loader or content_loader).load_news()
    if not loaded.success:
        return from_envelope(loaded, "Failed to fetch article")

    article = lookup.find_one(loaded.data, "slug", slug)
    if article is None:
        logger.info("Article with slug=%r not found", slug)
        return not_found("Article not found")

    related = lookup.related_items(
        loaded.data,
        article,
        exclude_id=article.id,
        tag_field="tags",
        limit=settings.related_items_limit if related_limit is None else related_limit,
    )
    return ok({"article": article, "relatedArticles": related})


# ══════════════════════════════════════════════════════════════════════════
# List adapters
# ══════════════════════════════════════════════════════════════════════════


@_guard("Failed to load faculty data")
async def faculty_list(
    query: Optional[str] = None,
    tags: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    sort_field: str = "name",
    sort_direction: str = "asc",
    loader: Optional[ContentLoader] = None,
) -> RouteResult:
    loaded = await (loader or content_loader).load_faculty()
    if not loaded.success:
        return from_envelope(loaded, "Failed to load faculty data")

    tag_list = split_csv(tags)
    if not (query or tag_list) and page == 1 and limit == 10:
        return ok(loaded.data)

    filtered = lookup.filter_faculty(loaded.data, query=query, tags=tag_list)
    ordered = lookup.sort_items(filtered, sort_field, sort_direction)
    return ok(lookup.paginate(ordered, page, limit))


@_guard("Failed to load research projects")
async def research_list(
    q: Optional[str] = None,
    tags: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    sort_field: str = "startDate",
    sort_direction: str = "desc",
    loader: Optional[ContentLoader] = None,
) -> RouteResult:
    loaded = await (loader or content_loader).load_research()
    if not loaded.success:
        return from_envelope(loaded, "Failed to load research projects")

    tag_list = split_csv(tags)
    if not (q or tag_list or status) and page == 1 and limit == 10:
        return ok(loaded.data)

    filtered = lookup.filter_research(loaded.data, query=q, tags=tag_list, status=status)
    ordered = lookup.sort_items(filtered, sort_field, sort_direction)
    return ok(lookup.paginate(ordered, page, limit))


@_guard("Failed to fetch programs")
async def programs_list(
    program_type: Optional[str] = None,
    level: Optional[str] = None,
    program_format: Optional[str] = None,
    featured: Optional[str] = None,
    active: Optional[str] = None,
    limit: int = 10,
    offset: int = 0,
    loader: Optional[ContentLoader] = None,
) -> RouteResult:
    for name, value, allowed in (
        ("type", program_type, PROGRAM_TYPES),
        ("level", level, PROGRAM_LEVELS),
        ("format", program_format, PROGRAM_FORMATS),
    ):
        if value is not None and value not in allowed:
            return bad_request(
                "Invalid query parameters",
                [{"field": name, "message": f"Must be one of: {', '.join(allowed)}"}],
            )

    loaded = await (loader or content_loader).load_programs()
    if not loaded.success:
        return from_envelope(loaded, "Failed to fetch programs")

    filtered = lookup.filter_programs(
        loaded.data,
        program_type=program_type,
        level=level,
        program_format=program_format,
        featured=parse_flag(featured),
        active=parse_flag(active),
    )
    return ok(lookup.paginate_offset(filtered, offset, limit))


@_guard("Failed to fetch news articles")
async def news_list(
    featured: Optional[str] = None,
    tag: Optional[str] = None,
    limit: Optional[int] = None,
    loader: Optional[ContentLoader] = None,
) -> RouteResult:
    loaded = await (loader or content_loader).load_news()
    if not loaded.success:
        return from_envelope(loaded, "Failed to fetch news articles")

    articles = lookup.filter_news(loaded.data, featured=parse_flag(featured), tag=tag, limit=limit)
    return ok(articles, count=len(articles))


@_guard("Failed to fetch events")
async def events_list(
    event_type: Optional[str] = None,
    upcoming: Optional[str] = None,
    month: Optional[str] = None,
    limit: Optional[int] = None,
    loader: Optional[ContentLoader] = None,
    now: Optional[datetime] = None,
) -> RouteResult:
    if month and not _MONTH_PATTERN.match(month):
        return bad_request("Invalid month", [{"field": "month", "message": "Expected YYYY-MM"}])

    loaded = await (loader or content_loader).load_events()
    if not loaded.success:
        return from_envelope(loaded, "Failed to fetch events")

    # unknown event types are ignored rather than rejected
    events = lookup.filter_events(
        loaded.data,
        event_type=event_type if event_type in EVENT_TYPES else None,
        upcoming=parse_flag(upcoming),
        month=month,
        limit=limit,
        now=now,
    )
    return ok(events, count=len(events))


# ══════════════════════════════════════════════════════════════════════════
# Diagnostics & search
# ══════════════════════════════════════════════════════════════════════════


@_guard("Failed to perform content health check")
async def content_health(checker: Optional[ContentHealthChecker] = None) -> RouteResult:
    envelope = await (checker or ContentHealthChecker()).check()
    result = from_envelope(envelope, "Failed to perform content health check")
    if result.status_code == 200:
        result.body["message"] = "Content health check completed"
    return result


@_guard("Failed to rebuild search index")
async def rebuild_search_index(cache: Optional[SearchIndexCache] = None) -> RouteResult:
    cache = cache or search_index_cache
    entries = await cache.rebuild()
    return RouteResult(
        status_code=200,
        body={
            "success": True,
            "message": "Search index rebuild completed",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "data": {"entries": len(entries)},
        },
    )


@_guard("Internal server error")
async def search(
    q: Optional[str] = None,
    types: Optional[str] = None,
    tags: Optional[str] = None,
    limit: int = 10,
    offset: int = 0,
    min_score: float = 0.1,
    cache: Optional[SearchIndexCache] = None,
) -> RouteResult:
    if not q or not q.strip():
        return RouteResult(status_code=200, body=to_json(SearchResponse(query="")))

    query = sanitize_query(q)
    if len(query) < settings.search_min_query_length:
        return bad_request(
            f"Query must be at least {settings.search_min_query_length} characters long"
        )

    response = await (cache or search_index_cache).search(
        query,
        types=split_csv(types) or None,
        tags=split_csv(tags) or None,
        limit=max(1, min(limit, settings.search_max_limit)),
        offset=max(offset, 0),
        min_score=min_score,
    )
    return RouteResult(status_code=200, body=to_json(response))


async def search_suggestions(payload: Any, cache: Optional[SearchIndexCache] = None) -> RouteResult:
    """Autocomplete; answers 200 with a possibly empty list no matter what."""
    try:
        query = payload.get("query") if isinstance(payload, dict) else None
        limit = payload.get("limit", 5) if isinstance(payload, dict) else 5
        if not isinstance(query, str) or isinstance(limit, bool) or not isinstance(limit, int):
            return RouteResult(body={"suggestions": []})

        sanitized = sanitize_query(query)
        if len(sanitized) < settings.search_min_query_length:
            return RouteResult(body={"suggestions": []})

        suggestions = await (cache or search_index_cache).suggestions(sanitized, max(limit, 0))
        return RouteResult(body={"suggestions": suggestions})
    except Exception as e:
        logger.warning("Search suggestions failed: %s: %s", type(e).__name__, e)
        return RouteResult(body={"suggestions": []})


# ══════════════════════════════════════════════════════════════════════════
# Contact
# ══════════════════════════════════════════════════════════════════════════


async def submit_contact(
    payload: Any,
    client_ip: str = "unknown",
    user_agent: Optional[str] = None,
) -> RouteResult:
    try:
        response = await contact_service.submit(payload, client_ip=client_ip, user_agent=user_agent)
    except ValidationError as e:
        return bad_request("Invalid form data", e.context.get("issues", [{"field": e.field, "message": e.message}]))
    except Exception as e:
        logger.error(
            "Contact form submission error from %s: %s",
            mask_ip(client_ip),
            e,
        )
        return RouteResult(
            status_code=500,
            body={
                "success": False,
                "error": "Internal server error",
                "data": None,
                "message": "Please try again later or contact us directly by email.",
            },
        )
    return RouteResult(status_code=200, body=response.model_dump())
