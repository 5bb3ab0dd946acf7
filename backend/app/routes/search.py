"""
MedAI Backend — Search Route Handlers
=======================================

What:  Site-wide search, autocomplete suggestions and manual index rebuild.
How:   All three go through the shared SearchIndexCache; only rebuild forces
       a reload of the collections.
"""

from typing import Any

from fastapi import APIRouter, Body, Query
from fastapi.responses import JSONResponse

from app.routes import adapters
from app.schemas.envelope import ErrorResponse, RebuildResponse, SearchResponse

router = APIRouter(prefix="/api", tags=["Search"])


@router.get(
    "/search",
    responses={
        200: {"description": "Scored results with facets", "model": SearchResponse},
        400: {"description": "Query too short after sanitizing", "model": ErrorResponse},
        500: {"description": "Index could not be built", "model": ErrorResponse},
    },
    summary="Search faculty, research, news, events and programs",
)
async def search(
    q: str = Query(default=""),
    types: str = Query(default="", description="Comma-separated result types"),
    tags: str = Query(default="", description="Comma-separated tags"),
    limit: int = Query(default=10, ge=1),
    offset: int = Query(default=0),
    min_score: float = Query(default=0.1, alias="minScore"),
) -> JSONResponse:
    result = await adapters.search(
        q=q,
        types=types,
        tags=tags,
        limit=limit,
        offset=offset,
        min_score=min_score,
    )
    return result.to_response()


@router.post(
    "/search/suggestions",
    summary="Autocomplete suggestions",
    description="Body `{query, limit=5}`. Always answers 200, with an empty list on any problem.",
)
async def search_suggestions(payload: Any = Body(default=None)) -> JSONResponse:
    result = await adapters.search_suggestions(payload)
    return result.to_response()


@router.post(
    "/search/rebuild",
    responses={
        200: {"description": "Index rebuilt", "model": RebuildResponse},
        500: {"description": "A collection failed to load; previous index kept", "model": ErrorResponse},
    },
    summary="Rebuild the search index",
)
async def rebuild_search_index() -> JSONResponse:
    result = await adapters.rebuild_search_index()
    return result.to_response()
