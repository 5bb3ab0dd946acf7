"""
MedAI Backend — Faculty Route Handlers
========================================

What:  GET /api/faculty (list / search) and GET /api/faculty/{id} (profile).
How:   Pulls query values off the request, calls the adapter, returns its
       RouteResult as a JSONResponse.
Who:   Faculty directory and profile pages.
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.routes import adapters
from app.schemas.envelope import ErrorResponse

router = APIRouter(prefix="/api", tags=["Faculty"])


@router.get(
    "/faculty",
    responses={500: {"description": "Faculty data could not be loaded", "model": ErrorResponse}},
    summary="List or search faculty members",
    description=(
        "Without parameters returns every faculty member. With `query`, `tags`, "
        "`page` or a non-default `limit`, returns a filtered, sorted page "
        "`{items, pagination}`."
    ),
)
async def list_faculty(
    query: Optional[str] = Query(default=None, description="Free-text match over name, title, department, bio and research areas"),
    tags: Optional[str] = Query(default=None, description="Comma-separated research-area filters"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_field: str = Query(default="name", alias="sortField"),
    sort_direction: str = Query(default="asc", alias="sortDirection", pattern="^(asc|desc)$"),
) -> JSONResponse:
    result = await adapters.faculty_list(
        query=query,
        tags=tags,
        page=page,
        limit=limit,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )
    return result.to_response()


@router.get(
    "/faculty/{member_id}",
    responses={
        404: {"description": "No faculty member with this id", "model": ErrorResponse},
        500: {"description": "Faculty data could not be loaded", "model": ErrorResponse},
    },
    summary="Get a faculty member by id",
)
async def get_faculty_member(member_id: str) -> JSONResponse:
    result = await adapters.faculty_detail(member_id)
    return result.to_response()
