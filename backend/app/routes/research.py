"""
MedAI Backend — Research Route Handlers
=========================================

What:  GET /api/research (list / search) and GET /api/research/{id}.
Who:   Research listing and project detail pages.

A blank id (e.g. "/api/research/%20") is a client error (400), not a 404.
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.routes import adapters
from app.schemas.envelope import ErrorResponse

router = APIRouter(prefix="/api", tags=["Research"])


@router.get(
    "/research",
    responses={500: {"description": "Research projects could not be loaded", "model": ErrorResponse}},
    summary="List or search research projects",
)
async def list_research(
    q: Optional[str] = Query(default=None, description="Free-text match over title, description, PI and tags"),
    tags: Optional[str] = Query(default=None, description="Comma-separated tag filters"),
    status: Optional[str] = Query(default=None, description="active, completed or planned"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_field: str = Query(default="startDate", alias="sortField"),
    sort_direction: str = Query(default="desc", alias="sortDirection", pattern="^(asc|desc)$"),
) -> JSONResponse:
    result = await adapters.research_list(
        q=q,
        tags=tags,
        status=status,
        page=page,
        limit=limit,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )
    return result.to_response()


@router.get(
    "/research/{project_id}",
    responses={
        400: {"description": "Blank project id", "model": ErrorResponse},
        404: {"description": "No research project with this id", "model": ErrorResponse},
        500: {"description": "Research projects could not be loaded", "model": ErrorResponse},
    },
    summary="Get a research project by id",
)
async def get_research_project(project_id: str) -> JSONResponse:
    result = await adapters.research_detail(project_id)
    return result.to_response()
