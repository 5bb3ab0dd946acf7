"""
MedAI Backend — Program Route Handlers
========================================

What:  Academic program listing, detail and admissions information.

Route order matters: /programs/applications is registered before
/programs/{program_id} so "applications" is never taken for an id.
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.routes import adapters
from app.schemas.envelope import ErrorResponse

router = APIRouter(prefix="/api", tags=["Programs"])


@router.get(
    "/programs",
    responses={
        400: {"description": "Unknown type, level or format", "model": ErrorResponse},
        500: {"description": "Programs could not be loaded", "model": ErrorResponse},
    },
    summary="List academic programs",
    description="Filtered, offset-paginated program list returned as `{items, pagination}`.",
)
async def list_programs(
    type: Optional[str] = Query(default=None, description="degree, certificate or continuing-education"),
    level: Optional[str] = Query(default=None, description="undergraduate, graduate, doctoral or professional"),
    format: Optional[str] = Query(default=None, description="on-campus, online or hybrid"),
    featured: Optional[str] = Query(default=None, description="true or false"),
    active: Optional[str] = Query(default=None, description="true or false"),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> JSONResponse:
    result = await adapters.programs_list(
        program_type=type,
        level=level,
        program_format=format,
        featured=featured,
        active=active,
        limit=limit,
        offset=offset,
    )
    return result.to_response()


@router.get(
    "/programs/applications",
    responses={500: {"description": "Application data could not be loaded", "model": ErrorResponse}},
    summary="Get application information",
    description="Every application entry, or only those of `programId` when given.",
)
async def list_applications(
    program_id: Optional[str] = Query(default=None, alias="programId"),
) -> JSONResponse:
    result = await adapters.program_applications(program_id)
    return result.to_response()


@router.get(
    "/programs/{program_id}",
    responses={
        404: {"description": "No program with this id", "model": ErrorResponse},
        500: {"description": "Programs could not be loaded or failed validation", "model": ErrorResponse},
    },
    summary="Get a program by id",
)
async def get_program(program_id: str) -> JSONResponse:
    result = await adapters.program_detail(program_id)
    return result.to_response()
