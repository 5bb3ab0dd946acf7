"""
MedAI Backend — Events Route Handler
======================================

What:  GET /api/events, soonest first, filterable by type, month and
       upcoming/past.
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.routes import adapters
from app.schemas.envelope import ErrorResponse

router = APIRouter(prefix="/api", tags=["Events"])


@router.get(
    "/events",
    responses={
        400: {"description": "Malformed month", "model": ErrorResponse},
        500: {"description": "Events could not be loaded", "model": ErrorResponse},
    },
    summary="List events",
)
async def list_events(
    type: Optional[str] = Query(default=None, description="seminar, conference, workshop or social"),
    upcoming: Optional[str] = Query(default=None, description="true for future events, false for past ones"),
    month: Optional[str] = Query(default=None, description="YYYY-MM"),
    limit: Optional[int] = Query(default=None),
) -> JSONResponse:
    result = await adapters.events_list(event_type=type, upcoming=upcoming, month=month, limit=limit)
    return result.to_response()
