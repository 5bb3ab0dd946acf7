"""
MedAI Backend — Content Diagnostics Route
===========================================

What:  GET /api/content/health: per-file report on the backing store.
Why:   Lets editors check a content change without clicking through pages.

A missing data root fails the whole check (500); problems inside individual
files are reported in a successful response.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.routes import adapters
from app.schemas.envelope import ErrorResponse

router = APIRouter(prefix="/api", tags=["Content"])


@router.get(
    "/content/health",
    responses={500: {"description": "Data directory missing or unreadable", "model": ErrorResponse}},
    summary="Content health check",
)
async def content_health() -> JSONResponse:
    result = await adapters.content_health()
    return result.to_response()
