"""
MedAI Backend — News Route Handlers
=====================================

What:  GET /api/news (newest first) and GET /api/news/{slug} (article plus
       up to three related articles sharing a tag).
"""

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.routes import adapters
from app.schemas.envelope import ErrorResponse

router = APIRouter(prefix="/api", tags=["News"])


@router.get(
    "/news",
    responses={500: {"description": "News could not be loaded", "model": ErrorResponse}},
    summary="List news articles",
)
async def list_news(
    featured: Optional[str] = Query(default=None, description="true or false"),
    tag: Optional[str] = Query(default=None, description="Case-insensitive tag substring"),
    limit: Optional[int] = Query(default=None, description="Maximum number of articles; ignored unless positive"),
) -> JSONResponse:
    result = await adapters.news_list(featured=featured, tag=tag, limit=limit)
    return result.to_response()


@router.get(
    "/news/{slug}",
    responses={
        404: {"description": "No article with this slug", "model": ErrorResponse},
        500: {"description": "News could not be loaded", "model": ErrorResponse},
    },
    summary="Get an article by slug",
    description="Returns `{article, relatedArticles}`.",
)
async def get_article(slug: str) -> JSONResponse:
    result = await adapters.news_detail(slug)
    return result.to_response()
