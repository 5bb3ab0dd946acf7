"""
MedAI Backend — Health Check Route
====================================

What:  Liveness endpoint for monitoring and load balancer checks.
Why:   Load balancers route away from instances that report unhealthy.
How:   The only hard dependency is the backing store, so the check is a
       cheap "can we list the data root" check.
Who:   Called by Docker health checks, load balancers, and monitoring systems.
When:  Periodically (e.g., every 30 seconds by Docker).

Status levels:
    - healthy:   data root readable (HTTP 200)
    - unhealthy: data root missing or unreadable (HTTP 503)
"""

import logging
import os
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.schemas.envelope import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


def data_root_readable() -> bool:
    root = settings.data_root_path
    try:
        return root.is_dir() and os.access(root, os.R_OK | os.X_OK)
    except OSError as e:
        logger.warning("Health check: data root listing failed: %s", str(e))
        return False


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Data root unreadable", "model": HealthResponse}},
    summary="Service health check",
    description=(
        "Returns the health status of the backend service and its backing store. "
        "Used by Docker health checks and load balancers to determine if the service "
        "can handle traffic."
    ),
)
async def health_check() -> JSONResponse:
    readable = data_root_readable()
    if not readable:
        logger.warning("Health check: data root %s is not readable", settings.data_root_path)

    body = HealthResponse(
        status="healthy" if readable else "unhealthy",
        version=__version__,
        data_root="readable" if readable else "unreadable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if readable else 503,
        content=body.model_dump(mode="json", by_alias=True),
    )
