"""
MedAI Backend — Contact Form Route
====================================

What:  POST /api/contact.
How:   The raw JSON body goes to the adapter untouched so the per-field
       validation details match the schema, not FastAPI's request parser.
       The stricter per-IP window is enforced by RateLimitMiddleware.
"""

import json

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.routes import adapters
from app.schemas.envelope import ContactResponse, ErrorResponse

router = APIRouter(prefix="/api", tags=["Contact"])


@router.post(
    "/contact",
    responses={
        200: {"description": "Message accepted", "model": ContactResponse},
        400: {"description": "Invalid form data", "model": ErrorResponse},
        429: {"description": "Too many submissions from this address", "model": ErrorResponse},
    },
    summary="Submit the contact form",
)
async def submit_contact(request: Request) -> JSONResponse:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return adapters.bad_request("Invalid form data", [{"field": "<root>", "message": "Body must be JSON"}]).to_response()

    client_ip = request.client.host if request.client else "unknown"
    result = await adapters.submit_contact(
        payload,
        client_ip=client_ip,
        user_agent=request.headers.get("user-agent"),
    )
    return result.to_response()
