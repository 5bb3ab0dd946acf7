"""
MedAI Backend — Request ID Middleware
=======================================

What:  Gives every request a short correlation id and echoes it back in the
       X-Request-ID response header.
Why:   Lets a failed page load on the website be matched to its log lines.
How:   Reuses a well-formed client X-Request-ID or generates one, stores it in a
       ContextVar (for loggers and exception handlers) and request.state.
When:  Runs before the logging middleware.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client ids end up in log lines and response headers
_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accept_request_id(value: Optional[str]) -> str:
    """The client's id when it is short and log-safe, otherwise a fresh one."""
    if value and _CLIENT_ID_PATTERN.fullmatch(value):
        return value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header when it is 1-64 characters
           of [A-Za-z0-9._-]
        2. Otherwise generate an 8-character id
        3. Expose it through request_id_var and request.state.request_id
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accept_request_id(request.headers.get("X-Request-ID"))

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        return response
