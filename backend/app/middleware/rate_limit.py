"""
MedAI Backend — Rate Limiting Middleware
==========================================

What:  Per-IP sliding window rate limiter with a stricter window for the
       contact form.
Why:   Keeps scrapers off the content API and spam out of the contact inbox.
How:   Tracks request timestamps per key in memory using a sliding window.
Who:   Applied to every request via Starlette middleware.
When:  First in the middleware chain (rejects abuse before any processing).

Algorithm: Sliding Window Counter
    1. Each key gets a list of request timestamps
    2. On each request, remove timestamps older than the window
    3. If remaining count >= limit, reject with 429
    4. Otherwise, add current timestamp and allow through

Windows:
    general:  settings.rate_limit_requests per settings.rate_limit_window, every path
    contact:  settings.contact_rate_limit_requests per settings.contact_rate_limit_window,
              POST /api/contact only (counted in addition to the general window)

Production Upgrade Path:
    This in-memory implementation works for single-process deployments.
    For multi-worker deployments, move the windows to Redis.
"""

import logging
import time
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings

logger = logging.getLogger(__name__)

CONTACT_PATH = "/api/contact"


class SlidingWindow:
    """
    Request timestamps per key inside a rolling window.

    `limit` and `window` are callables so a settings change (or a test
    patching settings) takes effect without rebuilding the middleware.
    """

    def __init__(self, limit: Callable[[], int], window: Callable[[], int]):
        self._limit = limit
        self._window = window
        self._requests: Dict[str, List[float]] = defaultdict(list)

    def hit(self, key: str, now: Optional[float] = None) -> Optional[int]:
        """
        Record a request for `key`.

        Returns:
            None when allowed, otherwise seconds until the oldest request in
            the window expires (the request is NOT recorded).
        """
        now = time.time() if now is None else now
        window = self._window()
        window_start = now - window

        self._requests[key] = [ts for ts in self._requests[key] if ts > window_start]

        if len(self._requests[key]) >= self._limit():
            oldest = self._requests[key][0]
            return int(oldest + window - now) + 1

        self._requests[key].append(now)

        # Periodic cleanup of inactive keys
        if sum(len(v) for v in self._requests.values()) % 1000 == 0:
            self._cleanup(window_start)
        return None

    def _cleanup(self, window_start: float) -> None:
        inactive = [
            key for key, timestamps in self._requests.items()
            if not timestamps or max(timestamps) < window_start
        ]
        for key in inactive:
            del self._requests[key]
        if inactive:
            logger.debug("Cleaned up %d inactive rate limit entries", len(inactive))

    def reset(self) -> None:
        self._requests.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Applies the general window to every path except EXCLUDED_PATHS, and the
    contact window to POST /api/contact.

    Response on rate limit:
        HTTP 429 Too Many Requests
        Retry-After header: Seconds until oldest request expires from window
        Body: failure envelope with a retry hint
    """

    # Health checks and docs should always be reachable
    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self.general = SlidingWindow(
            lambda: settings.rate_limit_requests,
            lambda: settings.rate_limit_window,
        )
        self.contact = SlidingWindow(
            lambda: settings.contact_rate_limit_requests,
            lambda: settings.contact_rate_limit_window,
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.EXCLUDED_PATHS:
            return await call_next(request)

        # Caveat: Behind a proxy, this may be the proxy's IP
        client_ip = (
            getattr(request.client, "host", "unknown")
            if request.client
            else "unknown"
        )

        retry_after = self.general.hit(client_ip)
        if retry_after is not None:
            logger.warning(
                "Rate limit exceeded for IP %s (%d requests / %ds)",
                client_ip,
                settings.rate_limit_requests,
                settings.rate_limit_window,
            )
            return self._reject(
                retry_after,
                f"Too many requests. Please wait {retry_after} seconds before retrying.",
            )

        if path == CONTACT_PATH and request.method == "POST":
            retry_after = self.contact.hit(client_ip)
            if retry_after is not None:
                logger.warning("Contact form rate limit exceeded for IP %s", client_ip)
                return self._reject(
                    retry_after,
                    "Please wait before submitting another message.",
                )

        return await call_next(request)

    @staticmethod
    def _reject(retry_after: int, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={
                "success": False,
                "error": "Too many requests",
                "data": None,
                "message": message,
                "details": {"retry_after": retry_after},
            },
            headers={"Retry-After": str(retry_after)},
        )
