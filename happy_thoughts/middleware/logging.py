"""
Happy Thoughts API — Request Logging Middleware
=================================================

What:  One access log line per HTTP request.
How:   Measures time from middleware entry to response, then logs method,
       path, status, duration, request ID, client IP and whether a token was
       sent. The level follows the status class: 5xx ERROR, 4xx WARNING,
       everything else INFO. A request whose handler raised is logged as a
       500 before the exception continues to the error handlers.

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path, status, duration, IP, request ID, token present
    ❌ Don't log: query strings, request bodies (passwords), the
       Authorization header value (tokens)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from happy_thoughts.middleware.request_id import request_id_var

logger = logging.getLogger("happy_thoughts.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    # Polled every few seconds by orchestrators; not worth a log line each
    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, start_time)
            raise

        self._log(request, response.status_code, start_time)
        return response

    def _log(self, request: Request, status: int, start_time: float) -> None:
        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        authenticated = "Authorization" in request.headers

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s%s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            " (token)" if authenticated else "",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "authenticated": authenticated,
            },
        )
