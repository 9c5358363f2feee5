"""
Happy Thoughts API — Request ID Middleware
============================================

What:  Assigns an ID to each request and echoes it in the X-Request-ID header.
Why:   Every log line from one request carries the same ID, and clients can
       quote it when reporting a failed call.
How:   Reuses the client's X-Request-ID when it is a short token of safe
       characters, otherwise generates 8 hex chars. The ID is stored in a
       ContextVar (for loggers) and request.state (for handlers).

Client IDs end up verbatim in log lines and response headers, so anything
longer than MAX_CLIENT_ID_LENGTH or outside [A-Za-z0-9._-] is replaced.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_CLIENT_ID_LENGTH = 64
_SAFE_ID = re.compile(r"[A-Za-z0-9._-]+")

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accepted_client_id(raw: Optional[str]) -> Optional[str]:
    """Return `raw` if it is safe to log and echo, else None."""
    if not raw or len(raw) > MAX_CLIENT_ID_LENGTH:
        return None
    return raw if _SAFE_ID.fullmatch(raw) else None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags every request with an ID for log correlation."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = accepted_client_id(request.headers.get(REQUEST_ID_HEADER)) or new_request_id()

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
