"""
HireLane API: Request ID Middleware
=====================================

What:  Assigns a correlation ID to each incoming request and echoes it back.
How:   Accepts a client-supplied X-Request-ID or generates a UUID, stores it in
       a ContextVar for loggers and exception handlers, and sets the response
       header.
Who:   Applied to every request via Starlette middleware.

The request middleware wrapper (hirelane.api.wrapper) generates its own fresh
identifier per wrapped invocation and binds it to the same ContextVar for the
duration of the handler, so error envelopes and log lines agree.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header when present
        2. Otherwise generate a new UUID
        3. Store in request_id_var and request.state.request_id
        4. Add X-Request-ID to the response unless a handler already set one
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        if REQUEST_ID_HEADER.lower() not in response.headers:
            response.headers[REQUEST_ID_HEADER] = rid
        return response
