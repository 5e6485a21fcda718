"""
HireLane API: Access Log Middleware
=====================================

What:  One structured access-log line per HTTP request.
How:   Measures time around the downstream app and logs method, path, status,
       duration, request ID and client address. Level follows the status
       class: 5xx → ERROR, 4xx → WARNING, otherwise INFO.
Who:   Applied to every request via Starlette middleware, inside
       RequestIDMiddleware so the correlation ID is already bound.

Request bodies, cookies and Authorization headers are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hirelane.middleware.client import resolve_client_address
from hirelane.middleware.request_id import request_id_var

logger = logging.getLogger("hirelane.access")

QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        client_address = resolve_client_address(request.headers)
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_address,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_address,
            },
        )
        return response
