"""
HireLane API: JSON Envelope
=============================

Every JSON error this service returns, from the wrapper gates and from the
global exception handlers alike, has the shape:

    {
        "success": false,
        "error": "Rate limit exceeded",
        "requestId": "7d0c0f0e-...",
        "retryAfter": 42,          # 429 only
        "details": "..."           # 500 outside production only
    }
"""

from typing import Any, Dict, Optional

from starlette.responses import JSONResponse

from hirelane.exceptions import HireLaneError, RateLimitExceededError
from hirelane.middleware.request_id import REQUEST_ID_HEADER


def error_envelope(
    error: str,
    request_id: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error}
    if request_id:
        body["requestId"] = request_id
    body.update({key: value for key, value in extra.items() if value is not None})
    return body


def error_response(
    status_code: int,
    error: str,
    request_id: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    **extra: Any,
) -> JSONResponse:
    response_headers = dict(headers or {})
    if request_id:
        response_headers[REQUEST_ID_HEADER] = request_id
    return JSONResponse(
        status_code=status_code,
        content=error_envelope(error, request_id, **extra),
        headers=response_headers,
    )


def app_error_response(exc: HireLaneError, request_id: Optional[str] = None) -> JSONResponse:
    """Render an application exception with its own status code."""
    if isinstance(exc, RateLimitExceededError):
        return error_response(
            exc.status_code,
            exc.message,
            request_id,
            headers={"Retry-After": str(exc.retry_after)},
            retryAfter=exc.retry_after,
        )
    return error_response(exc.status_code, exc.message, request_id)
