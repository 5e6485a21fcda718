"""
HireLane API: Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions, one per failure class the API reports.
How:   Each exception carries a user-facing message, an optional context dict
       (logged, never returned) and the HTTP status it maps to.
       The request middleware wrapper and the global exception handlers in
       main.py both render these into the same JSON envelope.
Who:   Raised by services, routes and the middleware wrapper gates.

Exception Hierarchy:
    HireLaneError (base)            → 500
    ├── UnauthorizedError           → 401 (missing/invalid session)
    ├── InvalidInputError           → 400 (validator failure, malformed body)
    ├── NotFoundError               → 404 (missing configuration/resource)
    ├── RateLimitExceededError      → 429 (window budget exhausted)
    └── DatabaseError               → 500 (query failed; generic message)

No exception in this hierarchy is retried automatically; every failure is
surfaced once to the immediate caller.
"""

from typing import Any, Dict, Optional


class HireLaneError(Exception):
    """
    Base exception for all HireLane application errors.

    Attributes:
        message:      User-facing error description (safe to return in API response)
        context:      Additional debug info (logged but NOT returned to client)
        status_code:  HTTP status the error is rendered with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnauthorizedError(HireLaneError):
    """Raised when a request requires a session and none could be resolved."""

    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidInputError(HireLaneError):
    """
    Raised when client input fails validation.

    What:    The client sent a body that is not JSON, or JSON that a validator
             rejected. The message is the validator's own error text.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(HireLaneError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that None
    into this exception so routes stay free of status-code handling.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class RateLimitExceededError(HireLaneError):
    """
    Raised when a client exhausts the request budget of its rate-limit window.

    Response includes:
        - retryAfter: whole seconds until the window resets
        - Retry-After header for HTTP-compliant clients
    """

    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message="Rate limit exceeded", context=ctx)
        self.retry_after = retry_after


class DatabaseError(HireLaneError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the SQL error is
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
