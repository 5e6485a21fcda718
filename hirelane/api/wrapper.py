"""
HireLane API: Request Middleware Wrapper
==========================================

What:  Decorates a route handler with opt-in gates and a uniform error envelope.
How:   `with_api_middleware(handler, options)` returns a FastAPI endpoint that,
       per invocation:

           1. generates a fresh request ID (bound to request_id_var)
           2. logs the start event                    (log_requests)
           3. counts the hit against (client, URL)    (rate_limit)     → 429
           4. resolves the caller's session           (require_auth)   → 401
           5. parses and validates the JSON body      (validate_input) → 400
           6. invokes the handler with an APIRequest context
           7. logs the completion event with duration (log_requests)

       A failure at any gate short-circuits the remaining gates and the
       handler. Application exceptions raised by the handler keep their own
       status; anything else becomes a 500 carrying the request ID, plus the
       exception message outside production.

Usage:
    @router.post("/question-banks")
    @api_middleware(
        require_auth=True,
        rate_limit=RateLimitRule(requests=30, window_ms=60_000),
        validate_input=schema_validator(QuestionBankPayload),
        log_requests=True,
    )
    async def create_question_bank(
        ctx: APIRequest,
        db: AsyncSession = Depends(get_db_session),
    ) -> JSONResponse:
        ...

Handler dependencies:
    Parameters after the context are re-exposed on the endpoint signature, so
    FastAPI resolves them (Depends(...), path and query parameters) before
    the wrapper runs and passes them through untouched.
    FastAPI validates those values before any gate runs, so declare path and
    query parameters as plain `str` and convert them inside the handler;
    a conversion failure then raises an application error after the auth
    and rate-limit gates instead of an early 422.

Request body:
    Starlette caches the body after the first read, but the wrapper does not
    rely on re-reading it: the parsed value is handed to the handler as
    `ctx.body`, and `ctx.raw_body` is its canonical re-serialization.
"""

import inspect
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from hirelane.api.responses import app_error_response, error_response
from hirelane.api.validators import Validator
from hirelane.auth.session import Session, SessionProvider, get_session
from hirelane.config import Environment, settings
from hirelane.exceptions import (
    HireLaneError,
    InvalidInputError,
    RateLimitExceededError,
    UnauthorizedError,
)
from hirelane.middleware.client import resolve_client_address
from hirelane.middleware.rate_limit import RateLimitStore, rate_limiter
from hirelane.middleware.request_id import REQUEST_ID_HEADER, new_request_id, request_id_var

logger = logging.getLogger("hirelane.api")

READ_ONLY_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


@dataclass(frozen=True)
class RateLimitRule:
    """At most `requests` calls per `window_ms` milliseconds per (client, URL)."""

    requests: int
    window_ms: int

    def __post_init__(self) -> None:
        if self.requests < 1:
            raise ValueError("RateLimitRule.requests must be at least 1")
        if self.window_ms < 1:
            raise ValueError("RateLimitRule.window_ms must be at least 1")


@dataclass
class APIMiddlewareOptions:
    require_auth: bool = False
    rate_limit: Optional[RateLimitRule] = None
    validate_input: Optional[Validator] = None
    log_requests: bool = False
    environment: Environment = field(default_factory=lambda: settings.environment)
    # None means the signed-cookie provider, looked up per call
    session_provider: Optional[SessionProvider] = None
    limiter: RateLimitStore = field(default_factory=lambda: rate_limiter)


@dataclass
class APIRequest:
    """What a wrapped handler receives as its first argument."""

    request: Request
    request_id: str
    session: Optional[Session] = None
    body: Any = None

    @property
    def raw_body(self) -> bytes:
        if self.body is None:
            return b""
        return json.dumps(self.body, separators=(",", ":")).encode("utf-8")

    @property
    def path_params(self) -> dict:
        return self.request.path_params

    @property
    def query_params(self):
        return self.request.query_params


Handler = Callable[..., Awaitable[Any]]


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _enforce_rate_limit(request: Request, options: APIMiddlewareOptions) -> None:
    rule = options.rate_limit
    if rule is None:
        return
    client_address = resolve_client_address(request.headers)
    key = f"{client_address}:{request.url}"
    decision = options.limiter.hit(key, rule.requests, rule.window_ms)
    if not decision.allowed:
        raise RateLimitExceededError(retry_after=decision.retry_after, context={"key": key})


async def _authenticate(request: Request, options: APIMiddlewareOptions) -> Optional[Session]:
    if not options.require_auth:
        return None
    provider = options.session_provider or get_session
    session = await provider(request)
    if session is None or not session.email:
        raise UnauthorizedError()
    return session


async def _validated_body(request: Request, options: APIMiddlewareOptions) -> Any:
    if options.validate_input is None or request.method in READ_ONLY_METHODS:
        return None
    try:
        body = await request.json()
    except ValueError:
        raise InvalidInputError("Invalid JSON body")
    result = options.validate_input(body)
    if not result.is_valid:
        raise InvalidInputError(result.error or "Invalid input")
    return body


def with_api_middleware(
    handler: Handler,
    options: Optional[APIMiddlewareOptions] = None,
) -> Callable[..., Awaitable[Response]]:
    """Wrap `handler` so it runs behind the gates configured in `options`."""
    options = options or APIMiddlewareOptions()

    handler_params = list(inspect.signature(handler).parameters.values())
    if not handler_params:
        raise TypeError(f"{handler.__name__} must accept an APIRequest as its first argument")
    dependency_params = handler_params[1:]

    async def endpoint(request: Request, **dependencies: Any) -> Response:
        started = time.perf_counter()
        request_id = new_request_id()
        token = request_id_var.set(request_id)
        method, url = request.method, str(request.url)

        try:
            if options.log_requests:
                logger.info("[%s] %s %s - Started", request_id, method, url)

            _enforce_rate_limit(request, options)
            session = await _authenticate(request, options)
            body = await _validated_body(request, options)

            ctx = APIRequest(request=request, request_id=request_id, session=session, body=body)
            result = await handler(ctx, **dependencies)

        except HireLaneError as exc:
            if exc.status_code >= 500:
                logger.error(
                    "[%s] %s %s - %s after %dms | Context: %s",
                    request_id, method, url, exc.message, _elapsed_ms(started), exc.context,
                )
            elif options.log_requests:
                logger.warning(
                    "[%s] %s %s - Rejected %d (%s) after %dms | Context: %s",
                    request_id, method, url, exc.status_code, exc.message, _elapsed_ms(started),
                    exc.context,
                )
            return app_error_response(exc, request_id)

        except Exception as exc:
            logger.error(
                "[%s] %s %s - Error after %dms: %s",
                request_id, method, url, _elapsed_ms(started), exc,
                exc_info=True,
            )
            details = None
            if options.environment != Environment.PRODUCTION:
                details = str(exc) or type(exc).__name__
            return error_response(500, "Internal server error", request_id, details=details)

        finally:
            request_id_var.reset(token)

        response = result if isinstance(result, Response) else JSONResponse(jsonable_encoder(result))
        if REQUEST_ID_HEADER.lower() not in response.headers:
            response.headers[REQUEST_ID_HEADER] = request_id

        if options.log_requests:
            logger.info(
                "[%s] %s %s - Completed in %dms", request_id, method, url, _elapsed_ms(started)
            )
        return response

    endpoint.__signature__ = inspect.Signature(
        [
            inspect.Parameter(
                "request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request
            ),
            *dependency_params,
        ]
    )
    endpoint.__name__ = handler.__name__
    endpoint.__qualname__ = handler.__qualname__
    endpoint.__doc__ = handler.__doc__
    endpoint.__module__ = handler.__module__
    return endpoint


def api_middleware(**option_values: Any) -> Callable[[Handler], Callable[..., Awaitable[Response]]]:
    """Decorator form of with_api_middleware; keyword arguments are APIMiddlewareOptions fields."""
    options = APIMiddlewareOptions(**option_values)

    def decorator(handler: Handler) -> Callable[..., Awaitable[Response]]:
        return with_api_middleware(handler, options)

    return decorator
