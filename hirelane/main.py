"""
HireLane API: FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn hirelane.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌────────────┐ ┌─────────┐ ┌──────────┐    │
    │  │ Req ID   │→│ Access Log │→│ Session │→│  CORS    │    │
    │  └──────────┘ └────────────┘ └─────────┘ └──────────┘    │
    │                                                          │
    │  Routes:                                                 │
    │  ┌──────────────────────┐ ┌──────────────┐ ┌──────────┐  │
    │  │ GET /auth/sso/oauth/ │ │ /api/content/│ │ /health  │  │
    │  │   authorize/...      │ │ question-... │ │          │  │
    │  └──────────────────────┘ └──────────────┘ └──────────┘  │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ HireLaneError → own status │ Exception → 500        │  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (production only)
    3. Start the rate-limit sweeper

    Shutdown:
    1. Cancel the sweeper
    2. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from hirelane import __version__
from hirelane.api.responses import app_error_response, error_response
from hirelane.api.validators import describe_error
from hirelane.config import settings
from hirelane.database import dispose_engine
from hirelane.exceptions import HireLaneError, InvalidInputError
from hirelane.middleware.logging import RequestLoggingMiddleware
from hirelane.middleware.rate_limit import rate_limiter
from hirelane.middleware.request_id import RequestIDMiddleware, request_id_var
from hirelane.routes import health, question_banks, sso

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Request IDs are embedded in the message by the access log and the
    request wrapper, so the format needs no custom record factory.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("HireLane API starting up (environment=%s)...", settings.environment.value)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    rate_limiter.start_sweeper(settings.rate_limit_sweep_interval)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("HireLane API shutting down...")
    await rate_limiter.stop_sweeper()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Errors raised outside the request wrapper (plain routes, dependencies)
    are rendered with the same envelope the wrapper uses.

        HireLaneError          → its own status_code (404, 400, 429, ...)
        RequestValidationError → 400 (instead of FastAPI's 422 detail list)
        Exception (fallback)   → 500, details only outside production

    The ID comes from request.state: the catch-all runs in Starlette's
    outermost error middleware, after RequestIDMiddleware has reset
    request_id_var.
    """

    def _request_id(request: Request) -> str:
        return getattr(request.state, "request_id", "") or request_id_var.get("")

    @app.exception_handler(HireLaneError)
    async def handle_app_error(request: Request, exc: HireLaneError) -> JSONResponse:
        rid = _request_id(request)
        if exc.status_code >= 500:
            logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        else:
            logger.warning("[%s] %s %d: %s", rid, request.url.path, exc.status_code, exc.message)
        return app_error_response(exc, rid or None)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0]
        loc = first.get("loc") or ()
        error = InvalidInputError(
            describe_error(first), field=str(loc[-1]) if loc else None
        )
        rid = _request_id(request)
        logger.warning("[%s] %s 400: %s", rid, request.url.path, error.message)
        return app_error_response(error, rid or None)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        details = None if settings.is_production else (str(exc) or type(exc).__name__)
        return error_response(500, "Internal server error", rid or None, details=details)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="HireLane API",
        description=(
            "Multi-tenant recruiting backend: company SSO sign-in and "
            "interview question bank management."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → Session → CORS → router

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )

    # Signed cookie holding {"user": {...}}; read by hirelane.auth.get_session
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=settings.session_cookie,
        same_site="lax",
        https_only=settings.is_production,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(sso.router)
    app.include_router(question_banks.router)
    app.include_router(health.router)

    return app


app = create_app()
