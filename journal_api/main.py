"""
Journal API: FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, routers and exception handlers; the
       lifespan builds the process-wide Database and CredentialService and
       stores them on `app.state`.
Who:   uvicorn (`uvicorn journal_api.main:app`) and the test suite.

Application Architecture:
    ┌───────────────────────────────────────────────────────┐
    │                     FastAPI App                       │
    │                                                       │
    │  Middleware: Request ID → Access Log → CORS           │
    │                                                       │
    │  Routes:                                              │
    │  ┌────────────┐ ┌────────────────┐ ┌───────────────┐  │
    │  │ /users     │ │ /entries       │ │ GET /health   │  │
    │  └────────────┘ └────────────────┘ └───────────────┘  │
    │                                                       │
    │  Exception Handlers (all render {code, msg, details}):│
    │  JournalError │ RequestValidationError │ HTTPException│
    │  Exception (fallback → 500)                           │
    └───────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration; a missing JWT_SECRET aborts startup
    3. Build Database and CredentialService onto app.state
    Shutdown:
    1. Dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from journal_api import __version__
from journal_api.config import Settings, get_settings
from journal_api.database import Database
from journal_api.exceptions import JournalError, MalformedRequestError
from journal_api.middleware.logging import RequestLoggingMiddleware
from journal_api.middleware.request_id import RequestIDMiddleware, request_id_var
from journal_api.routes import entries, health, users
from journal_api.services.credential_service import CredentialService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] journal_api.services.entry_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The access log middleware replaces uvicorn's access lines.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

def _build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(settings.log_level)
        logger.info("Journal API %s starting up", __version__)

        try:
            settings.validate_required_for_production()
        except ValueError as e:
            logger.critical("Configuration error: %s", e)
            raise

        if settings.jwt_delta_minutes is None:
            logger.warning("JWT_DELTA_MINUTES is not set; issued tokens will never expire")

        database = Database.from_settings(settings)
        app.state.database = database
        app.state.credentials = CredentialService.from_settings(settings)

        logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

        yield

        logger.info("Journal API shutting down")
        await database.dispose()
        logger.info("Shutdown complete")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _validation_details(exc: RequestValidationError):
    """
    Flatten FastAPI's validation errors into {location, msg, param} items.

    ("body", "title") → location="body", param="title"
    ("query", "username") → location="query", param="username"
    """
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        location = loc[0] if loc else "body"
        param = ".".join(loc[1:])
        details.append({"location": location, "msg": error.get("msg", "Invalid value"), "param": param})
    return details


def _error_response(exc: JournalError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_response(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Render every failure in the shared envelope.

    Handler hierarchy:
        JournalError            → its own status and static message
        RequestValidationError  → 400 Malformed request with details
        HTTPException           → framework status (unknown route 404, 405)
        Exception (fallback)    → 500 Internal server error

    Context dicts and tracebacks are logged, never returned.
    """

    @app.exception_handler(JournalError)
    async def handle_journal_error(request: Request, exc: JournalError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s | Context: %s", rid, type(exc).__name__, exc.context)
        else:
            logger.info("[%s] %s | Context: %s", rid, type(exc).__name__, exc.context)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        error = MalformedRequestError(details=_validation_details(exc))
        logger.info("[%s] Malformed request: %s", rid, error.details)
        return _error_response(error)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        msg = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": exc.status_code, "msg": msg, "details": None},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return _error_response(JournalError())


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Assemble the application.

    `settings` defaults to the cached environment settings; tests pass
    their own.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Journal API",
        description="Personal journaling service: accounts with bearer-token auth and private entries.",
        version=__version__,
        lifespan=_build_lifespan(settings),
    )

    # Executed in reverse order of addition: Request ID → Access Log → CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "WWW-Authenticate"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(entries.router)
    app.include_router(health.router)

    return app


app = create_app()
