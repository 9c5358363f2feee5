"""
Happy Thoughts API — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn happy_thoughts.main:app, or
       python -m happy_thoughts) and by the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐             │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │             │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘             │
    │                                                          │
    │  Routes:                                                 │
    │  ┌─────────┐ ┌──────────┐ ┌──────────────┐ ┌──────────┐  │
    │  │ / /tags │ │ /health  │ │ /users       │ │/thoughts │  │
    │  └─────────┘ └──────────┘ └──────────────┘ └──────────┘  │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Auth→401 │ NotFound→404 │ 409 │500│  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, log the listen address
    Shutdown: dispose the database engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from happy_thoughts import __version__
from happy_thoughts.config import settings
from happy_thoughts.database import dispose_engine
from happy_thoughts.exceptions import (
    AuthenticationError,
    AuthenticationStoreError,
    ConflictError,
    DatabaseError,
    HappyThoughtsError,
    InvalidCredentialsError,
    NoThoughtsFoundError,
    NotFoundError,
    ValidationError,
)
from happy_thoughts.middleware.logging import RequestLoggingMiddleware
from happy_thoughts.middleware.request_id import RequestIDMiddleware, request_id_var
from happy_thoughts.routes import health, index, thoughts, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout,
    at settings.log_level. Called once from the lifespan, before anything
    else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The access middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Happy Thoughts API %s starting up...", __version__)
    logger.info(
        "Ownership checks: %s | unique likes: %s",
        "on" if settings.enforce_ownership else "off",
        "on" if settings.unique_likes else "off",
    )
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    yield

    logger.info("Happy Thoughts API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _envelope_error(status_code: int, message: str, response: Any = None, **extra: Any) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "response": response, "message": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def _describe_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic errors to `{field, message}` pairs (JSON-safe)."""
    described = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = error.get("msg", "Invalid value")
        if error.get("type") == "value_error":
            message = message.removeprefix("Value error, ")
        described.append({"field": ".".join(loc) or "body", "message": message})
    return described


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the error envelope.

    Handler hierarchy:
        ValidationError, RequestValidationError → 400
        AuthenticationError                     → 401 {message, loggedOut}
        InvalidCredentialsError                 → 401
        NoThoughtsFoundError                    → 404 (response: [])
        NotFoundError                           → 404
        ConflictError                           → 409
        AuthenticationStoreError                → 500 {message, error}
        DatabaseError, HappyThoughtsError       → 500
        HTTPException (routing: 404/405)        → its own status
        Exception (fallback)                    → 500, stack trace logged only
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _envelope_error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        raw_errors = exc.errors()
        errors = _describe_validation_errors(raw_errors)
        if not errors:
            message = "Invalid request"
        elif raw_errors[0].get("type") == "value_error":
            # Custom validators already produce full sentences
            message = errors[0]["message"]
        else:
            message = f"{errors[0]['field']}: {errors[0]['message']}"
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return _envelope_error(400, message, errors=errors)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content={"message": exc.message, "loggedOut": True},
        )

    @app.exception_handler(InvalidCredentialsError)
    async def handle_invalid_credentials(request: Request, exc: InvalidCredentialsError):
        return _envelope_error(401, exc.message)

    @app.exception_handler(NoThoughtsFoundError)
    async def handle_no_thoughts_found(request: Request, exc: NoThoughtsFoundError):
        return _envelope_error(404, exc.message, response=[])

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _envelope_error(404, exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _envelope_error(409, exc.message)

    @app.exception_handler(AuthenticationStoreError)
    async def handle_authentication_store_error(request: Request, exc: AuthenticationStoreError):
        logger.error("[%s] Authentication lookup failed: %s", request_id_var.get(""), exc.error)
        return JSONResponse(
            status_code=500,
            content={"message": exc.message, "error": exc.error},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _envelope_error(
            500, exc.message, response={"error": exc.context.get("error_type", "DatabaseError")}
        )

    @app.exception_handler(HappyThoughtsError)
    async def handle_app_error(request: Request, exc: HappyThoughtsError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return _envelope_error(500, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "response": None, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _envelope_error(500, "An unexpected error occurred. Please try again later.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Why factory: tests build a fresh app per test and override the database
    session dependency on it.
    """
    app = FastAPI(
        title="Happy Thoughts API",
        description=(
            "Share short thoughts tagged by category, like other people's "
            "thoughts, and browse them by popularity, recency, tag or author."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,  # tokens travel in the Authorization header
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(index.router)
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(thoughts.router)

    return app


app = create_app()
