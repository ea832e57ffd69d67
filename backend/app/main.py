"""
Travel Journal Backend — FastAPI Application Factory
======================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware, routes, static mounts, and
       lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌──────────────┐ ┌──────┐ ┌──────┐         │
    │  │  Req ID  │→│  Access Log  │→│ GZip │→│ CORS │         │
    │  └──────────┘ └──────────────┘ └──────┘ └──────┘         │
    │                                                          │
    │  Routes:                                                 │
    │  ┌───────────────┐ ┌───────────────┐ ┌────────────────┐  │
    │  │ Account       │ │ Travel Blogs  │ │ Images         │  │
    │  │ /create-acc.. │ │ /add-travel.. │ │ /image-upload  │  │
    │  │ /login        │ │ /get-all-bl.. │ │ /delete-image  │  │
    │  │ /get-user     │ │ /search ...   │ │                │  │
    │  └───────────────┘ └───────────────┘ └────────────────┘  │
    │                                                          │
    │  Static:  /uploads/*  (user images)   /assets/* (bundled)│
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Auth→401 │ NotFound→404 │ else 500│  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (log loudly, keep serving /health)
    3. Log startup complete

    Shutdown:
    1. Dispose database engine (close all connections)
    2. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import (
    AuthError,
    ConflictError,
    NotFoundError,
    ServerError,
    TravelJournalError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import auth, health, images, travel_blogs

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-01T12:00:00 [INFO] app.services.travel_blog_service: ...

    Called once from lifespan, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party libraries log every query / connection at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration check. Shutdown: release the pool.

    A missing or short ACCESS_TOKEN_SECRET is logged as an error rather than
    aborting, so /health still answers and points operators at the log.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Travel Journal Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    logger.info("Uploads directory: %s", Path(settings.uploads_dir).resolve())
    logger.info("Public base URL: %s", settings.public_base_url)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Travel Journal Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": True,
            "message": message,
            "request_id": request_id_var.get(""),
        },
        headers=headers,
    )


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """First failing field as 'field: reason', e.g. 'title: Input should be a valid string'."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # loc is ("body", "visitedLocation", 0) or ("query", "imageUrl")
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    reason = first.get("msg", "invalid value")
    return f"{'.'.join(loc)}: {reason}" if loc else reason


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map domain exceptions to status codes and the error envelope.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        ConflictError                            → 400 (duplicate email)
        AuthError                                → 401 + WWW-Authenticate
        NotFoundError                            → 404 (also "not yours")
        ServerError (FileStorage, Database)      → 500, context logged only
        HTTPException (unknown route, 405)       → its own status
        Exception                                → 500, stack trace logged only

    Responses never carry stack traces, SQL, or file system paths.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = _describe_validation_errors(exc)
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), message)
        return _error_response(400, message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(400, exc.message)

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError):
        # Reason is logged, never which part of the token was wrong
        logger.info("[%s] Auth rejected: %s", request_id_var.get(""), exc.message)
        return _error_response(401, exc.message, headers={"WWW-Authenticate": "Bearer"})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc.message)

    @app.exception_handler(ServerError)
    async def handle_server_error(request: Request, exc: ServerError):
        logger.error(
            "[%s] %s: %s | Context: %s",
            request_id_var.get(""),
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return _error_response(500, exc.message)

    @app.exception_handler(TravelJournalError)
    async def handle_domain_error(request: Request, exc: TravelJournalError):
        logger.error("[%s] Unhandled domain error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(500, "An unexpected error occurred. Please try again later.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def _mount_static(app: FastAPI) -> None:
    """
    Serve uploaded images at /uploads and bundled assets at /assets.

    StaticFiles refuses a missing directory at construction time, so both
    are created here rather than in lifespan.
    """
    uploads = Path(settings.uploads_dir)
    assets = Path(settings.assets_dir)
    uploads.mkdir(parents=True, exist_ok=True)
    assets.mkdir(parents=True, exist_ok=True)

    app.mount("/uploads", StaticFiles(directory=str(uploads)), name="uploads")
    app.mount("/assets", StaticFiles(directory=str(assets)), name="assets")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Tests call this directly and override get_db_session / get_asset_service
    on the returned instance.
    """
    app = FastAPI(
        title="Travel Journal API",
        description=(
            "Personal travel journal: accounts, travel stories with images, "
            "favourites, search, and date-range filtering."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(travel_blogs.router)
    app.include_router(images.router)
    app.include_router(health.router)

    _mount_static(app)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app` to be importable
app = create_app()
