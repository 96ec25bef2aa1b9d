"""
Pressroom Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers; the
       lifespan opens the two database handles and the image storage
       backend, and closes them on shutdown.
Who:   uvicorn (`uvicorn pressroom.main:app`, or `python -m pressroom`).

Lifecycle:
    Startup:
    1. Structured logging
    2. Validate configuration (logged, never fatal)
    3. Build article DB, admin DB and image storage (unless injected)
    4. Create missing tables; an unreachable database is logged and the
       listener starts anyway
    Shutdown:
    1. Dispose both engines
    2. Close the storage client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from pressroom import __version__
from pressroom.config import settings
from pressroom.database import Database, create_admins_database, create_articles_database
from pressroom.exceptions import (
    BackendUnavailableError,
    PressroomError,
    RateLimitExceededError,
    ValidationError,
)
from pressroom.middleware.logging import RequestLoggingMiddleware
from pressroom.middleware.rate_limit import RateLimitMiddleware
from pressroom.middleware.request_id import RequestIDMiddleware, request_id_var
from pressroom.models import admin as _admin_models  # noqa: F401  (registers table)
from pressroom.models import article as _article_models  # noqa: F401  (registers table)
from pressroom.routes import admin, articles, files, health
from pressroom.services.image_upload import ImageUploadAdapter, create_image_storage
from pressroom.services.storage_base import ImageStorage

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2025-01-15T12:00:00 [INFO] pressroom.access: GET / 200 3.1ms [1f0c2a9b] from 10.0.0.4
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO/DEBUG
    for name in ("uvicorn.access", "sqlalchemy.engine", "botocore", "boto3", "httpcore", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

async def _prepare_database(database: Database) -> None:
    if not settings.db_create_tables:
        return
    try:
        await database.create_tables()
    except Exception as e:
        # The listener still starts; requests to this store fail with 503
        logger.error("Error connecting to %s database: %s", database.name, str(e))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Pressroom Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    if app.state.articles_db is None:
        app.state.articles_db = create_articles_database()
    if app.state.admins_db is None:
        app.state.admins_db = create_admins_database()
    if app.state.upload_adapter is None:
        app.state.upload_adapter = ImageUploadAdapter(create_image_storage())

    await _prepare_database(app.state.articles_db)
    await _prepare_database(app.state.admins_db)

    logger.info("Image storage backend: %s", settings.image_storage_backend)
    logger.info("Startup complete.")

    yield

    logger.info("Pressroom Backend shutting down...")
    await app.state.articles_db.dispose()
    await app.state.admins_db.dispose()
    await app.state.upload_adapter.storage.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure kind to one status code and one error body.

    Handler hierarchy:
        ValidationError          → 400 (415 for UploadRejectedError)
        NotFoundError            → 404
        RateLimitExceededError   → 429
        BackendUnavailableError  → 503 (DatabaseError, StorageError)
        RequestValidationError   → 400
        Exception (fallback)     → 500

    Backend error text is logged with the request id, never returned.
    """

    @app.exception_handler(PressroomError)
    async def handle_pressroom_error(request: Request, exc: PressroomError):
        rid = request_id_var.get("")
        content = {
            "error": exc.error_code,
            "message": exc.message,
            "request_id": rid,
        }
        headers = {}

        if isinstance(exc, ValidationError):
            logger.warning("[%s] %s: %s", rid, exc.error_code, exc.message)
            content["details"] = exc.context
        elif isinstance(exc, BackendUnavailableError):
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        elif isinstance(exc, RateLimitExceededError):
            content["details"] = exc.context
            headers["Retry-After"] = str(exc.retry_after)

        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        fields = sorted({
            str(err["loc"][-1]) for err in exc.errors() if err.get("loc")
        })
        logger.warning("[%s] Request validation failed: %s", rid, fields)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "The request could not be validated",
                "details": {"fields": fields},
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs in ServerErrorMiddleware, outside RequestIDMiddleware: the
        # context var is unset here, so only a client-sent id is available
        rid = request_id_var.get("") or request.headers.get("X-Request-ID", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    articles_db: Optional[Database] = None,
    admins_db: Optional[Database] = None,
    image_storage: Optional[ImageStorage] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        articles_db / admins_db / image_storage: pre-built handles (tests).
            Anything left as None is built by the lifespan from settings.
    """
    app = FastAPI(
        title="Pressroom API",
        description=(
            "Minimal content-management backend: article CRUD with image "
            "uploads, and administrator registration."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.articles_db = articles_db
    app.state.admins_db = admins_db
    app.state.upload_adapter = ImageUploadAdapter(image_storage) if image_storage is not None else None

    # Middleware executes in REVERSE order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(articles.router)
    app.include_router(admin.router)
    app.include_router(files.router)
    app.include_router(health.router)

    return app


app = create_app()
