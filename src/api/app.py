# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the Fateh content
network API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.middleware.request_context import RequestContextMiddleware
from src.api.routes import health, metrics
from src.api.v1 import router as v1_router
from src.core.config import get_settings
from src.core.exceptions import (
    ContentNetworkError,
    NotFoundError,
    StorageUnavailableError,
    ValidationFailedError,
)
from src.infrastructure.database.connection import (
    DatabaseError,
    close_database,
    create_schema,
    init_database,
)
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging and opens the database pool on startup, disposes of
    the pool on shutdown. SQLite databases get their tables created from the
    ORM metadata; server databases are expected to be migrated.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting Fateh content network API: environment=%s, debug=%s",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    await init_database(settings)
    logger.info("Database connection initialized")

    if settings.db.is_sqlite:
        await create_schema()
        logger.info("SQLite schema created")

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    try:
        await close_database()
        logger.info("Database connection closed")
    except DatabaseError as e:
        logger.warning("Error closing database: %s", str(e))

    logger.info("Fateh content network API shutdown complete")


def _error_body(exc: Exception, detail: object) -> dict[str, object]:
    return {"detail": detail, "error": type(exc).__name__}


def register_exception_handlers(app: FastAPI) -> None:
    """Map the domain error taxonomy onto HTTP responses."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(exc, exc.message),
        )

    @app.exception_handler(ValidationFailedError)
    async def validation_failed_handler(
        request: Request,
        exc: ValidationFailedError,
    ) -> JSONResponse:
        detail: object = exc.message
        if exc.details:
            detail = {"message": exc.message, **exc.details}
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(exc, detail),
        )

    @app.exception_handler(StorageUnavailableError)
    async def storage_unavailable_handler(
        request: Request,
        exc: StorageUnavailableError,
    ) -> JSONResponse:
        logger.error("Storage unavailable: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=_error_body(exc, "Storage is temporarily unavailable"),
        )

    @app.exception_handler(ContentNetworkError)
    async def content_network_error_handler(
        request: Request,
        exc: ContentNetworkError,
    ) -> JSONResponse:
        logger.error("Unhandled content network error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(exc, exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
        logger.error("Database error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(exc, "Database operation failed"),
        )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Fateh Content Network API",
        description="Global content distribution and localization engine",
        version=APP_VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # Middleware is executed in reverse order of registration.
    app.add_middleware(RequestContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(metrics.router, tags=["Metrics"])
    app.include_router(v1_router)

    return app


def run() -> None:
    """Serve the application with uvicorn using the API settings."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=1 if settings.api.reload else settings.api.workers,
        reload=settings.api.reload,
        log_config=None,
    )
