"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with middleware, routes,
error mapping and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from collectionhub.core.config import get_settings
from collectionhub.core.exceptions import (
    CollectionHubError,
    ForbiddenError,
    NotFoundError,
    PersistenceFailureError,
    ReferencedEntityMissingError,
    StorageFailureError,
    UnauthenticatedError,
    ValidationFailedError,
)
from collectionhub.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from collectionhub.domain.services import ResourceCache
from collectionhub.infrastructure.persistence.database import close_database, init_database
from collectionhub.infrastructure.storage import create_asset_store

logger = get_logger(__name__)

ERROR_STATUS: dict[type[CollectionHubError], int] = {
    UnauthenticatedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ValidationFailedError: 400,
    ReferencedEntityMissingError: 400,
    StorageFailureError: 500,
    PersistenceFailureError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging, initializes the database and builds the shared
    resource cache and asset store.
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting CollectionHub",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    app.state.resource_cache = ResourceCache(ttl_seconds=settings.cache_ttl_seconds)
    app.state.asset_store = create_asset_store(settings)
    logger.info("Asset store ready", backend=settings.storage_backend)

    yield

    logger.info("Shutting down CollectionHub")
    await close_database()
    logger.info("Database connection closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Curated collections of projects",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints."""

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint.

        Returns 200 if the service is running. Does not check
        database connectivity.
        """
        return {
            "status": "healthy",
            "service": "CollectionHub",
            "version": get_settings().app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check including database connectivity."""
        from collectionhub.infrastructure.persistence.database import get_db_manager

        if await get_db_manager().check_connection():
            return {"status": "ready", "service": "CollectionHub", "database": "connected"}
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "service": "CollectionHub", "database": "disconnected"},
        )


def register_routes(app: FastAPI) -> None:
    """Register API routes."""
    from collectionhub.infrastructure.api.routes import collections_router

    settings = get_settings()

    app.include_router(collections_router, prefix=settings.api_prefix, tags=["collections"])

    @app.get(settings.api_prefix, tags=["root"])
    async def api_root():
        """API root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "api_version": settings.api_prefix.strip("/"),
        }


def error_status(exc: CollectionHubError) -> int:
    """Map a domain error to its HTTP status code."""
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers for the domain error hierarchy."""

    @app.exception_handler(CollectionHubError)
    async def collectionhub_exception_handler(request: Request, exc: CollectionHubError):
        status_code = error_status(exc)
        content: dict = {"error": type(exc).__name__, "message": str(exc)}

        if isinstance(exc, ValidationFailedError):
            content["details"] = [
                {"field": e.field, "message": e.message, "code": e.code} for e in exc.errors
            ]

        if status_code >= 500:
            logger.error(
                "Request failed",
                path=str(request.url.path),
                method=request.method,
                error=str(exc),
                exc_type=type(exc).__name__,
            )
            if not get_settings().debug:
                content["message"] = "An unexpected error occurred"
        else:
            logger.info(
                "Request rejected",
                path=str(request.url.path),
                status_code=status_code,
                exc_type=type(exc).__name__,
            )

        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in err["loc"][1:]) or "body",
                "message": err["msg"],
                "code": err["type"],
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"error": "ValidationFailedError", "message": "Invalid request", "details": details},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc) if get_settings().debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register request logging middleware."""

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log each request and bind a correlation ID for its duration."""
        correlation_id = request.headers.get("X-Correlation-ID", new_correlation_id())
        bind_correlation_id(correlation_id)

        logger.info("Request started", method=request.method, path=str(request.url.path))
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


app = create_app()
