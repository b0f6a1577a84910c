"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from boilerplate_api.config import Settings, get_settings
from boilerplate_api.infrastructure.auth import ClerkAuth, ClerkWebhookVerifier
from boilerplate_api.infrastructure.database import Database
from boilerplate_api.infrastructure.middleware import (
    ClerkAuthMiddleware,
    HttpMetricsMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)
from boilerplate_api.infrastructure.telemetry import (
    configure_logging,
    get_logger,
    shutdown_logging,
)
from boilerplate_api.infrastructure.telemetry.metrics import set_service_info
from boilerplate_api.infrastructure.telemetry.tracing import (
    configure_tracing,
    instrument_app,
    shutdown_tracing,
)
from boilerplate_api.presentation.http import api_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # Startup
    logger.info(
        f"API running on {settings.host}:{settings.port}",
        extra={
            "event": "api.running",
            "version": settings.version,
            "environment": settings.environment,
        },
    )

    yield

    # Shutdown
    logger.info("Shutting down boilerplate API", extra={"event": "api.shutdown"})
    await database.dispose()
    logger.info("Database connection closed")
    shutdown_tracing()
    shutdown_logging()


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    clerk_auth: ClerkAuth | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override for testing
        database: Database to use instead of one built from settings
        clerk_auth: Token verifier to use instead of one built from settings

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    # Configure logging
    configure_logging(
        level=settings.log_level,
        format_type=settings.log_format,
        service_name=settings.otel_service_name,
        loki_host=settings.loki_host or None,
        environment=settings.environment,
    )

    # Set service info for metrics
    set_service_info(
        version=settings.version,
        environment=settings.environment,
    )

    if database is None:
        database = Database.from_settings(settings)
    if clerk_auth is None:
        clerk_auth = ClerkAuth(settings)

    # Create FastAPI app
    app = FastAPI(
        title="Boilerplate API",
        description="User management API with Clerk authentication",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.webhook_verifier = ClerkWebhookVerifier(settings.clerk_webhook_secret)

    # Configure OpenTelemetry tracing
    if settings.otel_enabled:
        configure_tracing(settings)
        instrument_app(app, database.engine)

    # Add middleware (order matters - last added is first executed)
    app.add_middleware(ClerkAuthMiddleware, clerk_auth=clerk_auth)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(HttpMetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Register error handlers
    error_handler_middleware(app)

    # Include API routes
    app.include_router(api_router)

    return app


def run() -> None:
    """Serve the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "boilerplate_api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


# Default app instance for uvicorn
app = create_app()
