"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
import signal
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application Factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings)

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    # Create FastAPI app
    app = FastAPI(
        title="BTD Tools API",
        description="Business calculators and AI content tools with tiered usage limits",
        version="1.0.0",
    )

    # Store settings on app state for middleware access
    app.state.settings = settings

    # Configure middleware
    _configure_cors(app, settings)

    # Include API routers
    _include_routers(app)

    # Register lifecycle hooks
    _register_shutdown(app)

    logger.info(
        "btd-tools-api configured (environment=%s, ai_provider=%s, rate_limit_store=%s)",
        settings.environment,
        settings.ai_provider,
        settings.rate_limit_store,
    )
    return app


def _configure_logging(settings: Settings) -> None:
    """Set the root log level from LOG_LEVEL."""
    logging.basicConfig(
        level=settings.log_level_value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(settings.log_level_value)


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            release=settings.render_git_commit,
            traces_sample_rate=0.1,
            profiles_sample_rate=0.1,
        )
        logger.info(
            "Sentry initialized for btd-tools-api (release=%s)",
            settings.render_git_commit or "unknown",
        )


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    origins = settings.allowed_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import analytics_router, health_router, internal_router, tools_router

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    # Tools router (/tools/*, /me/calculations)
    app.include_router(tools_router)

    # Analytics router (/analytics/*)
    app.include_router(analytics_router)

    # Internal maintenance router (/internal/*)
    app.include_router(internal_router)


def _register_shutdown(app: FastAPI) -> None:
    """Register graceful shutdown handler."""

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("btd-tools-api shutdown complete")

    # Handle SIGTERM for Render graceful shutdown
    def _handle_sigterm(signum, frame):
        logger.info("Received SIGTERM, initiating graceful shutdown")
        raise SystemExit(0)

    signal.signal(signal.SIGTERM, _handle_sigterm)
