"""FastAPI application serving the Linear webhook trigger."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI

from .api.webhooks import EventHandler, create_webhook_router
from .config import get_settings
from .observability.logging import configure_logging
from .transport.http_client import close_http_client, get_http_client
from .trigger import LinearTrigger

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    settings = get_settings()

    configure_logging(
        environment=settings.environment,
        log_level="DEBUG" if settings.debug else settings.log_level,
    )

    # Warm up HTTP client (creates connection pool)
    get_http_client()

    logger.info("%s v%s started", settings.app_name, settings.app_version)
    logger.info("Environment: %s", settings.environment)

    yield

    # Shutdown
    await close_http_client()
    logger.info("HTTP client closed")


def create_app(
    trigger: Optional[LinearTrigger] = None,
    on_event: Optional[EventHandler] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The webhook route is mounted only when a trigger is given.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Linear webhook trigger",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    if trigger is not None:
        app.include_router(create_webhook_router(trigger, on_event, settings.webhook_path))

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app
