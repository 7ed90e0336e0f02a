"""
PRD Concierge - FastAPI application.

Conversational front end that turns project descriptions into PRDs.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI

from prd_concierge.api.dependencies import set_service, set_startup_time
from prd_concierge.api.errors import add_exception_handlers
from prd_concierge.api.middleware import RequestIDMiddleware
from prd_concierge.api.routers import health, prd
from prd_concierge.core.config import Settings, get_settings
from prd_concierge.core.logging import configure_logging
from prd_concierge.domain.services.prd_concierge_service import PRDConciergeService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, host: Any = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Overrides the environment-derived settings
        host: Object exposing the host completion capabilities, if any
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(level=settings.log_level, format_type=settings.log_format)
        logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")

        service = PRDConciergeService.from_settings(settings, host=host)
        service.initialize()
        service.start_sweeper()

        set_service(service)
        set_startup_time(datetime.now(timezone.utc))
        logger.info(
            "Network transport "
            + ("enabled" if settings.network_transport_enabled else "disabled (no API key)")
        )

        yield

        logger.info("Shutting down")
        await service.shutdown()
        set_service(None)
        set_startup_time(None)

    app = FastAPI(
        title=settings.app_name,
        description="Turns multi-turn project conversations into structured PRDs",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)
    add_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(prd.router, prefix="/prd", tags=["prd"])

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn using the environment settings."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "prd_concierge.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )


if __name__ == "__main__":
    run()
