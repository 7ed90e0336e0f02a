"""Health check endpoint."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from prd_concierge.api.dependencies import get_service, get_startup_time
from prd_concierge.api.models import HealthResponse
from prd_concierge.core.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Liveness check.

    Never raises: an uninitialised service reports "unhealthy" with 200.
    """
    try:
        service = get_service()
        ready = True
        active = len(service.store)
    except RuntimeError as e:
        logger.warning(f"Health check: service not ready: {e}")
        ready = False
        active = 0

    try:
        uptime = int((datetime.now(timezone.utc) - get_startup_time()).total_seconds())
    except RuntimeError:
        uptime = 0

    return HealthResponse(
        status="healthy" if ready else "unhealthy",
        service_ready=ready,
        active_sessions=active,
        uptime_seconds=uptime,
        version=get_settings().app_version,
    )
