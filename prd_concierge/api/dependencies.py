"""Shared FastAPI dependencies."""

from datetime import datetime
from typing import Optional

from prd_concierge.domain.services.prd_concierge_service import PRDConciergeService

# Global state (set by main.py during startup)
_service: Optional[PRDConciergeService] = None
_startup_time: Optional[datetime] = None


def set_service(service: Optional[PRDConciergeService]):
    """Set the global concierge service (called from main.py)."""
    global _service
    _service = service


def set_startup_time(startup_time: Optional[datetime]):
    global _startup_time
    _startup_time = startup_time


def get_service() -> PRDConciergeService:
    """Get the global concierge service."""
    if _service is None:
        raise RuntimeError("PRD concierge service not initialized")
    return _service


def get_startup_time() -> datetime:
    if _startup_time is None:
        raise RuntimeError("Application not started")
    return _startup_time
