"""
PRD conversation endpoints.

All three endpoints delegate to PRDConciergeService; error mapping lives
in prd_concierge.api.errors.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from prd_concierge.api.dependencies import get_service
from prd_concierge.api.models import (
    ConciergeResponse,
    ContinueRequest,
    GeneratePRDRequest,
    SessionInfoResponse,
)
from prd_concierge.api.rendering import render
from prd_concierge.domain.schemas.output import GeneratePRDOutput
from prd_concierge.domain.services.prd_concierge_service import PRDConciergeService

logger = logging.getLogger(__name__)

router = APIRouter()


def _respond(result: GeneratePRDOutput) -> ConciergeResponse:
    return ConciergeResponse(**result.model_dump(), text=render(result))


@router.post("/generate", response_model=ConciergeResponse)
async def generate_prd(
    request: GeneratePRDRequest,
    service: PRDConciergeService = Depends(get_service),
) -> ConciergeResponse:
    """Start (or continue) a conversation with one user message."""
    logger.info(f"Generate request (session={request.session_id or 'new'})")
    result = await service.process_input(request.user_input, session_id=request.session_id)
    return _respond(result)


@router.post("/continue", response_model=ConciergeResponse)
async def continue_conversation(
    request: ContinueRequest,
    service: PRDConciergeService = Depends(get_service),
) -> ConciergeResponse:
    logger.info(f"Continue request (session={request.session_id})")
    result = await service.continue_session(request.session_id, request.user_response)
    return _respond(result)


@router.get("/sessions/{session_id}", response_model=SessionInfoResponse)
async def get_session_info(
    session_id: str,
    service: PRDConciergeService = Depends(get_service),
) -> SessionInfoResponse:
    summary = service.get_session_info(session_id)
    if summary is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "session_not_found", "message": f"Session not found: {session_id}"},
        )
    return SessionInfoResponse(session_id=session_id, summary=summary)
