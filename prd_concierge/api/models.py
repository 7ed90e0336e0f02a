"""Request and response models for the HTTP surface."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from prd_concierge.domain.schemas.output import GeneratePRDOutput

MAX_INPUT_LENGTH = 2000


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class GeneratePRDRequest(BaseModel):
    """A user message, optionally continuing an existing session."""
    user_input: str = Field(..., min_length=1, max_length=MAX_INPUT_LENGTH)
    session_id: Optional[str] = Field(None, description="Session to continue; omitted starts a new one")

    @field_validator("user_input")
    @classmethod
    def user_input_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class ContinueRequest(BaseModel):
    session_id: str = Field(..., min_length=1)
    user_response: str = Field(..., min_length=1, max_length=MAX_INPUT_LENGTH)

    @field_validator("user_response")
    @classmethod
    def user_response_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class ConciergeResponse(GeneratePRDOutput):
    """Structured result plus a markdown rendering for chat clients."""
    text: str = Field(..., description="Markdown view of the result")


class SessionInfoResponse(BaseModel):
    session_id: str
    summary: str


class HealthResponse(BaseModel):
    status: str
    service_ready: bool
    active_sessions: int
    uptime_seconds: int
    version: str
