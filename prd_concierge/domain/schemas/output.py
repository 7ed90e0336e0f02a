"""Pydantic schemas for concierge results."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from prd_concierge.domain.schemas.prd import PRDDocument


class OutputType(str, Enum):
    """Tag of a concierge result."""
    CONVERSATION = "conversation"
    CLARIFICATION = "clarification"
    PRD = "prd"


class DebugInfo(BaseModel):
    persona_used: str = Field(..., description="Persona id that shaped the reply")
    confidence: int = Field(..., description="Reply or document confidence (0-100)")
    reasoning: str = Field(..., description="Short explanation of the decision")
    completeness: Optional[int] = Field(None, description="Readiness completeness (0-100)")
    score: Optional[int] = Field(None, description="Cached session readiness score")
    transport: Optional[str] = Field(None, description="Transport that served the reply")


class OutputContent(BaseModel):
    message: Optional[str] = None
    questions: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    missing_information: List[str] = Field(default_factory=list)
    prd: Optional[PRDDocument] = None
    warnings: List[str] = Field(default_factory=list)
    debug_info: Optional[DebugInfo] = None


class GeneratePRDOutput(BaseModel):
    """Tagged union over conversation, clarification and prd results."""
    type: OutputType
    session_id: str
    content: OutputContent
