"""Pydantic schemas for the assembled requirements document."""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from prd_concierge.domain.schemas.session import ProjectType


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class PRDMetadata(_Frozen):
    """Document identity and provenance."""
    name: str = Field(..., description="Project name")
    version: str = Field("1.0.0", description="Document version")
    generated_at: str = Field(..., description="Generation timestamp (ISO format)")
    confidence_score: int = Field(..., ge=0, le=100, description="Confidence the document reflects the conversation")
    session_id: str = Field(..., description="Originating session identifier")


class ProjectInfo(_Frozen):
    type: ProjectType
    description: str
    target_audience: str
    key_features: List[str]
    business_model: Optional[str] = None
    scale_expectations: Optional[Literal["small", "medium", "large"]] = None


class TechStack(_Frozen):
    framework: str
    database: Optional[str] = None
    ui_library: str
    deployment_platform: Optional[str] = None
    additional_tools: List[str] = Field(default_factory=list)


class FeatureFlags(_Frozen):
    """One boolean per known feature tag."""
    auth: bool = False
    payment: bool = False
    admin: bool = False
    search: bool = False
    upload: bool = False
    realtime: bool = False
    analytics: bool = False
    email: bool = False


class FeatureSpecification(_Frozen):
    name: str
    description: str
    requirements: List[str]
    dependencies: List[str]
    implementation_notes: List[str]


class Constraints(_Frozen):
    """Snapshot of the constraint fields gathered during the conversation."""
    budget: Optional[str] = None
    timeline: Optional[str] = None
    team_size: Optional[int] = None
    complexity_preference: Optional[str] = None


class Environment(_Frozen):
    variables: Dict[str, str]
    secrets: List[str]


class PRDDocument(_Frozen):
    """The structured requirements document produced for a completed session."""
    metadata: PRDMetadata
    project: ProjectInfo
    tech_stack: TechStack
    features: FeatureFlags
    specifications: List[FeatureSpecification]
    constraints: Constraints
    environment: Environment
    next_steps: List[str]


class ValidationResult(BaseModel):
    """Outcome of validating an assembled document."""
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

