"""Domain schemas."""

from prd_concierge.domain.schemas.session import (
    AccumulatedContext,
    Complexity,
    ProjectType,
    Session,
    SessionStatus,
    Turn,
    TurnRole,
)
from prd_concierge.domain.schemas.prd import (
    Constraints,
    Environment,
    FeatureFlags,
    FeatureSpecification,
    PRDDocument,
    PRDMetadata,
    ProjectInfo,
    TechStack,
    ValidationResult,
)
from prd_concierge.domain.schemas.persona import Persona
from prd_concierge.domain.schemas.output import (
    DebugInfo,
    GeneratePRDOutput,
    OutputContent,
    OutputType,
)

__all__ = [
    "AccumulatedContext",
    "Complexity",
    "ProjectType",
    "Session",
    "SessionStatus",
    "Turn",
    "TurnRole",
    "Constraints",
    "Environment",
    "FeatureFlags",
    "FeatureSpecification",
    "PRDDocument",
    "PRDMetadata",
    "ProjectInfo",
    "TechStack",
    "ValidationResult",
    "Persona",
    "DebugInfo",
    "GeneratePRDOutput",
    "OutputContent",
    "OutputType",
]
