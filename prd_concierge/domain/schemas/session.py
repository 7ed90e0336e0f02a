"""Conversation session domain models."""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from uuid import uuid4


class ProjectType(str, Enum):
    """Project categories a conversation can resolve to."""
    BLOG = "blog"
    ECOMMERCE = "ecommerce"
    SAAS = "saas"
    PORTFOLIO = "portfolio"
    LANDING_PAGE = "landing_page"
    GENERIC = "generic"

    @classmethod
    def coerce(cls, value: Any) -> "ProjectType":
        """Map any value onto a known type; unknown values become GENERIC."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.GENERIC


class TurnRole(str, Enum):
    """Who produced a turn."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class SessionStatus(str, Enum):
    """Session lifecycle status."""
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


ConstraintValue = Union[str, int]


def new_session_id() -> str:
    return f"ss_{uuid4().hex}"


@dataclass(frozen=True)
class Turn:
    """One utterance in a session. Never modified after it is appended."""
    role: TurnRole
    content: str
    id: str = field(default_factory=lambda: f"turn_{uuid4().hex[:12]}")
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AccumulatedContext:
    """
    Running structured interpretation of a session's turns.

    Entries are only ever added. The one exception is ``project_type``, which
    the orchestrator replaces when a confident, non-generic classification
    arrives.
    """
    project_type: Optional[ProjectType] = None
    detected_features: List[str] = field(default_factory=list)
    user_preferences: Dict[str, str] = field(default_factory=dict)
    clarifications_resolved: List[str] = field(default_factory=list)
    tech_preferences: List[str] = field(default_factory=list)
    constraints: Dict[str, ConstraintValue] = field(default_factory=dict)

    @property
    def has_specific_type(self) -> bool:
        return self.project_type is not None and self.project_type != ProjectType.GENERIC

    def add_feature(self, tag: str) -> bool:
        """Append a feature tag if new. Returns True when it was added."""
        if tag in self.detected_features:
            return False
        self.detected_features.append(tag)
        return True

    def add_tech_preference(self, label: str) -> bool:
        if label in self.tech_preferences:
            return False
        self.tech_preferences.append(label)
        return True


@dataclass
class Session:
    """A bounded-lifetime conversation with one end user."""
    id: str
    created_at: datetime
    last_activity: datetime
    turns: List[Turn] = field(default_factory=list)
    context: AccumulatedContext = field(default_factory=AccumulatedContext)
    persona_id: Optional[str] = None
    status: SessionStatus = SessionStatus.ACTIVE
    score: int = 0

    @classmethod
    def create(cls, now: Optional[datetime] = None) -> "Session":
        """Create a fresh session with a generated identifier."""
        now = now or datetime.now(UTC)
        return cls(id=new_session_id(), created_at=now, last_activity=now)

    @property
    def user_turns(self) -> List[Turn]:
        return [t for t in self.turns if t.role == TurnRole.USER]

    @property
    def turn_count(self) -> int:
        return len(self.turns)
