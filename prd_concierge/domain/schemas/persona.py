"""Persona records used to flavor conversational replies."""

from dataclasses import dataclass, field
from typing import List

from prd_concierge.domain.schemas.session import ProjectType


@dataclass
class Persona:
    """A project-type-specific advisor template."""
    id: str
    name: str
    project_type: ProjectType
    description: str
    opening_questions: List[str] = field(default_factory=list)
    core_topics: List[str] = field(default_factory=list)
    clarification_templates: List[str] = field(default_factory=list)
    completion_criteria: List[str] = field(default_factory=list)
    recommended_tech_stack: List[str] = field(default_factory=list)
    common_features: List[str] = field(default_factory=list)
    best_practices: List[str] = field(default_factory=list)
    pitfalls_to_avoid: List[str] = field(default_factory=list)

    def to_prompt(self) -> str:
        """Render the persona as the leading block of a conversation prompt."""
        lines = [f"# {self.name}", "", self.description]
        sections = [
            ("Core topics", self.core_topics),
            ("Recommended stack", self.recommended_tech_stack),
            ("Common features", self.common_features),
            ("Best practices", self.best_practices),
            ("Pitfalls to avoid", self.pitfalls_to_avoid),
        ]
        for title, items in sections:
            if items:
                lines.append("")
                lines.append(f"## {title}")
                lines.extend(f"- {item}" for item in items)
        return "\n".join(lines)
