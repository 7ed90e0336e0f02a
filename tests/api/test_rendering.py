"""Tests for markdown rendering of results."""

from datetime import datetime, timezone

from prd_concierge.api.rendering import render
from prd_concierge.domain.schemas.output import DebugInfo, GeneratePRDOutput, OutputContent, OutputType
from prd_concierge.domain.schemas.session import AccumulatedContext, ProjectType, Session, Turn, TurnRole
from prd_concierge.domain.services.prd_builder import PRDBuilder

NOW = datetime(2024, 3, 1, tzinfo=timezone.utc)


def _document():
    context = AccumulatedContext(project_type=ProjectType.BLOG, detected_features=["search"])
    session = Session(id="ss_render", created_at=NOW, last_activity=NOW, context=context, score=80)
    session.turns.append(Turn(role=TurnRole.USER, content="A blog called Wanderlog about mountain trips"))
    return PRDBuilder().build(session, now=NOW)


class TestRender:

    def test_conversation(self):
        result = GeneratePRDOutput(
            type=OutputType.CONVERSATION,
            session_id="ss_1",
            content=OutputContent(message="Hello", questions=["Q1?"], suggestions=["Add detail"]),
        )
        text = render(result)

        assert text.startswith("**PRD Concierge**")
        assert "1. Q1?" in text
        assert "- Add detail" in text
        assert "_Session ID: ss_1_" in text

    def test_clarification_without_questions(self):
        result = GeneratePRDOutput(
            type=OutputType.CLARIFICATION,
            session_id="ss_2",
            content=OutputContent(message="Tell me more"),
        )
        assert render(result) == "**Clarification needed**\n\nTell me more\n\n_Session ID: ss_2_"

    def test_prd(self):
        result = GeneratePRDOutput(
            type=OutputType.PRD,
            session_id="ss_render",
            content=OutputContent(
                prd=_document(),
                debug_info=DebugInfo(persona_used="persona_blog", confidence=90, reasoning="assembled"),
            ),
        )
        text = render(result)

        assert "# Wanderlog" in text
        assert "**Project type**: blog" in text
        assert "- **Framework**: Astro" in text
        assert "- **Database**" not in text
        assert "Enabled: admin, search" in text
        assert "- Persona: persona_blog" in text

    def test_prd_missing_document(self):
        result = GeneratePRDOutput(type=OutputType.PRD, session_id="ss_3", content=OutputContent())
        assert render(result).startswith("PRD generation failed")
