"""Tests for prompt assembly."""

from prd_concierge.domain.schemas.session import AccumulatedContext, ProjectType, Turn, TurnRole
from prd_concierge.llm.prompt_builder import (
    build_classification_prompt,
    build_conversation_prompt,
    format_history,
    summarize_context,
)


def _turns(count: int):
    return [Turn(role=TurnRole.USER, content=f"message {i}") for i in range(count)]


class TestClassificationPrompt:

    def test_embeds_input_and_json_contract(self):
        prompt = build_classification_prompt("an online shop for tea")
        assert '"an online shop for tea"' in prompt
        assert '"project_type"' in prompt
        assert "landing_page" in prompt


class TestFormatHistory:

    def test_keeps_last_five(self):
        text = format_history(_turns(8))
        assert "message 2" not in text
        assert "message 3" in text
        assert text.splitlines()[-1] == "user: message 7"

    def test_zero_window(self):
        assert format_history(_turns(3), window=0) == ""


class TestSummarizeContext:

    def test_empty_context(self):
        summary = summarize_context(AccumulatedContext())
        assert "- Project type: undetermined" in summary
        assert "- Detected features: none" in summary

    def test_populated_context(self):
        context = AccumulatedContext(
            project_type=ProjectType.SAAS,
            detected_features=["auth", "payment"],
            constraints={"budget": "low"},
        )
        summary = summarize_context(context)
        assert "- Project type: saas" in summary
        assert "auth, payment" in summary
        assert "budget: low" in summary


class TestConversationPrompt:

    def test_section_order(self):
        prompt = build_conversation_prompt(
            "We need team billing",
            "# SaaS Product Advisor",
            _turns(2),
            AccumulatedContext(project_type=ProjectType.SAAS),
        )
        positions = [
            prompt.index("# SaaS Product Advisor"),
            prompt.index("## Conversation history"),
            prompt.index("## Accumulated context"),
            prompt.index("## Current user input"),
            prompt.index("## Instructions"),
        ]
        assert positions == sorted(positions)
        assert '"We need team billing"' in prompt

    def test_empty_history_placeholder(self):
        prompt = build_conversation_prompt("hi", "# Advisor", [], AccumulatedContext())
        assert "## Conversation history\n(none)" in prompt
