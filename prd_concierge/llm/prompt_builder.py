"""Prompt text for classification and conversational replies."""

from typing import Sequence

from prd_concierge.domain.schemas.session import AccumulatedContext, Turn

HISTORY_WINDOW = 5

CLASSIFICATION_TEMPLATE = """# Intent Classifier

You are a precise project-type classifier. Analyse the user's input and pick the best matching project type.

## Project types
- blog: blogs, content sites, news platforms
- ecommerce: online stores, shopping sites
- saas: SaaS products, subscription services, B2B platforms
- portfolio: portfolios, personal sites, showcase sites
- landing_page: marketing pages, product introductions, campaign pages
- generic: anything else, or no clear fit

## User input
"{user_input}"

## Requirements
1. Consider keywords, usage scenario and target users
2. Reply with JSON only: {{"project_type": "<type>", "confidence": 85, "reasoning": "<why>"}}
3. confidence is an integer from 0 to 100
4. When unsure, choose generic

Classification:"""

CONVERSATION_INSTRUCTIONS = """## Instructions
1. Answer as the advisor described above
2. If information is missing, ask one or two targeted clarification questions
3. If information is sufficient, start summarising towards the requirements document
4. Keep the conversation natural
5. Reply with JSON: {"response": "<reply>", "type": "question|suggestion|completion", "confidence": 85, "questions": ["<optional follow-up>"]}"""


def build_classification_prompt(user_input: str) -> str:
    return CLASSIFICATION_TEMPLATE.format(user_input=user_input)


def summarize_context(context: AccumulatedContext) -> str:
    """Bullet summary of what the conversation has established so far."""
    project_type = context.project_type.value if context.project_type else "undetermined"
    preferences = ", ".join(f"{k}: {v}" for k, v in context.user_preferences.items())
    constraints = ", ".join(f"{k}: {v}" for k, v in context.constraints.items())
    return "\n".join([
        f"- Project type: {project_type}",
        f"- Detected features: {', '.join(context.detected_features) or 'none'}",
        f"- User preferences: {preferences or 'none'}",
        f"- Tech preferences: {', '.join(context.tech_preferences) or 'none'}",
        f"- Constraints: {constraints or 'none'}",
    ])


def format_history(history: Sequence[Turn], window: int = HISTORY_WINDOW) -> str:
    recent = list(history)[-window:] if window > 0 else []
    return "\n".join(f"{turn.role.value}: {turn.content}" for turn in recent)


def build_conversation_prompt(
    user_input: str,
    persona_prompt: str,
    history: Sequence[Turn],
    context: AccumulatedContext,
) -> str:
    """
    Assemble the conversational prompt.

    Sections, in order: persona, the last five turns, the context summary,
    the current input, and the reply instructions.
    """
    return "\n\n".join([
        persona_prompt,
        "## Conversation history\n" + (format_history(history) or "(none)"),
        "## Accumulated context\n" + summarize_context(context),
        f'## Current user input\n"{user_input}"',
        CONVERSATION_INSTRUCTIONS,
    ])
