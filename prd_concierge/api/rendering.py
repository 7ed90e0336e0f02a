"""Markdown views of concierge results for chat-style clients."""

from typing import List

from prd_concierge.domain.schemas.output import GeneratePRDOutput, OutputType

FALLBACK_MESSAGE = "Tell me more about the project you have in mind."


def _numbered(items: List[str]) -> List[str]:
    return [f"{i}. {item}" for i, item in enumerate(items, start=1)]


def _footer(session_id: str) -> str:
    return f"_Session ID: {session_id}_"


def render_conversation(result: GeneratePRDOutput) -> str:
    content = result.content
    lines = ["**PRD Concierge**", ""]

    if content.message:
        lines += [content.message, ""]
    if content.questions:
        lines += ["**Clarifying questions**:"] + _numbered(content.questions) + [""]
    if content.suggestions:
        lines += ["**Suggestions**:"] + [f"- {s}" for s in content.suggestions] + [""]

    lines.append(_footer(result.session_id))
    lines.append("Reply with `POST /prd/continue` to keep going.")
    return "\n".join(lines)


def render_clarification(result: GeneratePRDOutput) -> str:
    content = result.content
    lines = ["**Clarification needed**", ""]

    if content.message:
        lines += [content.message, ""]
    if content.questions:
        lines += ["**Please answer the following**:"] + _numbered(content.questions) + [""]

    lines.append(_footer(result.session_id))
    return "\n".join(lines)


def render_prd(result: GeneratePRDOutput) -> str:
    content = result.content
    prd = content.prd
    if prd is None:
        return "PRD generation failed: no document in the result"

    lines = [
        "**PRD generated**",
        "",
        f"# {prd.metadata.name}",
        "",
        f"**Project type**: {prd.project.type.value}",
        f"**Confidence**: {prd.metadata.confidence_score}%",
        f"**Generated at**: {prd.metadata.generated_at}",
        "",
        "## Overview",
        prd.project.description,
        "",
        f"**Target audience**: {prd.project.target_audience}",
        "",
        "## Key features",
    ]
    lines += _numbered(prd.project.key_features) + [""]

    stack = prd.tech_stack
    lines += ["## Tech stack", f"- **Framework**: {stack.framework}"]
    if stack.database:
        lines.append(f"- **Database**: {stack.database}")
    lines.append(f"- **UI library**: {stack.ui_library}")
    if stack.deployment_platform:
        lines.append(f"- **Deployment**: {stack.deployment_platform}")
    if stack.additional_tools:
        lines.append(f"- **Additional tools**: {', '.join(stack.additional_tools)}")
    lines.append("")

    enabled = [name for name, on in prd.features.model_dump().items() if on]
    lines += ["## Feature flags", f"Enabled: {', '.join(enabled)}" if enabled else "Basic feature set", ""]

    lines += ["## Next steps"] + _numbered(prd.next_steps) + [""]

    if content.warnings:
        lines += ["## Warnings"] + [f"- {w}" for w in content.warnings] + [""]

    lines += ["---", _footer(result.session_id)]

    if content.debug_info:
        lines += [
            "",
            "**Debug info**:",
            f"- Persona: {content.debug_info.persona_used}",
            f"- Reasoning: {content.debug_info.reasoning}",
        ]
    return "\n".join(lines)


_RENDERERS = {
    OutputType.CONVERSATION: render_conversation,
    OutputType.CLARIFICATION: render_clarification,
    OutputType.PRD: render_prd,
}


def render(result: GeneratePRDOutput) -> str:
    renderer = _RENDERERS.get(result.type)
    if renderer is None:
        return result.content.message or FALLBACK_MESSAGE
    return renderer(result)
