"""Parsing of model replies into structured results."""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from prd_concierge.core.errors import MalformedCompletionResponse
from prd_concierge.domain.schemas.session import ProjectType

logger = logging.getLogger(__name__)

REPLY_TYPES = ("question", "suggestion", "completion")

# (project type, trigger phrases); first matching row wins
INTENT_KEYWORDS: Tuple[Tuple[ProjectType, Tuple[str, ...]], ...] = (
    (ProjectType.ECOMMERCE, ("电商", "商店", "ecommerce", "e-commerce", "store", "shop")),
    (ProjectType.BLOG, ("博客", "文章", "blog", "article")),
    (ProjectType.PORTFOLIO, ("作品", "展示", "portfolio", "showcase")),
    (ProjectType.SAAS, ("saas", "订阅", "subscription")),
    (ProjectType.LANDING_PAGE, ("落地页", "营销页", "landing page")),
)

KEYWORD_CONFIDENCE = 60
UNCLASSIFIED_CONFIDENCE = 30
DEFAULT_REPLY_CONFIDENCE = 70

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


@dataclass
class IntentClassification:
    project_type: ProjectType
    confidence: int
    reasoning: str


@dataclass
class ConversationReply:
    response: str
    type: str
    confidence: int
    questions: List[str] = field(default_factory=list)
    transport: Optional[str] = None


def extract_json(text: str) -> Dict[str, Any]:
    """
    Return the first JSON object embedded in ``text``.

    Code fences are searched before the surrounding text.

    Raises:
        MalformedCompletionResponse: No JSON object could be decoded
    """
    candidates = [m.group(1) for m in _FENCE_RE.finditer(text)] + [text]
    decoder = json.JSONDecoder()

    for candidate in candidates:
        start = candidate.find("{")
        while start != -1:
            try:
                parsed, _ = decoder.raw_decode(candidate, start)
            except json.JSONDecodeError:
                start = candidate.find("{", start + 1)
                continue
            if isinstance(parsed, dict):
                return parsed
            start = candidate.find("{", start + 1)

    raise MalformedCompletionResponse("No JSON object found in model reply", raw_text=text)


def _coerce_confidence(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError):
        return default
    return max(0, min(100, number))


def classify_by_keywords(text: str) -> IntentClassification:
    """Keyword heuristic used when a classification reply is unusable."""
    lowered = text.lower()
    for project_type, phrases in INTENT_KEYWORDS:
        if any(phrase in lowered for phrase in phrases):
            return IntentClassification(project_type, KEYWORD_CONFIDENCE, "keyword match")
    return IntentClassification(ProjectType.GENERIC, UNCLASSIFIED_CONFIDENCE, "no clear classification")


def parse_intent_response(content: str) -> IntentClassification:
    try:
        data = extract_json(content)
    except MalformedCompletionResponse as e:
        logger.warning(f"Intent reply not parseable, using keyword fallback: {e.message}")
        return classify_by_keywords(content)

    return IntentClassification(
        project_type=ProjectType.coerce(data.get("project_type") or ProjectType.GENERIC.value),
        confidence=_coerce_confidence(data.get("confidence"), 50),
        reasoning=str(data.get("reasoning") or "classified"),
    )


def _heuristic_type(text: str) -> str:
    return "question" if ("?" in text or "？" in text) else "suggestion"


def parse_conversation_response(content: str) -> ConversationReply:
    try:
        data = extract_json(content)
    except MalformedCompletionResponse as e:
        logger.warning(f"Conversation reply not parseable, using raw text: {e.message}")
        return ConversationReply(
            response=content.strip(),
            type=_heuristic_type(content),
            confidence=DEFAULT_REPLY_CONFIDENCE,
        )

    response = data.get("response")
    if not isinstance(response, str) or not response.strip():
        response = content.strip()

    reply_type = data.get("type")
    if reply_type not in REPLY_TYPES:
        reply_type = "suggestion"

    questions = data.get("questions") or []
    if not isinstance(questions, list):
        questions = []

    return ConversationReply(
        response=response,
        type=reply_type,
        confidence=_coerce_confidence(data.get("confidence"), DEFAULT_REPLY_CONFIDENCE),
        questions=[str(q) for q in questions if str(q).strip()],
    )
