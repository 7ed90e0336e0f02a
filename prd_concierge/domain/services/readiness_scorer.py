"""
Readiness scoring for sessions.

Pure functions of session state: no I/O, no clock, no mutation.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from prd_concierge.domain.schemas.session import Session, Turn, TurnRole

MIN_FEATURES = 3
MIN_TURNS = 4
MIN_TECH_PREFERENCES = 2
COMPLETENESS_GATE = 70
SCORE_GATE = 75

MISSING_PROJECT_TYPE = "Clear project type"
MISSING_FEATURES = "Core feature requirements"
MISSING_TECH = "Technology preferences"
MISSING_AUDIENCE = "Target audience"

QUESTION_PROJECT_TYPE = "What kind of project is this mainly? (website, online store, SaaS platform, ...)"
QUESTION_FEATURES = "Which core features does this project need?"
QUESTION_TECH = "Do you have any technology preferences? (e.g. React, Vue)"
QUESTION_AUDIENCE = "Who are the main users of this project?"


@dataclass(frozen=True)
class ReadinessAnalysis:
    """Gap report for a session. Recomputed on demand, never stored."""
    ready: bool
    confidence: int
    completeness: int
    missing_information: List[str] = field(default_factory=list)
    clarification_questions: List[str] = field(default_factory=list)


def score(session: Session) -> int:
    """Additive 0-100 readiness score."""
    context = session.context
    total = 0

    if context.has_specific_type:
        total += 20

    total += min(30, len(context.detected_features) * 6)
    total += min(20, len(session.turns) * 3)
    total += min(15, len(context.tech_preferences) * 5)
    total += min(10, len(context.constraints) * 3)
    total += min(5, len(context.user_preferences) * 2)

    return min(100, total)


def assess_input_quality(turns: Sequence[Turn]) -> bool:
    """Users averaged more than 20 characters and wrote at least one turn over 50."""
    user_turns = [t for t in turns if t.role == TurnRole.USER]
    if not user_turns:
        return False

    average = sum(len(t.content) for t in user_turns) / len(user_turns)
    detailed = any(len(t.content) > 50 for t in user_turns)
    return average > 20 and detailed


def analyze_readiness(session: Session, score_gate: int = SCORE_GATE) -> ReadinessAnalysis:
    """
    Evaluate the five readiness requirements.

    ``ready`` needs completeness of at least 70 and a cached session score
    of at least ``score_gate``. Missing-information labels and questions
    follow the order type, features, tech, audience.
    """
    context = session.context

    has_type = context.has_specific_type
    has_features = len(context.detected_features) >= MIN_FEATURES
    has_depth = len(session.turns) >= MIN_TURNS
    has_tech = len(context.tech_preferences) >= MIN_TECH_PREFERENCES
    has_quality = assess_input_quality(session.turns)

    satisfied = sum([has_type, has_features, has_depth, has_tech, has_quality])
    completeness = round(satisfied / 5 * 100)

    missing: List[str] = []
    questions: List[str] = []

    if not has_type:
        missing.append(MISSING_PROJECT_TYPE)
        questions.append(QUESTION_PROJECT_TYPE)

    if not has_features:
        missing.append(MISSING_FEATURES)
        questions.append(QUESTION_FEATURES)

    if not has_tech:
        missing.append(MISSING_TECH)
        questions.append(QUESTION_TECH)

    if context.detected_features and "target_audience" not in context.user_preferences:
        missing.append(MISSING_AUDIENCE)
        questions.append(QUESTION_AUDIENCE)

    return ReadinessAnalysis(
        ready=completeness >= COMPLETENESS_GATE and session.score >= score_gate,
        confidence=completeness,
        completeness=completeness,
        missing_information=missing,
        clarification_questions=questions,
    )
