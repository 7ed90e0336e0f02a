"""Rule-based follow-up questions for the next conversation turn."""

from typing import List

from prd_concierge.domain.schemas.session import AccumulatedContext, ProjectType

MAX_QUESTIONS = 2


def generate_questions(context: AccumulatedContext, limit: int = MAX_QUESTIONS) -> List[str]:
    """
    Up to ``limit`` questions, project-type gaps first, then generic gaps.

    Candidates past the limit are dropped; they come back on a later turn
    if the gap is still open.
    """
    features = context.detected_features
    preferences = context.user_preferences
    questions: List[str] = []

    if context.project_type == ProjectType.ECOMMERCE:
        if "payment" not in features:
            questions.append("Which payment methods do you need to support?")
        if "product_type" not in preferences:
            questions.append("What kind of products will you mainly sell?")
    elif context.project_type == ProjectType.SAAS:
        if "auth" not in features:
            questions.append("Do you need team collaboration features?")
        if "billing_model" not in preferences:
            questions.append("Which subscription or billing model do you plan to use?")
    elif context.project_type == ProjectType.BLOG:
        if "cms" not in features:
            questions.append("How would you like to manage your content?")

    if not context.tech_preferences:
        questions.append("Do you have any specific technology requirements?")

    if "timeline" not in context.constraints:
        questions.append("What is the timeline for this project?")

    return questions[:limit]
