"""Tests for rule-based clarification questions."""

from prd_concierge.domain.schemas.session import AccumulatedContext, ProjectType
from prd_concierge.domain.services.clarification_generator import generate_questions

TECH_QUESTION = "Do you have any specific technology requirements?"
TIMELINE_QUESTION = "What is the timeline for this project?"


class TestGenerateQuestions:

    def test_ecommerce_gaps_first(self):
        questions = generate_questions(AccumulatedContext(project_type=ProjectType.ECOMMERCE))
        assert questions == [
            "Which payment methods do you need to support?",
            "What kind of products will you mainly sell?",
        ]

    def test_ecommerce_payment_known(self):
        context = AccumulatedContext(project_type=ProjectType.ECOMMERCE, detected_features=["payment"])
        assert generate_questions(context) == ["What kind of products will you mainly sell?", TECH_QUESTION]

    def test_saas_with_auth_asks_billing(self):
        context = AccumulatedContext(project_type=ProjectType.SAAS, detected_features=["auth"])
        assert generate_questions(context)[0] == "Which subscription or billing model do you plan to use?"

    def test_saas_without_auth_asks_collaboration(self):
        context = AccumulatedContext(project_type=ProjectType.SAAS)
        assert generate_questions(context)[0] == "Do you need team collaboration features?"

    def test_blog_always_asks_content_management(self):
        context = AccumulatedContext(project_type=ProjectType.BLOG, tech_preferences=["Astro"])
        assert generate_questions(context) == ["How would you like to manage your content?", TIMELINE_QUESTION]

    def test_generic_gaps(self):
        assert generate_questions(AccumulatedContext()) == [TECH_QUESTION, TIMELINE_QUESTION]

    def test_nothing_missing(self):
        context = AccumulatedContext(tech_preferences=["React"], constraints={"timeline": "urgent"})
        assert generate_questions(context) == []

    def test_limit(self):
        assert len(generate_questions(AccumulatedContext(project_type=ProjectType.ECOMMERCE), limit=3)) == 3
        assert generate_questions(AccumulatedContext(), limit=1) == [TECH_QUESTION]
