"""Tests for readiness scoring."""

from datetime import datetime, timezone

from prd_concierge.domain.schemas.session import (
    AccumulatedContext,
    ProjectType,
    Session,
    Turn,
    TurnRole,
)
from prd_concierge.domain.services import readiness_scorer as rs

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
DETAILED = "We are building a subscription analytics platform for small marketing teams"


def _session(context=None, user_texts=(), assistant_turns=0) -> Session:
    session = Session(id="ss_test", created_at=NOW, last_activity=NOW, context=context or AccumulatedContext())
    for text in user_texts:
        session.turns.append(Turn(role=TurnRole.USER, content=text))
    for _ in range(assistant_turns):
        session.turns.append(Turn(role=TurnRole.ASSISTANT, content="ok"))
    return session


class TestScore:
    """Tests for the additive score."""

    def test_empty_session(self):
        assert rs.score(_session()) == 0

    def test_generic_type_earns_nothing(self):
        assert rs.score(_session(AccumulatedContext(project_type=ProjectType.GENERIC))) == 0

    def test_components_and_caps(self):
        context = AccumulatedContext(
            project_type=ProjectType.SAAS,
            detected_features=["auth", "payment", "admin", "search", "upload", "email"],
            tech_preferences=["React", "PostgreSQL", "Tailwind CSS", "Prisma"],
            constraints={"budget": "low"},
            user_preferences={"target_audience": "startup"},
        )
        session = _session(context, user_texts=["a", "b"], assistant_turns=2)

        # 20 type + 30 features (capped) + 12 turns + 15 tech (capped) + 3 constraints + 2 prefs
        assert rs.score(session) == 82

    def test_never_exceeds_100(self):
        context = AccumulatedContext(
            project_type=ProjectType.SAAS,
            detected_features=["f%d" % i for i in range(10)],
            tech_preferences=["t%d" % i for i in range(10)],
            constraints={"a": 1, "b": 2, "c": 3, "d": 4},
            user_preferences={"x": "1", "y": "2", "z": "3"},
        )
        assert rs.score(_session(context, user_texts=["x"] * 10)) == 100


class TestInputQuality:

    def test_no_user_turns(self):
        assert rs.assess_input_quality([]) is False

    def test_needs_one_long_turn(self):
        turns = [Turn(role=TurnRole.USER, content="x" * 30)] * 3
        assert rs.assess_input_quality(turns) is False

    def test_detailed_input(self):
        turns = [Turn(role=TurnRole.USER, content=DETAILED), Turn(role=TurnRole.USER, content="x" * 25)]
        assert rs.assess_input_quality(turns) is True


class TestAnalyzeReadiness:
    """Tests for analyze_readiness."""

    def test_fully_specified_session(self):
        context = AccumulatedContext(
            project_type=ProjectType.SAAS,
            detected_features=["auth", "payment", "analytics", "admin", "search"],
            tech_preferences=["React", "PostgreSQL", "Tailwind CSS"],
            constraints={"budget": "low"},
            user_preferences={"target_audience": "small_business"},
        )
        session = _session(context, user_texts=[DETAILED, DETAILED], assistant_turns=2)
        session.score = rs.score(session)

        analysis = rs.analyze_readiness(session)

        assert session.score == 82
        assert analysis.completeness == 100
        assert analysis.missing_information == []
        assert analysis.clarification_questions == []
        assert analysis.ready is True

    def test_cached_score_gates_readiness(self):
        context = AccumulatedContext(
            project_type=ProjectType.SAAS,
            detected_features=["auth", "payment", "analytics"],
            tech_preferences=["React", "PostgreSQL"],
        )
        session = _session(context, user_texts=[DETAILED, DETAILED], assistant_turns=2)
        session.score = 10

        analysis = rs.analyze_readiness(session)

        assert analysis.completeness == 100
        assert analysis.ready is False

    def test_missing_items_in_order(self):
        session = _session(AccumulatedContext(detected_features=["auth"]), user_texts=["hi"])

        analysis = rs.analyze_readiness(session)

        assert analysis.missing_information == [
            rs.MISSING_PROJECT_TYPE,
            rs.MISSING_FEATURES,
            rs.MISSING_TECH,
            rs.MISSING_AUDIENCE,
        ]
        assert analysis.clarification_questions[0] == rs.QUESTION_PROJECT_TYPE
        assert analysis.completeness == 0
        assert analysis.ready is False

    def test_audience_only_asked_once_features_exist(self):
        analysis = rs.analyze_readiness(_session(user_texts=["hi"]))
        assert rs.MISSING_AUDIENCE not in analysis.missing_information


class TestProperties:

    def test_score_non_decreasing_as_context_grows(self):
        session = _session()
        scores = [rs.score(session)]
        for feature in ["auth", "payment", "search", "admin", "upload", "email"]:
            session.context.add_feature(feature)
            session.turns.append(Turn(role=TurnRole.USER, content=feature))
            scores.append(rs.score(session))
        session.context.project_type = ProjectType.BLOG
        scores.append(rs.score(session))

        assert scores == sorted(scores)
        assert all(0 <= s <= 100 for s in scores)

    def test_analysis_is_repeatable(self):
        session = _session(AccumulatedContext(detected_features=["auth"]), user_texts=[DETAILED])
        assert rs.analyze_readiness(session) == rs.analyze_readiness(session)
