"""Tests for keyword-table context extraction."""

from prd_concierge.domain.schemas.session import AccumulatedContext, Complexity
from prd_concierge.domain.services import context_extractor as ce


class TestDetectors:
    """Tests for the individual table lookups."""

    def test_simple_blog_request(self):
        extracted = ce.extract("我想做一个简单的个人博客")

        assert extracted.complexity == Complexity.SIMPLE
        assert extracted.features == []
        assert extracted.constraints == {"complexity_preference": "simple"}
        assert extracted.target_audience is None

    def test_tech_preferences_canonical_and_deduplicated(self):
        labels = ce.detect_tech_preferences("Next.js with React, nextjs again, Tailwind and Postgres")
        assert labels == ["React", "Next.js", "Tailwind CSS", "PostgreSQL"]

    def test_tech_keyword_does_not_fire_inside_words(self):
        assert ce.detect_tech_preferences("the next step is material planning") == []

    def test_constraints_first_match_per_field(self):
        constraints = ce.detect_constraints("预算有限, solo developer, asap")
        assert constraints == {"budget": "low", "team_size": 1, "timeline": "urgent"}

    def test_audience(self):
        assert ce.detect_audience("面向小公司的工具") == "small_business"
        assert ce.detect_audience("built for developers") == "developers"
        assert ce.detect_audience("a tool") is None

    def test_preferences(self):
        found = ce.detect_preferences("monthly plans, we sell handmade clothing")
        assert found == {"billing_model": "monthly_subscription", "product_type": "apparel"}

    def test_features_in_table_order(self):
        features = ce.detect_features("Users can search, upload images and log in; admin dashboard too")
        assert features == ["auth", "admin", "search", "upload"]

    def test_chinese_features(self):
        assert ce.detect_features("需要用户登录和在线支付") == ["auth", "payment"]

    def test_complex_beats_simple(self):
        assert ce.estimate_complexity("a simple but enterprise-grade system") == Complexity.COMPLEX
        assert ce.estimate_complexity("a todo list") == Complexity.MEDIUM


class TestMergeInto:
    """Tests for merge_into."""

    def test_appends_without_duplicates(self):
        context = AccumulatedContext(detected_features=["auth"], tech_preferences=["React"])
        extracted = ce.extract("login with React and Vue, plus payment")

        changed = ce.merge_into(context, extracted)

        assert changed is True
        assert context.detected_features == ["auth", "payment"]
        assert context.tech_preferences == ["React", "Vue.js"]

    def test_never_overwrites_existing_values(self):
        context = AccumulatedContext(
            constraints={"budget": "high"},
            user_preferences={"target_audience": "enterprise"},
        )
        ce.merge_into(context, ce.extract("low budget tool for students"))

        assert context.constraints["budget"] == "high"
        assert context.user_preferences["target_audience"] == "enterprise"

    def test_no_change_reported(self):
        context = AccumulatedContext()
        assert ce.merge_into(context, ce.extract("hello there")) is False
        assert context == AccumulatedContext()
