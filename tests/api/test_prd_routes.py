"""Tests for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from prd_concierge.api.main import create_app
from prd_concierge.core.config import Settings

OPENING = "A project called TaskFlow: a SaaS tool for startups with user login, billing and analytics reports"
FOLLOW_UP = "We prefer React with PostgreSQL and Tailwind, and need an admin dashboard and search"


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(log_level="WARNING", openai_api_key=None)


@pytest.fixture
def client(settings, recording_host):
    with TestClient(create_app(settings=settings, host=recording_host)) as test_client:
        yield test_client


@pytest.fixture
def broken_client(settings, broken_host):
    with TestClient(create_app(settings=settings, host=broken_host)) as test_client:
        yield test_client


# =============================================================================
# HEALTH
# =============================================================================

class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service_ready"] is True
        assert body["active_sessions"] == 0
        assert response.headers["X-Request-ID"]

    def test_request_id_propagated(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"


# =============================================================================
# PRD ENDPOINTS
# =============================================================================

class TestGenerate:
    """Tests for POST /prd/generate."""

    def test_first_message(self, client, recording_host):
        response = client.post("/prd/generate", json={"user_input": "I want to build a SaaS tool with user login"})

        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "clarification"
        assert body["session_id"].startswith("ss_")
        assert body["content"]["questions"] == ["Which features matter most?"]
        assert body["content"]["debug_info"]["transport"] == "request_completion"
        assert body["text"].startswith("**Clarification needed**")
        assert body["session_id"] in body["text"]
        assert len(recording_host.calls) == 2

    def test_blank_input_rejected(self, client):
        assert client.post("/prd/generate", json={"user_input": "   "}).status_code == 422

    def test_too_long_input_rejected(self, client):
        assert client.post("/prd/generate", json={"user_input": "x" * 2001}).status_code == 422

    def test_missing_input_rejected(self, client):
        assert client.post("/prd/generate", json={}).status_code == 422

    def test_all_transports_failing(self, broken_client):
        response = broken_client.post("/prd/generate", json={"user_input": "I want to build a blog"})

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "LLM_REQUEST_FAILED"
        assert [a["method"] for a in body["attempts"]] == [
            "sampling.create_message",
            "create_message",
            "request_completion",
        ]
        assert all(a["status"] == "error" for a in body["attempts"])


class TestContinue:
    """Tests for POST /prd/continue."""

    def test_continues_same_session(self, client):
        first = client.post("/prd/generate", json={"user_input": "A SaaS for invoices"}).json()

        response = client.post(
            "/prd/continue",
            json={"session_id": first["session_id"], "user_response": "It needs search"},
        )

        assert response.status_code == 200
        assert response.json()["session_id"] == first["session_id"]

    def test_conversation_reaches_prd(self, client):
        first = client.post("/prd/generate", json={"user_input": OPENING}).json()

        response = client.post(
            "/prd/continue",
            json={"session_id": first["session_id"], "user_response": FOLLOW_UP},
        )

        body = response.json()
        assert body["type"] == "prd"
        assert body["content"]["prd"]["metadata"]["name"] == "TaskFlow"
        assert body["content"]["prd"]["project"]["type"] == "saas"
        assert "# TaskFlow" in body["text"]
        assert "## Tech stack" in body["text"]

    def test_blank_response_rejected(self, client):
        response = client.post("/prd/continue", json={"session_id": "ss_x", "user_response": " "})
        assert response.status_code == 422


class TestSessionInfo:
    """Tests for GET /prd/sessions/{session_id}."""

    def test_known_session(self, client):
        first = client.post("/prd/generate", json={"user_input": "A SaaS for invoices"}).json()

        response = client.get(f"/prd/sessions/{first['session_id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["session_id"] == first["session_id"]
        assert "- Project type: saas" in body["summary"]

    def test_unknown_session(self, client):
        response = client.get("/prd/sessions/ss_missing")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "session_not_found"
