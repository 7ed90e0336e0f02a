"""
Shared pytest fixtures for all tests.

Provides a controllable clock, fake host objects and a wired concierge
service that never touches the network.
"""

import json
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from prd_concierge.domain.services.persona_loader import PersonaLoader
from prd_concierge.domain.services.prd_builder import PRDBuilder
from prd_concierge.domain.services.prd_concierge_service import PRDConciergeService
from prd_concierge.domain.services.session_store import SessionStore
from prd_concierge.llm.client import LLMClient
from prd_concierge.llm.dispatcher import CompletionDispatcher
from prd_concierge.llm.models import CompletionRequest
from prd_concierge.llm.providers.mock import MockLLMProvider


# =============================================================================
# CLOCK
# =============================================================================

class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> SessionStore:
    return SessionStore(timeout_minutes=30, max_turns=50, clock=clock)


# =============================================================================
# HOST DOUBLES
# =============================================================================

class RecordingHost:
    """
    Host exposing only ``request_completion``.

    Classification prompts get a JSON classification; everything else gets a
    conversational JSON reply.
    """

    def __init__(self, project_type: str = "saas", confidence: int = 90):
        self.project_type = project_type
        self.confidence = confidence
        self.calls: List[Dict[str, Any]] = []

    def request_completion(self, prompt: str, temperature: float, max_tokens: int, context=None):
        self.calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        if "Intent Classifier" in prompt:
            payload = {
                "project_type": self.project_type,
                "confidence": self.confidence,
                "reasoning": "matched by test host",
            }
        else:
            payload = {
                "response": "Sounds good. Which features matter most to you?",
                "type": "question",
                "confidence": 80,
                "questions": ["Which features matter most?"],
            }
        return {"content": json.dumps(payload), "model": "test-host"}


class BrokenHost:
    """Host whose every capability raises."""

    def __init__(self):
        self.sampling = SimpleNamespace(create_message=self._fail)
        self.create_message = self._fail
        self.request_completion = self._fail

    @staticmethod
    def _fail(**kwargs):
        raise RuntimeError("host unavailable")


@pytest.fixture
def recording_host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def broken_host() -> BrokenHost:
    return BrokenHost()


# =============================================================================
# SERVICE
# =============================================================================

def classification_aware_mock(project_type: str = "saas", confidence: int = 90) -> MockLLMProvider:
    """Mock transport answering classification and conversation prompts."""

    def respond(request: CompletionRequest) -> str:
        if "Intent Classifier" in request.prompt:
            return json.dumps({"project_type": project_type, "confidence": confidence, "reasoning": "mock"})
        return json.dumps({
            "response": "Tell me more about the features.",
            "type": "question",
            "confidence": 80,
            "questions": [],
        })

    return MockLLMProvider(response_fn=respond)


def build_service(store: SessionStore, *providers) -> PRDConciergeService:
    dispatcher = CompletionDispatcher(list(providers), timeout_seconds=5)
    return PRDConciergeService(
        store=store,
        llm_client=LLMClient(dispatcher),
        prd_builder=PRDBuilder(),
        persona_loader=PersonaLoader(),
    )


@pytest.fixture
def mock_provider() -> MockLLMProvider:
    return classification_aware_mock()


@pytest.fixture
def service(store, mock_provider) -> PRDConciergeService:
    return build_service(store, mock_provider)


@pytest.fixture
def service_factory(store):
    """Build a service over ``store`` with the given transports."""

    def factory(*providers) -> PRDConciergeService:
        return build_service(store, *providers)

    return factory


@pytest.fixture
def mock_factory():
    return classification_aware_mock
