"""Mock completion transport for testing."""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from prd_concierge.llm.models import CompletionRequest, LLMResponse, LLMError, LLMException
from prd_concierge.llm.providers.base import BaseLLMProvider


@dataclass
class MockCall:
    """Record of a mock completion call."""
    prompt: str
    temperature: float
    max_tokens: int
    timestamp: float = field(default_factory=time.time)


class MockLLMProvider(BaseLLMProvider):
    """Mock transport for testing without a host or network."""

    def __init__(
        self,
        default_response: str = "Mock response",
        responses: Optional[Dict[str, str]] = None,
        response_fn: Optional[Callable[[CompletionRequest], str]] = None,
        name: str = "mock",
        available: bool = True,
        latency_ms: float = 5.0,
        tokens_used: int = 150,
    ):
        """
        Initialize mock transport.

        Args:
            default_response: Default response when no trigger matches
            responses: Dict mapping prompt substrings to responses
            response_fn: Custom function to generate responses
            name: Transport name reported in attempt logs
            available: Value returned by is_available()
            latency_ms: Simulated latency
            tokens_used: Simulated token count
        """
        self._default_response = default_response
        self._responses = responses or {}
        self._response_fn = response_fn
        self._name = name
        self._available = available
        self._latency_ms = latency_ms
        self._tokens_used = tokens_used
        self._calls: List[MockCall] = []
        self._error_on_next: Optional[LLMError] = None
        self._always_fail: Optional[LLMError] = None

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def calls(self) -> List[MockCall]:
        """Get list of all calls made to this transport."""
        return self._calls

    @property
    def call_count(self) -> int:
        return len(self._calls)

    def last_call(self) -> Optional[MockCall]:
        return self._calls[-1] if self._calls else None

    def is_available(self) -> bool:
        return self._available

    def set_error_on_next(self, error: LLMError) -> None:
        """Configure an error to be raised on the next call."""
        self._error_on_next = error

    def fail_always(self, error: Optional[LLMError]) -> None:
        """Raise the given error on every call until cleared with None."""
        self._always_fail = error

    def set_response(self, trigger: str, response: str) -> None:
        """Set a response for prompts containing the trigger string."""
        self._responses[trigger] = response

    def clear_calls(self) -> None:
        self._calls.clear()

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """Generate mock completion."""
        self._calls.append(MockCall(
            prompt=request.prompt,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        ))

        if self._always_fail:
            raise LLMException(self._always_fail)

        if self._error_on_next:
            error = self._error_on_next
            self._error_on_next = None
            raise LLMException(error)

        return LLMResponse(
            content=self._get_response(request),
            model="mock-model",
            tokens_used=self._tokens_used,
            latency_ms=self._latency_ms,
            transport=self.provider_name,
        )

    def _get_response(self, request: CompletionRequest) -> str:
        if self._response_fn:
            return self._response_fn(request)

        for trigger, response in self._responses.items():
            if trigger in request.prompt:
                return response

        return self._default_response


def create_json_response_provider(payload: Dict[str, Any], name: str = "mock") -> MockLLMProvider:
    """Create a mock transport that always answers with the given JSON payload."""

    def response_fn(request: CompletionRequest) -> str:
        return json.dumps(payload, ensure_ascii=False)

    return MockLLMProvider(response_fn=response_fn, name=name)
