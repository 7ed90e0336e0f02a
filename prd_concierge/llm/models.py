"""LLM domain models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from prd_concierge.core.errors import TransportAttempt


class MessageRole(str, Enum):
    """Message roles for LLM conversations."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """A message in an LLM conversation."""
    role: MessageRole
    content: str

    @classmethod
    def user(cls, content: str) -> "Message":
        """Create a user message."""
        return cls(role=MessageRole.USER, content=content)

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary for API calls."""
        return {"role": self.role.value, "content": self.content}


@dataclass
class CompletionRequest:
    """A single prompt handed to whichever transport answers first."""
    prompt: str
    temperature: float = 0.7
    max_tokens: int = 2000
    context: Optional[Dict[str, Any]] = None

    @property
    def messages(self) -> List[Message]:
        return [Message.user(self.prompt)]


@dataclass
class LLMResponse:
    """Response from a completion transport."""
    content: str
    model: str = "host-default"
    tokens_used: int = 0
    latency_ms: float = 0.0
    transport: Optional[str] = None
    confidence: Optional[int] = None
    attempts: List[TransportAttempt] = field(default_factory=list)


@dataclass
class LLMError:
    """Why a single transport call failed."""
    error_type: str
    message: str
    retryable: bool = False
    status_code: Optional[int] = None
    retry_after_seconds: Optional[float] = None

    @classmethod
    def rate_limit(cls, message: str, retry_after_seconds: Optional[float] = None) -> "LLMError":
        return cls("rate_limit", message, retryable=True, status_code=429,
                   retry_after_seconds=retry_after_seconds)

    @classmethod
    def timeout(cls, message: str) -> "LLMError":
        return cls("timeout", message, retryable=True)

    @classmethod
    def api_error(cls, message: str, status_code: int) -> "LLMError":
        """Non-2xx reply from a network endpoint; only 5xx is worth retrying."""
        return cls("api_error", message, retryable=status_code >= 500, status_code=status_code)

    @classmethod
    def host_error(cls, message: str) -> "LLMError":
        """Failure inside a host-provided capability."""
        return cls("host_error", message)


class LLMException(Exception):
    """Carries an LLMError out of a transport."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class LLMOperationalError(LLMException):
    """A retryable error that kept failing until retries ran out."""

    def __init__(self, transport: str, error: LLMError, attempts: int):
        self.transport = transport
        self.attempts = attempts
        super().__init__(LLMError(
            "operational_error",
            error.message,
            retryable=True,
            status_code=error.status_code,
        ))
