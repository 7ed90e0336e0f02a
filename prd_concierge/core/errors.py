"""Error types surfaced by the concierge core."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class PRDConciergeError(Exception):
    """Base error carrying a stable code and structured context."""

    def __init__(
        self,
        message: str,
        code: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.context = context or {}
        super().__init__(message)


@dataclass
class TransportAttempt:
    """One transport probe made while serving a completion request."""
    method: str
    status: str  # success | no-fn | error
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.method, "status": self.status, "detail": self.detail}


class CompletionRequestFailed(PRDConciergeError):
    """Every completion transport was exhausted without a reply."""

    def __init__(self, message: str, attempts: List[TransportAttempt]):
        self.attempts = list(attempts)
        super().__init__(
            message,
            code="LLM_REQUEST_FAILED",
            context={"attempts": [a.to_dict() for a in self.attempts]},
        )


class DocumentValidationFailed(PRDConciergeError):
    """An assembled PRD failed the hard validation checks."""

    def __init__(self, errors: List[str], warnings: Optional[List[str]] = None):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__(
            f"PRD validation failed: {', '.join(errors)}",
            code="PRD_VALIDATION_FAILED",
            context={"errors": self.errors, "warnings": self.warnings},
        )


class MalformedCompletionResponse(PRDConciergeError):
    """A model reply could not be parsed into the expected structure."""

    def __init__(self, message: str, raw_text: str = ""):
        self.raw_text = raw_text
        super().__init__(
            message,
            code="MALFORMED_COMPLETION",
            context={"raw_preview": raw_text[:200]},
        )
