"""Completion transports backed by capabilities exposed on a host object.

The host is whatever embeds the concierge (an editor, an agent runtime, a
test double). Each transport checks for exactly one capability on it and
speaks that capability's call shape; nothing here inspects the host beyond
those checks.
"""

import inspect
import time
from abc import abstractmethod
from typing import Any, Callable, Dict, List, Optional

from prd_concierge.llm.models import CompletionRequest, LLMError, LLMException, LLMResponse
from prd_concierge.llm.providers.base import BaseLLMProvider


def _read(raw: Any, *path: Any) -> Any:
    """Walk attributes, dict keys or list indices; None as soon as a hop is missing."""
    current = raw
    for hop in path:
        if current is None:
            return None
        if isinstance(hop, int):
            if isinstance(current, (list, tuple)) and len(current) > hop:
                current = current[hop]
            else:
                return None
        elif isinstance(current, dict):
            current = current.get(hop)
        else:
            current = getattr(current, hop, None)
    return current


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _tokens(raw: Any) -> int:
    total = _read(raw, "usage", "total_tokens")
    return int(total) if isinstance(total, (int, float)) else 0


class HostCapabilityProvider(BaseLLMProvider):
    """Shared plumbing for transports that call a host capability."""

    def __init__(self, host: Any):
        self._host = host

    @abstractmethod
    def _capability(self) -> Optional[Callable[..., Any]]:
        """The host callable this transport uses, or None when absent."""
        ...

    @abstractmethod
    def _build_kwargs(self, request: CompletionRequest) -> Dict[str, Any]:
        ...

    @abstractmethod
    def _content(self, raw: Any) -> str:
        ...

    def is_available(self) -> bool:
        return callable(self._capability())

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        fn = self._capability()
        if not callable(fn):
            raise LLMException(LLMError.host_error(f"{self.provider_name} is not exposed by the host"))

        start_time = time.perf_counter()
        try:
            raw = fn(**self._build_kwargs(request))
            if inspect.isawaitable(raw):
                raw = await raw
        except LLMException:
            raise
        except Exception as e:
            raise LLMException(LLMError.host_error(f"{self.provider_name} failed: {e}")) from e

        latency_ms = (time.perf_counter() - start_time) * 1000
        model = _text(_read(raw, "model")) or "host-default"

        return LLMResponse(
            content=self._content(raw),
            model=model,
            tokens_used=_tokens(raw),
            latency_ms=latency_ms,
            transport=self.provider_name,
        )


class SamplingProvider(HostCapabilityProvider):
    """Preferred transport: ``host.sampling.create_message``."""

    @property
    def provider_name(self) -> str:
        return "sampling.create_message"

    def _capability(self) -> Optional[Callable[..., Any]]:
        return _read(self._host, "sampling", "create_message")

    def _build_kwargs(self, request: CompletionRequest) -> Dict[str, Any]:
        return {
            "messages": [m.to_dict() for m in request.messages],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "include_context": "thisServer",
            "metadata": request.context,
        }

    def _content(self, raw: Any) -> str:
        return (
            _text(_read(raw, "content", "text"))
            or _text(_read(raw, "content"))
            or ""
        )


class CreateMessageProvider(HostCapabilityProvider):
    """Legacy transport: ``host.create_message``."""

    @property
    def provider_name(self) -> str:
        return "create_message"

    def _capability(self) -> Optional[Callable[..., Any]]:
        return _read(self._host, "create_message")

    def _build_kwargs(self, request: CompletionRequest) -> Dict[str, Any]:
        return {
            "messages": [m.to_dict() for m in request.messages],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "context": request.context,
        }

    def _content(self, raw: Any) -> str:
        return (
            _text(_read(raw, "choices", 0, "message", "content"))
            or _text(_read(raw, "content"))
            or ""
        )


class RequestCompletionProvider(CreateMessageProvider):
    """Oldest transport: ``host.request_completion`` with a bare prompt."""

    @property
    def provider_name(self) -> str:
        return "request_completion"

    def _capability(self) -> Optional[Callable[..., Any]]:
        return _read(self._host, "request_completion")

    def _build_kwargs(self, request: CompletionRequest) -> Dict[str, Any]:
        return {
            "prompt": request.prompt,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "context": request.context,
        }


def host_providers(host: Any) -> List[BaseLLMProvider]:
    """Host transports in priority order."""
    return [
        SamplingProvider(host),
        CreateMessageProvider(host),
        RequestCompletionProvider(host),
    ]
