"""Completion dispatcher: first available transport that answers wins."""

import asyncio
import logging
from typing import Any, List, Optional, Sequence

from prd_concierge.core.errors import CompletionRequestFailed, TransportAttempt
from prd_concierge.llm.models import CompletionRequest, LLMException, LLMResponse
from prd_concierge.llm.providers.base import BaseLLMProvider
from prd_concierge.llm.providers.host import host_providers
from prd_concierge.llm.providers.openai_http import OpenAIChatProvider

logger = logging.getLogger(__name__)

HEDGING_MARKERS = ("不确定", "可能", "not sure", "maybe", "perhaps", "uncertain")
RECOMMENDATION_MARKERS = ("建议", "推荐", "recommend", "suggest")


def estimate_confidence(content: str) -> int:
    """Rough confidence for a reply, based on its length and wording."""
    if len(content) < 10:
        return 20
    if len(content) < 50:
        return 50
    lowered = content.lower()
    if any(marker in lowered for marker in HEDGING_MARKERS):
        return 60
    if any(marker in lowered for marker in RECOMMENDATION_MARKERS):
        return 80
    return 75


class CompletionDispatcher:
    """
    Tries each transport in priority order until one returns a reply.

    Unavailable transports are recorded as ``no-fn`` and skipped; transports
    that raise or exceed the timeout are recorded as ``error`` and the next one
    is tried. The winning transport's reply carries the full attempt list.
    """

    def __init__(self, providers: Sequence[BaseLLMProvider], timeout_seconds: float = 60.0):
        self._providers = list(providers)
        self._timeout_seconds = timeout_seconds

    @classmethod
    def for_host(
        cls,
        host: Any,
        openai_api_key: Optional[str] = None,
        openai_base_url: Optional[str] = None,
        openai_model: str = "gpt-4o-mini",
        timeout_seconds: float = 60.0,
    ) -> "CompletionDispatcher":
        """Standard chain: host capabilities, then the network API when a key is set."""
        providers: List[BaseLLMProvider] = host_providers(host)
        if openai_api_key:
            providers.append(OpenAIChatProvider(
                api_key=openai_api_key,
                base_url=openai_base_url,
                model=openai_model,
                timeout=timeout_seconds,
            ))
        return cls(providers, timeout_seconds=timeout_seconds)

    @property
    def providers(self) -> List[BaseLLMProvider]:
        return list(self._providers)

    async def _call(self, provider: BaseLLMProvider, request: CompletionRequest) -> LLMResponse:
        if isinstance(provider, OpenAIChatProvider):
            return await provider.complete_with_retry(request)
        return await provider.complete(request)

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """
        Run the request through the transport chain.

        Raises:
            CompletionRequestFailed: No transport produced a reply
        """
        attempts: List[TransportAttempt] = []

        for provider in self._providers:
            name = provider.provider_name
            if not provider.is_available():
                attempts.append(TransportAttempt(method=name, status="no-fn"))
                continue

            try:
                response = await asyncio.wait_for(
                    self._call(provider, request),
                    timeout=self._timeout_seconds,
                )
            except asyncio.TimeoutError:
                logger.warning(f"Transport {name} timed out after {self._timeout_seconds}s")
                attempts.append(TransportAttempt(
                    method=name,
                    status="error",
                    detail=f"timed out after {self._timeout_seconds}s",
                ))
                continue
            except LLMException as e:
                logger.warning(f"Transport {name} failed: {e}")
                attempts.append(TransportAttempt(method=name, status="error", detail=str(e)))
                continue

            attempts.append(TransportAttempt(method=name, status="success"))
            response.transport = name
            response.attempts = attempts
            response.confidence = estimate_confidence(response.content)
            logger.info(
                f"Completion served by {name}",
                extra={"transport": name, "tokens_used": response.tokens_used},
            )
            return response

        logger.warning(
            "All completion transports failed",
            extra={"attempts": [a.to_dict() for a in attempts]},
        )
        raise CompletionRequestFailed(
            "Unable to complete the model request; every transport failed",
            attempts,
        )
