"""Completion transport base protocol."""

import asyncio
import random
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from prd_concierge.llm.models import (
    CompletionRequest,
    LLMException,
    LLMOperationalError,
    LLMResponse,
)


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol for completion transports."""

    @property
    def provider_name(self) -> str:
        """Return the transport name recorded in attempt logs."""
        ...

    def is_available(self) -> bool:
        """Return True when this transport can be tried at all."""
        ...

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """
        Generate a completion.

        Args:
            request: Prompt plus sampling parameters

        Returns:
            LLMResponse with content and metadata

        Raises:
            LLMException: On transport errors
        """
        ...


class BaseLLMProvider(ABC):
    """Base class for completion transports with common functionality."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the transport name."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Return True when this transport can be tried at all."""
        ...

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """Generate a completion."""
        ...

    async def complete_with_retry(
        self,
        request: CompletionRequest,
        max_retries: int = 2,
        base_delay: float = 0.5,
    ) -> LLMResponse:
        """
        Complete with exponential backoff retry.

        Backoff schedule (default): 0.5s, 2s (base * 4^attempt).
        Respects retry_after_seconds from provider errors when present.
        Adds jitter (up to 25% of sleep time) to avoid thundering herd.

        Raises:
            LLMOperationalError: After all retries exhausted on retryable errors
            LLMException: On non-retryable errors (immediate, no retry)
        """
        last_error = None
        delay = base_delay

        for attempt in range(max_retries + 1):
            try:
                return await self.complete(request)
            except LLMException as e:
                last_error = e
                if not e.error.retryable or attempt == max_retries:
                    break

                sleep_time = e.error.retry_after_seconds if e.error.retry_after_seconds else delay
                sleep_time += random.uniform(0, 0.25 * sleep_time)
                await asyncio.sleep(sleep_time)
                delay *= 4

        if not last_error.error.retryable:
            raise last_error

        raise LLMOperationalError(self.provider_name, last_error.error, attempts=max_retries + 1)
