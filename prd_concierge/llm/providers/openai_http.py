"""OpenAI-compatible chat completions transport over HTTP."""

import time
import logging
from typing import Optional

import httpx

from prd_concierge.llm.models import CompletionRequest, LLMResponse, LLMError, LLMException
from prd_concierge.llm.providers.base import BaseLLMProvider


logger = logging.getLogger(__name__)


class OpenAIChatProvider(BaseLLMProvider):
    """Network fallback used when no host capability answers."""

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        model: str = "gpt-4o-mini",
        timeout: float = 60.0,
    ):
        """
        Initialize the transport.

        Args:
            api_key: Bearer token; the transport reports unavailable without one
            base_url: API root, e.g. a self-hosted compatible gateway
            model: Model name sent with every request
            timeout: Request timeout in seconds
        """
        self._api_key = api_key
        self._base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._model = model
        self._timeout = timeout

    @property
    def provider_name(self) -> str:
        return "openai.chat_completions"

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/chat/completions"

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def complete(self, request: CompletionRequest) -> LLMResponse:
        """Generate completion via the chat completions endpoint."""
        if not self._api_key:
            raise LLMException(LLMError.api_error("No API key configured", 401))

        request_body = {
            "model": self._model,
            "messages": [m.to_dict() for m in request.messages],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "content-type": "application/json",
        }

        start_time = time.perf_counter()

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self.endpoint, json=request_body, headers=headers)
        except httpx.TimeoutException as e:
            raise LLMException(LLMError.timeout(f"Request timed out: {e}"))
        except httpx.RequestError as e:
            raise LLMException(LLMError.api_error(f"Request failed: {e}", 0))

        latency_ms = (time.perf_counter() - start_time) * 1000

        if response.status_code == 429:
            retry_after = response.headers.get("retry-after")
            raise LLMException(LLMError.rate_limit(
                "Rate limit exceeded",
                retry_after_seconds=float(retry_after) if retry_after and retry_after.isdigit() else None,
            ))

        if response.status_code >= 400:
            try:
                error_body = response.json() if response.content else {}
            except ValueError:
                error_body = {}
            error = error_body.get("error") if isinstance(error_body, dict) else None
            error_msg = error.get("message", response.text) if isinstance(error, dict) else response.text
            raise LLMException(LLMError.api_error(error_msg, response.status_code))

        data = response.json()

        content = ""
        choices = data.get("choices") or []
        if choices:
            content = (choices[0].get("message") or {}).get("content") or ""

        usage = data.get("usage") or {}
        logger.debug(
            "chat completion returned",
            extra={"model": data.get("model", self._model), "latency_ms": round(latency_ms, 1)},
        )

        return LLMResponse(
            content=content,
            model=data.get("model", self._model),
            tokens_used=usage.get("total_tokens", 0),
            latency_ms=latency_ms,
            transport=self.provider_name,
        )
