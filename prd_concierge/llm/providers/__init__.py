"""Completion transports."""

from prd_concierge.llm.providers.base import LLMProvider, BaseLLMProvider
from prd_concierge.llm.providers.host import (
    HostCapabilityProvider,
    SamplingProvider,
    CreateMessageProvider,
    RequestCompletionProvider,
    host_providers,
)
from prd_concierge.llm.providers.openai_http import OpenAIChatProvider
from prd_concierge.llm.providers.mock import MockLLMProvider, MockCall, create_json_response_provider

__all__ = [
    "LLMProvider",
    "BaseLLMProvider",
    "HostCapabilityProvider",
    "SamplingProvider",
    "CreateMessageProvider",
    "RequestCompletionProvider",
    "host_providers",
    "OpenAIChatProvider",
    "MockLLMProvider",
    "MockCall",
    "create_json_response_provider",
]
