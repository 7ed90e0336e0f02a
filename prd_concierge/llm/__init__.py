"""Model access for PRD Concierge."""

from prd_concierge.llm.models import (
    Message,
    MessageRole,
    CompletionRequest,
    LLMResponse,
    LLMError,
    LLMException,
    LLMOperationalError,
)
from prd_concierge.llm.providers.base import LLMProvider, BaseLLMProvider
from prd_concierge.llm.providers.host import host_providers
from prd_concierge.llm.providers.openai_http import OpenAIChatProvider
from prd_concierge.llm.providers.mock import MockLLMProvider, MockCall, create_json_response_provider
from prd_concierge.llm.dispatcher import CompletionDispatcher, estimate_confidence
from prd_concierge.llm.output_parser import (
    ConversationReply,
    IntentClassification,
    classify_by_keywords,
    extract_json,
    parse_conversation_response,
    parse_intent_response,
)
from prd_concierge.llm.client import LLMClient

__all__ = [
    # Models
    "Message",
    "MessageRole",
    "CompletionRequest",
    "LLMResponse",
    "LLMError",
    "LLMException",
    "LLMOperationalError",
    # Transports
    "LLMProvider",
    "BaseLLMProvider",
    "host_providers",
    "OpenAIChatProvider",
    "MockLLMProvider",
    "MockCall",
    "create_json_response_provider",
    # Dispatch
    "CompletionDispatcher",
    "estimate_confidence",
    # Parsing
    "ConversationReply",
    "IntentClassification",
    "classify_by_keywords",
    "extract_json",
    "parse_conversation_response",
    "parse_intent_response",
    # Client
    "LLMClient",
]
