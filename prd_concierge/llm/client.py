"""Model-backed operations used by the concierge."""

import logging
from typing import Any, Dict, Optional, Sequence

from prd_concierge.domain.schemas.session import AccumulatedContext, Turn
from prd_concierge.llm.dispatcher import CompletionDispatcher
from prd_concierge.llm.models import CompletionRequest, LLMResponse
from prd_concierge.llm.output_parser import (
    ConversationReply,
    IntentClassification,
    parse_conversation_response,
    parse_intent_response,
)
from prd_concierge.llm.prompt_builder import (
    HISTORY_WINDOW,
    build_classification_prompt,
    build_conversation_prompt,
)

logger = logging.getLogger(__name__)

CLASSIFY_TEMPERATURE = 0.3
CLASSIFY_MAX_TOKENS = 500
REPLY_TEMPERATURE = 0.7
REPLY_MAX_TOKENS = 1000


class LLMClient:
    """Classification and conversation on top of a CompletionDispatcher."""

    def __init__(
        self,
        dispatcher: CompletionDispatcher,
        default_temperature: float = 0.7,
        default_max_tokens: int = 2000,
    ):
        self._dispatcher = dispatcher
        self._default_temperature = default_temperature
        self._default_max_tokens = default_max_tokens

    async def complete(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> LLMResponse:
        """
        Send a raw prompt through the transport chain.

        Raises:
            CompletionRequestFailed: Every transport failed
        """
        request = CompletionRequest(
            prompt=prompt,
            temperature=self._default_temperature if temperature is None else temperature,
            max_tokens=max_tokens or self._default_max_tokens,
            context=context,
        )
        return await self._dispatcher.complete(request)

    async def classify_intent(self, user_input: str) -> IntentClassification:
        """Project type for ``user_input``. Malformed replies fall back to keywords."""
        response = await self.complete(
            build_classification_prompt(user_input),
            temperature=CLASSIFY_TEMPERATURE,
            max_tokens=CLASSIFY_MAX_TOKENS,
        )
        result = parse_intent_response(response.content)
        logger.info(
            f"Classified input as {result.project_type.value} ({result.confidence}%)",
            extra={"transport": response.transport},
        )
        return result

    async def generate_reply(
        self,
        user_input: str,
        persona_prompt: str,
        history: Sequence[Turn],
        context: AccumulatedContext,
        session_id: Optional[str] = None,
    ) -> ConversationReply:
        """Conversational reply in the persona's voice."""
        prompt = build_conversation_prompt(user_input, persona_prompt, history, context)
        response = await self.complete(
            prompt,
            temperature=REPLY_TEMPERATURE,
            max_tokens=REPLY_MAX_TOKENS,
            context={
                "session_id": session_id,
                "history_window": HISTORY_WINDOW,
                "project_type": context.project_type.value if context.project_type else None,
            },
        )
        reply = parse_conversation_response(response.content)
        reply.transport = response.transport
        return reply
