"""Tests for LLMClient."""

import json

import pytest

from prd_concierge.core.errors import CompletionRequestFailed
from prd_concierge.domain.schemas.session import AccumulatedContext, ProjectType
from prd_concierge.llm.client import LLMClient
from prd_concierge.llm.dispatcher import CompletionDispatcher
from prd_concierge.llm.models import LLMError
from prd_concierge.llm.providers.mock import MockLLMProvider, create_json_response_provider


class TestLLMClient:
    """Tests for classification and conversation calls."""

    @pytest.mark.asyncio
    async def test_complete_uses_defaults(self):
        provider = MockLLMProvider()
        client = LLMClient(CompletionDispatcher([provider]), default_temperature=0.5, default_max_tokens=1234)

        await client.complete("raw prompt")

        call = provider.last_call()
        assert call.temperature == 0.5
        assert call.max_tokens == 1234

    @pytest.mark.asyncio
    async def test_complete_zero_temperature_respected(self):
        provider = MockLLMProvider()
        await LLMClient(CompletionDispatcher([provider])).complete("p", temperature=0.0)
        assert provider.last_call().temperature == 0.0

    @pytest.mark.asyncio
    async def test_classify_intent(self):
        provider = create_json_response_provider({"project_type": "blog", "confidence": 91, "reasoning": "posts"})
        client = LLMClient(CompletionDispatcher([provider]))

        result = await client.classify_intent("I want to write posts")

        assert result.project_type == ProjectType.BLOG
        assert result.confidence == 91
        assert provider.last_call().temperature == 0.3
        assert provider.last_call().max_tokens == 500

    @pytest.mark.asyncio
    async def test_classify_intent_malformed_reply_uses_keywords(self):
        provider = MockLLMProvider(default_response="It is clearly an e-commerce store.")
        result = await LLMClient(CompletionDispatcher([provider])).classify_intent("sell tea")
        assert result.project_type == ProjectType.ECOMMERCE

    @pytest.mark.asyncio
    async def test_generate_reply_records_transport(self):
        payload = {"response": "Which features?", "type": "question", "confidence": 80, "questions": ["A?"]}
        provider = MockLLMProvider(default_response=json.dumps(payload), name="primary")
        client = LLMClient(CompletionDispatcher([provider]))

        reply = await client.generate_reply("hello", "# Advisor", [], AccumulatedContext(), session_id="ss_1")

        assert reply.response == "Which features?"
        assert reply.questions == ["A?"]
        assert reply.transport == "primary"
        assert provider.last_call().max_tokens == 1000

    @pytest.mark.asyncio
    async def test_failure_propagates(self):
        provider = MockLLMProvider()
        provider.fail_always(LLMError.host_error("down"))

        with pytest.raises(CompletionRequestFailed):
            await LLMClient(CompletionDispatcher([provider])).classify_intent("anything")
