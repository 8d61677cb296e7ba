"""
Tests for GenerationClient.
"""
import asyncio
import time

import pytest

from prompt_framework.exceptions import NetworkError, ParseError
from prompt_framework.llm.mock import MockProvider
from prompt_framework.llm.provider import FinishReason, LLMResponse
from prompt_framework.session import Effect, EffectKind, PromptSession, SessionMode
from prompt_framework.synthesis.generation import GenerationClient
from prompt_framework.synthesis.request_builder import SynthesisRequestBuilder


@pytest.fixture
def request_():
    session = PromptSession(original_input="write email", mode=SessionMode.SUPER_LAZY)
    return SynthesisRequestBuilder().build(session, Effect(EffectKind.REQUEST_SYNTHESIS, 1))


class SlowProvider(MockProvider):
    def generate(self, messages, **kwargs):
        time.sleep(0.5)
        return super().generate(messages, **kwargs)


class TestGenerationClient:
    @pytest.mark.asyncio
    async def test_sends_system_and_payload(self, generation_client, mock_provider, request_):
        mock_provider.set_response('{"generatedText": "x"}')

        raw = await generation_client.generate(request_)

        assert raw == '{"generatedText": "x"}'
        messages = mock_provider.calls[0]
        assert messages[0] == {"role": "system", "content": request_.system_instruction}
        assert messages[1]["role"] == "user"
        assert '"originalInput": "write email"' in messages[1]["content"]

    @pytest.mark.asyncio
    async def test_provider_exception_becomes_network_error(self, generation_client,
                                                             mock_provider, request_):
        mock_provider.set_response(ConnectionError("refused"))

        with pytest.raises(NetworkError, match="refused"):
            await generation_client.generate(request_)

    @pytest.mark.asyncio
    async def test_empty_content_is_parse_error(self, generation_client, mock_provider, request_):
        mock_provider.set_response(LLMResponse(content="   "))

        with pytest.raises(ParseError):
            await generation_client.generate(request_)

    @pytest.mark.asyncio
    async def test_truncated_content_still_returned(self, generation_client,
                                                    mock_provider, request_):
        mock_provider.set_response(
            LLMResponse(content='{"generatedText": "x"}', finish_reason=FinishReason.LENGTH)
        )
        assert await generation_client.generate(request_) == '{"generatedText": "x"}'

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self, request_):
        client = GenerationClient(SlowProvider(), timeout=0.05)

        with pytest.raises(NetworkError, match="timed out"):
            await client.generate(request_)
        # Let the worker thread finish before the loop closes
        await asyncio.sleep(0.6)
