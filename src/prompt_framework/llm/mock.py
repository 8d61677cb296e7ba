"""
Mock LLM Provider for testing.
"""
from typing import List, Dict, Any, Union
import json
from .provider import LLMProvider, LLMResponse, FinishReason


ScriptedReply = Union[LLMResponse, str, dict, Exception]


class MockProvider(LLMProvider):
    """Mock LLM provider that replays scripted replies in order."""

    provider_name = "mock"

    def __init__(self, model: str = "mock-model", **kwargs):
        kwargs.pop("api_key", None)
        kwargs.pop("base_url", None)
        super().__init__(model, **kwargs)
        self.responses: List[ScriptedReply] = []
        self.calls: List[List[Dict[str, Any]]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def set_response(self, response: ScriptedReply):
        """Set the next response to return."""
        self.responses = [response]

    def set_responses(self, responses: List[ScriptedReply]):
        """Set a list of responses to return in sequence."""
        self.responses = list(responses)

    def generate(
        self,
        messages: List[Dict[str, Any]],
        **kwargs
    ) -> LLMResponse:
        """Return the next scripted reply, raising it if it is an exception."""
        self.calls.append(messages)

        if not self.responses:
            return LLMResponse(
                content="This is a mock response",
                finish_reason=FinishReason.STOP,
                usage={"total_tokens": 10}
            )

        reply = self.responses.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return LLMResponse(content=json.dumps(reply))
        if isinstance(reply, str):
            return LLMResponse(content=reply)
        return reply

    def reset(self):
        """Reset mock state."""
        self.responses = []
        self.calls = []


# Convenience alias
MockLLMProvider = MockProvider
