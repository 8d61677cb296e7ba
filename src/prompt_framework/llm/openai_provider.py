import os
import logging
from typing import List, Dict, Any, Optional
from openai import OpenAI
from .provider import LLMProvider, LLMResponse, FinishReason
from ..config.env_loader import load_env

logger = logging.getLogger(__name__)

# Load environment variables
load_env()

FINISH_REASON_MAP = {
    "stop": FinishReason.STOP,
    "length": FinishReason.LENGTH,
    "content_filter": FinishReason.CONTENT_FILTER,
}


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions provider, also the base for compatible endpoints."""

    provider_name = "openai"

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs
    ):
        client_kwargs = kwargs.pop("client_kwargs", {})
        super().__init__(model, **kwargs)

        self.client = OpenAI(
            api_key=api_key or os.environ.get("OPENAI_API_KEY"),
            base_url=base_url,
            **client_kwargs
        )

    def generate(
        self,
        messages: List[Dict[str, Any]],
        **kwargs
    ) -> LLMResponse:
        """Generate a JSON-mode completion."""
        create_kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": kwargs.get("temperature", self.temperature),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
        }
        if self.model_config.supports_json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(**create_kwargs)
        except Exception as e:
            logger.error(f"{self.__class__.__name__} API error: {e}")
            raise

        choice = response.choices[0]
        return LLMResponse(
            content=choice.message.content,
            finish_reason=FINISH_REASON_MAP.get(choice.finish_reason, FinishReason.STOP),
            usage=response.usage.model_dump() if response.usage else {}
        )
