"""
Anthropic LLM Provider.

Provides integration with Anthropic's Claude models.
"""
import os
import logging
from typing import List, Dict, Any, Optional
from .provider import LLMProvider, LLMResponse, FinishReason
from ..config.env_loader import load_env

try:
    import anthropic
    ANTHROPIC_AVAILABLE = True
except ImportError:
    ANTHROPIC_AVAILABLE = False

logger = logging.getLogger(__name__)

# Load environment variables
load_env()


class AnthropicProvider(LLMProvider):
    """Anthropic LLM Provider for Claude models."""

    provider_name = "anthropic"

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs
    ):
        if not ANTHROPIC_AVAILABLE:
            raise ImportError(
                "anthropic package not installed. Install with: pip install anthropic"
            )

        if model is None:
            model = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-20241022")

        super().__init__(model, **kwargs)

        self.client = anthropic.Anthropic(
            api_key=api_key or os.environ.get("ANTHROPIC_API_KEY"),
            base_url=base_url,
        )

    def generate(
        self,
        messages: List[Dict[str, Any]],
        **kwargs
    ) -> LLMResponse:
        """Generate a response from Anthropic."""
        system, conversation = self.split_system(messages)

        create_kwargs = {
            "model": self.model,
            "messages": [
                {"role": msg.get("role"), "content": msg.get("content") or ""}
                for msg in conversation
                if msg.get("role") in ("user", "assistant")
            ],
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
            "temperature": kwargs.get("temperature", self.temperature),
        }
        if system:
            create_kwargs["system"] = system

        try:
            response = self.client.messages.create(**create_kwargs)
        except Exception as e:
            logger.error(f"Anthropic API error: {e}")
            raise

        content = "".join(
            block.text for block in response.content if block.type == "text"
        )

        finish_reason_map = {
            "end_turn": FinishReason.STOP,
            "max_tokens": FinishReason.LENGTH,
        }

        return LLMResponse(
            content=content if content else None,
            finish_reason=finish_reason_map.get(response.stop_reason, FinishReason.STOP),
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            }
        )
