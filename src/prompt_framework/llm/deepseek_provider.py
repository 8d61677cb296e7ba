"""
DeepSeek LLM Provider.

DeepSeek exposes an OpenAI-compatible chat-completions API, so this
provider only swaps the endpoint, the key lookup and the default model.
"""
import os
import logging
from typing import Optional

from .openai_provider import OpenAIProvider
from ..config.env_loader import load_env

logger = logging.getLogger(__name__)

# Load environment variables
load_env()

DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"


class DeepSeekProvider(OpenAIProvider):
    """DeepSeek provider (default backend for prompt enhancement)."""

    provider_name = "deepseek"

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize DeepSeek Provider.

        Args:
            model: DeepSeek model name (default: DEEPSEEK_MODEL or "deepseek-chat")
            api_key: DeepSeek API key (from DEEPSEEK_API_KEY if not provided)
            base_url: Custom base URL (uses DeepSeek's if not provided)
            **kwargs: temperature / max_tokens and extra client options
        """
        if model is None:
            model = os.getenv("DEEPSEEK_MODEL", "deepseek-chat")

        api_key = api_key or os.environ.get("DEEPSEEK_API_KEY")
        if not api_key:
            raise RuntimeError(
                "DEEPSEEK_API_KEY environment variable is required when using DeepSeek provider"
            )

        super().__init__(
            model=model,
            api_key=api_key,
            base_url=base_url or DEEPSEEK_BASE_URL,
            **kwargs
        )
