"""
Gemini LLM Provider.

Uses the google-genai SDK. The system instruction travels in the
request config rather than as a chat turn.
"""
import os
import logging
from typing import List, Dict, Any, Optional

from .provider import LLMProvider, LLMResponse, FinishReason
from ..config.env_loader import load_env

try:
    import google.genai as genai
    from google.genai import types
    GOOGLE_AVAILABLE = True
except ImportError:
    GOOGLE_AVAILABLE = False
    genai = None
    types = None

logger = logging.getLogger(__name__)

# Load environment variables
load_env()


class GeminiProvider(LLMProvider):
    """Google Gemini provider for text generation."""

    provider_name = "gemini"

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        **kwargs
    ):
        if not GOOGLE_AVAILABLE:
            raise ImportError(
                "google.genai package is required. "
                "Install with: pip install google-genai"
            )

        if model is None:
            model = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

        super().__init__(model, **kwargs)

        self.api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise RuntimeError(
                "GEMINI_API_KEY environment variable is required when using Gemini provider"
            )

        client_kwargs = {"api_key": self.api_key}
        if base_url:
            client_kwargs["http_options"] = types.HttpOptions(base_url=base_url)
            logger.info(f"Using custom Gemini base URL: {base_url}")

        self.client = genai.Client(**client_kwargs)

    def _convert_messages(self, messages: List[Dict[str, Any]]) -> List[Any]:
        """Convert OpenAI-style turns to Gemini contents."""
        contents = []
        for msg in messages:
            role = "model" if msg.get("role") == "assistant" else "user"
            contents.append(
                types.Content(role=role, parts=[types.Part(text=msg.get("content") or "")])
            )
        return contents

    def generate(
        self,
        messages: List[Dict[str, Any]],
        **kwargs
    ) -> LLMResponse:
        """Generate a JSON response from Gemini."""
        system, conversation = self.split_system(messages)

        config = types.GenerateContentConfig(
            system_instruction=system,
            temperature=kwargs.get("temperature", self.temperature),
            max_output_tokens=kwargs.get("max_tokens", self.max_tokens),
            response_mime_type="application/json",
        )

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=self._convert_messages(conversation),
                config=config,
            )
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise

        finish_reason = FinishReason.STOP
        if response.candidates:
            reason = str(response.candidates[0].finish_reason or "")
            if "MAX_TOKENS" in reason:
                finish_reason = FinishReason.LENGTH
            elif "SAFETY" in reason:
                finish_reason = FinishReason.CONTENT_FILTER

        usage = {}
        if response.usage_metadata:
            usage = {
                "input_tokens": response.usage_metadata.prompt_token_count or 0,
                "output_tokens": response.usage_metadata.candidates_token_count or 0,
            }

        return LLMResponse(
            content=response.text,
            finish_reason=finish_reason,
            usage=usage,
        )
