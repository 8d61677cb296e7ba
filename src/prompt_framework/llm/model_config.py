"""
Model configuration and registry for the generation collaborator.
"""
import logging
from dataclasses import dataclass
from typing import Dict

logger = logging.getLogger(__name__)


@dataclass
class ModelConfig:
    """Generation settings for a specific LLM model."""

    model_name: str
    max_output_tokens: int  # Hard cap the provider accepts
    default_max_tokens: int = 2_000  # What we ask for per call
    default_temperature: float = 0.3
    supports_json_mode: bool = True


class ModelRegistry:
    """Registry of known model configurations."""

    MODELS: Dict[str, ModelConfig] = {
        # DeepSeek (OpenAI-compatible)
        "deepseek-chat": ModelConfig(
            model_name="deepseek-chat",
            max_output_tokens=8_192,
            default_max_tokens=2_000,
        ),
        "deepseek-reasoner": ModelConfig(
            model_name="deepseek-reasoner",
            max_output_tokens=8_192,
            default_max_tokens=4_000,
            supports_json_mode=False,
        ),

        # Google Gemini
        "gemini-2.0-flash": ModelConfig(
            model_name="gemini-2.0-flash",
            max_output_tokens=8_192,
            default_max_tokens=4_000,
        ),
        "gemini-1.5-pro": ModelConfig(
            model_name="gemini-1.5-pro",
            max_output_tokens=8_192,
            default_max_tokens=2_000,
        ),

        # OpenAI
        "gpt-4o": ModelConfig(
            model_name="gpt-4o",
            max_output_tokens=4_096,
        ),
        "gpt-4o-mini": ModelConfig(
            model_name="gpt-4o-mini",
            max_output_tokens=16_384,
        ),

        # Anthropic
        "claude-3-5-sonnet-20241022": ModelConfig(
            model_name="claude-3-5-sonnet-20241022",
            max_output_tokens=8_192,
            supports_json_mode=False,
        ),
        "claude-3-haiku-20240307": ModelConfig(
            model_name="claude-3-haiku-20240307",
            max_output_tokens=4_096,
            supports_json_mode=False,
        ),

        "mock-model": ModelConfig(
            model_name="mock-model",
            max_output_tokens=8_192,
        ),
    }

    @classmethod
    def get(cls, model_name: str) -> ModelConfig:
        """
        Get configuration for a model.

        Args:
            model_name: Name of the model

        Returns:
            ModelConfig for the model (with fallback to defaults)
        """
        if model_name in cls.MODELS:
            return cls.MODELS[model_name]

        # Versioned names, e.g. "gemini-2.0-flash-001" -> "gemini-2.0-flash"
        for registered_name, config in cls.MODELS.items():
            if model_name.startswith(registered_name):
                logger.info(f"Model '{model_name}' matched to '{registered_name}'")
                return config

        logger.warning(
            f"Unknown model '{model_name}', using conservative defaults "
            f"(2k output tokens)"
        )
        return ModelConfig(
            model_name=model_name,
            max_output_tokens=2_048,
            default_max_tokens=1_500,
        )

    @classmethod
    def register(cls, model_name: str, config: ModelConfig) -> None:
        """Register a custom model configuration."""
        cls.MODELS[model_name] = config
        logger.info(f"Registered custom model: {model_name}")

    @classmethod
    def list_models(cls) -> list[str]:
        """Get list of all registered model names."""
        return sorted(cls.MODELS.keys())
