"""
LLM Provider Factory using the Factory Method pattern.

Resolves the provider name, model, credentials and generation settings from
the environment so the rest of the engine only ever asks for "the provider".
"""

import os
import logging
from typing import Dict, Type, Optional

from .provider import LLMProvider
from .mock import MockProvider
from ..config.env_loader import load_env

logger = logging.getLogger(__name__)

load_env()

DEFAULT_PROVIDER = "deepseek"


class ProviderConfig:
    """Configuration class for LLM providers."""

    def __init__(
        self,
        provider_class,
        default_model: str,
        api_key_env: Optional[str],
        api_key_name: str,
        env_prefix: str,
        base_url_env: Optional[str] = None
    ):
        self.provider_class = provider_class
        self.default_model = default_model
        self.api_key_env = api_key_env
        self.api_key_name = api_key_name
        self.env_prefix = env_prefix
        self.base_url_env = base_url_env


def _lazy(module: str, name: str):
    """Return a loader that imports a provider class on first use."""
    def load():
        import importlib
        return getattr(importlib.import_module(module, __package__), name)
    return load


def _float_from_env(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _int_from_env(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


class LLMProviderFactory:
    """
    Factory for creating LLM providers.

    Maintains a registry of provider configurations and creates providers
    based on the requested name, falling back to MAIN_SYSTEM or
    DEFAULT_LLM_PROVIDER from the environment.
    """

    def __init__(self):
        self._providers: Dict[str, ProviderConfig] = {}
        self._register_providers()

    def _register_providers(self):
        """Register all available LLM providers."""
        self.register_provider(
            name="deepseek",
            provider_class=_lazy(".deepseek_provider", "DeepSeekProvider"),
            default_model="deepseek-chat",
            api_key_env="DEEPSEEK_API_KEY",
            api_key_name="DeepSeek",
            env_prefix="DEEPSEEK",
            base_url_env="DEEPSEEK_BASE_URL"
        )

        self.register_provider(
            name="gemini",
            provider_class=_lazy(".gemini_provider", "GeminiProvider"),
            default_model="gemini-2.0-flash",
            api_key_env="GEMINI_API_KEY",
            api_key_name="Gemini",
            env_prefix="GEMINI",
            base_url_env="GEMINI_BASE_URL"
        )

        self.register_provider(
            name="openai",
            provider_class=_lazy(".openai_provider", "OpenAIProvider"),
            default_model="gpt-4o-mini",
            api_key_env="OPENAI_API_KEY",
            api_key_name="OpenAI",
            env_prefix="OPENAI",
            base_url_env="OPENAI_BASE_URL"
        )

        self.register_provider(
            name="anthropic",
            provider_class=_lazy(".anthropic_provider", "AnthropicProvider"),
            default_model="claude-3-5-sonnet-20241022",
            api_key_env="ANTHROPIC_API_KEY",
            api_key_name="Anthropic",
            env_prefix="ANTHROPIC",
            base_url_env="ANTHROPIC_BASE_URL"
        )

        # Mock doesn't need an API key
        self.register_provider(
            name="mock",
            provider_class=MockProvider,
            default_model="mock-model",
            api_key_env=None,
            api_key_name="Mock",
            env_prefix="MOCK"
        )

    def register_provider(
        self,
        name: str,
        provider_class,
        default_model: str,
        api_key_env: Optional[str],
        api_key_name: str,
        env_prefix: str,
        base_url_env: Optional[str] = None
    ):
        """
        Register a new LLM provider.

        Args:
            name: Provider name (e.g., "deepseek", "gemini")
            provider_class: The provider class or a loader returning it
            default_model: Default model for this provider
            api_key_env: Environment variable name for API key
            api_key_name: Human-readable name for the provider
            env_prefix: Prefix of the *_MODEL / *_TEMPERATURE / *_MAX_TOKENS variables
            base_url_env: Optional environment variable for custom base URL
        """
        self._providers[name] = ProviderConfig(
            provider_class=provider_class,
            default_model=default_model,
            api_key_env=api_key_env,
            api_key_name=api_key_name,
            env_prefix=env_prefix,
            base_url_env=base_url_env
        )

    def resolve_provider_name(self, provider: Optional[str] = None) -> str:
        """Pick the provider name from the argument or the environment."""
        if provider is None:
            provider = (
                os.getenv("MAIN_SYSTEM")
                or os.getenv("DEFAULT_LLM_PROVIDER")
                or DEFAULT_PROVIDER
            )
        return provider.strip().lower()

    def create_provider(
        self,
        provider: str = None,
        model: str = None,
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMProvider:
        """
        Create an LLM provider instance.

        Args:
            provider: Provider name ("deepseek", "gemini", "openai", "anthropic", "mock")
                      If None, uses MAIN_SYSTEM / DEFAULT_LLM_PROVIDER from environment
            model: Model name. If None, uses {PREFIX}_MODEL or the provider default
            api_key: API key (uses provider-specific env var if not provided)
            base_url: Custom base URL (optional)
            temperature: Sampling temperature, 0..2
            max_tokens: Completion budget, 1..model maximum

        Returns:
            LLMProvider instance

        Raises:
            ValueError: If provider is not supported or settings are out of range
            RuntimeError: If API key is missing
        """
        provider = self.resolve_provider_name(provider)

        if provider not in self._providers:
            supported = ", ".join(self._providers.keys())
            raise ValueError(
                f"Unsupported provider: {provider}. "
                f"Supported providers: {supported}"
            )

        config = self._providers[provider]
        prefix = config.env_prefix

        if model is None:
            model = (
                os.getenv(f"{prefix}_MODEL")
                or os.getenv(f"DEFAULT_{prefix}_MODEL")
                or config.default_model
            )
        if temperature is None:
            temperature = _float_from_env(f"{prefix}_TEMPERATURE")
        if max_tokens is None:
            max_tokens = _int_from_env(f"{prefix}_MAX_TOKENS")

        if isinstance(config.provider_class, type):
            provider_class: Type[LLMProvider] = config.provider_class
        else:
            provider_class = config.provider_class()

        if provider == "mock":
            return provider_class(model=model, temperature=temperature, max_tokens=max_tokens)

        if api_key is None:
            api_key = os.getenv(config.api_key_env) if config.api_key_env else None
            if not api_key and provider == "gemini":
                api_key = os.getenv("GOOGLE_API_KEY")

        if not api_key:
            raise RuntimeError(
                f"{config.api_key_name} API key not found. "
                f"Set {config.api_key_env} environment variable "
                f"or pass api_key parameter."
            )

        if base_url is None and config.base_url_env:
            base_url = os.getenv(config.base_url_env)

        logger.info(f"Creating {config.api_key_name} provider with model {model}")
        return provider_class(
            model=model,
            api_key=api_key,
            base_url=base_url,
            temperature=temperature,
            max_tokens=max_tokens
        )

    def get_supported_providers(self) -> list[str]:
        """Get list of supported provider names."""
        return list(self._providers.keys())

    def get_provider_info(self, provider_name: str) -> Dict[str, Optional[str]]:
        """Get information about a provider."""
        if provider_name not in self._providers:
            raise ValueError(f"Unknown provider: {provider_name}")

        config = self._providers[provider_name]
        return {
            "name": provider_name,
            "default_model": config.default_model,
            "api_key_env": config.api_key_env,
            "api_key_name": config.api_key_name,
        }


# Global factory instance
_llm_factory = LLMProviderFactory()


def create_llm_provider(
    provider: str = None,
    model: str = None,
    api_key: str | None = None,
    base_url: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> LLMProvider:
    """Create an LLM provider instance through the global factory."""
    return _llm_factory.create_provider(
        provider=provider,
        model=model,
        api_key=api_key,
        base_url=base_url,
        temperature=temperature,
        max_tokens=max_tokens
    )


def get_supported_providers() -> list[str]:
    """Get list of supported LLM provider names."""
    return _llm_factory.get_supported_providers()
