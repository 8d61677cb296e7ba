"""Generation collaborator adapters."""
from .provider import LLMProvider, LLMResponse, FinishReason
from .model_config import ModelConfig, ModelRegistry
from .mock import MockProvider, MockLLMProvider
from .factory import LLMProviderFactory, create_llm_provider, get_supported_providers

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "FinishReason",
    "ModelConfig",
    "ModelRegistry",
    "MockProvider",
    "MockLLMProvider",
    "LLMProviderFactory",
    "create_llm_provider",
    "get_supported_providers",
]
