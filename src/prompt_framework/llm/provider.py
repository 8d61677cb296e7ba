"""
LLM Provider Abstraction.

Defines the interface every generation backend implements and the
response type the synthesis layer consumes.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from enum import Enum
import logging

from .model_config import ModelRegistry

logger = logging.getLogger(__name__)


class FinishReason(Enum):
    """Reasons why LLM generation finished."""
    STOP = "stop"
    LENGTH = "length"
    CONTENT_FILTER = "content_filter"
    ERROR = "error"


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    content: Optional[str] = None
    finish_reason: FinishReason = FinishReason.STOP
    usage: Dict[str, int] = field(default_factory=dict)

    @property
    def is_truncated(self) -> bool:
        """Check if generation stopped on the token limit."""
        return self.finish_reason == FinishReason.LENGTH


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    provider_name: str = "base"

    def __init__(
        self,
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ):
        self.model = model
        self.config = kwargs
        self.model_config = ModelRegistry.get(model)
        self.temperature = (
            temperature if temperature is not None
            else self.model_config.default_temperature
        )
        self.max_tokens = max_tokens or self.model_config.default_max_tokens

        if not 0 <= self.temperature <= 2:
            raise ValueError(
                f"{self.__class__.__name__} temperature must be between 0 and 2, "
                f"got {self.temperature}"
            )
        if not 1 <= self.max_tokens <= self.model_config.max_output_tokens:
            raise ValueError(
                f"{self.__class__.__name__} max_tokens must be between 1 and "
                f"{self.model_config.max_output_tokens}, got {self.max_tokens}"
            )

        logger.info(
            f"Initialized {self.__class__.__name__} with model={self.model}, "
            f"temperature={self.temperature}, max_tokens={self.max_tokens}"
        )

    @abstractmethod
    def generate(
        self,
        messages: List[Dict[str, Any]],
        **kwargs
    ) -> LLMResponse:
        """
        Generate a response from the LLM.

        Args:
            messages: List of messages in OpenAI format; an optional first
                message with role "system" carries the system instruction
            **kwargs: Per-call overrides (temperature, max_tokens)

        Returns:
            LLMResponse with the raw completion text
        """
        pass

    @staticmethod
    def split_system(messages: List[Dict[str, Any]]) -> tuple[Optional[str], List[Dict[str, Any]]]:
        """Separate a leading system message from the conversation."""
        if messages and messages[0].get("role") == "system":
            return messages[0].get("content"), list(messages[1:])
        return None, list(messages)
