"""
Live session registry for the SlothBoost web backend.

Question-flow sessions live in memory only. The registry hands out one
PromptSessionController per session id and evicts the least recently used
ones once MAX_LIVE_SESSIONS is exceeded.
"""

from collections import OrderedDict
from typing import Optional, List
import os
import logging

from prompt_framework.config.limits import EngineLimits
from prompt_framework.exceptions import NetworkError
from prompt_framework.llm.factory import create_llm_provider
from prompt_framework.session.controller import PromptSessionController
from prompt_framework.synthesis.generation import GenerationClient

from ..config import settings

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a live session id is unknown or was evicted."""
    pass


class SessionRegistry:
    """In-memory map of session id -> controller."""

    def __init__(
        self,
        max_sessions: int = 1000,
        generation: Optional[GenerationClient] = None,
        limits: Optional[EngineLimits] = None,
    ):
        self.max_sessions = max_sessions
        self._generation = generation
        self.limits = limits or EngineLimits.from_env()
        self._sessions: "OrderedDict[str, PromptSessionController]" = OrderedDict()

    @property
    def generation(self) -> GenerationClient:
        """Generation client, created on first use from the environment."""
        if self._generation is None:
            provider_name = os.getenv("MAIN_SYSTEM") or settings.DEFAULT_LLM_PROVIDER
            try:
                provider = create_llm_provider(provider=provider_name)
            except (RuntimeError, ValueError, ImportError) as e:
                logger.error(f"Cannot create generation provider '{provider_name}': {e}")
                raise NetworkError(f"Generation provider unavailable: {e}") from e
            self._generation = GenerationClient(
                provider, timeout=settings.GENERATION_TIMEOUT_SECONDS
            )
        return self._generation

    def set_generation(self, generation: GenerationClient) -> None:
        self._generation = generation

    def create(self) -> PromptSessionController:
        controller = PromptSessionController(self.generation, limits=self.limits)
        self._sessions[controller.id] = controller
        self._evict()
        logger.info(f"Created live session {controller.id} ({len(self._sessions)} live)")
        return controller

    def get(self, session_id: str) -> PromptSessionController:
        controller = self._sessions.get(session_id)
        if controller is None:
            raise SessionNotFoundError(session_id)
        self._sessions.move_to_end(session_id)
        return controller

    def remove(self, session_id: str) -> bool:
        controller = self._sessions.pop(session_id, None)
        if controller is None:
            return False
        # Late results for a removed session must not be applied
        controller.reset()
        logger.info(f"Removed live session {session_id}")
        return True

    def _evict(self) -> None:
        while len(self._sessions) > self.max_sessions:
            session_id, controller = self._sessions.popitem(last=False)
            controller.reset()
            logger.info(f"Evicted live session {session_id}")

    def list_ids(self) -> List[str]:
        return list(self._sessions.keys())

    def clear(self) -> None:
        for controller in self._sessions.values():
            controller.reset()
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


# Global registry instance
_session_registry: Optional[SessionRegistry] = None


def get_session_registry() -> SessionRegistry:
    """Get the global session registry."""
    global _session_registry
    if _session_registry is None:
        _session_registry = SessionRegistry(max_sessions=settings.MAX_LIVE_SESSIONS)
    return _session_registry
