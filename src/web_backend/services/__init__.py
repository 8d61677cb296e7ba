"""
Business logic services for the SlothBoost web backend.
"""

from .prompt_service import PromptService
from .session_registry import (
    SessionRegistry,
    SessionNotFoundError,
    get_session_registry,
)
from .auth import CurrentUser, get_current_user, require_user

__all__ = [
    "PromptService",
    "SessionRegistry",
    "SessionNotFoundError",
    "get_session_registry",
    "CurrentUser",
    "get_current_user",
    "require_user",
]
