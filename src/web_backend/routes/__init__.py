"""
API Routes for the SlothBoost web backend.
"""

from . import sessions
from . import prompts
from . import auth

__all__ = ["sessions", "prompts", "auth"]
