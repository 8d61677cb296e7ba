"""
SQLAlchemy models for the SlothBoost web backend.
"""

from .prompt import PromptRecord

__all__ = [
    "PromptRecord",
]
