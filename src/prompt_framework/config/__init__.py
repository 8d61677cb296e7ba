"""Configuration helpers for the prompt engine."""
from .env_loader import load_env
from .limits import EngineLimits, DEFAULT_LIMITS

__all__ = [
    "load_env",
    "EngineLimits",
    "DEFAULT_LIMITS",
]
