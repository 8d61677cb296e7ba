"""
Fixed product constants for the question flows.

These are configuration values, not derived rules: the guided flow needs
3 of 5 answers, the topic flow runs 3 rounds and the analysis flow stops
after 5 iterations. Each can be overridden from the environment.
"""
import os
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default
    if value < 1:
        logger.warning(f"Ignoring non-positive {name}={value}, using {default}")
        return default
    return value


@dataclass(frozen=True)
class EngineLimits:
    """Round and answer limits shared by the state machine and the API."""

    guided_question_count: int = 5
    guided_min_answers: int = 3
    topic_rounds: int = 3
    max_iterations: int = 5

    def __post_init__(self):
        if self.guided_min_answers > self.guided_question_count:
            raise ValueError(
                f"guided_min_answers ({self.guided_min_answers}) cannot exceed "
                f"guided_question_count ({self.guided_question_count})"
            )

    @classmethod
    def from_env(cls) -> "EngineLimits":
        """Build limits from SLOTHBOOST_* environment variables."""
        return cls(
            guided_question_count=_int_from_env("SLOTHBOOST_GUIDED_QUESTION_COUNT", 5),
            guided_min_answers=_int_from_env("SLOTHBOOST_GUIDED_MIN_ANSWERS", 3),
            topic_rounds=_int_from_env("SLOTHBOOST_TOPIC_ROUNDS", 3),
            max_iterations=_int_from_env("SLOTHBOOST_MAX_ITERATIONS", 5),
        )


DEFAULT_LIMITS = EngineLimits()
