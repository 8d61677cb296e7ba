"""Session modes and the per-mode round rules."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config.limits import EngineLimits, DEFAULT_LIMITS


class SessionMode(str, Enum):
    SUPER_LAZY = "super_lazy"
    GUIDED_FIVE_QUESTION = "guided_five_question"
    THREE_ROUND_TOPIC = "three_round_topic"
    ITERATIVE_ANALYSIS = "iterative_analysis"


@dataclass(frozen=True)
class ModeRules:
    """What a mode allows: how many rounds, whether it asks questions, etc."""

    mode: SessionMode
    total_rounds: int
    asks_questions: bool
    offers_preliminary: bool
    # None means every question of the round must be answered or skipped
    minimum_answers: Optional[int]

    def required_answers(self, question_count: int) -> int:
        if self.minimum_answers is None:
            return question_count
        return min(self.minimum_answers, question_count)


def rules_for(mode: SessionMode, limits: EngineLimits = DEFAULT_LIMITS) -> ModeRules:
    """Build the rules for a mode from the configured limits."""
    mode = SessionMode(mode)
    if mode is SessionMode.SUPER_LAZY:
        return ModeRules(mode, total_rounds=1, asks_questions=False,
                         offers_preliminary=False, minimum_answers=0)
    if mode is SessionMode.GUIDED_FIVE_QUESTION:
        return ModeRules(mode, total_rounds=1, asks_questions=True,
                         offers_preliminary=False,
                         minimum_answers=limits.guided_min_answers)
    if mode is SessionMode.THREE_ROUND_TOPIC:
        return ModeRules(mode, total_rounds=limits.topic_rounds, asks_questions=True,
                         offers_preliminary=True, minimum_answers=None)
    return ModeRules(mode, total_rounds=limits.max_iterations, asks_questions=True,
                     offers_preliminary=False, minimum_answers=None)
