"""Question orchestration: accumulator, modes, state machine and controller."""
from .accumulator import AnswerAccumulator, AnswerEntry
from .modes import SessionMode, ModeRules, rules_for
from .questions import (
    Question,
    QuestionOption,
    QuestionKind,
    TOPICS,
    question_key,
    topic_key,
    analysis_key,
    default_guided_questions,
    default_topic_questions,
)
from .state import (
    PromptSession,
    SessionPhase,
    Effect,
    EffectKind,
    Transition,
    SynthesisResult,
    DEFAULT_LAZY_TWEAKS,
    default_lazy_tweaks,
)
from .state_machine import RoundStateMachine

__all__ = [
    "AnswerAccumulator",
    "AnswerEntry",
    "SessionMode",
    "ModeRules",
    "rules_for",
    "Question",
    "QuestionOption",
    "QuestionKind",
    "TOPICS",
    "question_key",
    "topic_key",
    "analysis_key",
    "default_guided_questions",
    "default_topic_questions",
    "PromptSession",
    "SessionPhase",
    "Effect",
    "EffectKind",
    "Transition",
    "SynthesisResult",
    "DEFAULT_LAZY_TWEAKS",
    "default_lazy_tweaks",
    "RoundStateMachine",
]
