"""Session data, phases and the effects a transition asks the caller to run."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .accumulator import AnswerAccumulator
from .modes import SessionMode
from .questions import Question


class SessionPhase(str, Enum):
    IDLE = "idle"
    AWAITING_ANSWERS = "awaiting_answers"
    ROUND_COMPLETE = "round_complete"
    PRELIMINARY_OFFERED = "preliminary_offered"
    RESULT_READY = "result_ready"
    FINISHED = "finished"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"


class EffectKind(str, Enum):
    REQUEST_QUESTIONS = "request_questions"
    REQUEST_ANALYSIS = "request_analysis"
    REQUEST_PRELIMINARY = "request_preliminary"
    REQUEST_SYNTHESIS = "request_synthesis"
    REQUEST_IMPROVEMENT = "request_improvement"
    REQUEST_TWEAK = "request_tweak"


# Effects whose result becomes a new prompt version
VERSIONED_EFFECTS = frozenset({
    EffectKind.REQUEST_PRELIMINARY,
    EffectKind.REQUEST_SYNTHESIS,
    EffectKind.REQUEST_IMPROVEMENT,
    EffectKind.REQUEST_TWEAK,
})


@dataclass(frozen=True)
class Effect:
    kind: EffectKind
    round: int
    tweak: Optional[str] = None

    @property
    def produces_version(self) -> bool:
        return self.kind in VERSIONED_EFFECTS


@dataclass
class PromptSession:
    """
    In-memory state of one enhancement session.

    Owned by a single controller. The state machine never mutates a session
    it is given; it returns a modified copy.
    """

    original_input: str = ""
    mode: SessionMode = SessionMode.SUPER_LAZY
    language: str = "en"
    phase: SessionPhase = SessionPhase.IDLE
    current_round: int = 1
    total_rounds: int = 1
    questions: List[Question] = field(default_factory=list)
    cursor: int = 0
    answers: AnswerAccumulator = field(default_factory=AnswerAccumulator)
    current_text: Optional[str] = None
    current_version_id: Optional[str] = None
    edited: bool = False
    lazy_tweaks: List[Dict[str, str]] = field(default_factory=list)
    laziness_score: Optional[int] = None
    prompt_quality: Optional[int] = None
    analysis: Optional[Dict[str, Any]] = None
    changes_made: List[str] = field(default_factory=list)

    @property
    def has_result(self) -> bool:
        return self.current_text is not None

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.cursor < len(self.questions):
            return self.questions[self.cursor]
        return None

    @property
    def question_keys(self) -> List[str]:
        return [q.key for q in self.questions]

    @property
    def answered_count(self) -> int:
        return self.answers.answered_count

    @property
    def round_answered_count(self) -> int:
        return self.answers.count_answered(self.question_keys)

    @property
    def is_terminal(self) -> bool:
        return self.phase in (SessionPhase.FINISHED, SessionPhase.MAX_ITERATIONS_REACHED)


@dataclass
class Transition:
    session: PromptSession
    effects: List[Effect] = field(default_factory=list)


@dataclass(frozen=True)
class SynthesisResult:
    """Text produced by a synthesis-type call, plus whatever extras it carried."""

    text: str
    lazy_tweaks: tuple = ()
    laziness_score: Optional[int] = None
    prompt_quality: Optional[int] = None
    changes_made: tuple = ()


# Offered when a result arrives without tweaks of its own; "key" is the i18n key suffix
DEFAULT_LAZY_TWEAKS = (
    {"key": "make_funnier", "name": "Make it funnier", "emoji": "😄", "description": ""},
    {"key": "add_details", "name": "Add more details", "emoji": "🔍", "description": ""},
    {"key": "make_shorter", "name": "Make it shorter", "emoji": "✂️", "description": ""},
    {"key": "more_professional", "name": "More professional", "emoji": "👔", "description": ""},
)


def default_lazy_tweaks() -> List[Dict[str, str]]:
    return [dict(t) for t in DEFAULT_LAZY_TWEAKS]
