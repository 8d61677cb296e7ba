"""
Round/iteration state machine.

Every command takes a PromptSession, leaves it untouched and returns a
Transition: the proposed next session plus the effects the caller has to run
(generation calls). The caller commits the proposed session only once those
effects succeed, so a failed call leaves the committed session as it was.
"""
import copy
import logging
from typing import Iterable, List, Optional

from ..config.limits import EngineLimits, DEFAULT_LIMITS
from ..exceptions import (
    ValidationError,
    SessionStateError,
    RoundIncompleteError,
    RoundLimitError,
)
from ..i18n import detect_language
from .modes import SessionMode, ModeRules, rules_for
from .questions import Question
from .state import (
    PromptSession,
    SessionPhase,
    Effect,
    EffectKind,
    Transition,
    SynthesisResult,
    default_lazy_tweaks,
)

logger = logging.getLogger(__name__)


class RoundStateMachine:
    """Pure transition logic for all four session modes."""

    def __init__(self, limits: EngineLimits = DEFAULT_LIMITS):
        self.limits = limits

    def rules(self, session: PromptSession) -> ModeRules:
        return rules_for(session.mode, self.limits)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_phase(session: PromptSession, command: str, *phases: SessionPhase):
        if session.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise SessionStateError(
                f"Cannot {command} while session is {session.phase.value} "
                f"(allowed: {allowed})"
            )

    @staticmethod
    def _require_result(session: PromptSession, command: str):
        if not session.has_result:
            raise SessionStateError(f"Cannot {command} before a result exists")

    @staticmethod
    def _fork(session: PromptSession) -> PromptSession:
        nxt = copy.copy(session)
        nxt.answers = session.answers.copy()
        nxt.questions = list(session.questions)
        nxt.lazy_tweaks = list(session.lazy_tweaks)
        nxt.analysis = copy.deepcopy(session.analysis)
        nxt.changes_made = list(session.changes_made)
        return nxt

    def _log(self, command: str, before: PromptSession, after: Transition):
        logger.debug(
            f"{command}: {before.phase.value}(round={before.current_round}) -> "
            f"{after.session.phase.value}(round={after.session.current_round}) "
            f"effects={[e.kind.value for e in after.effects]}"
        )

    def _completion_effect(self, session: PromptSession) -> Effect:
        """Which call finishing the current round triggers."""
        rules = self.rules(session)
        n = session.current_round
        if session.mode is SessionMode.ITERATIVE_ANALYSIS:
            return Effect(EffectKind.REQUEST_IMPROVEMENT, n)
        if rules.offers_preliminary and n < rules.total_rounds:
            return Effect(EffectKind.REQUEST_PRELIMINARY, n)
        return Effect(EffectKind.REQUEST_SYNTHESIS, n)

    def _complete_round(self, nxt: PromptSession) -> List[Effect]:
        nxt.phase = SessionPhase.ROUND_COMPLETE
        return [self._completion_effect(nxt)]

    def _round_can_complete(self, session: PromptSession) -> bool:
        rules = self.rules(session)
        keys = session.question_keys
        required = rules.required_answers(len(keys))
        if rules.minimum_answers is None:
            return session.answers.count_recorded(keys) >= required
        return session.answers.count_answered(keys) >= required

    # ------------------------------------------------------------------
    # commands
    # ------------------------------------------------------------------

    def start(
        self,
        session: PromptSession,
        original_input: str,
        mode: SessionMode,
        language: Optional[str] = None,
    ) -> Transition:
        """Begin a session from the idle state."""
        self._require_phase(session, "start", SessionPhase.IDLE)
        if not original_input or not original_input.strip():
            raise ValidationError("Original input must not be empty")

        mode = SessionMode(mode)
        rules = rules_for(mode, self.limits)

        nxt = PromptSession(
            original_input=original_input.strip(),
            mode=mode,
            language=detect_language(original_input, language),
            current_round=1,
            total_rounds=rules.total_rounds,
        )

        if mode is SessionMode.SUPER_LAZY:
            nxt.phase = SessionPhase.ROUND_COMPLETE
            effects = [Effect(EffectKind.REQUEST_SYNTHESIS, 1)]
        elif mode is SessionMode.ITERATIVE_ANALYSIS:
            nxt.phase = SessionPhase.AWAITING_ANSWERS
            effects = [Effect(EffectKind.REQUEST_ANALYSIS, 1)]
        else:
            nxt.phase = SessionPhase.AWAITING_ANSWERS
            effects = [Effect(EffectKind.REQUEST_QUESTIONS, 1)]

        transition = Transition(nxt, effects)
        self._log("start", session, transition)
        return transition

    def submit_answer(self, session: PromptSession, value: Optional[str], custom: bool = False) -> Transition:
        """
        Record an answer for the question under the cursor.

        Advances the cursor, or completes the round when this was the last
        question and the round's minimum is met. In the guided flow a short
        batch keeps the cursor on the last question until enough answers exist.
        """
        self._require_phase(session, "answer", SessionPhase.AWAITING_ANSWERS)
        question = session.current_question
        if question is None:
            raise SessionStateError("No question is waiting for an answer")

        nxt = self._fork(session)
        nxt.answers.record(
            question.key,
            value,
            question_text=question.prompt_text,
            topic=question.topic,
            round=session.current_round,
            custom=custom,
        )

        effects: List[Effect] = []
        if nxt.cursor < len(nxt.questions) - 1:
            nxt.cursor += 1
        elif self._round_can_complete(nxt):
            effects = self._complete_round(nxt)

        transition = Transition(nxt, effects)
        self._log("submit_answer", session, transition)
        return transition

    def skip(self, session: PromptSession) -> Transition:
        """Skipping is submitting an empty answer."""
        return self.submit_answer(session, "")

    def previous(self, session: PromptSession) -> Transition:
        """Move the cursor back one question; recorded answers are kept."""
        self._require_phase(session, "go back", SessionPhase.AWAITING_ANSWERS)
        if session.cursor == 0:
            raise SessionStateError("Already at the first question")
        nxt = self._fork(session)
        nxt.cursor -= 1
        transition = Transition(nxt)
        self._log("previous", session, transition)
        return transition

    def confirm_round(self, session: PromptSession) -> Transition:
        """Complete the round explicitly once the minimum is met."""
        self._require_phase(session, "confirm round", SessionPhase.AWAITING_ANSWERS)

        if not self._round_can_complete(session):
            rules = self.rules(session)
            keys = session.question_keys
            required = rules.required_answers(len(keys))
            if rules.minimum_answers is None:
                done = session.answers.count_recorded(keys)
            else:
                done = session.answers.count_answered(keys)
            raise RoundIncompleteError(done, required)

        nxt = self._fork(session)
        transition = Transition(nxt, self._complete_round(nxt))
        self._log("confirm_round", session, transition)
        return transition

    def continue_refinement(self, session: PromptSession) -> Transition:
        """Move on to the next round (topic flow) or iteration (analysis flow)."""
        if session.phase is SessionPhase.MAX_ITERATIONS_REACHED:
            raise RoundLimitError(
                f"Round limit of {session.total_rounds} reached; only finish is allowed"
            )
        self._require_phase(
            session, "continue",
            SessionPhase.PRELIMINARY_OFFERED, SessionPhase.RESULT_READY,
        )
        if session.current_round >= session.total_rounds:
            raise RoundLimitError(
                f"Round {session.current_round} is the last of {session.total_rounds}"
            )

        nxt = self._fork(session)
        nxt.current_round += 1
        nxt.phase = SessionPhase.AWAITING_ANSWERS
        nxt.questions = []
        nxt.cursor = 0

        if session.mode is SessionMode.ITERATIVE_ANALYSIS:
            effects = [Effect(EffectKind.REQUEST_ANALYSIS, nxt.current_round)]
        else:
            effects = [Effect(EffectKind.REQUEST_QUESTIONS, nxt.current_round)]

        transition = Transition(nxt, effects)
        self._log("continue_refinement", session, transition)
        return transition

    def finish(self, session: PromptSession) -> Transition:
        """Accept the current result."""
        self._require_phase(
            session, "finish",
            SessionPhase.PRELIMINARY_OFFERED,
            SessionPhase.RESULT_READY,
            SessionPhase.MAX_ITERATIONS_REACHED,
        )
        self._require_result(session, "finish")
        nxt = self._fork(session)
        nxt.phase = SessionPhase.FINISHED
        transition = Transition(nxt)
        self._log("finish", session, transition)
        return transition

    def tweak(self, session: PromptSession, tweak: str) -> Transition:
        """Ask for a revised result; round and phase stay where they are."""
        self._require_result(session, "tweak")
        if session.phase in (SessionPhase.ROUND_COMPLETE, SessionPhase.IDLE):
            raise SessionStateError(f"Cannot tweak while session is {session.phase.value}")
        if not tweak or not tweak.strip():
            raise ValidationError("Tweak must not be empty")
        nxt = self._fork(session)
        transition = Transition(
            nxt, [Effect(EffectKind.REQUEST_TWEAK, session.current_round, tweak.strip())]
        )
        self._log("tweak", session, transition)
        return transition

    def edit_result(self, session: PromptSession, text: str) -> Transition:
        """Replace the current result text by hand."""
        self._require_result(session, "edit")
        if not text or not text.strip():
            raise ValidationError("Edited text must not be empty")
        nxt = self._fork(session)
        nxt.current_text = text
        nxt.edited = True
        nxt.changes_made = []
        return Transition(nxt)

    def revert_to(self, session: PromptSession, version_id: str, text: str) -> Transition:
        """Make an earlier version current again."""
        self._require_result(session, "revert")
        nxt = self._fork(session)
        nxt.current_text = text
        nxt.current_version_id = version_id
        nxt.edited = False
        nxt.changes_made = []
        return Transition(nxt)

    def reset(self, session: PromptSession) -> Transition:
        """Start over: a fresh idle session."""
        transition = Transition(PromptSession())
        self._log("reset", session, transition)
        return transition

    # ------------------------------------------------------------------
    # results of effects
    # ------------------------------------------------------------------

    def apply_questions(
        self,
        session: PromptSession,
        effect: Effect,
        questions: Iterable[Question],
        analysis: Optional[dict] = None,
    ) -> PromptSession:
        """Install a question batch produced by a questions or analysis call."""
        if effect.kind not in (EffectKind.REQUEST_QUESTIONS, EffectKind.REQUEST_ANALYSIS):
            raise SessionStateError(f"{effect.kind.value} does not produce questions")
        self._require_phase(session, "receive questions", SessionPhase.AWAITING_ANSWERS)

        nxt = self._fork(session)
        nxt.questions = list(questions)
        nxt.cursor = 0
        if analysis is not None:
            nxt.analysis = analysis
        logger.debug(
            f"Installed {len(nxt.questions)} questions for round {nxt.current_round}"
        )
        return nxt

    def apply_result(
        self,
        session: PromptSession,
        effect: Effect,
        result: SynthesisResult,
        version_id: Optional[str] = None,
    ) -> PromptSession:
        """Install generated text and move to the phase that follows the call."""
        nxt = self._fork(session)
        nxt.current_text = result.text
        nxt.current_version_id = version_id
        nxt.edited = False
        # Describes the step to the current text only
        nxt.changes_made = list(result.changes_made)
        if result.lazy_tweaks:
            nxt.lazy_tweaks = list(result.lazy_tweaks)
        elif not nxt.lazy_tweaks:
            nxt.lazy_tweaks = default_lazy_tweaks()
        if result.laziness_score is not None:
            nxt.laziness_score = result.laziness_score
        if result.prompt_quality is not None:
            nxt.prompt_quality = result.prompt_quality

        kind = effect.kind
        if kind is EffectKind.REQUEST_TWEAK:
            pass
        elif kind is EffectKind.REQUEST_PRELIMINARY:
            nxt.phase = SessionPhase.PRELIMINARY_OFFERED
        elif kind is EffectKind.REQUEST_SYNTHESIS:
            nxt.phase = SessionPhase.MAX_ITERATIONS_REACHED
        elif kind is EffectKind.REQUEST_IMPROVEMENT:
            if nxt.current_round < nxt.total_rounds:
                nxt.phase = SessionPhase.RESULT_READY
            else:
                nxt.phase = SessionPhase.MAX_ITERATIONS_REACHED
        else:
            raise SessionStateError(f"{kind.value} does not produce a result")

        logger.debug(
            f"Applied {kind.value} result: phase={nxt.phase.value} round={nxt.current_round}"
        )
        return nxt
