"""
Session controller.

Owns one PromptSession and runs the effects the state machine asks for.
At most one generation call is in flight; the proposed session is committed
only when its call succeeds, and a reset discards results that arrive late.
"""
import logging
import uuid
from typing import List, Optional

from ..config.limits import EngineLimits, DEFAULT_LIMITS
from ..exceptions import SynthesisError, SynthesisInProgressError, VersionNotFoundError
from ..ledger import GeneratedPromptVersion, VersionLedger
from ..synthesis.generation import GenerationClient
from ..synthesis.request_builder import SynthesisRequestBuilder
from ..synthesis.response_parser import ResponseParser
from ..synthesis.schemas import ResponseKind
from .modes import SessionMode
from .questions import Question, default_guided_questions, default_topic_questions
from .state import PromptSession, Effect, EffectKind, Transition
from .state_machine import RoundStateMachine

logger = logging.getLogger(__name__)


class PromptSessionController:
    """Executes state machine transitions for a single session."""

    def __init__(
        self,
        generation: GenerationClient,
        limits: EngineLimits = DEFAULT_LIMITS,
        ledger: Optional[VersionLedger] = None,
        session_id: Optional[str] = None,
    ):
        self.id = session_id or str(uuid.uuid4())
        self.limits = limits
        self.generation = generation
        self.machine = RoundStateMachine(limits)
        self.builder = SynthesisRequestBuilder(limits)
        self.parser = ResponseParser()
        self.ledger = ledger or VersionLedger()
        self.session = PromptSession()
        self.root_version_id: Optional[str] = None
        # Id of the stored family this session saves into, if any
        self.saved_prompt_id: Optional[str] = None
        self._in_flight = False
        self._epoch = 0

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    # ------------------------------------------------------------------
    # commands
    # ------------------------------------------------------------------

    async def start(self, original_input: str, mode: SessionMode, language: Optional[str] = None) -> PromptSession:
        return await self._dispatch(self.machine.start, original_input, mode, language)

    async def submit_answer(self, value: Optional[str], custom: bool = False) -> PromptSession:
        return await self._dispatch(self.machine.submit_answer, value, custom)

    async def skip(self) -> PromptSession:
        return await self._dispatch(self.machine.skip)

    async def previous(self) -> PromptSession:
        return await self._dispatch(self.machine.previous)

    async def confirm_round(self) -> PromptSession:
        return await self._dispatch(self.machine.confirm_round)

    async def continue_refinement(self) -> PromptSession:
        return await self._dispatch(self.machine.continue_refinement)

    async def finish(self) -> PromptSession:
        return await self._dispatch(self.machine.finish)

    async def tweak(self, tweak: str) -> PromptSession:
        return await self._dispatch(self.machine.tweak, tweak)

    async def edit_result(self, text: str) -> PromptSession:
        return await self._dispatch(self.machine.edit_result, text)

    async def revert_to(self, version_id: str) -> PromptSession:
        version = self.ledger.get(version_id)
        if version.root_id != self.root_version_id:
            raise VersionNotFoundError(f"Version {version_id} does not belong to this session")
        return await self._dispatch(self.machine.revert_to, version.id, version.generated_text)

    def reset(self) -> PromptSession:
        """Start over. Calls still running are ignored when they finish."""
        self._epoch += 1
        self._in_flight = False
        self.session = self.machine.reset(self.session).session
        self.root_version_id = None
        self.saved_prompt_id = None
        logger.info(f"Session {self.id} reset (epoch {self._epoch})")
        return self.session

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    def versions(self) -> List[GeneratedPromptVersion]:
        if self.root_version_id is None:
            return []
        return self.ledger.list_family(self.root_version_id)

    def summary(self) -> str:
        return self.session.answers.serialize()

    # ------------------------------------------------------------------
    # effect execution
    # ------------------------------------------------------------------

    async def _dispatch(self, command, *args) -> PromptSession:
        if self._in_flight:
            raise SynthesisInProgressError("A generation call is already in progress")

        transition: Transition = command(self.session, *args)
        if not transition.effects:
            self.session = transition.session
            return self.session

        epoch = self._epoch
        self._in_flight = True
        try:
            session = transition.session
            for effect in transition.effects:
                session = await self._run_effect(session, effect, epoch)
                if session is None:
                    return self.session
            self.session = session
            return self.session
        finally:
            if epoch == self._epoch:
                self._in_flight = False

    def _is_stale(self, epoch: int, effect: Effect) -> bool:
        if epoch != self._epoch:
            logger.info(
                f"Session {self.id}: discarding {effect.kind.value} result from epoch {epoch}"
            )
            return True
        return False

    async def _run_effect(self, session: PromptSession, effect: Effect, epoch: int) -> Optional[PromptSession]:
        request = self.builder.build(session, effect)

        if effect.kind is EffectKind.REQUEST_QUESTIONS:
            questions = await self._fetch_questions(session, effect, request)
            if self._is_stale(epoch, effect):
                return None
            return self.machine.apply_questions(session, effect, questions)

        raw = await self.generation.generate(request)
        if self._is_stale(epoch, effect):
            return None
        response = self.parser.parse(raw, request.kind)

        if effect.kind is EffectKind.REQUEST_ANALYSIS:
            questions, analysis = self.parser.analysis_questions(response, effect.round)
            return self.machine.apply_questions(session, effect, questions, analysis=analysis)

        result = response.to_result()
        nxt = self.machine.apply_result(session, effect, result)
        version = self.ledger.append(
            original_input=nxt.original_input,
            generated_text=result.text,
            root_id=self.root_version_id,
            mode=nxt.mode.value,
            questions_snapshot=nxt.answers.snapshot(),
        )
        if self.root_version_id is None:
            self.root_version_id = version.id
        nxt.current_version_id = version.id
        logger.info(
            f"Session {self.id}: {effect.kind.value} produced version {version.version}"
        )
        return nxt

    async def _fetch_questions(self, session: PromptSession, effect: Effect, request) -> List[Question]:
        """Generated questions, or the default table when generation fails."""
        try:
            raw = await self.generation.generate(request)
            response = self.parser.parse(raw, request.kind)
            if request.kind is ResponseKind.GUIDED_QUESTIONS:
                questions = self.parser.guided_questions(
                    response, self.limits.guided_question_count
                )
            else:
                questions = self.parser.topic_questions(response, effect.round)
            if session.mode is SessionMode.GUIDED_FIVE_QUESTION and \
                    len(questions) < self.limits.guided_min_answers:
                raise SynthesisError(
                    f"Only {len(questions)} guided questions generated, "
                    f"need at least {self.limits.guided_min_answers}"
                )
            return questions
        except SynthesisError as e:
            logger.warning(
                f"Session {self.id}: question generation failed ({e}), using defaults"
            )
            if session.mode is SessionMode.GUIDED_FIVE_QUESTION:
                return default_guided_questions(self.limits)
            return default_topic_questions(effect.round)
