"""
Prompt synthesis request builder.

Turns a session and the effect to run into the exact request sent to the
generation collaborator: a system instruction, a JSON payload and the
response kind the reply is validated against.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Type

from pydantic import BaseModel

from ..config.limits import EngineLimits, DEFAULT_LIMITS
from ..exceptions import ValidationError
from ..session.modes import SessionMode
from ..session.state import PromptSession, Effect, EffectKind
from . import prompts
from .schemas import ResponseKind, RESPONSE_MODELS

logger = logging.getLogger(__name__)


@dataclass
class SynthesisRequest:
    kind: ResponseKind
    system_instruction: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def response_model(self) -> Type[BaseModel]:
        return RESPONSE_MODELS[self.kind]

    def to_user_payload(self) -> str:
        """Payload as JSON text; identical payloads render identically."""
        return json.dumps(self.payload, ensure_ascii=False, indent=2)


class SynthesisRequestBuilder:
    """Builds one request per effect."""

    def __init__(self, limits: EngineLimits = DEFAULT_LIMITS):
        self.limits = limits

    def build(self, session: PromptSession, effect: Effect) -> SynthesisRequest:
        if not session.original_input or not session.original_input.strip():
            raise ValidationError("Original input must not be empty")

        kind = effect.kind
        if kind is EffectKind.REQUEST_QUESTIONS:
            request = self._questions(session, effect)
        elif kind is EffectKind.REQUEST_SYNTHESIS:
            request = self._synthesis(session, effect)
        elif kind is EffectKind.REQUEST_PRELIMINARY:
            request = SynthesisRequest(
                ResponseKind.PRELIMINARY_RESULT,
                prompts.render(prompts.PRELIMINARY_RESULT,
                               language_name=prompts.language_name(session.language)),
                self._question_driven_payload(session, effect),
            )
        elif kind is EffectKind.REQUEST_ANALYSIS:
            request = self._analysis(session, effect)
        elif kind is EffectKind.REQUEST_IMPROVEMENT:
            request = self._improvement(session, effect)
        elif kind is EffectKind.REQUEST_TWEAK:
            request = self._tweak(session, effect)
        else:
            raise ValueError(f"Unsupported effect: {kind}")

        logger.debug(f"Built {request.kind.value} request for round {effect.round}")
        return request

    def _question_driven_payload(self, session: PromptSession, effect: Effect) -> Dict[str, Any]:
        return {
            "originalInput": session.original_input,
            "serializedAnswers": session.answers.serialize(),
            "round": effect.round,
            "totalRounds": session.total_rounds,
            "language": session.language,
        }

    def _questions(self, session: PromptSession, effect: Effect) -> SynthesisRequest:
        payload = self._question_driven_payload(session, effect)
        name = prompts.language_name(session.language)
        if session.mode is SessionMode.GUIDED_FIVE_QUESTION:
            return SynthesisRequest(
                ResponseKind.GUIDED_QUESTIONS,
                prompts.render(prompts.GUIDED_QUESTIONS,
                               count=self.limits.guided_question_count,
                               language_name=name),
                payload,
            )
        if session.mode is not SessionMode.THREE_ROUND_TOPIC:
            raise ValueError(f"{session.mode.value} sessions do not request question batches")

        first = effect.round == 1
        return SynthesisRequest(
            ResponseKind.FIRST_ROUND_QUESTIONS if first else ResponseKind.SECOND_ROUND_QUESTIONS,
            prompts.render(
                prompts.TOPIC_QUESTIONS,
                round=effect.round,
                total_rounds=session.total_rounds,
                round_hint=prompts.FIRST_ROUND_HINT if first else prompts.LATER_ROUND_HINT,
                language_name=name,
            ),
            payload,
        )

    def _synthesis(self, session: PromptSession, effect: Effect) -> SynthesisRequest:
        name = prompts.language_name(session.language)
        if session.mode is SessionMode.SUPER_LAZY:
            return SynthesisRequest(
                ResponseKind.COMPLETE_PROMPT,
                prompts.COMPLETE_PROMPT,
                {"originalInput": session.original_input},
            )
        return SynthesisRequest(
            ResponseKind.FINAL_RESULT,
            prompts.render(prompts.FINAL_RESULT, language_name=name),
            self._question_driven_payload(session, effect),
        )

    def _analysis(self, session: PromptSession, effect: Effect) -> SynthesisRequest:
        # Later iterations analyse the latest improved text
        text = session.current_text if session.has_result else session.original_input
        return SynthesisRequest(
            ResponseKind.ANALYSIS,
            prompts.ANALYZE.get(session.language, prompts.ANALYZE["en"]),
            {"prompt": text, "language": session.language, "iteration": effect.round},
        )

    def _improvement(self, session: PromptSession, effect: Effect) -> SynthesisRequest:
        text = session.current_text if session.has_result else session.original_input
        return SynthesisRequest(
            ResponseKind.IMPROVEMENT,
            prompts.IMPROVE.get(session.language, prompts.IMPROVE["en"]),
            {
                "promptToImprove": text,
                "questionsAndAnswers": session.answers.question_answer_pairs(round=effect.round),
                "language": session.language,
                "iteration": effect.round,
            },
        )

    def _tweak(self, session: PromptSession, effect: Effect) -> SynthesisRequest:
        if not effect.tweak:
            raise ValidationError("Tweak must not be empty")
        return SynthesisRequest(
            ResponseKind.TWEAK,
            prompts.render(prompts.TWEAK, language_name=prompts.language_name(session.language)),
            {
                "originalInput": session.original_input,
                "currentText": session.current_text or "",
                "tweak": effect.tweak,
                "language": session.language,
            },
        )
