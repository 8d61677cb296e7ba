"""
Response parser.

Locates the JSON object in a raw completion, validates it against the
model for the expected kind and converts question payloads into Question
objects. Non-JSON text is a ParseError; JSON of the wrong shape is a
SchemaError. Nothing is retried or defaulted here.
"""
import json
import logging
from typing import List, Tuple

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..exceptions import ParseError, SchemaError
from ..session.questions import (
    ANALYSIS_CATEGORIES,
    Question,
    QuestionKind,
    QuestionOption,
    analysis_key,
    question_key,
    topic_key,
)
from .schemas import (
    ResponseKind,
    RESPONSE_MODELS,
    GuidedQuestionsResponse,
    TopicQuestionsResponse,
    AnalysisResponse,
)

logger = logging.getLogger(__name__)


def extract_json_text(raw: str) -> str:
    """Substring from the first '{' to the last '}'."""
    if raw is None:
        raise ParseError("Empty response from generation provider", raw="")
    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ParseError("No JSON object found in response", raw=raw)
    return raw[start:end + 1]


class ResponseParser:
    """Validates raw completions into typed responses."""

    def parse(self, raw: str, kind: ResponseKind) -> BaseModel:
        kind = ResponseKind(kind)
        text = extract_json_text(raw)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug(f"Unparsable {kind.value} response: {raw!r}")
            raise ParseError(f"Invalid JSON in response: {e.msg}", raw=raw) from e

        if not isinstance(data, dict):
            raise SchemaError(f"Expected a JSON object for {kind.value}", kind=kind.value)

        model = RESPONSE_MODELS[kind]
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.debug(f"{kind.value} response failed validation: {data!r}")
            raise SchemaError(
                f"Response does not match {kind.value} schema: {e.error_count()} error(s)",
                kind=kind.value,
                errors=e.errors(include_url=False),
            ) from e

    # ------------------------------------------------------------------

    @staticmethod
    def guided_questions(response: GuidedQuestionsResponse, limit: int) -> List[Question]:
        questions = []
        for index, item in enumerate(response.questions[:limit]):
            questions.append(Question(
                key=question_key(index, item.question),
                prompt_text=item.question,
                options=tuple(QuestionOption(o.text, o.emoji) for o in item.options),
            ))
        return questions

    @staticmethod
    def topic_questions(response: TopicQuestionsResponse, round_number: int) -> List[Question]:
        """One question per topic; later duplicates of a topic are dropped."""
        seen = set()
        questions = []
        for item in response.questions:
            topic = item.topic.strip().lower()
            if topic in seen:
                continue
            seen.add(topic)
            questions.append(Question(
                key=topic_key(round_number, topic),
                prompt_text=item.question,
                options=tuple(QuestionOption(o.text, o.emoji) for o in item.options),
                allows_custom=item.allow_custom,
                topic=topic,
            ))
        return questions

    @staticmethod
    def analysis_questions(response: AnalysisResponse, iteration: int = 1) -> Tuple[List[Question], dict]:
        """
        Flatten suggested questions in category order (goals, context,
        specificity, format, then any others) and key them by iteration
        and position.
        """
        categories = [c for c in ANALYSIS_CATEGORIES if c in response.suggested_questions]
        categories += [c for c in response.suggested_questions if c not in ANALYSIS_CATEGORIES]

        questions = []
        for category in categories:
            for item in response.suggested_questions[category]:
                index = len(questions)
                kind = QuestionKind(item.type)
                options = tuple(QuestionOption(o) for o in (item.options or []) if o)
                questions.append(Question(
                    key=analysis_key(iteration, index, item.question),
                    prompt_text=item.question,
                    kind=kind,
                    options=options if kind is QuestionKind.SELECT else (),
                    category=category,
                ))

        summary = {"score": response.score, "score_label": response.score_label}
        return questions, summary
