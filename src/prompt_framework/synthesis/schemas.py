"""
Response schemas for the generation collaborator.

One pydantic model per response kind. Extra fields are ignored; missing or
mistyped required fields fail validation and surface as SchemaError.
"""
from enum import Enum
from typing import Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..session.state import SynthesisResult


class ResponseKind(str, Enum):
    GUIDED_QUESTIONS = "guided_questions"
    FIRST_ROUND_QUESTIONS = "first_round_questions"
    SECOND_ROUND_QUESTIONS = "second_round_questions"
    PRELIMINARY_RESULT = "preliminary_result"
    FINAL_RESULT = "final_result"
    COMPLETE_PROMPT = "complete_prompt"
    ANALYSIS = "analysis"
    IMPROVEMENT = "improvement"
    TWEAK = "tweak"


SCORE_LABELS = (
    "Excellent", "Good", "Needs Work", "Poor",
    "Відмінно", "Добре", "Потребує покращення", "Погано",
)


class _Response(BaseModel):
    model_config = ConfigDict(extra="ignore")


class OptionModel(_Response):
    text: str = Field(..., min_length=1)
    emoji: str = ""


class GuidedQuestionModel(_Response):
    question: str = Field(..., min_length=1)
    options: List[OptionModel] = Field(default_factory=list)


class GuidedQuestionsResponse(_Response):
    questions: List[GuidedQuestionModel] = Field(..., min_length=1)


class TopicQuestionModel(_Response):
    topic: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)
    options: List[OptionModel] = Field(default_factory=list)
    allow_custom: bool = True


class TopicQuestionsResponse(_Response):
    questions: List[TopicQuestionModel] = Field(..., min_length=1)


class LazyTweakModel(_Response):
    name: str = Field(..., min_length=1)
    emoji: str = ""
    description: str = ""


class _Scored(_Response):
    laziness_score: int = Field(0, ge=0, le=10)
    prompt_quality: int = Field(0, ge=0, le=10)


class PreliminaryResultResponse(_Scored):
    enhanced_prompt: str = Field(..., min_length=1)

    def to_result(self) -> SynthesisResult:
        return SynthesisResult(
            text=self.enhanced_prompt,
            laziness_score=self.laziness_score,
            prompt_quality=self.prompt_quality,
        )


class FinalResultResponse(_Scored):
    enhanced_prompt: str = Field(..., min_length=1)
    lazy_tweaks: List[LazyTweakModel]

    def to_result(self) -> SynthesisResult:
        return SynthesisResult(
            text=self.enhanced_prompt,
            lazy_tweaks=tuple(t.model_dump() for t in self.lazy_tweaks),
            laziness_score=self.laziness_score,
            prompt_quality=self.prompt_quality,
        )


class CompletePromptResponse(_Response):
    generatedText: str = Field(..., min_length=1)
    lazy_tweaks: List[LazyTweakModel] = Field(default_factory=list)

    def to_result(self) -> SynthesisResult:
        return SynthesisResult(
            text=self.generatedText,
            lazy_tweaks=tuple(t.model_dump() for t in self.lazy_tweaks),
        )


class AnalysisQuestionModel(_Response):
    question: str = Field(..., min_length=1)
    type: Literal["text", "select", "textarea"] = "textarea"
    options: Optional[List[str]] = None

    @field_validator("options", mode="before")
    @classmethod
    def _flatten_options(cls, value):
        # Some models answer with {"text": ...} objects instead of strings
        if isinstance(value, list):
            return [v.get("text", "") if isinstance(v, dict) else v for v in value]
        return value


class AnalysisResponse(_Response):
    score: float = Field(..., ge=0, le=100)
    score_label: Literal[SCORE_LABELS]
    suggested_questions: Dict[str, List[AnalysisQuestionModel]]


class ImprovementResponse(_Response):
    improved_prompt: str = Field(..., min_length=1)
    changes_made: List[str] = Field(default_factory=list)

    def to_result(self) -> SynthesisResult:
        return SynthesisResult(
            text=self.improved_prompt,
            changes_made=tuple(self.changes_made),
        )


class TweakResponse(_Response):
    enhanced_prompt: str = Field(..., min_length=1)

    def to_result(self) -> SynthesisResult:
        return SynthesisResult(text=self.enhanced_prompt)


RESPONSE_MODELS: Dict[ResponseKind, Type[BaseModel]] = {
    ResponseKind.GUIDED_QUESTIONS: GuidedQuestionsResponse,
    ResponseKind.FIRST_ROUND_QUESTIONS: TopicQuestionsResponse,
    ResponseKind.SECOND_ROUND_QUESTIONS: TopicQuestionsResponse,
    ResponseKind.PRELIMINARY_RESULT: PreliminaryResultResponse,
    ResponseKind.FINAL_RESULT: FinalResultResponse,
    ResponseKind.COMPLETE_PROMPT: CompletePromptResponse,
    ResponseKind.ANALYSIS: AnalysisResponse,
    ResponseKind.IMPROVEMENT: ImprovementResponse,
    ResponseKind.TWEAK: TweakResponse,
}
