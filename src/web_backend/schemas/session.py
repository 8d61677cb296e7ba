"""
Pydantic schemas for the Session API.

Request bodies for the question flow commands and the view model returned
after every command.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from prompt_framework.session import SessionMode, SessionPhase, PromptSession, Question
from prompt_framework.ledger import GeneratedPromptVersion
from prompt_framework.i18n import translate, translate_score_label


class SessionCreate(BaseModel):
    """Request schema for starting a session."""

    original_input: str = Field(
        ...,
        min_length=1,
        description="The user's raw request"
    )
    mode: SessionMode = Field(
        SessionMode.SUPER_LAZY,
        description="Question flow to run"
    )
    language: Optional[str] = Field(
        None,
        description="Language code; detected from the input when omitted"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "original_input": "help me write an email",
                    "mode": "guided_five_question",
                }
            ]
        }
    }


class AnswerSubmit(BaseModel):
    """Answer for the question under the cursor."""

    value: Optional[str] = Field(None, description="Selected option text or free text")
    custom: bool = Field(False, description="True when the value is free text")


class TweakRequest(BaseModel):
    tweak: str = Field(..., min_length=1, description="Tweak name, e.g. 'Make it funnier'")


class EditRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Replacement result text")


class OptionOut(BaseModel):
    text: str
    emoji: str = ""


class QuestionOut(BaseModel):
    key: str
    prompt_text: str
    kind: str
    options: List[OptionOut] = Field(default_factory=list)
    allows_custom: bool = True
    topic: Optional[str] = None
    topic_label: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_question(cls, question: Question, language: str) -> "QuestionOut":
        data = question.to_dict()
        if question.topic:
            data["topic_label"] = translate(language, f"topic.{question.topic}", question.topic)
        return cls(**data)


def _tweak_out(tweak: Dict[str, Any], language: str) -> Dict[str, Any]:
    """Default tweaks carry an i18n key; generated ones are already in the session language."""
    key = tweak.get("key")
    if not key:
        return dict(tweak)
    return {**tweak, "name": translate(language, f"tweak.{key}", tweak.get("name"))}


def _analysis_out(analysis: Optional[Dict[str, Any]], language: str) -> Optional[Dict[str, Any]]:
    if not analysis:
        return analysis
    label = analysis.get("score_label")
    if not label:
        return dict(analysis)
    return {**analysis, "score_label": translate_score_label(language, label)}


class SessionView(BaseModel):
    """State of a live session as the views render it."""

    id: str
    original_input: str
    mode: SessionMode
    language: str
    phase: SessionPhase
    phase_caption: str
    current_round: int
    total_rounds: int
    cursor: int
    question_count: int
    current_question: Optional[QuestionOut] = None
    questions: List[QuestionOut] = Field(default_factory=list)
    answered_count: int
    round_answered_count: int
    current_text: Optional[str] = None
    current_version_id: Optional[str] = None
    edited: bool = False
    lazy_tweaks: List[Dict[str, Any]] = Field(default_factory=list)
    laziness_score: Optional[int] = None
    prompt_quality: Optional[int] = None
    analysis: Optional[Dict[str, Any]] = None
    changes_made: List[str] = Field(default_factory=list)

    @classmethod
    def from_session(cls, session_id: str, session: PromptSession) -> "SessionView":
        language = session.language
        questions = [QuestionOut.from_question(q, language) for q in session.questions]
        current = session.current_question
        return cls(
            id=session_id,
            original_input=session.original_input,
            mode=session.mode,
            language=language,
            phase=session.phase,
            phase_caption=translate(language, f"phase.{session.phase.value}"),
            current_round=session.current_round,
            total_rounds=session.total_rounds,
            cursor=session.cursor,
            question_count=len(session.questions),
            current_question=QuestionOut.from_question(current, language) if current else None,
            questions=questions,
            answered_count=session.answered_count,
            round_answered_count=session.round_answered_count,
            current_text=session.current_text,
            current_version_id=session.current_version_id,
            edited=session.edited,
            lazy_tweaks=[_tweak_out(t, language) for t in session.lazy_tweaks],
            laziness_score=session.laziness_score,
            prompt_quality=session.prompt_quality,
            analysis=_analysis_out(session.analysis, language),
            changes_made=list(session.changes_made),
        )


class VersionOut(BaseModel):
    id: str
    parent_id: Optional[str] = None
    version: int
    original_input: str
    generated_text: str
    mode: Optional[str] = None
    questions_snapshot: Optional[Dict[str, str]] = None
    created_at: datetime

    @classmethod
    def from_version(cls, version: GeneratedPromptVersion) -> "VersionOut":
        return cls(
            id=version.id,
            parent_id=version.parent_id,
            version=version.version,
            original_input=version.original_input,
            generated_text=version.generated_text,
            mode=version.mode,
            questions_snapshot=version.questions_snapshot,
            created_at=version.created_at,
        )


class SummaryEntry(BaseModel):
    key: str
    label: str
    value: str
    round: int


class SummaryResponse(BaseModel):
    """Answered questions, as text ready to copy and as entries."""

    summary: str
    entries: List[SummaryEntry] = Field(default_factory=list)


class SaveResponse(BaseModel):
    saved: bool
    id: Optional[str] = None
    version: Optional[int] = None
