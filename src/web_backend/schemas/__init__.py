"""
Pydantic schemas for API request/response validation.
"""

from .session import (
    SessionCreate,
    AnswerSubmit,
    TweakRequest,
    EditRequest,
    QuestionOut,
    SessionView,
    VersionOut,
    SummaryEntry,
    SummaryResponse,
    SaveResponse,
)
from .prompt import (
    PromptResponse,
    PromptListResponse,
    PromptCountResponse,
    PromptDeleteResponse,
)

__all__ = [
    "SessionCreate",
    "AnswerSubmit",
    "TweakRequest",
    "EditRequest",
    "QuestionOut",
    "SessionView",
    "VersionOut",
    "SummaryEntry",
    "SummaryResponse",
    "SaveResponse",
    "PromptResponse",
    "PromptListResponse",
    "PromptCountResponse",
    "PromptDeleteResponse",
]
