"""
Pydantic schemas for the prompt history API.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


class PromptResponse(BaseModel):
    """A saved prompt version."""

    id: str
    parent_id: Optional[str] = None
    version: int
    user_id: str
    original_input: str
    generated_prompt: str
    mode: Optional[str] = None
    questions_snapshot: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }


class PromptListResponse(BaseModel):
    """Latest version of each prompt family, newest first."""

    prompts: List[PromptResponse]
    total: int = Field(..., description="Number of prompt families")


class PromptCountResponse(BaseModel):
    count: int


class PromptDeleteResponse(BaseModel):
    deleted: List[str]
