"""
Prompt record model.

One row per saved prompt version. The root of a family has no parent_id
and carries the family's version counter; children point at the root.
"""

from sqlalchemy import Column, String, DateTime, Integer, JSON, Text
from datetime import datetime
import uuid

from ..database.connection import Base


def generate_prompt_id() -> str:
    """Generate a unique prompt ID."""
    return str(uuid.uuid4())


class PromptRecord(Base):
    """SQLAlchemy model for saved prompt versions."""
    __tablename__ = "prompts"

    id = Column(String(64), primary_key=True, default=generate_prompt_id)
    parent_id = Column(String(64), nullable=True, index=True)
    version = Column(Integer, nullable=False, default=1)

    # Highest version ever assigned in the family; only kept on the root
    latest_version = Column(Integer, nullable=False, default=1)

    user_id = Column(String(64), nullable=False, index=True)
    original_input = Column(Text, nullable=False)
    generated_prompt = Column(Text, nullable=False)
    mode = Column(String(32), nullable=True)
    questions_snapshot = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def root_id(self) -> str:
        return self.parent_id or self.id

    def __repr__(self) -> str:
        return f"<PromptRecord(id={self.id}, parent_id={self.parent_id}, version={self.version})>"

    def to_dict(self) -> dict:
        """Convert record to dictionary for API responses."""
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "version": self.version,
            "user_id": self.user_id,
            "original_input": self.original_input,
            "generated_prompt": self.generated_prompt,
            "mode": self.mode,
            "questions_snapshot": self.questions_snapshot,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
