"""
Result/version ledger.

Keeps the generated versions of each prompt family in memory. Version
numbers come from a per-family counter, so deleting a version never frees
its number for reuse.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .exceptions import VersionNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedPromptVersion:
    """Immutable record of one synthesis result."""

    id: str
    version: int
    original_input: str
    generated_text: str
    parent_id: Optional[str] = None
    mode: Optional[str] = None
    questions_snapshot: Optional[Dict[str, str]] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def root_id(self) -> str:
        return self.parent_id or self.id

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "version": self.version,
            "original_input": self.original_input,
            "generated_text": self.generated_text,
            "mode": self.mode,
            "questions_snapshot": dict(self.questions_snapshot) if self.questions_snapshot else None,
            "created_at": self.created_at.isoformat(),
        }


class VersionLedger:
    """In-memory store of prompt families."""

    def __init__(self):
        self._versions: Dict[str, GeneratedPromptVersion] = {}
        self._counters: Dict[str, int] = {}

    def append(
        self,
        original_input: str,
        generated_text: str,
        root_id: Optional[str] = None,
        mode: Optional[str] = None,
        questions_snapshot: Optional[Dict[str, str]] = None,
    ) -> GeneratedPromptVersion:
        """
        Add a version. Without root_id a new family is started and the
        version becomes its root.
        """
        if root_id is not None and root_id not in self._counters:
            raise VersionNotFoundError(f"Prompt family {root_id} not found")

        version_id = str(uuid.uuid4())
        family = root_id or version_id
        number = self._counters.get(family, 0) + 1
        self._counters[family] = number

        version = GeneratedPromptVersion(
            id=version_id,
            version=number,
            original_input=original_input,
            generated_text=generated_text,
            parent_id=root_id,
            mode=mode,
            questions_snapshot=dict(questions_snapshot) if questions_snapshot else None,
        )
        self._versions[version_id] = version
        logger.debug(f"Appended version {number} to family {family}")
        return version

    def get(self, version_id: str) -> GeneratedPromptVersion:
        try:
            return self._versions[version_id]
        except KeyError:
            raise VersionNotFoundError(f"Version {version_id} not found")

    def list_family(self, root_id: str) -> List[GeneratedPromptVersion]:
        """All surviving versions of a family, oldest first."""
        return sorted(
            (v for v in self._versions.values() if v.root_id == root_id),
            key=lambda v: v.version,
        )

    def latest(self, root_id: str) -> Optional[GeneratedPromptVersion]:
        family = self.list_family(root_id)
        return family[-1] if family else None

    def delete(self, version_id: str) -> List[str]:
        """
        Delete a version. Deleting a root removes its whole family.

        Returns:
            Ids of the removed versions
        """
        version = self.get(version_id)
        if version.is_root:
            removed = [v.id for v in self.list_family(version.id)]
            self._counters.pop(version.id, None)
        else:
            removed = [version.id]
        for vid in removed:
            del self._versions[vid]
        logger.debug(f"Deleted {len(removed)} version(s) starting at {version_id}")
        return removed

    def __len__(self) -> int:
        return len(self._versions)
