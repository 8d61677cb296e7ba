"""
Answer accumulator.

Collects answers across rounds keyed by question key. Re-answering a key
overwrites the value in place and keeps the key's original position, so the
serialized block reads in the order questions were first seen.
"""
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerEntry:
    key: str
    value: str
    question_text: str = ""
    topic: Optional[str] = None
    round: int = 1
    custom: bool = False

    @property
    def is_answered(self) -> bool:
        # A custom selection with blank text is not an answer yet
        return bool(self.value and self.value.strip())

    @property
    def label(self) -> str:
        return self.topic or self.question_text or self.key


class AnswerAccumulator:
    """Ordered, last-write-wins store of answers."""

    def __init__(self):
        self._entries: Dict[str, AnswerEntry] = {}

    def record(
        self,
        key: str,
        value: Optional[str],
        *,
        question_text: str = "",
        topic: Optional[str] = None,
        round: int = 1,
        custom: bool = False,
    ) -> AnswerEntry:
        """Store an answer. An empty value records the question as skipped."""
        value = (value or "").strip()
        existing = self._entries.get(key)
        if existing is not None:
            # Position is kept; the entry belongs to the round that answered it last
            entry = replace(
                existing,
                value=value,
                custom=custom,
                question_text=question_text or existing.question_text,
                topic=topic if topic is not None else existing.topic,
                round=round,
            )
            logger.debug(f"Overwriting answer for {key}")
        else:
            entry = AnswerEntry(
                key=key,
                value=value,
                question_text=question_text,
                topic=topic,
                round=round,
                custom=custom,
            )
        self._entries[key] = entry
        return entry

    def get(self, key: str) -> Optional[AnswerEntry]:
        return self._entries.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def answered_count(self) -> int:
        return sum(1 for e in self._entries.values() if e.is_answered)

    def count_answered(self, keys) -> int:
        """Answered entries among the given keys."""
        return sum(
            1 for k in keys
            if k in self._entries and self._entries[k].is_answered
        )

    def count_recorded(self, keys) -> int:
        """Entries among the given keys, answered or skipped."""
        return sum(1 for k in keys if k in self._entries)

    def entries(self, round: Optional[int] = None, answered_only: bool = False) -> List[AnswerEntry]:
        result = list(self._entries.values())
        if round is not None:
            result = [e for e in result if e.round == round]
        if answered_only:
            result = [e for e in result if e.is_answered]
        return result

    def serialize(self, round: Optional[int] = None) -> str:
        """
        Render answered entries as "label: answer" lines.

        Entries from rounds after the first carry the round number so the
        same topic asked twice stays distinguishable.
        """
        lines = []
        for entry in self.entries(round=round, answered_only=True):
            label = entry.label
            if entry.topic and entry.round > 1:
                label = f"{label} (round {entry.round})"
            lines.append(f"{label}: {entry.value}")
        return "\n".join(lines)

    def question_answer_pairs(self, round: Optional[int] = None) -> List[Dict[str, str]]:
        return [
            {"question": e.question_text or e.label, "answer": e.value}
            for e in self.entries(round=round, answered_only=True)
        ]

    def snapshot(self) -> Dict[str, str]:
        """Plain key -> value copy of answered entries."""
        return {e.key: e.value for e in self._entries.values() if e.is_answered}

    def copy(self) -> "AnswerAccumulator":
        clone = AnswerAccumulator()
        clone._entries = dict(self._entries)
        return clone
