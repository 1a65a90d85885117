"""
srs.card
--------

This module defines the JournalEntry class.

Classes:
    JournalEntry: One saved word in a learner's journal together with its repetition metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

# ratings averaged by calculate_quality
QUALITY_WINDOW = 5


def _parse_datetime(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class JournalEntry:
    """
    Represents a saved word in a learner's journal.

    Attributes:
        learner_id: Platform id of the learner owning the entry.
        word: The normalized word.
        definition_index: Index of the chosen sense in the cached word. A lookup key, not a reference:
            the sense may disappear after a refresh.
        time_added: When the word was saved.
        next_practice_time: When the word is due next.
        repetitions: Consecutive successful reviews.
        quality_history: Ratings given at each review, oldest first.
    """

    learner_id: str
    word: str
    definition_index: int = 0
    time_added: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    next_practice_time: datetime | None = None
    repetitions: int = 0
    quality_history: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.next_practice_time is None:
            # new words are due right away
            self.next_practice_time = self.time_added

    def calculate_quality(self) -> int:
        """Rounded average of the most recent ratings, 0 when the word was never reviewed."""
        recent = self.quality_history[-QUALITY_WINDOW:]
        if not recent:
            return 0
        return round(sum(recent) / len(recent))

    def is_due(self, now: datetime) -> bool:
        return self.next_practice_time <= now

    def to_dict(self) -> dict:
        """
        Returns a JSON-serializable dictionary representation of the entry.

        Returns:
            A dictionary representation of the JournalEntry object.
        """
        return {
            "learner_id": self.learner_id,
            "word": self.word,
            "definition_index": self.definition_index,
            "time_added": self.time_added.isoformat(),
            "next_practice_time": self.next_practice_time.isoformat(),
            "repetitions": self.repetitions,
            "quality_history": list(self.quality_history),
        }

    @staticmethod
    def from_dict(source_dict: dict) -> JournalEntry:
        """
        Creates a JournalEntry object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing entry.

        Returns:
            A JournalEntry object created from the provided dictionary.
        """
        return JournalEntry(
            learner_id=str(source_dict["learner_id"]),
            word=source_dict["word"],
            definition_index=int(source_dict.get("definition_index", 0)),
            time_added=_parse_datetime(source_dict["time_added"]),
            next_practice_time=_parse_datetime(source_dict["next_practice_time"]),
            repetitions=int(source_dict.get("repetitions", 0)),
            quality_history=[int(q) for q in source_dict.get("quality_history") or []],
        )


__all__ = ["JournalEntry"]
