"""
srs
---

Spaced repetition scheduling for journal words.
"""

from lingobot.srs.card import JournalEntry
from lingobot.srs.scheduler import (
    Interval,
    next_interval,
    next_practice_time,
    ease_factor,
    validate_quality,
    PASSING_QUALITY,
    MIN_INTERVAL,
)

__all__ = [
    "JournalEntry",
    "Interval",
    "next_interval",
    "next_practice_time",
    "ease_factor",
    "validate_quality",
    "PASSING_QUALITY",
    "MIN_INTERVAL",
]
