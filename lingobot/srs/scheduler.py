"""
srs.scheduler
-------------

SM-2 style interval scheduling.

A review quality below PASSING_QUALITY resets the repetition count and brings
the word back after the minimum relearning interval. A passing quality
increments the repetition count and grows the interval geometrically by an
ease factor derived from the quality, clamped to MIN_EASE_FACTOR.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import NamedTuple

from lingobot.errors import InvalidQuality

MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3

BASE_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3

# days
MIN_INTERVAL = 1
FIRST_INTERVAL = 1
SECOND_INTERVAL = 6


class Interval(NamedTuple):
    repetitions: int
    interval_days: int


def validate_quality(quality) -> int:
    """Return quality as an int, raising InvalidQuality unless it is an integer in 0..5."""
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQuality(quality)
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidQuality(quality)
    return quality


def ease_factor(quality: int) -> float:
    """Ease factor for a rating, 2.6 for a perfect recall down to the floor for poor ones."""
    miss = MAX_QUALITY - quality
    return max(MIN_EASE_FACTOR, BASE_EASE_FACTOR + (0.1 - miss * (0.08 + miss * 0.02)))


def next_interval(current_repetitions: int, quality: int) -> Interval:
    """
    Compute the repetition count and interval following a review.

    Args:
        current_repetitions: Consecutive successful reviews before this one
        quality: Self-rated recall strength, 0 (blackout) to 5 (perfect)

    Returns:
        Interval with the new repetition count and the interval in days (always >= MIN_INTERVAL)

    Raises:
        InvalidQuality: If quality is not an integer in 0..5
    """
    quality = validate_quality(quality)
    if current_repetitions < 0:
        raise ValueError(f"Repetitions cannot be negative: {current_repetitions}")

    if quality < PASSING_QUALITY:
        return Interval(repetitions=0, interval_days=MIN_INTERVAL)

    repetitions = current_repetitions + 1
    if repetitions == 1:
        days = FIRST_INTERVAL
    elif repetitions == 2:
        days = SECOND_INTERVAL
    else:
        days = round(SECOND_INTERVAL * ease_factor(quality) ** (repetitions - 2))
    return Interval(repetitions=repetitions, interval_days=max(MIN_INTERVAL, days))


def next_practice_time(previous: datetime, now: datetime, interval_days: int) -> datetime:
    """
    Absolute due time for an interval starting now.

    The result is always later than the previous due time, so reviewing a word
    before it is due never moves it backwards.
    """
    candidate = now + timedelta(days=interval_days)
    if candidate <= previous:
        candidate = previous + timedelta(seconds=1)
    return candidate


__all__ = [
    "Interval",
    "next_interval",
    "next_practice_time",
    "ease_factor",
    "validate_quality",
    "PASSING_QUALITY",
    "MIN_INTERVAL",
]
