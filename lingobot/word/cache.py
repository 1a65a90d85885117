"""
Word-definition cache.

Cache-aside memoization of dictionary lookups with a per-word single-flight
gate: concurrent misses for the same word trigger one fetch and every waiter
observes the same outcome. Lookups for different words never wait on each
other.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from lingobot.errors import LookupFailed
from lingobot.logger_module import get_logger

logger = get_logger("lingobot")


class Sense(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    part_of_speech: str
    definition: str


class CachedWordEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    word: str
    senses: tuple[Sense, ...] = Field(default=())
    fetched_at: datetime

    def sense(self, index: int) -> Optional[Sense]:
        """Sense with the given index, or None when a refresh dropped it."""
        return next((s for s in self.senses if s.index == index), None)


def normalize_word(word: str) -> str:
    return word.strip().lower()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Flight:
    """One in-progress fetch that later callers for the same word wait on."""

    def __init__(self):
        self.done = threading.Event()
        self.entry: Optional[CachedWordEntry] = None
        self.error: Optional[LookupFailed] = None

    def outcome(self) -> CachedWordEntry:
        if self.error is not None:
            raise self.error
        assert self.entry is not None
        return self.entry


class WordCache:
    """
    Memoizes dictionary lookups.

    Features:
    - Keys are normalized (trimmed, lower-cased) words
    - Single fetch per word under concurrent misses
    - Stale-but-available fallback when the dictionary fails
    - Optional TTL staleness and LRU bound
    """

    def __init__(
        self,
        fetch: Callable[[str], Sequence[Sense]],
        ttl: float = 0,
        max_entries: int = 0,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Args:
            fetch: Dictionary collaborator, returns the senses of a word or raises
            ttl: Seconds after which an entry is re-fetched (0 = never)
            max_entries: Least-recently-used bound (0 = unbounded)
            clock: Source of the current time
        """
        self._fetch = fetch
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CachedWordEntry] = OrderedDict()
        self._flights: dict[str, _Flight] = {}
        # guards the two maps above, never held while fetching
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, fetch: Callable[[str], Sequence[Sense]], settings) -> WordCache:
        return cls(fetch, ttl=settings.word_cache_ttl, max_entries=settings.word_cache_max_entries)

    def get(self, word: str) -> CachedWordEntry:
        """
        Return the cached entry for a word, fetching it on a miss.

        Raises:
            LookupFailed: If the dictionary failed and nothing is cached
        """
        key = normalize_word(word)
        if not key:
            raise LookupFailed(word, "empty word")

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not self._is_stale(entry):
                self._entries.move_to_end(key)
                return entry
            flight = self._flights.get(key)
            leader = flight is None
            if leader:
                flight = _Flight()
                self._flights[key] = flight

        if not leader:
            logger.debug(f"Waiting on in-flight lookup for '{key}'")
            flight.done.wait()
            return flight.outcome()

        try:
            flight.entry = self._load(key, entry)
        except LookupFailed as e:
            flight.error = e
        finally:
            with self._lock:
                self._flights.pop(key, None)
            flight.done.set()
        return flight.outcome()

    def peek(self, word: str) -> Optional[CachedWordEntry]:
        """Cached entry for a word without fetching, stale or not."""
        with self._lock:
            return self._entries.get(normalize_word(word))

    def invalidate(self, word: str) -> bool:
        with self._lock:
            return self._entries.pop(normalize_word(word), None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_stale(self, entry: CachedWordEntry) -> bool:
        if not self.ttl:
            return False
        return (self._clock() - entry.fetched_at).total_seconds() > self.ttl

    def _load(self, key: str, previous: Optional[CachedWordEntry]) -> CachedWordEntry:
        logger.debug(f"Word cache miss for '{key}'")
        try:
            senses = self._fetch(key)
        except Exception as e:
            if previous is not None:
                logger.warning(f"Dictionary lookup for '{key}' failed, serving cached entry: {e}")
                return previous
            logger.error(f"Dictionary lookup for '{key}' failed: {e}")
            raise LookupFailed(key, str(e)) from e

        entry = CachedWordEntry(word=key, senses=tuple(senses), fetched_at=self._clock())
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while self.max_entries and len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted '{evicted}' from word cache")
        return entry
