"""
Learner journals: saved words with their repetition metadata.

Every write is a read-modify-write of the learner's document, conditional on
the version read. Reviews of the same (learner, word) are additionally
serialized by a per-key lock so a repetition is never counted twice.
"""

from __future__ import annotations

import dataclasses
import threading
import uuid
import weakref
from datetime import datetime, timezone
from typing import Callable, Optional

from lingobot.errors import (
    DocumentStoreError,
    JournalEntryNotFound,
    PersistenceFailure,
    VersionConflict,
)
from lingobot.logger_module import get_logger
from lingobot.srs.card import JournalEntry
from lingobot.srs.scheduler import next_interval, next_practice_time, validate_quality
from lingobot.word.cache import normalize_word

logger = get_logger("lingobot")

# re-reads allowed when another writer got in first
MAX_CONFLICT_RETRIES = 32
# ids of the latest reviews kept in a document to recognize a replayed write
RECENT_REVIEW_IDS = 64


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JournalStore:
    def __init__(
        self,
        documents,
        retries: int = 1,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Args:
            documents: Persistence collaborator (see db.documents.DocumentStore)
            retries: Extra attempts after the store fails before giving up
            clock: Source of the current time
        """
        self.documents = documents
        self.retries = retries
        self._clock = clock
        self._key_locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
        self._key_locks_guard = threading.Lock()

    def exists(self, learner_id: str) -> bool:
        document, _ = self._load(learner_id)
        return document is not None

    def get_entry(self, learner_id: str, word: str) -> Optional[JournalEntry]:
        document, _ = self._load(learner_id)
        raw = (document or {}).get("words", {}).get(normalize_word(word))
        return JournalEntry.from_dict(raw) if raw else None

    def entries(self, learner_id: str) -> list[JournalEntry]:
        """All entries of a learner, due-soonest first."""
        document, _ = self._load(learner_id)
        if document is None:
            return []
        entries = [JournalEntry.from_dict(raw) for raw in document.get("words", {}).values()]
        entries.sort(key=lambda e: (e.next_practice_time, e.word))
        return entries

    def recent_entries(self, learner_id: str, page: int, page_size: int) -> list[JournalEntry]:
        """
        One page of a learner's journal ordered by next practice time, due-soonest first.

        Args:
            learner_id: Learner id
            page: Page number, starting from 0
            page_size: Entries per page

        Returns:
            The entries of the page (empty past the end)
        """
        if page < 0:
            raise ValueError(f"Page cannot be negative: {page}")
        if page_size < 1:
            raise ValueError(f"Page size must be >= 1, got {page_size}")
        start = page * page_size
        return self.entries(learner_id)[start : start + page_size]

    def due_entries(self, learner_id: str, now: Optional[datetime] = None, limit: Optional[int] = None) -> list[JournalEntry]:
        now = now or self._clock()
        due = [e for e in self.entries(learner_id) if e.is_due(now)]
        return due[:limit] if limit else due

    def upsert(self, entry: JournalEntry) -> JournalEntry:
        """Insert or replace an entry in its learner's journal."""
        entry = dataclasses.replace(entry, word=normalize_word(entry.word), quality_history=list(entry.quality_history))

        def write(document: dict) -> JournalEntry:
            document["words"][entry.word] = entry.to_dict()
            return entry

        with self._key_lock(entry.learner_id, entry.word):
            return self._update(entry.learner_id, write)

    def add_word(self, learner_id: str, word: str, definition_index: int = 0) -> JournalEntry:
        """Save a word, due right away. Saving a word already in the journal keeps its progress."""
        key = normalize_word(word)

        def write(document: dict) -> JournalEntry:
            existing = document["words"].get(key)
            if existing:
                return JournalEntry.from_dict(existing)
            entry = JournalEntry(learner_id=learner_id, word=key, definition_index=definition_index, time_added=self._clock())
            document["words"][key] = entry.to_dict()
            return entry

        with self._key_lock(learner_id, key):
            entry = self._update(learner_id, write)
        logger.info(f"Learner {learner_id} saved '{key}'")
        return entry

    def remove_word(self, learner_id: str, word: str) -> bool:
        key = normalize_word(word)
        if not self.exists(learner_id):
            return False

        def write(document: dict) -> bool:
            return document["words"].pop(key, None) is not None

        with self._key_lock(learner_id, key):
            return self._update(learner_id, write)

    def record_review(self, learner_id: str, word: str, quality: int) -> JournalEntry:
        """
        Apply a review to a journal entry and persist it.

        Args:
            learner_id: Learner id
            word: Reviewed word
            quality: Recall quality 0..5

        Returns:
            The updated entry

        Raises:
            InvalidQuality: If quality is outside 0..5
            JournalEntryNotFound: If the word is not in the journal
            PersistenceFailure: If the store stays unavailable after retrying
        """
        quality = validate_quality(quality)
        key = normalize_word(word)
        review_id = uuid.uuid4().hex

        def review(document: dict) -> JournalEntry:
            raw = document["words"].get(key)
            if raw is None:
                raise JournalEntryNotFound(learner_id, key)
            entry = JournalEntry.from_dict(raw)
            applied = document.setdefault("applied_reviews", [])
            if review_id in applied:
                # an earlier attempt was written before the store reported failure
                return entry
            applied.append(review_id)
            del applied[:-RECENT_REVIEW_IDS]
            repetitions, interval_days = next_interval(entry.repetitions, quality)
            entry.repetitions = repetitions
            entry.next_practice_time = next_practice_time(entry.next_practice_time, self._clock(), interval_days)
            entry.quality_history.append(quality)
            document["words"][key] = entry.to_dict()
            return entry

        with self._key_lock(learner_id, key):
            entry = self._update(learner_id, review)
        logger.info(
            f"Review of '{key}' by {learner_id}: quality={quality}, repetitions={entry.repetitions}, "
            f"next={entry.next_practice_time.isoformat()}"
        )
        return entry

    def _key_lock(self, learner_id: str, word: str) -> threading.Lock:
        with self._key_locks_guard:
            lock = self._key_locks.get((learner_id, word))
            if lock is None:
                lock = threading.Lock()
                self._key_locks[(learner_id, word)] = lock
            return lock

    def _load(self, learner_id: str) -> tuple[Optional[dict], int]:
        failures = 0
        while True:
            try:
                return self.documents.load(learner_id)
            except DocumentStoreError as e:
                failures += 1
                if failures > self.retries:
                    raise PersistenceFailure(f"Journal of learner {learner_id} is unavailable") from e
                logger.warning(f"Loading journal of {learner_id} failed, retrying: {e}")

    def _update(self, learner_id: str, mutate):
        """Run mutate on a fresh copy of the learner's document and write it back conditionally."""
        failures = 0
        conflicts = 0
        while True:
            try:
                document, version = self.documents.load(learner_id)
                if document is None:
                    document = {"learner_id": learner_id, "words": {}}
                result = mutate(document)
                self.documents.save(learner_id, document, version)
                return result
            except VersionConflict as e:
                conflicts += 1
                if conflicts > MAX_CONFLICT_RETRIES:
                    raise PersistenceFailure(f"Journal of learner {learner_id} kept changing during update") from e
                logger.debug(f"Journal of {learner_id} changed concurrently, re-reading")
            except DocumentStoreError as e:
                failures += 1
                if failures > self.retries:
                    logger.error(f"Journal of {learner_id} could not be written: {e}")
                    raise PersistenceFailure(f"Journal of learner {learner_id} could not be written") from e
                logger.warning(f"Writing journal of {learner_id} failed, retrying: {e}")
