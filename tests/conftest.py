"""
Shared pytest fixtures for the learning core tests.
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from lingobot.db.db_journal import JournalStore
from lingobot.db.documents import MemoryDocumentStore
from lingobot.word.cache import Sense, WordCache


class FakeClock:
    """Settable clock; call it to read the current time."""

    def __init__(self, start: datetime = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingPresenter:
    """Chat presenter that keeps every page it is asked to show."""

    def __init__(self):
        self.sent = []
        self.deleted = []
        self.live = set()
        self._ids = itertools.count(1)

    def render_prompt(self, target, content, controls):
        handle = f"msg-{next(self._ids)}"
        self.sent.append({"target": target, "page": content, "controls": list(controls), "handle": handle})
        self.live.add(handle)
        return handle

    def delete_message(self, target, message_handle):
        self.deleted.append(message_handle)
        self.live.discard(message_handle)

    @property
    def last_page(self):
        return self.sent[-1]["page"]

    @property
    def last_controls(self):
        return self.sent[-1]["controls"]


def make_senses(word: str, count: int = 2) -> list[Sense]:
    return [
        Sense(index=i, part_of_speech="noun" if i == 0 else "verb", definition=f"{word} meaning {i}")
        for i in range(count)
    ]


class FakeDictionary:
    """Dictionary collaborator returning generated senses and counting calls."""

    def __init__(self):
        self.calls = []
        self.failing = set()

    def __call__(self, word: str):
        self.calls.append(word)
        if word in self.failing:
            raise ConnectionError(f"dictionary unreachable for {word}")
        return make_senses(word)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def dictionary():
    return FakeDictionary()


@pytest.fixture
def word_cache(dictionary, clock):
    return WordCache(dictionary, clock=clock)


@pytest.fixture
def documents():
    return MemoryDocumentStore()


@pytest.fixture
def journal(documents, clock):
    return JournalStore(documents, clock=clock)
