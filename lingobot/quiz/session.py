"""
Interactive quiz sessions.

A session walks a learner through an ordered set of questions:

    AwaitingReveal --reveal--> AwaitingRating --rate--> AwaitingReveal | Finished

The engine owns the live-session registry (learner id -> session). Events for
one learner are serialized by a per-learner lock; different learners never
share a lock. State transitions are authoritative, rendering is best-effort:
a failed render is logged and never rolls a transition back.
"""

from __future__ import annotations

import threading
import uuid
import weakref
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from lingobot.errors import (
    InvalidTransition,
    JournalEntryNotFound,
    LookupFailed,
    SessionExpired,
)
from lingobot.logger_module import get_logger
from lingobot.quiz.content import Question, QuizContent, build_content
from lingobot.quiz.presentation import (
    ChatPresenter,
    Control,
    Page,
    PageField,
    rating_controls,
    reveal_controls,
)
from lingobot.srs.scheduler import validate_quality
from lingobot.utils import render_quality

logger = get_logger("lingobot")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(str, Enum):
    AWAITING_REVEAL = "awaiting_reveal"
    AWAITING_RATING = "awaiting_rating"
    FINISHED = "finished"


@dataclass
class QuizSession:
    """
    One learner's run through a quiz.

    Attributes:
        learner_id: Learner taking the quiz
        target: Where the chat layer renders pages (e.g. a private channel)
        content: Quiz content variant
        session_id: Handle the chat layer attaches to controls
        current_index: Question being asked
        state: Current state
        last_message_handle: Outstanding interactive message, if any
        last_activity: Time of the last accepted event
        ratings: Qualities given so far, in order
        last_render_error: Why the latest page could not be rendered, if it could not
    """

    learner_id: str
    target: Any
    content: QuizContent
    last_activity: datetime
    session_id: str = field(default_factory=lambda: f"qz-{uuid.uuid4()}")
    current_index: int = 0
    state: SessionState = SessionState.AWAITING_REVEAL
    last_message_handle: Optional[str] = None
    ratings: list[int] = field(default_factory=list)
    last_render_error: Optional[Exception] = None

    @property
    def finished(self) -> bool:
        return self.state == SessionState.FINISHED

    @property
    def remaining(self) -> int:
        return len(self.content) - self.current_index


class QuizEngine:
    def __init__(
        self,
        journal,
        word_cache,
        presenter: ChatPresenter,
        idle_timeout: float = 900,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Args:
            journal: Journal store receiving the reviews
            word_cache: Word cache used to build journal quizzes
            presenter: Chat presentation collaborator
            idle_timeout: Seconds without events after which a session is abandoned
            clock: Source of the current time
        """
        self.journal = journal
        self.word_cache = word_cache
        self.presenter = presenter
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._sessions: dict[str, QuizSession] = {}
        self._registry_lock = threading.Lock()
        self._learner_locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    @classmethod
    def from_settings(cls, journal, word_cache, presenter: ChatPresenter, settings) -> QuizEngine:
        return cls(journal, word_cache, presenter, idle_timeout=settings.quiz_idle_timeout)

    def start(self, learner_id: str, target: Any, content: QuizContent) -> QuizSession:
        """
        Start a quiz, replacing any session the learner already has.

        Controls of the replaced session stop working: their events fail with SessionExpired.
        """
        if len(content) == 0:
            raise ValueError("A quiz needs at least one question")

        with self._learner_lock(learner_id):
            session = QuizSession(learner_id=learner_id, target=target, content=content, last_activity=self._clock())
            with self._registry_lock:
                previous = self._sessions.get(learner_id)
                self._sessions[learner_id] = session

            if previous is not None:
                logger.info(f"Quiz {previous.session_id} of {learner_id} replaced by {session.session_id}")
                self._delete_outstanding(previous)
            logger.info(f"Quiz {session.session_id} ({content.kind}, {len(content)} questions) started for {learner_id}")

            self._render(session, content.start, reveal_controls())
            return session

    def start_journal_quiz(
        self,
        learner_id: str,
        target: Any,
        limit: int = 10,
        kind: str = "flashcard",
    ) -> Optional[QuizSession]:
        """
        Start a quiz over the learner's due journal words.

        Returns:
            The new session, or None when nothing is due
        """
        entries = self.journal.due_entries(learner_id, limit=limit)
        if not entries:
            logger.info(f"No words due for {learner_id}")
            return None
        questions = [Question(word=e.word, definition_index=e.definition_index) for e in entries]
        return self.start(learner_id, target, build_content(kind, questions, self.word_cache))

    def reveal(self, learner_id: str, session_id: str) -> QuizSession:
        """
        Show the answer of the current question.

        Raises:
            SessionExpired: If session_id is not the learner's live session
            InvalidTransition: If the answer is already shown
        """
        with self._learner_lock(learner_id):
            session = self._live_session(learner_id, session_id)
            if session.state != SessionState.AWAITING_REVEAL:
                raise InvalidTransition("reveal", session.state.value)

            session.state = SessionState.AWAITING_RATING
            session.last_activity = self._clock()
            number = session.current_index
            self._render(session, lambda: session.content.show_answer(number), rating_controls())
            return session

    def rate(self, learner_id: str, session_id: str, quality: int) -> QuizSession:
        """
        Record the learner's rating of the current question and move on.

        The review is persisted before the session advances; if persisting fails
        the session stays in AWAITING_RATING so the learner can rate again.

        Raises:
            SessionExpired: If session_id is not the learner's live session
            InvalidTransition: If the answer has not been revealed yet
            InvalidQuality: If quality is outside 0..5
            PersistenceFailure: If the review could not be saved
        """
        with self._learner_lock(learner_id):
            session = self._live_session(learner_id, session_id)
            if session.state != SessionState.AWAITING_RATING:
                raise InvalidTransition("rate", session.state.value)
            quality = validate_quality(quality)

            word = session.content.word_at(session.current_index)
            try:
                self.journal.record_review(learner_id, word, quality)
            except JournalEntryNotFound:
                logger.warning(f"'{word}' left the journal of {learner_id} during the quiz, rating not recorded")

            session.ratings.append(quality)
            session.current_index += 1
            session.last_activity = self._clock()

            if session.current_index < len(session.content):
                session.state = SessionState.AWAITING_REVEAL
                number = session.current_index
                self._render(session, lambda: session.content.show_question(number), reveal_controls())
            else:
                session.state = SessionState.FINISHED
                self._remove(session)
                logger.info(f"Quiz {session.session_id} of {learner_id} finished")
                self._render(session, lambda: self._summary_page(session), [])
            return session

    def get_session(self, learner_id: str) -> Optional[QuizSession]:
        """The learner's live session, or None. Idle sessions are evicted on access."""
        with self._registry_lock:
            session = self._sessions.get(learner_id)
        if session is not None and self._is_idle(session):
            self._evict(session)
            return None
        return session

    def evict_idle(self) -> int:
        """Drop every idle session and return how many were dropped."""
        with self._registry_lock:
            idle = [s for s in self._sessions.values() if self._is_idle(s)]
        for session in idle:
            self._evict(session)
        return len(idle)

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._sessions)

    def _learner_lock(self, learner_id: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._learner_locks.get(learner_id)
            if lock is None:
                lock = threading.RLock()
                self._learner_locks[learner_id] = lock
            return lock

    def _live_session(self, learner_id: str, session_id: str) -> QuizSession:
        with self._registry_lock:
            session = self._sessions.get(learner_id)
        if session is None or session.session_id != session_id:
            raise SessionExpired(learner_id, session_id)
        if self._is_idle(session):
            self._evict(session)
            raise SessionExpired(learner_id, session_id)
        return session

    def _is_idle(self, session: QuizSession) -> bool:
        return (self._clock() - session.last_activity).total_seconds() > self.idle_timeout

    def _evict(self, session: QuizSession) -> None:
        if self._remove(session):
            logger.info(f"Quiz {session.session_id} of {session.learner_id} abandoned after inactivity")
            self._delete_outstanding(session)

    def _remove(self, session: QuizSession) -> bool:
        """Drop session from the registry unless it was already replaced."""
        with self._registry_lock:
            if self._sessions.get(session.learner_id) is session:
                del self._sessions[session.learner_id]
                return True
        return False

    def _render(self, session: QuizSession, build: Callable[[], Page], controls: Sequence[Control]) -> None:
        """
        Replace the session's outstanding message with a new page.

        When the page cannot be built because a lookup failed, a bare page naming
        the word is sent instead so the controls of the new state stay reachable.
        """
        error = None
        try:
            page = build()
        except LookupFailed as e:
            logger.warning(f"Definition unavailable for quiz {session.session_id}: {e}")
            error = e
            page = self._fallback_page(session)

        self._delete_outstanding(session)
        try:
            session.last_message_handle = self.presenter.render_prompt(session.target, page, controls)
        except Exception as e:
            logger.warning(f"Rendering quiz {session.session_id} failed: {e}")
            error = e
        session.last_render_error = error

    def _delete_outstanding(self, session: QuizSession) -> None:
        handle, session.last_message_handle = session.last_message_handle, None
        if handle is None:
            return
        try:
            self.presenter.delete_message(session.target, handle)
        except Exception as e:
            logger.warning(f"Deleting message {handle} of quiz {session.session_id} failed: {e}")

    @staticmethod
    def _fallback_page(session: QuizSession) -> Page:
        return Page(
            title=session.content.word_at(session.current_index),
            description="Definition unavailable",
        )

    @staticmethod
    def _summary_page(session: QuizSession) -> Page:
        average = round(sum(session.ratings) / len(session.ratings)) if session.ratings else 0
        return Page(
            title="Quiz finished",
            description="Great job! Your journal has been updated.",
            fields=(
                PageField("Words reviewed", str(len(session.ratings)), inline=True),
                PageField("Average quality", render_quality(average), inline=True),
            ),
        )
