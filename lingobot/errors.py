"""
Exceptions raised by the learning core.

Every error is recovered at the operation boundary by the chat layer; none of
them is meant to terminate the bot process.
"""


class LingobotError(Exception):
    """Base class for all learning-core errors."""


class QuizError(LingobotError):
    """An interaction with a quiz session was rejected."""


class InvalidTransition(QuizError):
    """An event arrived while the session was in a state that does not accept it."""

    def __init__(self, event: str, state: str):
        super().__init__(f"Cannot {event} while session is {state}")
        self.event = event
        self.state = state


class SessionExpired(QuizError):
    """The session handle no longer refers to the learner's live session."""

    def __init__(self, learner_id: str, session_id: str | None = None):
        super().__init__(f"Quiz session {session_id or '<none>'} for learner {learner_id} is no longer active")
        self.learner_id = learner_id
        self.session_id = session_id


class InvalidQuality(QuizError, ValueError):
    def __init__(self, quality):
        super().__init__(f"Quality must be an integer between 0 and 5, got {quality!r}")
        self.quality = quality


class LookupFailed(LingobotError, LookupError):
    """The dictionary could not be reached and there is no cached value to fall back on."""

    def __init__(self, word: str, reason: str = ""):
        message = f"Failed to look up '{word}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.word = word


class DictionaryError(LingobotError):
    """Raised by the dictionary client for transport errors and empty results."""


class PersistenceFailure(LingobotError):
    """The journal could not be written after retrying."""


class JournalEntryNotFound(LingobotError, LookupError):
    def __init__(self, learner_id: str, word: str):
        super().__init__(f"'{word}' is not in the journal of learner {learner_id}")
        self.learner_id = learner_id
        self.word = word


class DocumentStoreError(LingobotError):
    """The document backend is unavailable or rejected the request."""


class VersionConflict(DocumentStoreError):
    """A document changed between read and write."""

    def __init__(self, key: str, expected: int, actual: int | None):
        super().__init__(f"Document {key} is at version {actual}, expected {expected}")
        self.key = key
        self.expected = expected
        self.actual = actual
