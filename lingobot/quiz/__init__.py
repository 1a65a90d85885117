"""
quiz
----

Interactive quiz sessions over journal words.
"""

from lingobot.quiz.content import (
    CONTENT_KINDS,
    FlashcardDeck,
    Question,
    QuizContent,
    ReverseFlashcardDeck,
    build_content,
)
from lingobot.quiz.presentation import (
    RATE,
    REVEAL,
    ChatPresenter,
    Control,
    Page,
    PageField,
    rating_controls,
    reveal_controls,
)
from lingobot.quiz.session import QuizEngine, QuizSession, SessionState

__all__ = [
    "CONTENT_KINDS",
    "FlashcardDeck",
    "Question",
    "QuizContent",
    "ReverseFlashcardDeck",
    "build_content",
    "RATE",
    "REVEAL",
    "ChatPresenter",
    "Control",
    "Page",
    "PageField",
    "rating_controls",
    "reveal_controls",
    "QuizEngine",
    "QuizSession",
    "SessionState",
]
