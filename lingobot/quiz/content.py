"""
Quiz content variants.

Each variant knows how to show question n and answer n; the session engine
only deals with indexes and never with what a question looks like.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from lingobot.errors import LookupFailed
from lingobot.quiz.presentation import Page, PageField
from lingobot.word.cache import Sense, WordCache


@dataclass(frozen=True)
class Question:
    word: str
    definition_index: int = 0


class QuizContent(Protocol):
    kind: str

    def __len__(self) -> int: ...

    def word_at(self, number: int) -> str: ...

    def show_question(self, number: int) -> Page: ...

    def show_answer(self, number: int) -> Page: ...

    def start(self) -> Page: ...


def lookup_sense(word_cache: WordCache, question: Question) -> Sense:
    """
    Resolve the (word, definition index) pair of a question.

    Raises:
        LookupFailed: If the word cannot be fetched or the sense is gone after a refresh
    """
    entry = word_cache.get(question.word)
    sense = entry.sense(question.definition_index)
    if sense is None:
        raise LookupFailed(question.word, f"definition #{question.definition_index} is no longer available")
    return sense


class FlashcardDeck:
    """Shows the word, reveals its definition."""

    kind = "flashcard"

    def __init__(self, questions: Sequence[Question], word_cache: WordCache):
        self.questions = list(questions)
        self.word_cache = word_cache

    def __len__(self) -> int:
        return len(self.questions)

    def word_at(self, number: int) -> str:
        return self.questions[number].word

    def show_question(self, number: int) -> Page:
        question = self.questions[number]
        return Page(
            title=question.word,
            description="Do you remember what this word means?",
            fields=(PageField("Card", f"{number + 1}/{len(self)}", inline=True),),
        )

    def show_answer(self, number: int) -> Page:
        question = self.questions[number]
        sense = lookup_sense(self.word_cache, question)
        return Page(
            title=question.word,
            description="How well did you remember it?",
            fields=(
                PageField("Part of speech", sense.part_of_speech),
                PageField("Definition", sense.definition),
            ),
        )

    def start(self) -> Page:
        return self.show_question(0)


class ReverseFlashcardDeck:
    """Shows a definition, reveals the word it belongs to."""

    kind = "reverse"

    def __init__(self, questions: Sequence[Question], word_cache: WordCache):
        self.questions = list(questions)
        self.word_cache = word_cache

    def __len__(self) -> int:
        return len(self.questions)

    def word_at(self, number: int) -> str:
        return self.questions[number].word

    def show_question(self, number: int) -> Page:
        sense = lookup_sense(self.word_cache, self.questions[number])
        return Page(
            title=f"Which word is this? ({number + 1}/{len(self)})",
            fields=(
                PageField("Part of speech", sense.part_of_speech),
                PageField("Definition", sense.definition),
            ),
        )

    def show_answer(self, number: int) -> Page:
        return Page(title=self.questions[number].word, description="How well did you remember it?")

    def start(self) -> Page:
        return self.show_question(0)


CONTENT_KINDS = {
    FlashcardDeck.kind: FlashcardDeck,
    ReverseFlashcardDeck.kind: ReverseFlashcardDeck,
}


def build_content(kind: str, questions: Sequence[Question], word_cache: WordCache) -> QuizContent:
    try:
        factory = CONTENT_KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown quiz kind '{kind}', expected one of {sorted(CONTENT_KINDS)}") from None
    return factory(questions, word_cache)
