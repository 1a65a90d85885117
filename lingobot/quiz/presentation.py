"""
Abstract chat output.

The core never talks to the chat platform directly. It produces Pages with
Controls and hands them to a ChatPresenter, which maps them to whatever the
platform offers (embeds and buttons, cards, plain text) and maps control
presses back to QuizEngine.reveal / QuizEngine.rate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from lingobot.srs.scheduler import MAX_QUALITY, MIN_QUALITY
from lingobot.utils import keycap

REVEAL = "reveal"
RATE = "rate"

DEFAULT_COLOR = 39129


@dataclass(frozen=True)
class PageField:
    name: str
    value: str
    inline: bool = False


@dataclass(frozen=True)
class Page:
    title: str
    description: str = ""
    fields: tuple[PageField, ...] = ()
    color: int = DEFAULT_COLOR

    def value_of(self, name: str) -> Optional[str]:
        return next((f.value for f in self.fields if f.name == name), None)


@dataclass(frozen=True)
class Control:
    """A trigger shown with a page. `quality` is set for rating controls only."""

    action: str
    label: str
    quality: Optional[int] = None

    @property
    def control_id(self) -> str:
        if self.action == RATE:
            return f"flashcard-answer-{self.quality}"
        return f"flashcard-{self.action}"


def reveal_controls() -> list[Control]:
    return [Control(action=REVEAL, label="Reveal")]


def rating_controls() -> list[Control]:
    return [Control(action=RATE, label=keycap(q), quality=q) for q in range(MIN_QUALITY, MAX_QUALITY + 1)]


class ChatPresenter(Protocol):
    def render_prompt(self, target: Any, content: Page, controls: Sequence[Control]) -> str:
        """Send a page with its controls to target and return the handle of the sent message."""
        ...

    def delete_message(self, target: Any, message_handle: str) -> None:
        ...
