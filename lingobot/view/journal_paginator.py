"""
Paged view of a learner's journal.

Each saved word becomes one page with its definition, recall quality and
practice times. Words whose definition cannot be resolved are left out of the
page rather than failing it.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from lingobot.errors import LookupFailed
from lingobot.logger_module import get_logger
from lingobot.quiz.presentation import Page, PageField
from lingobot.srs.card import JournalEntry
from lingobot.utils import format_relative, render_quality

logger = get_logger("lingobot")


class JournalPaginator:
    def __init__(self, journal, word_cache, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.journal = journal
        self.word_cache = word_cache
        self._clock = clock

    def get_page(self, learner_id: str, page: int, count: int) -> list[Page]:
        """
        Gets a page of a learner's journal.

        Args:
            learner_id: The learner to get the journal of
            page: The page number. Starts from 0
            count: Words per page

        Returns:
            A list of pages, one per word
        """
        if not self.journal.exists(learner_id):
            return []

        now = self._clock()
        pages = []
        for entry in self.journal.recent_entries(learner_id, page, count):
            rendered = self.render_entry(entry, now)
            if rendered is not None:
                pages.append(rendered)
        return pages

    def render_entry(self, entry: JournalEntry, now: Optional[datetime] = None) -> Optional[Page]:
        try:
            cached = self.word_cache.get(entry.word)
        except LookupFailed as e:
            logger.warning(f"Leaving '{entry.word}' out of the journal page: {e}")
            return None

        definition = cached.sense(entry.definition_index)
        if definition is None:
            logger.debug(f"Definition #{entry.definition_index} of '{entry.word}' no longer exists")
            return None

        now = now or self._clock()
        return Page(
            title=entry.word,
            fields=(
                PageField("Part of speech", definition.part_of_speech),
                PageField("Definition", definition.definition),
                PageField("Quality", render_quality(entry.calculate_quality())),
                PageField("Stored time", format_relative(entry.time_added, now), inline=True),
                PageField("Times practiced", str(entry.repetitions), inline=True),
                PageField("Next practice", format_relative(entry.next_practice_time, now), inline=True),
            ),
        )
