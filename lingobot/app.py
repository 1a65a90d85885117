"""
Wiring of the learning core.

The chat layer builds one LearningCore at startup and forwards slash commands
and control presses to it.
"""

from dataclasses import dataclass
from typing import Optional

from lingobot import get_dictionary_client, logger
from lingobot.db.client import get_supabase_client
from lingobot.db.db_journal import JournalStore
from lingobot.db.documents import MemoryDocumentStore, SupabaseDocumentStore
from lingobot.quiz.presentation import ChatPresenter
from lingobot.quiz.session import QuizEngine
from lingobot.settings import Settings, get_settings
from lingobot.view.journal_paginator import JournalPaginator
from lingobot.word.cache import WordCache


@dataclass
class LearningCore:
    word_cache: WordCache
    journal: JournalStore
    quizzes: QuizEngine
    paginator: JournalPaginator


def build_core(presenter: ChatPresenter, documents=None, settings: Optional[Settings] = None) -> LearningCore:
    """
    Build the learning core.

    Args:
        presenter: Chat presentation collaborator
        documents: Document store for journals (default: Supabase when configured, otherwise in-memory)
        settings: Settings to use (default: loaded from the environment)

    Returns:
        The wired LearningCore
    """
    settings = settings or get_settings()

    if documents is None:
        if settings.supabase_url and settings.supabase_key:
            documents = SupabaseDocumentStore(get_supabase_client())
            logger.info("Journals stored in Supabase")
        else:
            documents = MemoryDocumentStore()
            logger.warning("Supabase is not configured, journals are kept in memory")

    word_cache = WordCache.from_settings(get_dictionary_client().fetch_definitions, settings)
    journal = JournalStore(documents, retries=settings.persistence_retries)
    quizzes = QuizEngine.from_settings(journal, word_cache, presenter, settings)
    paginator = JournalPaginator(journal, word_cache)
    return LearningCore(word_cache=word_cache, journal=journal, quizzes=quizzes, paginator=paginator)
