"""
Unit tests for the journal page view.
"""

from lingobot.view.journal_paginator import JournalPaginator

LEARNER = "learner-1"


def test_unknown_learner_has_empty_journal(journal, word_cache, dictionary):
    assert JournalPaginator(journal, word_cache).get_page("nobody", 0, 5) == []
    assert dictionary.calls == []


def test_page_fields(journal, word_cache, clock):
    journal.add_word(LEARNER, "apple", definition_index=1)
    clock.advance(days=3)
    journal.record_review(LEARNER, "apple", 4)

    pages = JournalPaginator(journal, word_cache, clock=clock).get_page(LEARNER, 0, 5)

    assert len(pages) == 1
    page = pages[0]
    assert page.title == "apple"
    assert page.value_of("Part of speech") == "verb"
    assert page.value_of("Definition") == "apple meaning 1"
    assert page.value_of("Quality") == "🟩 🟩 🟩 🟩"
    assert page.value_of("Stored time") == "3 days ago"
    assert page.value_of("Times practiced") == "1"
    assert page.value_of("Next practice") == "in 1 day"


def test_entries_with_missing_definitions_are_skipped(journal, word_cache, clock):
    journal.add_word(LEARNER, "apple", definition_index=7)
    clock.advance(seconds=1)
    journal.add_word(LEARNER, "pear")

    pages = JournalPaginator(journal, word_cache, clock=clock).get_page(LEARNER, 0, 5)
    assert [p.title for p in pages] == ["pear"]


def test_entries_failing_lookup_are_skipped(journal, word_cache, dictionary, clock):
    journal.add_word(LEARNER, "apple")
    clock.advance(seconds=1)
    journal.add_word(LEARNER, "pear")
    dictionary.failing.add("apple")

    pages = JournalPaginator(journal, word_cache, clock=clock).get_page(LEARNER, 0, 5)
    assert [p.title for p in pages] == ["pear"]


def test_never_reviewed_word_has_no_quality(journal, word_cache, clock):
    journal.add_word(LEARNER, "apple")
    page = JournalPaginator(journal, word_cache, clock=clock).get_page(LEARNER, 0, 5)[0]
    assert page.value_of("Quality") == "🚫"
    assert page.value_of("Times practiced") == "0"
