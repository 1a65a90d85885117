import pytest
from pydantic import ValidationError

from lingobot.settings import DEFAULT_DICTIONARY_API_URL, Settings


def test_defaults(monkeypatch):
    for name in ("DICTIONARY_API_URL", "QUIZ_IDLE_TIMEOUT", "JOURNAL_PAGE_SIZE", "supabaseUrl", "supabaseKey"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.dictionary_api_url == DEFAULT_DICTIONARY_API_URL
    assert settings.quiz_idle_timeout == 900
    assert settings.journal_page_size == 5
    assert settings.supabase_url is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("QUIZ_IDLE_TIMEOUT", "60")
    monkeypatch.setenv("WORD_CACHE_MAX_ENTRIES", "10")
    monkeypatch.setenv("supabaseUrl", "https://example.supabase.co")
    settings = Settings.from_env()
    assert settings.quiz_idle_timeout == 60.0
    assert settings.word_cache_max_entries == 10
    assert settings.supabase_url == "https://example.supabase.co"


@pytest.mark.parametrize("name, value", [("JOURNAL_PAGE_SIZE", "0"), ("DICTIONARY_TIMEOUT", "-1"), ("WORD_CACHE_TTL", "soon")])
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings.from_env()
