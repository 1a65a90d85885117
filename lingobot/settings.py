"""
Runtime settings for the learning core.

Values come from environment variables (a local ``.env`` is loaded by the
package on import) and are validated by pydantic.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_DICTIONARY_API_URL = "https://api.dictionaryapi.dev/api/v2/entries/en"


class Settings(BaseModel):
    dictionary_api_url: str = Field(default=DEFAULT_DICTIONARY_API_URL)
    dictionary_timeout: float = Field(default=10.0, gt=0, description="HTTP timeout for dictionary lookups, in seconds.")
    word_cache_ttl: float = Field(default=7 * 24 * 3600, ge=0, description="Seconds before a cached word is stale. 0 disables staleness.")
    word_cache_max_entries: int = Field(default=5000, ge=0, description="LRU bound for the word cache. 0 means unbounded.")
    quiz_idle_timeout: float = Field(default=900, gt=0, description="Seconds of inactivity after which a quiz is abandoned.")
    journal_page_size: int = Field(default=5, ge=1)
    persistence_retries: int = Field(default=1, ge=0)
    supabase_url: Optional[str] = Field(default=None)
    supabase_key: Optional[str] = Field(default=None)
    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls) -> "Settings":
        env = {
            "dictionary_api_url": os.getenv("DICTIONARY_API_URL"),
            "dictionary_timeout": os.getenv("DICTIONARY_TIMEOUT"),
            "word_cache_ttl": os.getenv("WORD_CACHE_TTL"),
            "word_cache_max_entries": os.getenv("WORD_CACHE_MAX_ENTRIES"),
            "quiz_idle_timeout": os.getenv("QUIZ_IDLE_TIMEOUT"),
            "journal_page_size": os.getenv("JOURNAL_PAGE_SIZE"),
            "persistence_retries": os.getenv("PERSISTENCE_RETRIES"),
            "supabase_url": os.getenv("supabaseUrl"),
            "supabase_key": os.getenv("supabaseKey"),
            "log_level": os.getenv("LOG_LEVEL"),
        }
        # unset variables fall back to the field defaults
        return cls(**{key: value for key, value in env.items() if value is not None})


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
