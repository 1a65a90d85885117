"""
lingobot
--------

Spaced-repetition vocabulary core of the language-learning chat bot: the
learner journal, the word-definition cache, the review scheduler and the
interactive quiz engine.
"""

from dotenv import load_dotenv

from .logger_module import setup_logger
from .settings import get_settings

load_dotenv()

# Setup logger
logger = setup_logger(level=get_settings().log_level)

if "_dictionary_client" not in globals():
    _dictionary_client = None


def get_dictionary_client():
    """Return the process-wide dictionary client, creating it on first use."""
    global _dictionary_client
    if _dictionary_client is None:
        from .word.word_utils import DictionaryClient

        settings = get_settings()
        _dictionary_client = DictionaryClient(
            base_url=settings.dictionary_api_url,
            timeout=settings.dictionary_timeout,
        )
        logger.info("Dictionary client initialized")
    return _dictionary_client
