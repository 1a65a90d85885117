"""
Dictionary lookups for English words.

This module wraps the public dictionary API and flattens its response into the
ordered list of senses the word cache stores.
"""

from urllib.parse import quote

import requests

from lingobot.errors import DictionaryError
from lingobot.logger_module import get_logger
from lingobot.word.cache import Sense

logger = get_logger("lingobot")


def parse_senses(payload: list[dict]) -> list[Sense]:
    """
    Flatten a dictionary API payload into indexed senses.

    The API returns one block per homograph, each with meanings grouped by part
    of speech. Indexes follow the order of appearance.

    Args:
        payload: Decoded JSON body of a successful lookup

    Returns:
        Ordered list of senses
    """
    senses: list[Sense] = []
    for block in payload:
        for meaning in block.get("meanings", []):
            part_of_speech = meaning.get("partOfSpeech") or "unknown"
            for definition in meaning.get("definitions", []):
                text = (definition.get("definition") or "").strip()
                if not text:
                    continue
                senses.append(Sense(index=len(senses), part_of_speech=part_of_speech, definition=text))
    return senses


class DictionaryClient:
    """Dictionary Lookup Collaborator backed by an HTTP API."""

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch_definitions(self, word: str) -> list[Sense]:
        """
        Query the dictionary API for a word.

        Args:
            word: Normalized word to look up

        Returns:
            Ordered list of senses (never empty)

        Raises:
            DictionaryError: If the API is unreachable, answers with an error
                status or knows no definitions for the word
        """
        logger.debug(f"🔴 Querying dictionary API for word: {word}")
        url = f"{self.base_url}/{quote(word)}"
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"🔴 Dictionary API request failed: {e}")
            raise DictionaryError(f"Dictionary API unreachable: {e}") from e

        if response.status_code == 404:
            logger.debug(f"🔴 No definitions found for '{word}'")
            raise DictionaryError(f"No definitions found for '{word}'")
        if response.status_code != 200:
            logger.error(f"🔴 Dictionary API request failed: {response.status_code}")
            raise DictionaryError(f"Dictionary API returned status {response.status_code}")

        try:
            senses = parse_senses(response.json())
        except (ValueError, AttributeError, TypeError) as e:
            raise DictionaryError(f"Malformed dictionary response for '{word}'") from e

        if not senses:
            raise DictionaryError(f"No definitions found for '{word}'")
        logger.debug(f"🔴 Dictionary API returned {len(senses)} senses for '{word}'")
        return senses
