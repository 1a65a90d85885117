"""
Unit tests for the dictionary HTTP client.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from lingobot.errors import DictionaryError
from lingobot.word.word_utils import DictionaryClient, parse_senses

APPLE_PAYLOAD = [
    {
        "word": "apple",
        "meanings": [
            {
                "partOfSpeech": "noun",
                "definitions": [
                    {"definition": "A common, round fruit."},
                    {"definition": "  "},
                    {"definition": "The tree of the apple."},
                ],
            },
            {"partOfSpeech": "verb", "definitions": [{"definition": "To pick apples."}]},
        ],
    },
    {"word": "apple", "meanings": [{"definitions": [{"definition": "Something apple-shaped."}]}]},
]


def _response(status_code, payload=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


def test_parse_senses_flattens_in_order():
    senses = parse_senses(APPLE_PAYLOAD)

    assert [s.index for s in senses] == [0, 1, 2, 3]
    assert senses[0].definition == "A common, round fruit."
    assert senses[1].definition == "The tree of the apple."
    assert senses[2].part_of_speech == "verb"
    assert senses[3].part_of_speech == "unknown"


@patch("lingobot.word.word_utils.requests.get")
def test_fetch_definitions(mock_get):
    mock_get.return_value = _response(200, APPLE_PAYLOAD)
    client = DictionaryClient("https://dict.example/api/", timeout=3)

    senses = client.fetch_definitions("apple")

    assert len(senses) == 4
    mock_get.assert_called_once_with("https://dict.example/api/apple", timeout=3)


@patch("lingobot.word.word_utils.requests.get")
def test_word_is_url_quoted(mock_get):
    mock_get.return_value = _response(200, APPLE_PAYLOAD)
    DictionaryClient("https://dict.example").fetch_definitions("ice cream")
    assert mock_get.call_args[0][0] == "https://dict.example/ice%20cream"


@patch("lingobot.word.word_utils.requests.get")
def test_unknown_word(mock_get):
    mock_get.return_value = _response(404, {"title": "No Definitions Found"})
    with pytest.raises(DictionaryError, match="No definitions"):
        DictionaryClient("https://dict.example").fetch_definitions("qwxz")


@patch("lingobot.word.word_utils.requests.get")
def test_server_error(mock_get):
    mock_get.return_value = _response(503)
    with pytest.raises(DictionaryError, match="503"):
        DictionaryClient("https://dict.example").fetch_definitions("apple")


@patch("lingobot.word.word_utils.requests.get")
def test_transport_error(mock_get):
    mock_get.side_effect = requests.ConnectionError("boom")
    with pytest.raises(DictionaryError) as excinfo:
        DictionaryClient("https://dict.example").fetch_definitions("apple")
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


@patch("lingobot.word.word_utils.requests.get")
def test_empty_payload(mock_get):
    mock_get.return_value = _response(200, [])
    with pytest.raises(DictionaryError):
        DictionaryClient("https://dict.example").fetch_definitions("apple")
