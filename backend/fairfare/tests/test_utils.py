"""
Tests for JSON extraction from model replies.
"""
import pytest
from fairfare.core.utils import extract_json_object, find_json_object


def test_plain_json():
    assert extract_json_object('{"a": 1}') == {"a": 1}


def test_markdown_fenced_json():
    text = 'Here you go:\n```json\n{"food": [{"name": "Thali"}], "travel_tips": []}\n```\nEnjoy!'
    assert extract_json_object(text) == {"food": [{"name": "Thali"}], "travel_tips": []}


def test_first_balanced_object_only():
    text = 'First {"a": {"b": 2}} then {"c": 3}'
    assert find_json_object(text) == '{"a": {"b": 2}}'


def test_braces_inside_strings():
    text = 'x {"desc": "curly } brace { inside", "n": 1} y'
    assert extract_json_object(text) == {"desc": "curly } brace { inside", "n": 1}


def test_escaped_quote_inside_string():
    text = '{"desc": "say \\"hi\\" }", "n": 2}'
    assert extract_json_object(text)["n"] == 2


def test_unbalanced_prefix_is_skipped():
    assert find_json_object('{ oops {"ok": true}') == '{"ok": true}'


def test_first_region_must_parse():
    with pytest.raises(ValueError):
        extract_json_object('{ oops } {"ok": true}')


@pytest.mark.parametrize("text", ["", "no json here", "{ never closed", "[1, 2, 3]"])
def test_missing_object_raises(text):
    with pytest.raises(ValueError):
        extract_json_object(text)


def test_invalid_json_raises():
    with pytest.raises(ValueError):
        extract_json_object("{'single': 'quotes'}")
