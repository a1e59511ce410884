import pytest

from studyflow.agents.json_extract import extract_json_payload, find_fenced_block
from studyflow.errors import MalformedModelOutput


def test_fenced_json_block_ignores_surrounding_prose():
    text = 'I searched the web. {"decoy": true}\n```json\n{"resources": [1, 2]}\n```\nEnjoy!'
    assert extract_json_payload(text) == {"resources": [1, 2]}


def test_untagged_fence_is_accepted():
    text = "```\n{\"resources\": []}\n```"
    assert extract_json_payload(text) == {"resources": []}


def test_unfenced_text_is_parsed_whole():
    assert extract_json_payload('  {"a": [1, {"b": 2}]}  \n') == {"a": [1, {"b": 2}]}


def test_first_balanced_object_when_prose_wraps_unfenced_json():
    text = 'Sure! Here you go: {"title": "use {braces} in strings", "n": 1} Let me know.'
    assert extract_json_payload(text) == {"title": "use {braces} in strings", "n": 1}


def test_broken_fence_does_not_fall_back_to_prose():
    text = '{"ok": true}\n```json\n{"resources": [\n```'
    with pytest.raises(MalformedModelOutput) as exc:
        extract_json_payload(text)
    assert exc.value.raw_text == text


def test_no_json_anywhere():
    with pytest.raises(MalformedModelOutput) as exc:
        extract_json_payload("I could not find anything useful, sorry.")
    assert "sorry" in exc.value.raw_text


def test_find_fenced_block_none_without_fence():
    assert find_fenced_block('{"a": 1}') is None
