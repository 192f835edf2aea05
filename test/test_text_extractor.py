import pytest

from llm.text_extractor import extract_json, strip_fences


@pytest.mark.parametrize(
    "text, expected",
    [
        ('{"a": 1, "b": [1, 2]}', {"a": 1, "b": [1, 2]}),
        ("[1, 2, 3]", [1, 2, 3]),
        ('  {"nested": {"x": "y"}}  ', {"nested": {"x": "y"}}),
    ],
)
def test_direct_json(text, expected):
    assert extract_json(text) == expected


def test_fenced_json_block():
    text = 'Here you go:\n```json\n{"profile_short": "Fast dev"}\n```\nEnjoy!'
    assert extract_json(text) == {"profile_short": "Fast dev"}


def test_fenced_block_without_language():
    text = 'Output:\n```\n{"ok": true}\n```'
    assert extract_json(text) == {"ok": True}


def test_brace_span_with_surrounding_prose():
    text = 'Sure! Here is the result: {"tasks": [{"title": "Call mom"}]} Thanks.'
    assert extract_json(text) == {"tasks": [{"title": "Call mom"}]}


@pytest.mark.parametrize(
    "text",
    ["", None, "not json", "INVALID OUTPUT", 42, "NaN", "Infinity", "-Infinity", '{"a": NaN}', '[1, Infinity]'],
)
def test_unrecoverable_returns_none(text):
    assert extract_json(text) is None


def test_unrelated_braces_in_prose_defeat_heuristic():
    # braces are not balanced: first "{" to last "}" spans two objects
    text = 'first {"a": 1} then {"b": 2}'
    assert extract_json(text) is None


def test_strip_fences_removes_json_marker():
    assert strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_strip_fences_removes_plain_marker_case_insensitive():
    assert strip_fences("```JSON\nhello\n```") == "hello"
    assert strip_fences("```\nhello\n```  ") == "hello"


def test_strip_fences_leaves_plain_text():
    assert strip_fences("  just text \n") == "just text"
    assert strip_fences("Use `code` inline") == "Use `code` inline"


def test_strip_fences_non_string_unchanged():
    assert strip_fences(None) is None
    assert strip_fences(5) == 5


@pytest.mark.parametrize(
    "text",
    [
        '```json\n{"a": 1}\n```',
        "``` ```  ```",
        "```json```json\n{}\n``````",
        "  plain  ",
        "",
        "```",
    ],
)
def test_strip_fences_idempotent(text):
    once = strip_fences(text)
    assert strip_fences(once) == once


@pytest.mark.parametrize("text", ["[" * 100000, '{"a":' * 100000])
def test_pathologically_nested_input_returns_none(text):
    assert extract_json(text) is None
