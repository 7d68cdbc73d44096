import json

import pytest

from stardust.infrastructure.parsing.json_repair import (
    UnrecoverableResponseError,
    attempt_repair,
    count_delimiters,
    drop_trailing_separator,
    strip_code_fences,
    truncate_incomplete_tail,
)


def test_complete_document_is_left_alone():
    text = '{"results": [{"id": "o/r", "categories": ["Lang: Python"]}]}'
    assert attempt_repair(text) == text
    assert attempt_repair(f"  {text}\n") == text


@pytest.mark.parametrize(
    "fenced",
    [
        '```json\n{"results": []}\n```',
        '```\n{"results": []}\n```',
        '```JSON{"results": []}```',
    ],
)
def test_code_fences_are_stripped(fenced):
    assert strip_code_fences(fenced) == '{"results": []}'
    assert json.loads(attempt_repair(fenced)) == {"results": []}


def test_truncate_drops_unfinished_trailing_object():
    text = '{"results": [{"id": "a"}, {"id": "b", "categories": ["X"'
    assert truncate_incomplete_tail(text) == '{"results": [{"id": "a"}'


def test_truncate_keeps_text_without_unfinished_object():
    text = '{"results": [{"id": "a"}]'
    assert truncate_incomplete_tail(text) == text
    assert truncate_incomplete_tail('{"results": [') == '{"results": ['


def test_count_delimiters():
    counts = count_delimiters('{"a": [{"b": [1, 2]}')
    assert (counts.open_braces, counts.close_braces) == (2, 1)
    assert (counts.open_brackets, counts.close_brackets) == (2, 1)
    assert counts.missing_braces == 1
    assert counts.missing_brackets == 1


def test_missing_counts_never_negative():
    counts = count_delimiters("}}]]")
    assert counts.missing_braces == 0
    assert counts.missing_brackets == 0


def test_drop_trailing_separator():
    assert drop_trailing_separator('{"a": 1},  \n') == '{"a": 1}'
    assert drop_trailing_separator('{"a": 1}') == '{"a": 1}'


def test_truncated_document_is_balanced():
    text = (
        '{"results": [{"id": "o/r1", "categories": ["Lang: Python"]}, '
        '{"id": "o/r2", "categories": ["AI'
    )
    repaired = attempt_repair(text)
    assert json.loads(repaired) == {"results": [{"id": "o/r1", "categories": ["Lang: Python"]}]}


def test_dangling_comma_after_last_entry():
    repaired = attempt_repair('{"results": [{"id": "a", "categories": []},')
    assert json.loads(repaired) == {"results": [{"id": "a", "categories": []}]}


def test_missing_only_closers():
    repaired = attempt_repair('{"results": [{"id": "a", "categories": ["X"]}]')
    assert json.loads(repaired)["results"][0]["id"] == "a"


@pytest.mark.parametrize("text", ["", "   \n", "``````", None, 42])
def test_unrecoverable_input(text):
    with pytest.raises(UnrecoverableResponseError):
        attempt_repair(text)
