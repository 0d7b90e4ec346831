"""Unit tests for value coercers."""

from __future__ import annotations

import pytest

from transforms.field_resolution import MISSING
from transforms.value_coercion import (
    first_attachment_url,
    to_array,
    to_bool,
    to_kebab,
    to_object,
    to_text,
    try_json,
)


@pytest.mark.parametrize("value", [True, "1", "true", "TRUE", "yes", "YES", " y ", 1, 2.5])
def test_to_bool_accepts_truthy_forms(value: object) -> None:
    """Truthy words, True, and non-zero numbers should coerce to True."""
    assert to_bool(value) is True


@pytest.mark.parametrize(
    "value", [False, "", "0", "false", "no", "maybe", None, MISSING, 0, {"a": 1}, ["true"]]
)
def test_to_bool_is_false_for_everything_else(value: object) -> None:
    """Unrecognized, empty, and absent values should coerce to False."""
    assert to_bool(value) is False


def test_try_json_passes_parsed_structures_through() -> None:
    """Already-parsed mappings and lists should be returned unchanged."""
    layout = {"elements": []}
    rows = [{"key": "name"}]

    assert try_json(layout) is layout and try_json(rows) is rows


def test_try_json_returns_none_for_malformed_or_unsupported_input() -> None:
    """Malformed JSON text and non-text scalars should yield None."""
    assert try_json("{not json") is None
    assert try_json(None) is None
    assert try_json(42) is None


def test_to_array_parses_json_array_text() -> None:
    """A JSON array string should parse into an equal list."""
    assert to_array('[{"key":"name"}]') == [{"key": "name"}]


@pytest.mark.parametrize("value", ['{"key":"name"}', "[{", "", None, 7, '"text"'])
def test_to_array_falls_back_to_empty_list(value: object) -> None:
    """Non-array results and parse failures should yield an empty list."""
    assert to_array(value) == []


def test_to_object_parses_json_object_text() -> None:
    """A JSON object string should parse into an equal mapping."""
    assert to_object('{"canvasMM":[100,100],"elements":[]}') == {
        "canvasMM": [100, 100],
        "elements": [],
    }


@pytest.mark.parametrize("value", ["[1, 2]", "{bad", "", None, [{"elements": []}]])
def test_to_object_falls_back_to_none(value: object) -> None:
    """Arrays, parse failures, and absent values should yield None."""
    assert to_object(value) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("Beer Mat — Photo!", "beer-mat-photo"),
        ("", ""),
        ("  --Hello__World--  ", "hello-world"),
        ("Card / Folded", "card-folded"),
        (None, ""),
        (42, "42"),
    ],
)
def test_to_kebab_builds_hyphenated_slugs(value: object, expected: str) -> None:
    """Slugs should be lower-case with single hyphens and no edge hyphens."""
    assert to_kebab(value) == expected


def test_first_attachment_url_reads_first_attachment() -> None:
    """Attachment arrays should yield the first element's url."""
    attachments = [
        {"url": "https://cdn.example/one.png", "filename": "one.png"},
        {"url": "https://cdn.example/two.png"},
    ]

    assert first_attachment_url(attachments) == "https://cdn.example/one.png"


def test_first_attachment_url_trims_plain_strings() -> None:
    """Plain URL strings should be trimmed, blank strings should yield None."""
    assert first_attachment_url("  https://cdn.example/base.png ") == "https://cdn.example/base.png"
    assert first_attachment_url("   ") is None


@pytest.mark.parametrize(
    "value", [[], [{"filename": "a.png"}], ["https://cdn.example/a.png"], {"url": "x"}, 5, None]
)
def test_first_attachment_url_returns_none_for_other_shapes(value: object) -> None:
    """Unexpected attachment shapes should yield None."""
    assert first_attachment_url(value) is None


def test_to_text_renders_scalars_and_structures() -> None:
    """Text coercion should stringify scalars and compact-encode structures."""
    assert to_text(None) is None
    assert to_text("  keep  ") == "  keep  "
    assert to_text("  trim  ", trim=True) == "trim"
    assert to_text(12) == "12"
    assert to_text({"a": [1, 2]}) == '{"a":[1,2]}'
