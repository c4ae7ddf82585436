"""Unit tests for the pure text and field normalizers."""

from __future__ import annotations

import pytest

from app.services.extraction.text import (
    append_query_param,
    clean_text,
    extract_identifier,
    is_bare_identifier,
    normalize_date,
    split_names,
    truncate,
)

ARBITRARY_INPUTS = [
    "",
    "   ",
    "no numbers here",
    "Widget  assembly\n\twith  gears",
    "US 2021/0123456 A1 filed 03/04/2021",
    "WO2021/123456 - 12.05.2021",
    "13/45/2021",
    "????",
]


def test_clean_text_collapses_whitespace_and_nbsp() -> None:
    assert clean_text("  Widget  assembly\n\twith  gears ") == "Widget assembly with gears"
    assert clean_text(None) == ""


@pytest.mark.parametrize("value", ARBITRARY_INPUTS)
def test_normalizers_are_total_and_idempotent(value) -> None:
    assert clean_text(clean_text(value)) == clean_text(value)
    assert normalize_date(normalize_date(value)) == normalize_date(value)
    assert extract_identifier(extract_identifier(value)) == extract_identifier(value)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Publication US20170364492A1 (2017)", "US20170364492A1"),
        ("EP12345678B1", "EP12345678B1"),
        ("WO2021/123456 Solar cell", "WO2021/123456"),
        ("ref 2021/123456", "2021/123456"),
        ("Granted as US 123456", "US123456"),
        ("nothing to see", ""),
    ],
)
def test_extract_identifier_patterns(text, expected) -> None:
    assert extract_identifier(text) == expected


def test_extract_identifier_prefers_specific_pattern() -> None:
    # The looser slash pattern would otherwise capture "2021/123456" only.
    assert extract_identifier("see WO2021/123456") == "WO2021/123456"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2021-03-04", "2021-03-04"),
        ("2021-3-4", "2021-03-04"),
        ("Published 03/04/2021", "2021-03-04"),
        ("2021/3/4", "2021-03-04"),
        ("21.12.2017", "2017-12-21"),
        ("Priority 2019", "2019-01-01"),
        ("13/45/2021", ""),
        ("no date", ""),
        ("", ""),
        ("0000", ""),
    ],
)
def test_normalize_date_formats(text, expected) -> None:
    assert normalize_date(text) == expected


def test_truncate_marks_long_values() -> None:
    text = "x" * 350
    truncated = truncate(text, 300)
    assert truncated == "x" * 300 + "..."
    assert truncate("short", 300) == "short"


def test_is_bare_identifier() -> None:
    assert is_bare_identifier("US1234567B2")
    assert not is_bare_identifier("US1234567B2 Widget")


def test_split_names_drops_numeric_tokens() -> None:
    assert split_names("Alice Smith; 12, Bob Lee") == ["Alice Smith", "Bob Lee"]
    assert split_names("") == []


def test_append_query_param() -> None:
    assert append_query_param("https://x.test/patent/US1", "oq", "US1") == "https://x.test/patent/US1?oq=US1"
    assert append_query_param("https://x.test/d?docId=1", "format", "pdf") == "https://x.test/d?docId=1&format=pdf"
    assert append_query_param("", "oq", "US1") == ""
