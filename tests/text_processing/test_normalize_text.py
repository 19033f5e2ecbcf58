"""Tests for text normalization utilities."""

import pytest

from second_brain.text_processing.normalize_text import normalize_text


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("café", "café"),
        ("cafe\u0301", "café"),  # Combining accent
        ("ｈｅｌｌｏ", "hello"),  # Full-width characters
    ],
)
def test_unicode_normalization(raw: str, expected: str) -> None:
    assert normalize_text(raw) == expected


def test_zero_width_characters_removed() -> None:
    assert normalize_text("hello\u200Bworld") == "helloworld"
    assert normalize_text("\uFEFFtext") == "text"


def test_control_characters_removed_newlines_kept() -> None:
    assert normalize_text("a\x00b\x07c\nd") == "abc\nd"


def test_paragraph_spacing_preserved() -> None:
    text = "Para 1.\n\n\n\nPara 2."
    assert normalize_text(text) == "Para 1.\n\nPara 2."


def test_line_endings_standardized() -> None:
    assert normalize_text("Line1\r\nLine2") == "Line1\nLine2"
    assert normalize_text("Line1\rLine2") == "Line1\nLine2"


def test_whitespace_collapsed() -> None:
    assert normalize_text("Hello    world") == "Hello world"
    assert normalize_text("Hello\t\tworld  \nnext") == "Hello world\nnext"


def test_empty_input() -> None:
    assert normalize_text("") == ""
    assert normalize_text("   \n\n ") == ""
