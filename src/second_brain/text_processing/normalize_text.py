"""Whitespace and unicode cleanup applied to text before chunking."""

import re
import unicodedata

from second_brain.core.logging import get_logger

logger = get_logger(__name__)

_ZW_PATTERN = re.compile(r"[\u200B-\u200D\uFEFF]")
_CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_MULTISPACE_PATTERN = re.compile(r"[ ]{2,}")
_TRAILING_SPACE_PATTERN = re.compile(r"[ ]+\n")
_BLANK_LINES_PATTERN = re.compile(r"\n{3,}")


def normalize_text(value: str) -> str:
    """Normalize extracted text while keeping its paragraph structure.

    NFKC-normalizes, converts line endings to LF and tabs to spaces, drops
    zero-width and control characters (newlines survive), and collapses runs
    of spaces and of blank lines.
    """
    if not value:
        return value

    text = unicodedata.normalize("NFKC", value)
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\t", " ")
    text = _ZW_PATTERN.sub("", text)
    text = _CONTROL_PATTERN.sub("", text)
    text = _MULTISPACE_PATTERN.sub(" ", text)
    text = _TRAILING_SPACE_PATTERN.sub("\n", text)
    text = _BLANK_LINES_PATTERN.sub("\n\n", text).strip()

    logger.debug("Normalized text length from %d to %d chars", len(value), len(text))
    return text
