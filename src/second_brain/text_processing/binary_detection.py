"""Detection of binary data passed off as extracted text."""

import re

# C0 controls except tab/newline/carriage return, DEL and C1 controls.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F-\x9F]")

# Short strings with a stray control character are tolerated.
MIN_BINARY_LENGTH = 100


def has_control_chars(text: str) -> bool:
    return _CONTROL_CHARS.search(text) is not None


def looks_binary(text: str) -> bool:
    """True for content that is most likely an unextracted DOCX/PDF buffer."""
    return len(text) > MIN_BINARY_LENGTH and has_control_chars(text)
