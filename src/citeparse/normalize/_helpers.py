"""Compiled regex patterns and small helpers shared by field normalizers."""

import re

DOI_SUFFIX_RE = re.compile(r"(?:\[doi\])+$")
ISSN_RE = re.compile(r"\d{4}-\d{3}[\dX](?:\s*\([^)]+\))?")
WHITESPACE_RE = re.compile(r"\s+")

# Escaped newline sequences as exported by some databases
ESCAPED_NEWLINES = ("\\r\\n", "\\r", "\\n")


def first_digit_index(value: str) -> int:
    """Return index of the first decimal digit, or ``len(value)`` if none."""
    for idx, char in enumerate(value):
        if "0" <= char <= "9":
            return idx
    return len(value)


def parse_int(value: str) -> int | None:
    """Parse a signed integer the strict way, returning None on failure.

    Unlike ``int()``, surrounding whitespace and digit separators are
    rejected.
    """
    if not value or value != value.strip() or "_" in value:
        return None
    try:
        return int(value)
    except ValueError:
        return None
