"""Small text helpers used when reading scene and image files."""

from __future__ import annotations

import re

_LEADING_INT = re.compile(r"[\t\n\v\f\r ]*([+-]?[0-9]+)")


def atoi(text: str) -> int:
    """Parse a leading decimal integer the way C's ``atoi`` does.

    Leading whitespace is skipped, one optional sign is accepted and digits
    are read until the first non-digit. Text without a number yields 0.
    """
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def split(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep``, dropping the empty pieces between separators."""
    return [word for word in text.split(sep) if word]