"""Reader for XPM images into 32-bit pixel grids."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from .colornames import lookup_color
from .textparse import atoi

TRANSPARENT = 0xFF000000

_QUOTED = re.compile(r'"([^"]*)"')
_WORD = re.compile(r"[^ \t]+")
_STRTOL_HEX = re.compile(
    r"[\t\n\v\f\r ]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)"
)


class XpmError(ValueError):
    """Raised when XPM data cannot be read or is malformed."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded image; ``rows`` holds 0xAARRGGBB values, top row first."""

    width: int
    height: int
    rows: tuple[tuple[int, ...], ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the colour value at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        return self.rows[y][x]


def split_words(text: str) -> list[str]:
    """Split on spaces and tabs only."""
    return _WORD.findall(text)


def _find_unquoted(text: str, token: str) -> int:
    quoted = False
    for pos, char in enumerate(text):
        if char == '"':
            quoted = not quoted
        if not quoted and text.startswith(token, pos):
            return pos
    return -1


def _blank(text: str, begin: int, stop: int) -> str:
    stop = min(stop, len(text))
    return text[:begin] + " " * (stop - begin) + text[stop:]


def strip_comments(text: str) -> str:
    """Replace C-style comments outside double quotes with spaces.

    The result keeps the length of the input.
    """
    while (begin := _find_unquoted(text, "/*")) != -1:
        end = text.find("*/", begin + 2)
        text = _blank(text, begin, end + 2 if end != -1 else begin + 3)
    while (begin := _find_unquoted(text, "//")) != -1:
        end = text.find("\n", begin + 2)
        text = _blank(text, begin, end + 1 if end != -1 else begin + 2)
    return text


def parse_color(name: str, end: str | None) -> int:
    """Turn an XPM colour specification into an 0xRRGGBB value.

    ``#hex`` values are read like ``strtol`` in base 16. Otherwise ``name``
    (joined with ``end`` by a space when given) is looked up in the colour
    table; unknown names give 0 and ``None`` gives -1.
    """
    if name.startswith("#"):
        match = _STRTOL_HEX.match(name, 1)
        digits = match.group(2) if match else ""
        if not digits:
            return 0
        value = int(digits, 16)
        return -value if match.group(1) == "-" else value
    if end is not None:
        name = f"{name} {end}"[:63]
    found = lookup_color(name)
    return 0 if found is None else found


def _next_line(lines: Iterator[str], what: str) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise XpmError(f"missing {what}") from None


def _read_header(line: str) -> tuple[int, int, int, int]:
    words = split_words(line)
    if len(words) < 4:
        raise XpmError(f"bad header: {line!r}")
    width, height, ncolors, cpp = (atoi(word) for word in words[:4])
    if width <= 0 or height <= 0 or ncolors <= 0 or cpp <= 0:
        raise XpmError(f"bad header: {line!r}")
    return width, height, ncolors, cpp


def _read_color_line(line: str, cpp: int) -> tuple[str, int]:
    words = split_words(line[cpp:])
    try:
        key_index = words.index("c")
    except ValueError:
        raise XpmError(f"no colour key in {line!r}") from None
    rest = words[key_index + 1:]
    if not rest:
        raise XpmError(f"no colour after key in {line!r}")
    return line[:cpp], parse_color(rest[0], rest[1] if len(rest) > 1 else None)


def parse_xpm_lines(lines: Iterable[str]) -> XpmImage:
    """Decode an image from its strings: header, colours, then pixel rows."""
    source = iter(lines)
    width, height, ncolors, cpp = _read_header(_next_line(source, "header"))

    palette: dict[str, int] = {}
    for _ in range(ncolors):
        key, value = _read_color_line(_next_line(source, "colour line"), cpp)
        if cpp <= 2:
            palette[key] = value
        else:
            palette.setdefault(key, value)

    rows = []
    for _ in range(height):
        line = _next_line(source, "pixel row")
        if len(line) < width * cpp:
            raise XpmError(f"pixel row too short: {line!r}")
        row = []
        for start in range(0, width * cpp, cpp):
            value = palette.get(line[start:start + cpp], 0)
            row.append(TRANSPARENT if value == -1 else value & 0xFFFFFFFF)
        rows.append(tuple(row))
    return XpmImage(width, height, tuple(rows))


def parse_xpm_text(text: str) -> XpmImage:
    """Decode the contents of an XPM file."""
    cleaned = strip_comments(text)
    return parse_xpm_lines(m.group(1) for m in _QUOTED.finditer(cleaned))


def load_xpm(path: str | Path) -> XpmImage:
    """Read and decode an XPM file."""
    try:
        text = Path(path).read_text(encoding="latin-1")
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return parse_xpm_text(text)