"""Reading and validating ``.cub`` scene descriptions.

A scene file holds four wall texture paths (``NO``, ``SO``, ``WE``, ``EA``),
a floor colour (``F r,g,b``) and a ceiling colour (``C r,g,b``), followed by
a map drawn with ``1`` (wall), ``0`` (floor), ``D`` (door), a single player
start ``N``/``S``/``E``/``W`` and spaces for the void outside the walls.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .textparse import atoi, split

TILE = 64

_TEXTURE_KEYS = ("NO", "SO", "WE", "EA")
_MAP_LINE_CHARS = frozenset("10NSEW\n ")
_GRID_CHARS = frozenset("10NSEW D")
_PLAYER_CHARS = frozenset("NSEW")
_BORDER_CHARS = frozenset("1 ")


class SceneError(ValueError):
    """Raised when a scene file cannot be read or is invalid."""


@dataclass(frozen=True)
class Color:
    """An RGB colour with components in 0..255."""

    r: int
    g: int
    b: int

    def rgb(self) -> int:
        """Pack the colour as 0xRRGGBB."""
        return ((self.r & 0xFF) << 16) + ((self.g & 0xFF) << 8) + (self.b & 0xFF)


@dataclass(frozen=True)
class Scene:
    """A validated scene: textures, colours, map and player start."""

    north: str
    south: str
    west: str
    east: str
    floor: Color
    ceiling: Color
    grid: tuple[str, ...]
    player_x: float
    player_y: float
    angle: float

    @property
    def max_x(self) -> int:
        """Index of the last map column."""
        return len(self.grid[0]) - 1 if self.grid else -1

    @property
    def max_y(self) -> int:
        """Index of the last map row."""
        return len(self.grid) - 1

    @property
    def door_count(self) -> int:
        """Number of doors, counted outside the last row and column."""
        return sum(row[: self.max_x].count("D") for row in self.grid[: self.max_y])


def player_angle(c: str) -> int:
    """Return the view angle in degrees for a player start character."""
    if c == "N":
        return 90
    if c == "S":
        return 270
    if c == "E":
        return 0
    return 180


def check_name(path: str | Path) -> None:
    """Raise SceneError unless the file name ends in ``.cub``."""
    if not str(path).endswith(".cub"):
        raise SceneError("Invalid file")


def read_lines(path: str | Path) -> list[str]:
    """Read a file as lines that keep their trailing newline."""
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise SceneError(f"cannot read {path}: {exc}") from exc
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _second_word(line: str) -> str:
    words = split(line, " ")
    if len(words) < 2:
        raise SceneError(f"missing value in line {line!r}")
    return words[1]


def _color_values(line: str) -> tuple[int, int, int]:
    parts = split(_second_word(line), ",")
    if len(parts) < 3:
        raise SceneError(f"colour needs three components: {line!r}")
    return atoi(parts[0]), atoi(parts[1]), atoi(parts[2])


def _checked_color(values: tuple[int, int, int] | None) -> Color:
    if values is None or any(not 0 <= v <= 255 for v in values):
        raise SceneError("WRONG DATA")
    return Color(*values)


def parse_header(lines: Iterable[str]) -> tuple[dict[str, str], Color, Color]:
    """Collect texture paths and colours from every line of a scene.

    Returns the texture paths keyed by ``NO``/``SO``/``WE``/``EA`` and the
    floor and ceiling colours. Later definitions replace earlier ones.
    """
    textures: dict[str, str] = {}
    floor: tuple[int, int, int] | None = None
    ceiling: tuple[int, int, int] | None = None
    for line in lines:
        key = line[:2]
        if key in _TEXTURE_KEYS:
            # The value's last character is taken to be the line's newline.
            textures[key] = _second_word(line)[:-1]
        elif line[:1] == "F":
            floor = _color_values(line)
        elif line[:1] == "C":
            ceiling = _color_values(line)
    ceiling_color = _checked_color(ceiling)
    floor_color = _checked_color(floor)
    if any(key not in textures for key in _TEXTURE_KEYS):
        raise SceneError("WRONG DATA")
    return textures, floor_color, ceiling_color


def _is_map_line(line: str) -> bool:
    return not line.startswith("\n") and set(line) <= _MAP_LINE_CHARS


def build_map(lines: Iterable[str]) -> list[str]:
    """Cut the map out of the scene lines as equally wide rows.

    The map starts at the first line made only of map characters and runs to
    the end of the file. Rows are padded with spaces to the longest line,
    whose newline counts towards the width.
    """
    lines = list(lines)
    start = next((i for i, line in enumerate(lines) if _is_map_line(line)), len(lines))
    body = lines[start:]
    if not body:
        return []
    width = max(len(line) for line in body)
    return [line.split("\n", 1)[0].ljust(width) for line in body]


def check_map_chars(grid: Sequence[str]) -> tuple[float, float, float] | None:
    """Check the map characters and find the player start.

    Returns the player's ``(x, y, angle)`` in world units, or None when the
    map has no start position.
    """
    player: tuple[float, float, float] | None = None
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell not in _GRID_CHARS:
                raise SceneError(f"invalid character {cell!r}")
            if cell in _PLAYER_CHARS:
                if player is not None:
                    raise SceneError("repeated player character")
                player = (
                    float(x * TILE + TILE // 2),
                    float(y * TILE + TILE // 2),
                    float(player_angle(cell)),
                )
    return player


def check_map_walls(grid: Sequence[str], max_x: int, max_y: int) -> None:
    """Raise SceneError if the walkable area touches the void or the edge."""
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell in _BORDER_CHARS:
                continue
            on_edge = x in (0, max_x) or y in (0, max_y)
            if on_edge or " " in (grid[y - 1][x], row[x - 1], row[x + 1], grid[y + 1][x]):
                raise SceneError(f"invalid border x: {x} y: {y}")


def _fill_floor(grid: Sequence[str], max_x: int, max_y: int) -> tuple[str, ...]:
    rows = []
    for y, row in enumerate(grid):
        if y < max_y:
            row = row[:max_x].replace(" ", "0") + row[max_x:]
        rows.append(row)
    return tuple(rows)


def parse_scene_lines(lines: Iterable[str]) -> Scene:
    """Validate the lines of a scene and build a Scene from them."""
    lines = list(lines)
    textures, floor, ceiling = parse_header(lines)
    grid = build_map(lines)
    max_x = len(grid[0]) - 1 if grid else -1
    max_y = len(grid) - 1
    player = check_map_chars(grid)
    check_map_walls(grid, max_x, max_y)
    if player is None:
        raise SceneError("there's no player")
    x, y, angle = player
    return Scene(
        north=textures["NO"],
        south=textures["SO"],
        west=textures["WE"],
        east=textures["EA"],
        floor=floor,
        ceiling=ceiling,
        grid=_fill_floor(grid, max_x, max_y),
        player_x=x,
        player_y=y,
        angle=angle,
    )


def load_scene(path: str | Path) -> Scene:
    """Read, validate and return the scene stored in a ``.cub`` file."""
    check_name(path)
    return parse_scene_lines(read_lines(path))