"""Game state: player movement, input handling and doors."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum

from .scene import TILE, Scene

WINDOW_WIDTH = 1080
WINDOW_HEIGHT = 720

WALK_SPEED = 7
TURN_STEP = 3
EYE_WIDENING = 20
BODY_RADIUS = 10
MOUSE_DEAD_ZONE = 150
MOUSE_TURN = 200


class Key(IntEnum):
    """Key codes understood by the game."""

    A = 0
    S = 1
    D = 2
    W = 13
    SPACE = 49
    E = 14
    Q = 12
    ESCAPE = 53
    LEFT = 123
    RIGHT = 124
    DOWN = 125
    UP = 126


@dataclass
class Door:
    """A door on the map; doors start closed."""

    x: int
    y: int
    open: bool = False


@dataclass
class Player:
    """Position in world units, view angle in degrees and current motion."""

    x: float
    y: float
    a: float
    speed: float = 0.0
    v_speed: float = 0.0


def lerp(a: float, b: float, f: float) -> float:
    """Linear interpolation between ``a`` and ``b``."""
    return a * (1.0 - f) + b * f


def _tile(value: float) -> int:
    """Map a world coordinate to a tile index, truncating toward zero."""
    return int(int(value) / TILE)


def _wrap_angle(angle: float) -> float:
    if angle < 0:
        return angle + 360
    if angle >= 360:
        return angle - 360
    return angle


@dataclass
class Game:
    """The running game: map, player, doors and key state."""

    scene: Scene
    grid: tuple[str, ...]
    max_x: int
    max_y: int
    player: Player
    doors: dict[tuple[int, int], Door] = field(default_factory=dict)
    collision: bool = False
    eye: int = 0
    w_press: bool = False
    a_press: bool = False
    s_press: bool = False
    d_press: bool = False
    quit_requested: bool = False

    @classmethod
    def from_scene(cls, scene: Scene) -> Game:
        """Start a game on a validated scene."""
        doors = {
            (x, y): Door(x, y)
            for y, row in enumerate(scene.grid[: scene.max_y])
            for x, cell in enumerate(row[: scene.max_x])
            if cell == "D"
        }
        return cls(
            scene=scene,
            grid=scene.grid,
            max_x=scene.max_x,
            max_y=scene.max_y,
            player=Player(scene.player_x, scene.player_y, scene.angle),
            doors=doors,
        )

    def _cell(self, y: int, x: int) -> str:
        if 0 <= y < len(self.grid) and 0 <= x < len(self.grid[y]):
            return self.grid[y][x]
        return ""

    # Input -----------------------------------------------------------------

    def key_press(self, keycode: int) -> None:
        """Handle a key going down."""
        if keycode in (Key.W, Key.UP):
            self.w_press = True
        if keycode in (Key.A, Key.LEFT):
            self.a_press = True
        if keycode in (Key.S, Key.DOWN):
            self.s_press = True
        if keycode in (Key.D, Key.RIGHT):
            self.d_press = True
        if keycode == Key.SPACE:
            self.collision = not self.collision
        if keycode == Key.E:
            self.toggle_nearby_door()
        if keycode == Key.Q:
            self.eye = 0 if self.eye else EYE_WIDENING
        elif keycode == Key.ESCAPE:
            self.quit_requested = True

    def key_release(self, keycode: int) -> None:
        """Handle a key going up."""
        if keycode in (Key.W, Key.UP):
            self.w_press = False
        if keycode in (Key.A, Key.LEFT):
            self.a_press = False
        if keycode in (Key.S, Key.DOWN):
            self.s_press = False
        if keycode in (Key.D, Key.RIGHT):
            self.d_press = False

    def _turn(self, amount: float) -> None:
        self.player.a = _wrap_angle(self.player.a + amount)

    def mouse_move(self, x: int, y: int) -> bool:
        """Turn the view from the pointer position.

        Only active while collisions are on and the pointer is below the top
        band of the window. Returns True when the pointer should be put back
        in the middle of the window.
        """
        if not self.collision or y < MOUSE_DEAD_ZONE:
            return False
        half = WINDOW_WIDTH // 2
        offset = float(x - half) / float(WINDOW_WIDTH)
        if x < half:
            self._turn(-lerp(0, MOUSE_TURN, offset))
        else:
            self._turn(lerp(0, MOUSE_TURN, -offset))
        return True

    # Movement --------------------------------------------------------------

    def move(self, direction: int) -> None:
        """Set speed and heading offset for direction 0 (forward) to 3."""
        player = self.player
        player.speed = WALK_SPEED
        if direction == 0:
            if self.collision and self.a_press:
                player.v_speed = 45
            elif self.collision and self.d_press:
                player.v_speed = 315
            else:
                player.v_speed = 0
        elif direction == 2:
            if self.collision and self.a_press:
                player.v_speed = 135
            elif self.d_press and self.collision:
                player.v_speed = 225
            else:
                player.v_speed = 180
        elif direction == 1:
            if self.s_press and self.collision:
                player.v_speed = 135
            else:
                player.v_speed = 90
        elif direction == 3:
            player.v_speed = 270

    def _steer(self) -> None:
        player = self.player
        if self.w_press:
            self.move(0)
        elif self.a_press:
            if self.collision:
                self.move(1)
            else:
                player.a += TURN_STEP
        elif self.s_press:
            self.move(2)
        elif self.d_press:
            if self.collision:
                self.move(3)
            else:
                player.a -= TURN_STEP
        if player.a > 360:
            player.a -= 360
        if player.a < 0:
            player.a += 360

    def _blocked(self, move_x: float, move_y: float) -> bool:
        player = self.player
        space_x = -BODY_RADIUS if move_x < 0 else BODY_RADIUS
        space_y = -BODY_RADIUS if move_y < 0 else BODY_RADIUS
        row = _tile(player.y + move_y + space_y)
        col = _tile(player.x + move_x + space_x)
        if not self.is_blocking(row, col):
            return False
        if int(player.y + move_y) % TILE == 0:
            player.y += move_y
        elif int(player.x + move_x) % TILE == 0:
            player.x += move_x
        return True

    def _advance(self) -> None:
        player = self.player
        angle = player.a + player.v_speed
        if angle > 360:
            angle -= 360
        if angle < 0:
            angle += 360
        radians = angle * math.pi / 180
        move_x = player.speed * math.cos(radians)
        move_y = player.speed * -math.sin(radians)
        if self.collision and self._blocked(move_x, move_y):
            return
        player.x += move_x
        player.y += move_y
        if player.x < 0:
            player.x = 0.5
        if player.x > self.max_x * TILE:
            player.x = self.max_x * TILE - 0.5
        if player.y < 0:
            player.y = 0.5
        if player.y > self.max_y * TILE:
            player.y = float(self.max_y * TILE)

    def update(self) -> None:
        """Advance the game by one frame."""
        self._steer()
        self._advance()
        self.player.speed = 0

    # Doors -----------------------------------------------------------------

    def door_is_closed(self, y: int, x: int) -> bool:
        """Return True if a closed door stands on tile (x, y)."""
        door = self.doors.get((x, y))
        return door is not None and not door.open

    def is_blocking(self, y: int, x: int) -> bool:
        """Return True if tile (x, y) is a wall or a closed door."""
        cell = self._cell(y, x)
        return cell == "1" or (cell == "D" and self.door_is_closed(y, x))

    def _toggle(self, y: int, x: int) -> tuple[int, int] | None:
        door = self.doors.get((x, y))
        if door is None:
            return None
        door.open = not door.open
        return (x, y)

    def _toggle_first(self, distance: int) -> tuple[int, int] | None:
        py = _tile(self.player.y)
        px = _tile(self.player.x)
        for y, x in (
            (py + distance, px),
            (py - distance, px),
            (py, px + distance),
            (py, px - distance),
        ):
            if self._cell(y, x) == "D":
                return self._toggle(y, x)
        return None

    def toggle_nearby_door(self) -> list[tuple[int, int]]:
        """Open or close the doors next to the player.

        The first door found one tile away and the first door found two
        tiles away are toggled. Returns the (x, y) of each toggled door.
        """
        toggled = [self._toggle_first(1), self._toggle_first(2)]
        return [pos for pos in toggled if pos is not None]