"""Software renderer: background, textured ray casting and the minimap."""

from __future__ import annotations

import math
from collections.abc import Mapping

import numpy as np

from .game import WINDOW_HEIGHT, WINDOW_WIDTH, Game, lerp
from .scene import TILE, Color
from .xpm import XpmImage

PLANK_CONST = 50000
FOV_HALF = 25
MIN_WALL_DISTANCE = 12
MAX_WALL_DISTANCE = 1024
MINIMAP_TILE = 10
MINIMAP_OFFSET = 10
UI_CYCLE_START = 20
UI_CYCLE_RESET = 3

WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)
RED = Color(255, 0, 0)

_WALL_KEYS = ("north", "south", "west", "east")


def create_rgb(r: int, g: int, b: int) -> int:
    """Pack three 8-bit components as 0xRRGGBB, masking each to a byte."""
    return ((r & 0xFF) << 16) + ((g & 0xFF) << 8) + (b & 0xFF)


def _tile(value: float) -> int:
    return int(int(value) / TILE)


def _texture_array(image: XpmImage) -> np.ndarray:
    return np.array(image.rows, dtype=np.uint32) & 0xFFFFFF


class FrameBuffer:
    """A 0xRRGGBB pixel grid indexed as ``pixels[y, x]``."""

    def __init__(self, width: int = WINDOW_WIDTH, height: int = WINDOW_HEIGHT) -> None:
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint32)

    def put_pixel(self, x: int, y: int, color: Color) -> None:
        """Set one pixel; coordinates outside the buffer are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y, x] = create_rgb(color.r, color.g, color.b)

    def get_pixel(self, x: int, y: int) -> Color:
        """Return the colour of one pixel."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        value = int(self.pixels[y, x])
        return Color((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    def _fill(self, x0: int, x1: int, y0: int, y1: int, value: int) -> None:
        x0, x1 = max(x0, 0), min(x1, self.width)
        y0, y1 = max(y0, 0), min(y1, self.height)
        if x0 < x1 and y0 < y1:
            self.pixels[y0:y1, x0:x1] = value


class Renderer:
    """Draws frames of a game into a frame buffer.

    ``textures`` maps ``north``, ``south``, ``west`` and ``east`` to wall
    images and may map ``door`` to the door image.
    """

    def __init__(
        self,
        game: Game,
        textures: Mapping[str, XpmImage | None],
        width: int = WINDOW_WIDTH,
        height: int = WINDOW_HEIGHT,
    ) -> None:
        self.game = game
        self.framebuffer = FrameBuffer(width, height)
        self.frame = 0
        self._walls = {key: _texture_array(textures[key]) for key in _WALL_KEYS}
        door = textures.get("door")
        self._door = _texture_array(door) if door is not None else None
        self._last_tex: np.ndarray | None = None

    # Background ------------------------------------------------------------

    def draw_background(self) -> None:
        """Fill the upper half with the ceiling colour, the rest with the floor."""
        fb = self.framebuffer
        half = fb.height // 2
        fb.pixels[:half, :] = self.game.scene.ceiling.rgb()
        fb.pixels[half:, :] = self.game.scene.floor.rgb()

    # Ray casting -----------------------------------------------------------

    def _blocking_grid(self) -> np.ndarray:
        game = self.game
        return np.array(
            [[game.is_blocking(y, x) for x in range(len(row))] for y, row in enumerate(game.grid)],
            dtype=bool,
        )

    def _march(self, cos: np.ndarray, sin: np.ndarray):
        game = self.game
        player = game.player
        blocking = self._blocking_grid()
        y_limit = (game.max_y + 1) * TILE
        x_limit = game.max_x * TILE
        count = len(cos)
        cx = np.full(count, float(player.x))
        cy = np.full(count, float(player.y))
        active = np.ones(count, dtype=bool)
        hit = np.zeros(count, dtype=bool)
        while True:
            active &= (cy < y_limit) & (cx < x_limit) & (cy > 0) & (cx > 0)
            if not active.any():
                break
            idx = np.nonzero(active)[0]
            rows = cy[idx].astype(np.int64) // TILE
            cols = cx[idx].astype(np.int64) // TILE
            found = blocking[rows, cols]
            stopped = idx[found]
            hit[stopped] = True
            active[stopped] = False
            moving = idx[~found]
            cy[moving] += sin[moving]
            cx[moving] += cos[moving]
        return cx, cy, hit

    def cast_rays(self) -> None:
        """Cast one ray per screen column and draw the textured walls."""
        game = self.game
        player = game.player
        width = self.framebuffer.width
        spread = FOV_HALF + game.eye
        fraction = np.arange(width) / float(width)
        angles = lerp(player.a + spread, player.a - spread, fraction)
        angles = np.where(angles < 0, angles + 360, np.where(angles >= 360, angles - 360, angles))
        diffs = angles - player.a
        radians = angles * math.pi / 180
        cos = np.cos(radians)
        sin = -np.sin(radians)
        cx, cy, hit = self._march(cos, sin)
        for column in np.nonzero(hit)[0]:
            x = int(column)
            hx, hy = float(cx[x]), float(cy[x])
            dist = math.hypot(hx - player.x, hy - player.y) * math.cos(
                float(diffs[x]) * math.pi / 180
            )
            self._draw_slice(x, hx, hy, float(cos[x]), float(sin[x]), dist)

    def _pick_texture(self, cx: float, cy: float, cos: float, sin: float):
        player = self.game.player
        icx, icy = int(cx), int(cy)
        if icy % TILE == 0 and icx % TILE == 0:
            return self._last_tex, icx % TILE, cx, cy
        if icy % TILE == 0:
            if sin < 0:
                cy -= 1
            key = "north" if cy > player.y else "south"
            return self._walls[key], icx % TILE, cx, cy
        if cos < 0:
            cx -= 1
        key = "west" if cx > player.x else "east"
        return self._walls[key], icy % TILE, cx, cy

    def _draw_slice(self, x: int, cx: float, cy: float, cos: float, sin: float, dist: float) -> None:
        if dist < MIN_WALL_DISTANCE:
            return
        dist = min(dist, MAX_WALL_DISTANCE)
        if cos < 0:
            cx += 1
        if sin < 0:
            cy += 1
        texture, column, cx, cy = self._pick_texture(cx, cy, cos, sin)
        if texture is None:
            texture = self._walls["north"]
        self._last_tex = texture
        grid = self.game.grid
        row, col = int(cy) // TILE, int(cx) // TILE
        if (
            self._door is not None
            and 0 <= row < len(grid)
            and 0 <= col < len(grid[row])
            and grid[row][col] == "D"
            and self.game.door_is_closed(row, col)
        ):
            texture = self._door
        self._render_column(x, int(PLANK_CONST / dist), texture, column)

    def _render_column(self, x: int, length: int, texture: np.ndarray, column: int) -> None:
        fb = self.framebuffer
        height = fb.height
        size = height - length
        start = size / 2
        ys = start + np.arange(length, dtype=np.float64)
        texel_rows = (63 * ((ys - start) / (height - size))).astype(np.int64)
        visible = (ys < height) & (ys > -1)
        ys = ys[visible]
        texel_rows = np.clip(texel_rows[visible], 0, texture.shape[0] - 1)
        texel_col = min(max(column, 0), texture.shape[1] - 1)
        fb.pixels[ys.astype(np.int64), x] = texture[texel_rows, texel_col]

    # Minimap ---------------------------------------------------------------

    def draw_minimap(self) -> None:
        """Draw the map in the top-left corner with the player's tile in red."""
        game = self.game
        fb = self.framebuffer
        player_row = _tile(game.player.y)
        player_col = _tile(game.player.x)
        for y, row in enumerate(game.grid):
            for x, cell in enumerate(row):
                if cell == "1" or (cell == "D" and game.door_is_closed(y, x)):
                    color = WHITE
                elif x + 1 < len(row):
                    color = BLACK
                else:
                    color = None
                if y == player_row and x == player_col:
                    color = RED
                if color is None:
                    continue
                left = MINIMAP_OFFSET + x * MINIMAP_TILE + 1
                top = MINIMAP_OFFSET + y * MINIMAP_TILE
                fb._fill(left, left + MINIMAP_TILE, top, top + MINIMAP_TILE, color.rgb())

    # Frames ----------------------------------------------------------------

    def _cycle_step(self) -> int:
        return int((self.frame - UI_CYCLE_START) / 2)

    def overlay_index(self) -> int | None:
        """Return the number of the animated overlay for this frame, if any."""
        step = self._cycle_step()
        if 0 <= step <= 2:
            return 2 - step
        return None

    def render_frame(self) -> tuple[str, ...]:
        """Advance the game one frame and draw it.

        Returns the names of the overlay images to draw on top, in order.
        """
        self.frame += 1
        self.game.update()
        self.draw_background()
        self.cast_rays()
        self.draw_minimap()
        overlays = ["ui3"]
        index = self.overlay_index()
        if index is not None:
            overlays.append(f"ui{index}")
        elif self._cycle_step() == UI_CYCLE_RESET:
            self.frame = 0
        return tuple(overlays)