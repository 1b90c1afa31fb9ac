"""Window, event loop and command-line entry point."""

from __future__ import annotations

import os
import sys
from pathlib import Path

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np  # noqa: E402
import pygame  # noqa: E402

from .game import WINDOW_HEIGHT, WINDOW_WIDTH, Game, Key  # noqa: E402
from .render import Renderer  # noqa: E402
from .scene import Scene, SceneError, load_scene  # noqa: E402
from .xpm import XpmError, XpmImage, load_xpm  # noqa: E402

DEFAULT_UI_DIR = Path("textures")
TITLE = "cub3D"
FPS = 60
OVERLAY_POS = (WINDOW_WIDTH // 2 - 422, WINDOW_HEIGHT - 152)
_UI_IMAGES = ("door", "ui", "ui0", "ui1", "ui2", "ui3")

_KEYMAP = {
    pygame.K_a: Key.A,
    pygame.K_s: Key.S,
    pygame.K_d: Key.D,
    pygame.K_w: Key.W,
    pygame.K_SPACE: Key.SPACE,
    pygame.K_e: Key.E,
    pygame.K_q: Key.Q,
    pygame.K_ESCAPE: Key.ESCAPE,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_UP: Key.UP,
}


def translate_key(key: int) -> Key | None:
    """Map a pygame key constant to a game key, or None if it is unused."""
    return _KEYMAP.get(key)


def load_textures(scene: Scene, ui_dir: str | Path = DEFAULT_UI_DIR) -> dict[str, XpmImage | None]:
    """Load the wall textures of a scene and the door and interface images.

    Wall textures must load; a missing interface image is given as None.
    """
    textures: dict[str, XpmImage | None] = {
        "north": load_xpm(scene.north),
        "south": load_xpm(scene.south),
        "west": load_xpm(scene.west),
        "east": load_xpm(scene.east),
    }
    ui_dir = Path(ui_dir)
    for name in _UI_IMAGES:
        try:
            textures[name] = load_xpm(ui_dir / f"{name}.xpm")
        except XpmError:
            textures[name] = None
    return textures


def _rgb_array(pixels: np.ndarray) -> np.ndarray:
    rgb = np.empty(pixels.shape + (3,), dtype=np.uint8)
    rgb[..., 0] = (pixels >> 16) & 0xFF
    rgb[..., 1] = (pixels >> 8) & 0xFF
    rgb[..., 2] = pixels & 0xFF
    return rgb.transpose(1, 0, 2)


def _image_surface(image: XpmImage) -> pygame.Surface:
    pixels = np.array(image.rows, dtype=np.uint32)
    surface = pygame.surfarray.make_surface(_rgb_array(pixels)).convert_alpha()
    alpha = pygame.surfarray.pixels_alpha(surface)
    # The top byte of a pixel is its transparency.
    alpha[:] = (255 - ((pixels >> 24) & 0xFF)).T.astype(np.uint8)
    del alpha
    return surface


def _handle_events(game: Game, center: tuple[int, int]) -> None:
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            game.quit_requested = True
        elif event.type == pygame.KEYDOWN:
            code = translate_key(event.key)
            if code is not None:
                game.key_press(code)
        elif event.type == pygame.KEYUP:
            code = translate_key(event.key)
            if code is not None:
                game.key_release(code)
        elif event.type == pygame.MOUSEMOTION:
            if game.mouse_move(*event.pos):
                pygame.mouse.set_pos(center)


def run(path: str | Path, ui_dir: str | Path = DEFAULT_UI_DIR) -> int:
    """Load a scene and play it in a window until it is closed."""
    scene = load_scene(path)
    textures = load_textures(scene, ui_dir)
    game = Game.from_scene(scene)
    renderer = Renderer(game, textures)
    pygame.init()
    try:
        screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(TITLE)
        overlays = {
            name: _image_surface(image)
            for name in ("ui0", "ui1", "ui2", "ui3")
            if (image := textures.get(name)) is not None
        }
        center = (WINDOW_WIDTH // 2, WINDOW_HEIGHT // 2)
        pygame.mouse.set_pos(center)
        pygame.mouse.set_visible(False)
        clock = pygame.time.Clock()
        while not game.quit_requested:
            _handle_events(game, center)
            if game.quit_requested:
                break
            names = renderer.render_frame()
            frame = pygame.surfarray.make_surface(_rgb_array(renderer.framebuffer.pixels))
            screen.blit(frame, (0, 0))
            for name in names:
                overlay = overlays.get(name)
                if overlay is not None:
                    screen.blit(overlay, OVERLAY_POS)
            pygame.display.flip()
            clock.tick(FPS)
    finally:
        pygame.quit()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point: play the ``.cub`` scene given as argument."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("BAD INPUT")
        return 1
    try:
        return run(args[0])
    except SceneError as exc:
        print(f"Error: {exc}")
        return 1
    except XpmError:
        print("Error: wrong path to texture")
        return 1


if __name__ == "__main__":
    sys.exit(main())