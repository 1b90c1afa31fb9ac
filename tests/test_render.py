import pytest

from cubraycast.game import Game, Key
from cubraycast.render import FrameBuffer, Renderer, create_rgb
from cubraycast.scene import Color, parse_scene_lines
from cubraycast.xpm import XpmImage

NORTH = 0x112233
SOUTH = 0x445566
WEST = 0x778899
EAST = 0xAABBCC
DOOR = 0x0D0E0F

HEADER = [
    "NO n.xpm\n",
    "SO s.xpm\n",
    "WE w.xpm\n",
    "EA e.xpm\n",
    "F 10,20,30\n",
    "C 40,50,60\n",
    "\n",
]


def solid(value):
    return XpmImage(64, 64, tuple((value,) * 64 for _ in range(64)))


def textures():
    return {
        "north": solid(NORTH),
        "south": solid(SOUTH),
        "west": solid(WEST),
        "east": solid(EAST),
        "door": solid(DOOR),
    }


def make_renderer(map_lines, **kwargs):
    scene = parse_scene_lines(HEADER + map_lines)
    return Renderer(Game.from_scene(scene), textures(), **kwargs)


EAST_CORRIDOR = ["11111\n", "1E001\n", "11111\n"]
DOOR_CORRIDOR = ["11111\n", "1E0D1\n", "11111\n"]
NORTH_CORRIDOR = ["111\n", "101\n", "101\n", "1N1\n", "111\n"]


def test_create_rgb_packs_and_masks():
    assert create_rgb(255, 255, 255) == 0xFFFFFF
    assert create_rgb(0x1FF, 0, 0) == 0xFF0000


def test_framebuffer_round_trip():
    fb = FrameBuffer(8, 6)
    fb.put_pixel(3, 4, Color(1, 2, 3))
    assert fb.get_pixel(3, 4) == Color(1, 2, 3)


def test_framebuffer_ignores_outside_pixels():
    fb = FrameBuffer(8, 6)
    fb.put_pixel(-1, 0, Color(9, 9, 9))
    fb.put_pixel(8, 0, Color(9, 9, 9))
    fb.put_pixel(0, 6, Color(9, 9, 9))
    assert (fb.pixels == 0).all()
    with pytest.raises(IndexError):
        fb.get_pixel(-1, 0)


def test_background_uses_scene_colours():
    renderer = make_renderer(EAST_CORRIDOR)
    renderer.draw_background()
    fb = renderer.framebuffer
    assert fb.get_pixel(0, 0) == Color(40, 50, 60)
    assert fb.get_pixel(fb.width - 1, fb.height - 1) == Color(10, 20, 30)


def test_east_facing_ray_sees_west_face():
    renderer = make_renderer(EAST_CORRIDOR)
    renderer.draw_background()
    renderer.cast_rays()
    fb = renderer.framebuffer
    assert fb.get_pixel(540, 360).rgb() == WEST
    assert fb.get_pixel(540, 0) == Color(40, 50, 60)


def test_north_facing_ray_sees_south_face():
    renderer = make_renderer(NORTH_CORRIDOR)
    renderer.draw_background()
    renderer.cast_rays()
    assert renderer.framebuffer.get_pixel(540, 360).rgb() == SOUTH


def test_closed_door_is_drawn_and_opened_door_is_not():
    renderer = make_renderer(DOOR_CORRIDOR)
    renderer.cast_rays()
    assert renderer.framebuffer.get_pixel(540, 360).rgb() == DOOR
    assert renderer.game.toggle_nearby_door() == [(3, 1)]
    renderer.cast_rays()
    assert renderer.framebuffer.get_pixel(540, 360).rgb() == WEST


def test_minimap_tiles():
    renderer = make_renderer(EAST_CORRIDOR)
    renderer.draw_background()
    renderer.draw_minimap()
    fb = renderer.framebuffer
    ceiling = Color(40, 50, 60)
    assert fb.get_pixel(11, 10) == Color(255, 255, 255)
    assert fb.get_pixel(21, 20) == Color(255, 0, 0)
    assert fb.get_pixel(31, 20) == Color(0, 0, 0)
    assert fb.get_pixel(10, 10) == ceiling
    assert fb.get_pixel(61, 20) == ceiling


def test_minimap_shows_closed_doors_as_walls():
    renderer = make_renderer(DOOR_CORRIDOR)
    renderer.draw_minimap()
    assert renderer.framebuffer.get_pixel(41, 20) == Color(255, 255, 255)
    renderer.game.toggle_nearby_door()
    renderer.draw_minimap()
    assert renderer.framebuffer.get_pixel(41, 20) == Color(0, 0, 0)


def test_overlay_cycle_order_and_reset():
    renderer = make_renderer(EAST_CORRIDOR, width=120, height=80)
    extras = []
    for _ in range(100):
        names = renderer.render_frame()
        assert names[0] == "ui3"
        extras.extend(names[1:])
        if renderer.frame == 0:
            break
    assert renderer.frame == 0
    deduped = [name for i, name in enumerate(extras) if i == 0 or extras[i - 1] != name]
    assert deduped == ["ui2", "ui1", "ui0"]
    assert renderer.overlay_index() is None


def test_render_frame_updates_game():
    renderer = make_renderer(EAST_CORRIDOR, width=120, height=80)
    start_x = renderer.game.player.x
    renderer.game.key_press(Key.W)
    renderer.render_frame()
    assert renderer.game.player.x > start_x