import pytest

from cubraycast.game import Game, Key, WINDOW_WIDTH, lerp
from cubraycast.scene import parse_scene_lines

SCENE_LINES = [
    "NO ./n.xpm\n",
    "SO ./s.xpm\n",
    "WE ./w.xpm\n",
    "EA ./e.xpm\n",
    "F 10,20,30\n",
    "C 40,50,60\n",
    "\n",
    "1111111\n",
    "1000001\n",
    "100D001\n",
    "100N001\n",
    "1111111\n",
]


@pytest.fixture
def game():
    return Game.from_scene(parse_scene_lines(SCENE_LINES))


def test_lerp_endpoints_and_middle():
    assert lerp(2, 10, 0) == 2
    assert lerp(2, 10, 1) == 10
    assert lerp(0, 200, 0.5) == pytest.approx(100)


def test_from_scene_copies_player_and_doors(game):
    assert game.player.x == game.scene.player_x
    assert game.player.y == game.scene.player_y
    assert game.player.a == 90
    assert set(game.doors) == {(3, 2)}
    assert game.door_is_closed(2, 3)
    assert not game.collision
    assert game.eye == 0


def test_is_blocking(game):
    assert game.is_blocking(0, 0)
    assert not game.is_blocking(1, 1)
    assert game.is_blocking(2, 3)


def test_toggle_nearby_door(game):
    assert game.toggle_nearby_door() == [(3, 2)]
    assert not game.door_is_closed(2, 3)
    assert not game.is_blocking(2, 3)
    assert game.toggle_nearby_door() == [(3, 2)]
    assert game.door_is_closed(2, 3)


def test_toggle_with_no_door_near(game):
    game.player.x = 1 * 64 + 32
    game.player.y = 1 * 64 + 32
    assert game.toggle_nearby_door() == []
    assert game.door_is_closed(2, 3)


def test_key_e_toggles_door(game):
    game.key_press(Key.E)
    assert not game.door_is_closed(2, 3)


def test_space_toggles_collision(game):
    game.key_press(Key.SPACE)
    assert game.collision
    game.key_press(Key.SPACE)
    assert not game.collision


def test_q_toggles_eye(game):
    game.key_press(Key.Q)
    assert game.eye == 20
    game.key_press(Key.Q)
    assert game.eye == 0


def test_escape_requests_quit(game):
    game.key_press(Key.ESCAPE)
    assert game.quit_requested


@pytest.mark.parametrize(
    "key, attr",
    [
        (Key.W, "w_press"),
        (Key.UP, "w_press"),
        (Key.A, "a_press"),
        (Key.LEFT, "a_press"),
        (Key.S, "s_press"),
        (Key.DOWN, "s_press"),
        (Key.D, "d_press"),
        (Key.RIGHT, "d_press"),
    ],
)
def test_press_and_release(game, key, attr):
    game.key_press(key)
    assert getattr(game, attr) is True
    game.key_release(key)
    assert getattr(game, attr) is False


def test_move_headings(game):
    game.collision = True
    game.a_press = True
    game.move(0)
    assert game.player.speed == 7
    assert game.player.v_speed == 45
    game.move(2)
    assert game.player.v_speed == 135
    game.a_press = False
    game.d_press = True
    game.move(0)
    assert game.player.v_speed == 315
    game.move(2)
    assert game.player.v_speed == 225
    game.move(3)
    assert game.player.v_speed == 270
    game.move(1)
    assert game.player.v_speed == 90


def test_update_idle_keeps_position(game):
    x, y = game.player.x, game.player.y
    game.update()
    assert game.player.x == pytest.approx(x)
    assert game.player.y == pytest.approx(y)
    assert game.player.speed == 0


def test_update_walks_north(game):
    y = game.player.y
    game.key_press(Key.W)
    game.update()
    assert game.player.y == pytest.approx(y - 7)
    assert game.player.speed == 0


def test_turning_without_collision(game):
    game.key_press(Key.A)
    game.update()
    assert game.player.a == pytest.approx(93)
    game.key_release(Key.A)
    game.player.a = 0
    game.key_press(Key.D)
    game.update()
    assert game.player.a == pytest.approx(357)


def test_walking_through_walls_clamps_to_edge(game):
    game.key_press(Key.W)
    for _ in range(100):
        game.update()
    assert game.player.y == 0.5


def test_collision_stops_at_wall(game):
    game.key_press(Key.SPACE)
    game.player.x = 1 * 64 + 32
    start = game.player.y
    game.key_press(Key.W)
    for _ in range(100):
        game.update()
        assert game.player.y >= 64
    assert game.player.y < start


def test_closed_door_blocks_and_open_door_lets_through(game):
    game.key_press(Key.SPACE)
    game.key_press(Key.W)
    for _ in range(100):
        game.update()
    assert game.player.y >= 3 * 64
    game.toggle_nearby_door()
    for _ in range(100):
        game.update()
    assert game.player.y < 3 * 64
    assert game.player.y >= 64


def test_mouse_ignored_without_collision(game):
    assert game.mouse_move(0, 400) is False
    assert game.player.a == 90


def test_mouse_ignored_in_top_band(game):
    game.collision = True
    assert game.mouse_move(0, 100) is False
    assert game.player.a == 90


def test_mouse_turns_view(game):
    game.collision = True
    assert game.mouse_move(WINDOW_WIDTH // 2, 400) is True
    assert game.player.a == pytest.approx(90)
    game.mouse_move(0, 400)
    assert game.player.a > 90
    left = game.player.a
    game.mouse_move(WINDOW_WIDTH - 1, 400)
    assert game.player.a < left


def test_mouse_angle_stays_in_range(game):
    game.collision = True
    for _ in range(20):
        game.mouse_move(0, 400)
        assert 0 <= game.player.a < 360
    for _ in range(40):
        game.mouse_move(WINDOW_WIDTH - 1, 400)
        assert 0 <= game.player.a < 360