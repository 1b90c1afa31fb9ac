# cubraycast

A small first-person explorer drawn with grid raycasting. It reads a `.cub`
scene file that describes wall textures, floor and ceiling colours and a map.
It then opens a window where you can walk around, open and close doors and see
a minimap in the top-left corner.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running

```
cubraycast maps/level.cub
```

The command takes exactly one argument, the path of a scene file whose name
ends in `.cub`. If it gets any other number of arguments it prints `BAD INPUT`
and exits with status 1. If the scene is invalid it prints `Error: ...` with
the reason and exits with status 1. If a wall texture cannot be read it prints
`Error: wrong path to texture` and exits with status 1.

The command also loads extra images from a `textures` directory relative to
the current working directory:

- `door.xpm` is drawn on closed doors. Without it, doors use the wall textures.
- `ui0.xpm` to `ui3.xpm` are overlays drawn near the bottom of the window.
  `ui3` is drawn on every frame, and the other three are drawn in turn as a
  short animation.
- `ui.xpm` is also loaded when present.

Any of these images may be missing.

## Scene files

A scene file starts with header lines and ends with the map:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 120,80,40
C 100,160,220

111111
1N0D01
100001
111111
```

- `NO`, `SO`, `WE` and `EA` give the XPM texture used for walls facing each
  way. The last character of each value is dropped, because it is taken to be
  the line's newline. Each texture line must therefore end with a line break.
- `F` and `C` give the floor and ceiling colours as `r,g,b`. Each component
  must be between 0 and 255.
- The map starts at the first non-empty line made only of `1`, `0`, `N`, `S`,
  `E`, `W` and spaces, and it runs to the end of the file. In the map:
  - `1` is a wall.
  - `0` is floor.
  - `D` is a door. Doors start closed.
  - A space is void.
  - Exactly one of `N`, `S`, `E` or `W` marks where the player starts and which
    way they face.
- Floor, doors and the start must be closed in by walls. They may not touch
  the void or the edge of the map.

A scene that breaks these rules is rejected with a `SceneError`.

## Controls

- `W` / `Up`: walk forward.
- `S` / `Down`: walk backward.
- `A` / `Left` and `D` / `Right`: turn, or strafe while collision mode is on.
- `Space`: switch collision mode on or off. While it is on, walls and closed
  doors block you. Moving the mouse below the top 150 pixels of the window
  also turns the view.
- `E`: open or close a door one or two tiles away.
- `Q`: widen the field of view, or set it back to normal.
- `Escape` or closing the window: quit.

## Using it as a library

Each part of the package can be used on its own:

- `cubraycast.scene.load_scene(path)` reads and checks a scene file and
  returns a `Scene`. `parse_scene_lines(lines)` does the same from lines of
  text. Both raise `SceneError` on bad input.
- `cubraycast.xpm.load_xpm(path)` and `parse_xpm_text(text)` decode XPM images
  into an `XpmImage`, whose `pixel(x, y)` returns an `0xAARRGGBB` value.
  These functions raise `XpmError` on bad input.
- `cubraycast.colornames.lookup_color(name)` looks up the X11 colour names
  that XPM files may use.
- `cubraycast.game.Game.from_scene(scene)` builds the game state. Its
  `key_press`, `key_release`, `mouse_move`, `update` and `toggle_nearby_door`
  methods drive it. The key codes are in `cubraycast.game.Key`.
- `cubraycast.render.Renderer(game, textures)` draws frames into a
  `FrameBuffer`, a numpy array of `0xRRGGBB` values. Its `render_frame()`
  advances the game by one frame, draws the frame and returns the names of the
  overlay images to draw on top.
- `cubraycast.app.run(path, ui_dir)` opens the window and plays a scene.
  `main(argv)` is the command-line entry point.

## Limits

- Textures must be XPM files. No other image formats are read.
- There is no sound.
- There are no enemies or goals. The map can only be explored.