"""Grid raycasting explorer for .cub scene files with XPM textures."""

__version__ = "0.1.0"