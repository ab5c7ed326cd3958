"""Isometric tile levels, sprite catalogs, game objects, drawing commands, timing and logging."""

__version__ = "0.1.0"

__all__ = ["display", "graphics", "level", "log", "objects", "sprites", "timer", "ui"]