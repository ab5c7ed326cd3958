"""Sprite, text and line drawing recorded as a list of draw commands."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable

from .sprites import AssetCatalog, GraphicImage

DIGIT_SPRITE_BASE = 1200
MAX_SPRITE_NUMBER = 999999
SPRITE_NUMBER_WIDTH = 6
DEFAULT_TEXTURE_COLOR = (105, 60, 40)

_CIRCLE_SEGMENTS = 48
_CIRCLE_PI = 3.14159


class Font(IntEnum):
    """Fonts available for text output: Arial or Verdana, size, B for bold."""

    A12 = 0
    A12B = 1
    A14 = 2
    A14B = 3
    A16 = 4
    A16B = 5
    V12 = 6
    V12B = 7
    V14 = 8
    V14B = 9
    V16 = 10
    V16B = 11
    V20 = 12
    V20B = 13
    A8 = 14


_FONT_HEIGHTS = {
    Font.A12: 12,
    Font.A12B: 12,
    Font.V12: 12,
    Font.V12B: 12,
    Font.A14: 14,
    Font.A14B: 14,
    Font.V14: 14,
    Font.V14B: 14,
    Font.A16: 16,
    Font.A16B: 16,
    Font.V16: 16,
    Font.V16B: 16,
    Font.V20: 20,
    Font.V20B: 20,
}
_DEFAULT_FONT_HEIGHT = 12


def _to_font(font: int | Font) -> Font:
    try:
        return Font(font)
    except ValueError:
        raise ValueError(f"unknown font: {font!r}") from None


def font_height(font: int | Font) -> int:
    """Return the line height used when laying out text in this font."""
    return _FONT_HEIGHTS.get(_to_font(font), _DEFAULT_FONT_HEIGHT)


def _channel(value: int) -> int:
    return int(value) & 0xFF


def _argb(alpha: int, red: int, green: int, blue: int) -> int:
    return (
        (_channel(alpha) << 24)
        | (_channel(red) << 16)
        | (_channel(green) << 8)
        | _channel(blue)
    )


def _xrgb(red: int, green: int, blue: int) -> int:
    return _argb(0xFF, red, green, blue)


def circle_points(x: float, y: float, radius: float) -> list[tuple[float, float]]:
    """Return the closed line strip outlining a circle, 48 segments long."""
    wedge = (2 * _CIRCLE_PI) / _CIRCLE_SEGMENTS
    return [
        (x + radius * math.cos(i * wedge), y - radius * math.sin(i * wedge))
        for i in range(_CIRCLE_SEGMENTS + 1)
    ]


@dataclass
class DrawCommand:
    """One drawing operation issued to the screen."""

    kind: str
    points: tuple[tuple[float, float], ...] = ()
    color: int = 0
    text: str = ""
    font: Font | None = None
    rect: tuple[int, int, int, int] | None = None
    texture: int | None = None
    position: tuple[float, float] = (0.0, 0.0)
    scale: tuple[float, float] = (1.0, 1.0)
    rotation_center: tuple[float, float] = (0.0, 0.0)
    angle: float = 0.0
    texture_factor: int | None = None


@dataclass
class Graphics:
    """Draws sprites from an asset catalogue, text and outlines.

    Every drawing call appends a DrawCommand to ``commands``; a presenting
    back end replays them in order.
    """

    catalog: AssetCatalog = field(default_factory=AssetCatalog)
    texture_color: tuple[int, int, int] = DEFAULT_TEXTURE_COLOR
    commands: list[DrawCommand] = field(default_factory=list)
    rendering: bool = False

    def begin_render(self) -> None:
        """Start a batch of alpha-blended drawing."""
        self.rendering = True

    def end_render(self) -> None:
        """Finish the current batch of drawing."""
        self.rendering = False

    def sprite(self, sprite_id: int) -> GraphicImage:
        """Return the sprite with this id, or an invalid image."""
        return self.catalog.sprite(sprite_id)

    def _emit_sprite(
        self,
        image: GraphicImage,
        x: float,
        y: float,
        scale: tuple[float, float],
        center: tuple[float, float],
        color: int,
    ) -> None:
        if self.catalog.texture(image.file_id) is None:
            return
        self.commands.append(
            DrawCommand(
                kind="sprite",
                color=color,
                rect=image.source_rect(),
                texture=image.file_id,
                position=(x, y),
                scale=scale,
                rotation_center=center,
                angle=image.angle,
                texture_factor=_xrgb(*self.texture_color),
            )
        )

    def render_sprite(
        self,
        image: GraphicImage,
        x: float,
        y: float,
        red: int,
        green: int,
        blue: int,
    ) -> None:
        """Draw a sprite at its own scale, rotated about its centre and tinted."""
        if not image.valid:
            return
        left, top, right, bottom = image.source_rect()
        factor = image.scale * image.screen_scale
        center = (
            ((right - left) // 2) * image.screen_scale,
            ((bottom - top) // 2) * image.screen_scale,
        )
        self._emit_sprite(
            image, x, y, (factor, factor), center, _argb(image.alpha, red, green, blue)
        )

    def render_sprite_scaled(
        self,
        image: GraphicImage,
        x: float,
        y: float,
        sx: float,
        sy: float,
        rx: float,
        ry: float,
    ) -> None:
        """Draw a sprite with explicit scale factors and rotation centre."""
        if not image.valid:
            return
        s = image.screen_scale
        self._emit_sprite(
            image,
            x,
            y,
            (sx * s, sy * s),
            (rx * s, ry * s),
            _argb(image.alpha, 255, 255, 255),
        )

    def print_sprite_number(self, x: float, y: float, number: int) -> None:
        """Draw a number from 0 to 999999 as six zero-padded digit sprites."""
        if number < 0 or number > MAX_SPRITE_NUMBER:
            return
        pos_x = x
        for digit in f"{number:0{SPRITE_NUMBER_WIDTH}d}":
            image = self.sprite(DIGIT_SPRITE_BASE + int(digit))
            self.render_sprite(image, pos_x, y, 255, 255, 255)
            pos_x += image.width

    def _line_strip(self, points: Iterable[tuple[float, float]], color: int) -> None:
        self.commands.append(
            DrawCommand(kind="line_strip", points=tuple(points), color=color)
        )

    def draw_line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        red: int,
        green: int,
        blue: int,
    ) -> None:
        """Draw a one-pixel line between two screen points."""
        self._line_strip(((x1 - 1, y1), (x2 - 1, y2)), _xrgb(red, green, blue))

    def draw_rect(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        red: int,
        green: int,
        blue: int,
    ) -> None:
        """Draw the outline of a rectangle given by two opposite corners."""
        self._line_strip(
            ((x1, y1), (x2, y1), (x2, y2), (x1, y2), (x1, y1)),
            _xrgb(red, green, blue),
        )

    def draw_circle(
        self,
        x: float,
        y: float,
        red: int,
        green: int,
        blue: int,
        radius: float,
    ) -> None:
        """Draw the outline of a circle."""
        self._line_strip(circle_points(x, y, radius), _xrgb(red, green, blue))

    def _print_texts(
        self,
        texts: Iterable[str],
        font: int | Font,
        x: float,
        y: float,
        color: int,
    ) -> None:
        chosen = _to_font(font)
        height = font_height(chosen)
        for index, text in enumerate(texts):
            left = int(x)
            top = int(y + (index * height + 2))
            rect = (left, top, left + len(text) * height, top + height + 2)
            self.commands.append(
                DrawCommand(kind="text", text=text, font=chosen, rect=rect, color=color)
            )

    def print_lines(
        self,
        lines: Iterable[str],
        font: int | Font,
        x: float,
        y: float,
        red: int,
        green: int,
        blue: int,
        alpha: int,
    ) -> None:
        """Draw strings one below the other, starting at (x, y)."""
        self._print_texts(lines, font, x, y, _argb(alpha, red, green, blue))

    def print_numbers(
        self,
        values: Iterable[float],
        font: int | Font,
        x: float,
        y: float,
        red: int,
        green: int,
        blue: int,
        alpha: int,
    ) -> None:
        """Draw numbers one below the other, to four significant digits."""
        self._print_texts(
            (format(value, ".4g") for value in values),
            font,
            x,
            y,
            _argb(alpha, red, green, blue),
        )