"""Isometric tile map: editing, picking, animation and drawing of a level."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Protocol

from .log import Log, get_log
from .sprites import GraphicImage
from .ui import GameData

MAX_ROWS = 50
MAX_COLS = 50
TILE_WIDTH = 128
TILE_HEIGHT = 64
SCREEN_WIDTH = 1024
SCREEN_HEIGHT = 768
WATER_TILE_ID = 9
MAP_SPRITE = 2020
MIN_RATING = 1
MAX_RATING = 5

_DEFINITION_TERMS = 7
_LEVEL_TERMS = 4
_OSCILLATION_SPEED = 5.0
_OSCILLATION_TOP = 8
_GRID_COLOR = (30, 30, 30)

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _read_rows(path: str | Path) -> list[list[str]]:
    """Return the trimmed comma-separated terms of each non-blank line, or []."""
    try:
        with open(path, encoding="utf-8") as handle:
            return [
                [term.strip() for term in line.rstrip("\r\n").split(",")]
                for line in handle
                if line.strip()
            ]
    except OSError:
        return []


class SpriteSource(Protocol):
    def sprite(self, sprite_id: int) -> GraphicImage: ...


@dataclass
class LevelTile:
    """A tile definition, or one placed cell of the level grid."""

    id: int = -1
    sprite: int = 0
    sprite2: int = 0
    rating: int = 0
    y_offset: float = 0.0
    y_normal_offset: float = 0.0
    group_id: int = 0
    name: str = ""
    gi: GraphicImage = field(default_factory=GraphicImage)
    gi2: GraphicImage = field(default_factory=GraphicImage)

    def copy(self) -> "LevelTile":
        """Return an independent copy, images included."""
        return replace(self, gi=replace(self.gi), gi2=replace(self.gi2))


def calc_iso_row(x: float, y: float, view_mode: int) -> int:
    """Return the grid row under a world position."""
    if view_mode == 0:
        return int(((y + 1613) / 32 - (x + 3134) / 64) / -2)
    if view_mode == 1:
        return int(((x + 3134) / -64 + (y + 1613) / -32) / 2)
    return 0


def calc_iso_col(x: float, y: float, view_mode: int) -> int:
    """Return the grid column under a world position."""
    if view_mode == 0:
        return int(((x + 3134) / -64 + (y + 1613) / -32) / 2)
    if view_mode == 1:
        return int(50 - ((y + 1613) / 32 - (x + 3134) / 64) / -2)
    return 0


def iso_x(col: int, row: int, view_mode: int) -> float:
    """Return the world x position of a grid cell."""
    if view_mode == 0:
        return float(-3134 + row * 64 - col * 64)
    if view_mode == 1:
        return float(1 - row * 64 - col * 64)
    return 0.0


def iso_y(col: int, row: int, view_mode: int) -> float:
    """Return the world y position of a grid cell."""
    if view_mode == 0:
        return float(-1613 - col * 32 - row * 32)
    if view_mode == 1:
        return float(-3187 + row * 32 - col * 64)
    return 0.0


def _brush_cells(row: float, col: float, brush_size: int) -> list[tuple[int, int]]:
    """Return the grid cells a brush covers, or [] if it does not fit."""
    if brush_size == 1:
        if 0 <= row < MAX_ROWS and 0 <= col < MAX_COLS:
            return [(int(row), int(col))]
    elif brush_size == 2:
        if 1 <= row < MAX_ROWS - 1 and 1 <= col < MAX_COLS - 1:
            r, c = int(row), int(col)
            return [(r + dr, c + dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1)]
    return []


def _map_cell(mx: int, my: int) -> tuple[int, int]:
    return int((mx - 272) / 10), int((my - 104) / 10)


class Level:
    """A MAX_ROWS by MAX_COLS isometric grid of tiles with an editing cursor."""

    def __init__(self, log: Log | None = None, rng: random.Random | None = None) -> None:
        self._log = log if log is not None else get_log()
        self._rng = rng if rng is not None else random.Random()
        self.view_mode = 0
        self.offset_x = (MAX_COLS - 1) * 64
        self.offset_y = self.offset_x // 2
        self.tile_id = 0
        self.iso_row = 0.0
        self.iso_col = 0.0
        self.tile_width = TILE_WIDTH
        self.tile_height = TILE_HEIGHT
        self.show_grid = True
        self.current_rating = 1
        self.level_scale = 1.0
        self.group_index = 0
        self.oscillate = 1.0
        self._osc_up = False
        self.pos_x = 0.0
        self.pos_y = 0.0
        self.y_intercept1 = 0.0
        self.y_intercept2 = 0.0
        self.definitions: list[LevelTile] = []
        self.group_tiles: list[LevelTile] = []
        self.tiles: list[list[LevelTile]] = []
        self.clear_tiles()

    # -- per-frame work -------------------------------------------------

    def update(
        self,
        pos_x: float,
        pos_y: float,
        mouse_x: float,
        mouse_y: float,
        time_difference: float,
        data: GameData,
    ) -> None:
        """Move the cursor to the cell under the mouse and advance animations."""
        if not self._osc_up:
            self.oscillate += time_difference * _OSCILLATION_SPEED
            if self.oscillate > _OSCILLATION_TOP:
                self._osc_up = True
        else:
            self.oscillate -= time_difference * _OSCILLATION_SPEED
            if self.oscillate < 0:
                self._osc_up = False

        if data.show_map:
            if 263 < mouse_x < 763 and 104 < mouse_y < 604:
                self.iso_col = (mouse_x - 262) / 10
                self.iso_row = (mouse_y - 104) / 10
        elif self.view_mode in (0, 1):
            dx = (mouse_x - pos_x) - self.offset_x
            dy = (mouse_y - pos_y) - self.offset_y - data.windowed_y_offset
            self.y_intercept1 = dy - dx * 0.5
            self.y_intercept2 = self.offset_x + dy + dx * 0.5
            if self.view_mode == 0:
                self.iso_row = (self.y_intercept1 - 32) / 64
                self.iso_col = (self.y_intercept2 - 32) / 64 - (MAX_COLS - 1)
            else:
                self.iso_col = float(MAX_COLS - int((self.y_intercept1 - 32) / 64) - 1)
                self.iso_row = (self.y_intercept2 - 32) / 64 - (MAX_ROWS - 1)

        self.pos_x = pos_x
        self.pos_y = pos_y

        for line in self.tiles:
            for tile in line:
                image = tile.gi
                if image.frame_max > 1:
                    image.anim_time += time_difference
                    if image.anim_time > image.update_interval:
                        image.anim_time = 0.0
                        image.frame_count += 1
                        if image.frame_count > image.frame_max - 1:
                            image.frame_count = 0
                    tile.gi2.frame_count = image.frame_count
                if tile.id == WATER_TILE_ID:
                    tile.y_offset = self.oscillate + tile.y_normal_offset

    # -- drawing --------------------------------------------------------

    def _visible(self, px: float, py: float) -> bool:
        return (
            -self.tile_width * 2 < px < SCREEN_WIDTH + self.tile_width * 2
            and -self.tile_height * 2 < py < SCREEN_HEIGHT + self.tile_height * 2
        )

    def _left_position(self, first: int, second: int, y_offset: float) -> tuple[float, float]:
        half_w = self.tile_width // 2
        half_h = self.tile_height // 2
        px = self.pos_x + self.offset_x - half_w + second * half_w - first * half_w
        py = self.pos_y + self.offset_y + half_h + first * half_h + second * half_h + y_offset
        return px, py

    def _right_position(self, first: int, second: int, y_offset: float) -> tuple[float, float]:
        half_w = self.tile_width // 2
        half_h = self.tile_height // 2
        px = self.pos_x + self.offset_x - MAX_COLS * half_w + first * half_w + second * half_w
        py = (
            self.pos_y + self.offset_y + MAX_ROWS * half_h
            - second * half_h + first * half_h + y_offset
        )
        return px, py

    def _render_left(self, graphics: Any, first: int, second: int) -> None:
        tile = self.tiles[first][second]
        if tile.rating > self.current_rating:
            tile = self.tile_definition(0)
        px, py = self._left_position(first, second, tile.y_offset)
        if self._visible(px, py):
            graphics.render_sprite(tile.gi, px, py, 255, 255, 255)

    def render(self, graphics: Any, data: GameData) -> None:
        """Draw every visible tile of the level in the current view mode."""
        self.level_scale = 1.0
        if self.view_mode == 0:
            for second in range(MAX_ROWS):
                for first in range(MAX_COLS):
                    self._render_left(graphics, first, second)
        elif self.view_mode == 1:
            for first in range(MAX_ROWS):
                for second in reversed(range(MAX_COLS)):
                    tile = self.tiles[first][second]
                    if tile.rating <= self.current_rating:
                        image = tile.gi2
                    else:
                        tile = self.tile_definition(0)
                        image = tile.gi
                    px, py = self._right_position(first, second, tile.y_offset)
                    if self._visible(px, py):
                        graphics.render_sprite(image, px, py, 255, 255, 255)

    def render_tile(self, graphics: Any, data: GameData, row: int, col: int) -> None:
        """Draw the single tile at a row and column in the left view."""
        self.level_scale = 1.0
        self._render_left(graphics, col, row)

    def render_map(self, graphics: Any) -> None:
        """Draw the overview map: a 10x10 pixel swatch for each cell."""
        x, y = 263, 50
        graphics.render_sprite(graphics.sprite(MAP_SPRITE), x, y, 255, 255, 255)
        for i, line in enumerate(self.tiles):
            for j, cell in enumerate(line):
                image = replace(cell.gi)
                image.source_x += image.width // 2 - 5
                image.width = 10
                image.height = 10
                image.frame_max = 1
                graphics.render_sprite(image, x + 10 + j * 10, y + 54 + i * 10, 255, 255, 255)

    def draw_grid(self, graphics: Any) -> None:
        """Outline every cell of the grid when the grid is shown."""
        if not self.show_grid:
            return
        offset_x = float(self.offset_x)
        offset_y = float(self.offset_y)
        half_w = TILE_WIDTH // 2
        half_h = TILE_HEIGHT // 2
        for _ in range(MAX_ROWS):
            offset_x -= half_w
            offset_y += half_h
            for i in range(MAX_COLS):
                base_x = self.pos_x + offset_x + i * half_w
                base_y = self.pos_y + offset_y + i * half_h
                x1, y1 = base_x + half_w, base_y
                x2, y2 = base_x + TILE_WIDTH, base_y + half_h
                x3, y3 = base_x + half_w, base_y + TILE_HEIGHT
                graphics.draw_line(x1, y1, x2, y2, *_GRID_COLOR)
                graphics.draw_line(x2, y2, x3, y3, *_GRID_COLOR)

    # -- editing --------------------------------------------------------

    def clear_tiles(self) -> None:
        """Empty every cell of the grid."""
        self.tiles = [[LevelTile() for _ in range(MAX_COLS)] for _ in range(MAX_ROWS)]

    def _randomize_frames(self, tile: LevelTile) -> None:
        for image in (tile.gi, tile.gi2):
            if image.frame_count == -1 and image.frame_max > 0:
                image.frame_count = self._rng.randrange(image.frame_max) + 1

    def _paint(self, cells: list[tuple[int, int]], brush_size: int) -> None:
        if not cells or not 0 <= self.tile_id < len(self.group_tiles):
            return
        template = self.group_tiles[self.tile_id]
        template.y_normal_offset = template.y_offset
        for row, col in cells:
            tile = template.copy()
            if brush_size == 1:
                self._randomize_frames(tile)
            self.tiles[row][col] = tile

    def add_tile(self, brush_size: int) -> None:
        """Place the selected group tile at the cursor with a 1x1 or 3x3 brush."""
        self._paint(_brush_cells(self.iso_row, self.iso_col, brush_size), brush_size)

    def add_tile_via_map(self, mx: int, my: int, brush_size: int) -> None:
        """Place the selected group tile at the map cell under a screen point."""
        col, row = _map_cell(mx, my)
        if self.tile_id < len(self.definitions):
            self._paint(_brush_cells(row, col, brush_size), brush_size)
        self.iso_row = float(row)
        self.iso_col = float(col)

    def remove_tile(self) -> None:
        """Empty the cell under the cursor."""
        for row, col in _brush_cells(self.iso_row, self.iso_col, 1):
            self.tiles[row][col] = LevelTile()

    def remove_tile_via_map(self, mx: int, my: int, brush_size: int) -> None:
        """Empty the map cells under a screen point with a 1x1 or 3x3 brush."""
        col, row = _map_cell(mx, my)
        for r, c in _brush_cells(row, col, brush_size):
            self.tiles[r][c] = LevelTile()
        self.iso_row = float(row)
        self.iso_col = float(col)

    def inc_tile_id(self) -> None:
        """Select the next tile, stopping at the last definition."""
        self.tile_id += 1
        if self.definitions and self.tile_id > len(self.definitions) - 1:
            self.tile_id = len(self.definitions) - 1

    def dec_tile_id(self) -> None:
        """Select the previous tile, stopping at the first."""
        self.tile_id = max(self.tile_id - 1, 0)

    def set_tile_id(self, tile_id: int) -> None:
        """Select a tile by index; out-of-range indices are ignored."""
        if 0 <= tile_id < len(self.definitions):
            self.tile_id = tile_id

    # -- files ----------------------------------------------------------

    def load_tile_definitions(self, catalog: SpriteSource, path: str | Path) -> bool:
        """Read tile definitions; return False if the file has no lines.

        Each line is ``id, sprite, sprite2, rating, y offset, group, name``.
        """
        self._log.log("Loading tile definitions")
        self.clear_tiles()
        rows = _read_rows(path)
        if not rows:
            return False
        for terms in rows:
            if len(terms) != _DEFINITION_TERMS:
                continue
            sprite = _atoi(terms[1])
            sprite2 = _atoi(terms[2])
            self.definitions.append(
                LevelTile(
                    id=_atoi(terms[0]),
                    sprite=sprite,
                    sprite2=sprite2,
                    rating=_atoi(terms[3]),
                    y_offset=_atof(terms[4]),
                    group_id=_atoi(terms[5]),
                    name=terms[6],
                    gi=catalog.sprite(sprite),
                    gi2=catalog.sprite(sprite2),
                )
            )
        self._log.log("Number of tiles loaded", len(self.definitions))
        self.set_group(0)
        return True

    def save(self, path: str | Path) -> None:
        """Write every occupied cell as a ``tile, id, row, col`` line."""
        with open(path, "w", encoding="utf-8") as handle:
            for i, line in enumerate(self.tiles):
                for j, tile in enumerate(line):
                    if tile.id > -1:
                        handle.write(f"tile, {tile.id}, {i}, {j}\n")

    def load(self, path: str | Path) -> bool:
        """Replace the grid with a saved level; return False if it has no lines."""
        rows = _read_rows(path)
        if not rows:
            return False
        self.clear_tiles()
        known = {definition.id for definition in self.definitions}
        for terms in rows:
            if len(terms) != _LEVEL_TERMS or terms[0] != "tile":
                continue
            tile_id = _atoi(terms[1])
            row = _atoi(terms[2])
            col = _atoi(terms[3])
            if tile_id in known and 0 <= row < MAX_ROWS and 0 <= col < MAX_COLS:
                tile = self.tile_definition(tile_id)
                tile.y_normal_offset = tile.y_offset
                self._randomize_frames(tile)
                self.tiles[row][col] = tile
        return True

    # -- queries --------------------------------------------------------

    def _find(self, tile_id: int) -> LevelTile | None:
        return next((d for d in self.definitions if d.id == tile_id), None)

    def tile_name(self, tile_id: int) -> str:
        """Return the name of the definition with this id, or ''."""
        found = self._find(tile_id)
        return found.name if found else ""

    def current_tile_name(self) -> str:
        """Return the name of the definition at the selected index."""
        if not 0 <= self.tile_id < len(self.definitions):
            raise IndexError(f"no tile definition at index {self.tile_id}")
        return self.definitions[self.tile_id].name

    def tile_sprite(self, tile_id: int) -> int:
        """Return the sprite of the definition with this id, or -1."""
        if tile_id < 0:
            return -1
        found = self._find(tile_id)
        return found.sprite if found else -1

    def tile_rating(self, tile_id: int) -> int:
        """Return the rating of the definition with this id, or -1."""
        if tile_id < 0:
            return -1
        found = self._find(tile_id)
        return found.rating if found else -1

    def tile_y_offset(self, tile_id: int) -> float:
        """Return the y offset of the definition with this id, or 0."""
        if tile_id < 0:
            return -1.0
        found = self._find(tile_id)
        return found.y_offset if found else 0.0

    def y_offset_at(self, x: float, y: float) -> float:
        """Return the y offset of the cell at a world position, or 0 outside."""
        row = calc_iso_row(x, y, 0)
        col = calc_iso_col(x, y, 0)
        if not (0 <= row < MAX_ROWS and 0 <= col < MAX_COLS):
            return 0.0
        return self.tiles[row][col].y_offset

    def set_current_rating(self, rating: int) -> None:
        """Set the highest tile rating drawn as itself; 1 to 5, else ignored."""
        if MIN_RATING <= rating <= MAX_RATING:
            self.current_rating = rating

    # -- groups ---------------------------------------------------------

    def set_group(self, group: int) -> None:
        """Restrict the selectable tiles to one group and select its first."""
        self.group_index = group
        self.group_tiles = [d.copy() for d in self.definitions if d.group_id == group]
        self.tile_id = 0 if self.group_tiles else -1

    def set_group_tile_id(self, index: int) -> None:
        """Select a tile of the current group; out-of-range indices are ignored."""
        if 0 <= index < len(self.group_tiles):
            self.tile_id = index

    def _group_tile(self, index: int) -> LevelTile | None:
        if 0 <= index < len(self.group_tiles):
            return self.group_tiles[index]
        return None

    def group_tile_sprite(self, index: int) -> int:
        """Return the sprite of a tile of the current group, or -1."""
        tile = self._group_tile(index)
        return tile.sprite if tile else -1

    def group_tile_rating(self, index: int) -> int:
        """Return the rating of a tile of the current group, or -1."""
        tile = self._group_tile(index)
        return tile.rating if tile else -1

    def group_tile_y_offset(self, index: int) -> float:
        """Return the y offset of a tile of the current group, or -1."""
        tile = self._group_tile(index)
        return tile.y_offset if tile else -1.0

    def tile_definition(self, tile_id: int) -> LevelTile:
        """Return a copy of the definition with this id, or an empty tile."""
        found = self._find(tile_id)
        return found.copy() if found else LevelTile(id=-1)