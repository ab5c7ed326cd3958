import random
from dataclasses import replace

import pytest

from isotiles.level import (
    MAX_COLS,
    MAX_ROWS,
    WATER_TILE_ID,
    Level,
    LevelTile,
    calc_iso_col,
    calc_iso_row,
    iso_x,
    iso_y,
)
from isotiles.log import Log
from isotiles.sprites import GraphicImage
from isotiles.ui import GameData


class RecordingGraphics:
    def __init__(self, sprites):
        self._sprites = sprites
        self.calls = []
        self.lines = []

    def sprite(self, sprite_id):
        return replace(self._sprites.get(sprite_id, GraphicImage(valid=False)))

    def render_sprite(self, image, x, y, red, green, blue):
        self.calls.append((image, x, y))

    def draw_line(self, x1, y1, x2, y2, red, green, blue):
        self.lines.append((x1, y1, x2, y2))


SPRITES = {
    sid: GraphicImage(sprite_id=sid, width=128, height=64, valid=True)
    for sid in (100, 101, 200, 201, 300, 301)
}
SPRITES[400] = GraphicImage(sprite_id=400, width=128, height=64, frame_max=4, frame_count=-1, valid=True)

TILES_FILE = (
    "0, 100, 101, 1, 0, 0, grass\n"
    "5, 200, 201, 3, -4.5, 0, rock\n"
    "9, 300, 301, 1, 2, 1, water\n"
    "7, 400, 400, 1, 0, 2, flag\n"
)


@pytest.fixture
def graphics():
    return RecordingGraphics(SPRITES)


@pytest.fixture
def level(tmp_path, graphics):
    lvl = Level(log=Log(str(tmp_path / "log.txt")), rng=random.Random(1))
    path = tmp_path / "tiles.dat"
    path.write_text(TILES_FILE, encoding="utf-8")
    assert lvl.load_tile_definitions(graphics, path) is True
    return lvl


@pytest.mark.parametrize("row,col", [(0, 0), (3, 7), (49, 0), (12, 49), (25, 25)])
def test_iso_position_round_trip(row, col):
    x = iso_x(col, row, 0)
    y = iso_y(col, row, 0)
    assert calc_iso_row(x, y, 0) == row
    assert calc_iso_col(x, y, 0) == col


def test_unknown_view_mode_gives_zero():
    assert calc_iso_row(10.0, 20.0, 7) == 0
    assert calc_iso_col(10.0, 20.0, 7) == 0
    assert iso_x(3, 4, 7) == 0.0
    assert iso_y(3, 4, 7) == 0.0


def test_definitions_loaded_and_grouped(level):
    assert [d.id for d in level.definitions] == [0, 5, 9, 7]
    assert level.tile_name(5) == "rock"
    assert level.tile_sprite(9) == 300
    assert level.tile_rating(5) == 3
    assert level.tile_y_offset(5) == -4.5
    assert [t.id for t in level.group_tiles] == [0, 5]
    assert level.tile_id == 0


def test_unknown_definition_queries(level):
    assert level.tile_name(42) == ""
    assert level.tile_sprite(42) == -1
    assert level.tile_sprite(-3) == -1
    assert level.tile_rating(42) == -1
    assert level.tile_y_offset(42) == 0.0
    assert level.tile_definition(42).id == -1


def test_load_definitions_missing_file(tmp_path, graphics):
    lvl = Level(log=Log(str(tmp_path / "log.txt")))
    assert lvl.load_tile_definitions(graphics, tmp_path / "absent.dat") is False
    assert lvl.definitions == []


def test_set_group_empty_selects_nothing(level):
    level.set_group(77)
    assert level.group_tiles == []
    assert level.tile_id == -1
    assert level.group_tile_sprite(0) == -1
    assert level.group_tile_rating(0) == -1
    assert level.group_tile_y_offset(0) == -1.0


def test_group_tile_queries(level):
    level.set_group(1)
    assert level.group_tile_sprite(0) == 300
    assert level.group_tile_rating(0) == 1
    assert level.group_tile_y_offset(0) == 2.0
    level.set_group_tile_id(5)
    assert level.tile_id == 0


def test_add_tile_single_places_independent_copy(level):
    level.set_group(0)
    level.set_group_tile_id(1)
    level.iso_row, level.iso_col = 4.7, 6.2
    level.add_tile(1)
    placed = level.tiles[4][6]
    assert placed.id == 5
    assert placed.y_normal_offset == placed.y_offset
    placed.gi.width = 1
    assert level.tile_definition(5).gi.width == SPRITES[200].width
    assert level.tiles[4][7].id == -1


def test_add_tile_brush_two_fills_neighbourhood(level):
    level.iso_row, level.iso_col = 10.0, 20.0
    level.add_tile(2)
    filled = {(r, c) for r in range(MAX_ROWS) for c in range(MAX_COLS) if level.tiles[r][c].id != -1}
    assert filled == {(r, c) for r in (9, 10, 11) for c in (19, 20, 21)}


def test_add_tile_brush_two_rejected_on_edge(level):
    level.iso_row, level.iso_col = 0.0, 5.0
    level.add_tile(2)
    assert all(t.id == -1 for line in level.tiles for t in line)


def test_add_tile_randomizes_unset_frames(level):
    level.set_group(2)
    level.iso_row, level.iso_col = 2.0, 2.0
    level.add_tile(1)
    frame = level.tiles[2][2].gi.frame_count
    assert 1 <= frame <= SPRITES[400].frame_max


def test_add_and_remove_via_map(level):
    row, col = 8, 13
    mx = 272 + col * 10 + 5
    my = 104 + row * 10 + 5
    level.add_tile_via_map(mx, my, 1)
    assert level.tiles[row][col].id == 0
    assert (level.iso_row, level.iso_col) == (row, col)
    level.remove_tile_via_map(mx, my, 1)
    assert level.tiles[row][col].id == -1


def test_remove_tile_at_cursor(level):
    level.iso_row, level.iso_col = 3.0, 3.0
    level.add_tile(1)
    level.remove_tile()
    assert level.tiles[3][3] == LevelTile()


def test_save_and_load_round_trip(level, tmp_path):
    level.iso_row, level.iso_col = 5.0, 9.0
    level.set_group_tile_id(1)
    level.add_tile(1)
    path = tmp_path / "level.dat"
    level.save(path)
    assert path.read_text(encoding="utf-8") == "tile, 5, 5, 9\n"
    level.clear_tiles()
    assert level.load(path) is True
    assert level.tiles[5][9].id == 5
    assert level.tiles[5][9].y_normal_offset == level.tile_y_offset(5)


def test_load_ignores_unknown_ids_and_bad_cells(level, tmp_path):
    path = tmp_path / "level.dat"
    path.write_text("tile, 42, 1, 1\ntile, 0, 60, 1\ntile, 0, 2, 3\n", encoding="utf-8")
    assert level.load(path) is True
    occupied = [(r, c) for r in range(MAX_ROWS) for c in range(MAX_COLS) if level.tiles[r][c].id != -1]
    assert occupied == [(2, 3)]


def test_load_missing_file(level, tmp_path):
    assert level.load(tmp_path / "nothing.dat") is False


def test_tile_id_stepping_clamps(level):
    for _ in range(10):
        level.inc_tile_id()
    assert level.tile_id == len(level.definitions) - 1
    for _ in range(10):
        level.dec_tile_id()
    assert level.tile_id == 0
    level.set_tile_id(99)
    assert level.tile_id == 0
    level.set_tile_id(2)
    assert level.current_tile_name() == "water"


def test_current_tile_name_without_selection(level):
    level.set_group(77)
    with pytest.raises(IndexError):
        level.current_tile_name()


def test_current_rating_bounds(level):
    level.set_current_rating(4)
    assert level.current_rating == 4
    level.set_current_rating(0)
    level.set_current_rating(6)
    assert level.current_rating == 4


def test_y_offset_at_cell(level):
    level.set_group(0)
    level.set_group_tile_id(1)
    level.iso_row, level.iso_col = 6.0, 11.0
    level.add_tile(1)
    x, y = iso_x(11, 6, 0), iso_y(11, 6, 0)
    assert level.y_offset_at(x, y) == level.tile_y_offset(5)
    assert level.y_offset_at(1.0e6, 1.0e6) == 0.0


def test_update_water_oscillates(level):
    level.set_group(1)
    level.iso_row, level.iso_col = 1.0, 1.0
    level.add_tile(1)
    water = level.tiles[1][1]
    assert water.id == WATER_TILE_ID
    before = level.oscillate
    level.update(0.0, 0.0, 0.0, 0.0, 0.1, GameData())
    assert level.oscillate > before
    assert water.y_offset == level.oscillate + water.y_normal_offset


def test_update_advances_animation(level):
    tile = level.tile_definition(0)
    tile.gi.frame_max = 3
    tile.gi.update_interval = 0.5
    tile.gi.frame_count = 1
    level.tiles[0][0] = tile
    level.update(0.0, 0.0, 0.0, 0.0, 0.6, GameData())
    assert tile.gi.frame_count == 2
    assert tile.gi2.frame_count == tile.gi.frame_count
    level.update(0.0, 0.0, 0.0, 0.0, 0.6, GameData())
    assert tile.gi.frame_count == 0


def test_update_map_picking(level):
    level.update(0.0, 0.0, 262 + 70, 104 + 30, 0.0, GameData(show_map=True))
    assert (level.iso_row, level.iso_col) == (3.0, 7.0)


def test_render_tile_uses_rating(level, graphics):
    level.set_group(0)
    level.set_group_tile_id(1)
    level.iso_row, level.iso_col = 2.0, 2.0
    level.add_tile(1)
    level.pos_x = -level.offset_x
    level.pos_y = -level.offset_y
    level.render_tile(graphics, GameData(), 2, 2)
    assert graphics.calls[-1][0].sprite_id == 100
    level.set_current_rating(3)
    level.render_tile(graphics, GameData(), 2, 2)
    assert graphics.calls[-1][0].sprite_id == 200


def test_render_skips_offscreen(level, graphics):
    level.pos_x = 1.0e6
    level.pos_y = 1.0e6
    level.render(graphics, GameData())
    assert graphics.calls == []


def test_render_map_swatches(level, graphics):
    level.render_map(graphics)
    assert len(graphics.calls) == 1 + MAX_ROWS * MAX_COLS
    assert all(img.width == 10 and img.height == 10 for img, _, _ in graphics.calls[1:])


def test_draw_grid_toggle(level, graphics):
    level.draw_grid(graphics)
    assert len(graphics.lines) == 2 * MAX_ROWS * MAX_COLS
    graphics.lines.clear()
    level.show_grid = False
    level.draw_grid(graphics)
    assert graphics.lines == []