# isotiles

Building blocks for an isometric tile game and its level editor: a sprite
catalog read from comma-separated asset files, a 50 x 50 isometric tile
level, placeable game objects, a graphics surface that records draw
commands, a frame timer, a log and a button panel.

The package has no dependencies outside the standard library.

## Install

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Modules

- `isotiles.log`: `Log` appends records to a text file (`logfile.txt` by
  default), one per line, fields joined by a delimiter (`,` by default).
  `log(*args)`, `log_date()` (`MM.DD.YYYY`), `log_time()` (`HH:MM:SS`) and
  `log_series(typecode, *args)` with type codes `i`, `f` and `d`; an unknown
  code raises `ValueError`. `get_log()` returns one shared instance.
- `isotiles.timer`: `Timer` measures seconds on a monotonic clock:
  `time_difference()`, `interval_elapsed(interval)`, `second_elapsed()` and
  `reset()`. A different clock can be passed to the constructor.
- `isotiles.sprites`: `AssetCatalog.load(path)` reads `texture` and `sprite`
  lines from an asset file, reads each texture file from `graphics_dir`
  (`assets/graphics` by default) and registers the sprites whose texture id
  is listed. `sprite(id)` returns a copy of a `GraphicImage`, or an image
  with `valid` set to False; `texture(id)` returns the texture file's bytes
  or None. `GraphicImage.source_rect()` gives the current frame's rectangle.
- `isotiles.display`: `DisplaySettings` with `aspect_ratio()`,
  `is_mode_supported(modes)` over a list of `DisplayMode`s and
  `refresh_rate_for(current_mode)`; `find_depth_stencil_format(supported)`
  picks `DepthFormat.D32`, then `D24X8`, then `D16`, else `UNKNOWN`.
- `isotiles.graphics`: `Graphics` draws from an `AssetCatalog` by appending
  `DrawCommand`s to its `commands` list: `render_sprite`,
  `render_sprite_scaled`, `print_sprite_number` (0 to 999999, six digit
  sprites from id 1200), `draw_line`, `draw_rect`, `draw_circle`,
  `print_lines` and `print_numbers` in one of the `Font`s.
  `font_height(font)` and `circle_points(x, y, radius)` are also exported.
- `isotiles.level`: `Level` holds the tile grid, tile definitions and
  groups, the editing cursor (`update`), brush painting directly
  (`add_tile`, `remove_tile`) or through the overview map
  (`add_tile_via_map`, `remove_tile_via_map`), water tile oscillation and
  frame animation, drawing (`render`, `render_tile`, `render_map`,
  `draw_grid`), and `save`/`load`. The helpers `calc_iso_row`,
  `calc_iso_col`, `iso_x` and `iso_y` convert between world positions and
  grid cells.
- `isotiles.objects`: `ObjectManager` loads `ObjectDefinition`s
  (`load_definitions`), places `Thing`s (`add_object`, `load_level`),
  removes them (`remove_object`, `clear`), animates and draws them
  (`update`, `render`, `render_at`) and appends them to a level file
  (`save_level`).
- `isotiles.ui`: `UserInterface` tracks the mouse and sets its `state` to a
  `UIState` when a panel button is clicked, toggling `GameData.paused` on the
  pause button. `UIRect` is a screen rectangle with `from_size`, `contains`
  and `absolute`. `GameData` carries the state shared by the panel, the
  level and the objects.

## File formats

Asset file lines:

```
texture, <file id>, <filename>, <description>
sprite, <sprite id>, <file id>, <x>, <y>, <width>, <height>, <scale>, <angle>, <alpha>, <frames>, <start frame>, <frame interval>, <description>
```

Tile definition lines:

```
<id>, <sprite>, <sprite2>, <rating>, <y offset>, <group>, <name>
```

Level files hold one line per placed tile, followed by the lines
`ObjectManager.save_level` appends for placed objects:

```
tile, <tile id>, <row>, <column>
<object name>, <x>, <y>, <z>
```

## Example

```python
from isotiles.graphics import Graphics
from isotiles.level import Level
from isotiles.sprites import AssetCatalog
from isotiles.ui import GameData

catalog = AssetCatalog()
catalog.load("assets/assets.dat")

level = Level()
level.load_tile_definitions(catalog, "assets/tiles.dat")
level.load("levels/level1.dat")

graphics = Graphics(catalog)
level.render(graphics, GameData())
for command in graphics.commands:
    print(command)
```

## What it does not do

- It opens no window and puts nothing on a screen: `Graphics` only records
  `DrawCommand`s, and something else has to present them.
- Texture files are read as raw bytes and are not decoded into images.
- It does not read the mouse or keyboard; positions and button states are
  passed in by the caller, through `GameData` and method arguments.
- It has no game loop and no command to run.