"""Placed level objects: their definitions, animation, drawing and files."""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .level import (
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SpriteSource,
    _atof,
    _atoi,
    _read_rows,
    calc_iso_col,
    calc_iso_row,
)
from .log import Log, get_log
from .ui import GameData

CIRCLE_FOOTPRINT = 0
NO_GROUP_SPRITE = 1
REMOVE_DISTANCE = 100

_MIN_DEFINITION_TERMS = 13
_LEVEL_TERMS = 4
_FIRST_SPRITE_TERM = 10


def _term(terms: list[str], index: int) -> str:
    return terms[index] if 0 <= index < len(terms) else ""


def _format_number(value: float) -> str:
    return format(value, "g")


@dataclass
class ObjectDefinition:
    """A kind of object that can be placed on a level."""

    id: int = 0
    group_id: int = 0
    rating: int = 0
    footprint: int = 0
    radius: float = 0.0
    width_ew: float = 0.0
    width_ns: float = 0.0
    sprite_ids: list[int] = field(default_factory=list)
    sprite_ids2: list[int] = field(default_factory=list)
    sound_ids: list[int] = field(default_factory=list)
    x_offset: float = 0.0
    y_offset: float = 0.0
    name: str = ""

    @property
    def first_sprite(self) -> int:
        """Return the sprite used to draw this object, or -1 if it has none."""
        return self.sprite_ids[0] if self.sprite_ids else -1

    def copy(self) -> "ObjectDefinition":
        """Return an independent copy."""
        return replace(
            self,
            sprite_ids=list(self.sprite_ids),
            sprite_ids2=list(self.sprite_ids2),
            sound_ids=list(self.sound_ids),
        )


def _parse_definition(terms: list[str]) -> ObjectDefinition:
    definition = ObjectDefinition(
        id=_atoi(_term(terms, 0)),
        group_id=_atoi(_term(terms, 1)),
        rating=_atoi(_term(terms, 2)),
        footprint=_atoi(_term(terms, 3)),
    )
    if definition.footprint == CIRCLE_FOOTPRINT:
        definition.radius = _atof(_term(terms, 4))
        # circular objects are always registered under id 0
        definition.id = 0
    else:
        definition.width_ew = _atof(_term(terms, 6))
        definition.width_ns = _atof(_term(terms, 7))

    number_sprites = _atoi(_term(terms, 8))
    number_sounds = int(_atof(_term(terms, 9)))

    for j in range(0, max(number_sprites, 0), 2):
        definition.sprite_ids.append(_atoi(_term(terms, _FIRST_SPRITE_TERM + j)))
        definition.sprite_ids2.append(_atoi(_term(terms, _FIRST_SPRITE_TERM + j + 1)))

    sounds_start = _FIRST_SPRITE_TERM + number_sprites * 2
    definition.sound_ids = [
        _atoi(_term(terms, sounds_start + j)) for j in range(max(number_sounds, 0))
    ]

    tail = sounds_start + number_sounds
    definition.x_offset = _atof(_term(terms, tail))
    definition.y_offset = _atof(_term(terms, tail + 1))
    definition.name = _term(terms, tail + 2)
    return definition


@dataclass
class Thing:
    """One object placed in the world, with its own animation state."""

    definition: ObjectDefinition = field(default_factory=ObjectDefinition)
    position_x: float = 0.0
    position_y: float = 0.0
    position_z: float = 0.0
    tile_row: int = 0
    tile_col: int = 0
    anim_time: float = 0.0
    frame_count: int = 0
    frame_max: int = 1
    update_interval: float = 0.0

    def update(self, time_difference: float) -> None:
        """Advance the animation, wrapping to the first frame after the last."""
        if self.frame_max <= 1:
            return
        self.anim_time += time_difference
        if self.anim_time > self.update_interval:
            self.anim_time = 0.0
            self.frame_count += 1
            if self.frame_count > self.frame_max - 1:
                self.frame_count = 0

    def screen_position(self, data: GameData) -> tuple[float, float]:
        """Return where the object lies on screen for the current camera."""
        px = -self.position_x + data.pos_x
        py = -self.position_y + data.pos_y + self.position_z
        return px, py

    def render(self, graphics: Any, data: GameData) -> None:
        """Draw the object in the left isometric view when it is on screen."""
        if data.view_mode != 0:
            return
        px, py = self.screen_position(data)
        if not (0 < px < SCREEN_WIDTH and 0 < py < SCREEN_HEIGHT):
            return
        image = graphics.sprite(self.definition.first_sprite)
        image.update_interval = self.update_interval
        image.anim_time = self.anim_time
        image.frame_count = self.frame_count
        image.frame_max = self.frame_max
        graphics.render_sprite(
            image,
            px + self.definition.x_offset,
            py + self.definition.y_offset,
            255,
            255,
            255,
        )


class ObjectManager:
    """Object definitions, the selectable group of them and the placed objects."""

    def __init__(self, log: Log | None = None, rng: random.Random | None = None) -> None:
        self._log = log if log is not None else get_log()
        self._rng = rng if rng is not None else random.Random()
        self.definitions: list[ObjectDefinition] = []
        self.group_objects: list[ObjectDefinition] = []
        self.objects: list[Thing] = []
        self.group_id = 0
        self.object_id = -1

    def update(self, time_difference: float) -> None:
        """Advance the animation of every placed object."""
        for thing in self.objects:
            thing.update(time_difference)

    def render(self, graphics: Any, data: GameData) -> None:
        """Draw every placed object."""
        for thing in self.objects:
            thing.render(graphics, data)

    def render_at(self, graphics: Any, data: GameData, row: int, col: int) -> None:
        """Draw the placed objects that stand on one grid cell."""
        for thing in self.objects:
            if thing.tile_row == row and thing.tile_col == col:
                thing.render(graphics, data)

    def load_definitions(self, path: str | Path) -> bool:
        """Read object definitions; return False if the file has no lines.

        Each line is ``id, group, rating, footprint, radius, -, width EW,
        width NS, sprite count, sound count, sprites..., sounds..., x offset,
        y offset, name``; lines of 12 terms or fewer are ignored.
        """
        self._log.log("Loading object definitions")
        self.definitions = []
        rows = _read_rows(path)
        if not rows:
            return False
        self.definitions = [
            _parse_definition(terms)
            for terms in rows
            if len(terms) >= _MIN_DEFINITION_TERMS
        ]
        self._log.log("Number of object definitions loaded", len(self.definitions))
        return True

    def _spawn(
        self,
        definition: ObjectDefinition,
        catalog: SpriteSource,
    ) -> tuple[Thing, Any]:
        image = catalog.sprite(definition.first_sprite)
        thing = Thing(
            definition=definition.copy(),
            anim_time=0.0,
            frame_count=image.frame_count,
            frame_max=image.frame_max,
            update_interval=image.update_interval,
        )
        self.objects.append(thing)
        return thing, image

    def load_level(self, path: str | Path, catalog: SpriteSource) -> None:
        """Replace the placed objects with those of a level file.

        Lines of the form ``name, x, y, z`` whose name matches a definition
        are placed; ``tile`` lines belong to the tile map and are skipped.
        A missing or empty file leaves the objects untouched.
        """
        rows = _read_rows(path)
        if not rows:
            return
        self.objects = []
        for terms in rows:
            if len(terms) != _LEVEL_TERMS or terms[0] == "tile":
                continue
            name = terms[0]
            x = _atof(terms[1])
            y = _atof(terms[2])
            z = _atof(terms[3])
            for definition in self.definitions:
                if definition.name != name:
                    continue
                thing, image = self._spawn(definition, catalog)
                thing.position_x = x
                thing.position_y = y
                thing.position_z = z
                thing.tile_row = calc_iso_row(x, y, 0) + 2
                thing.tile_col = calc_iso_col(x, y, 0) - 1
                if image.frame_max > 0:
                    thing.frame_count = self._rng.randrange(image.frame_max) + 1
                else:
                    thing.frame_count = 0

        for thing in self.objects:
            self._log.log(thing.definition.id, thing.definition.name)
        if len(self.objects) > 1:
            self._log.log(str(path), " loaded objects", len(self.objects))

    def save_level(self, path: str | Path) -> None:
        """Append every placed object to a level file as ``name, x, y, z``."""
        with open(path, "a", encoding="utf-8") as handle:
            for thing in self.objects:
                handle.write(
                    f"{thing.definition.name}, "
                    f"{_format_number(thing.position_x)}, "
                    f"{_format_number(thing.position_y)}, "
                    f"{_format_number(thing.position_z)}\n"
                )

    def add_object(
        self,
        x: float,
        y: float,
        z: float,
        catalog: SpriteSource,
        row: int | None = None,
        col: int | None = None,
    ) -> None:
        """Place the selected object, centred on (x, y) by its sprite's size.

        When a grid cell is given the object is bound to it.
        """
        for definition in self.group_objects:
            if definition.id != self.object_id:
                continue
            thing, image = self._spawn(definition, catalog)
            thing.position_x = x + image.width / 2
            thing.position_y = y + image.height / 2
            thing.position_z = z
            if row is not None and col is not None:
                thing.tile_row = row
                thing.tile_col = col
                self._log.log("Added object")
                self._log.log("X", thing.position_x)
                self._log.log("Y", thing.position_y)
                self._log.log("Z", thing.position_z)
                self._log.log("xOffset", thing.definition.x_offset)
                self._log.log("yOffset", thing.definition.y_offset)

    def clear(self) -> None:
        """Remove every placed object."""
        self.objects.clear()

    def set_group(self, group: int) -> None:
        """Restrict the selectable objects to one group."""
        self.group_id = group
        self.group_objects = [d for d in self.definitions if d.group_id == group]
        self.object_id = 0 if self.group_objects else -1

    def group_object_sprite(self, index: int) -> int:
        """Return the first sprite of an object of the group, or 1 if out of range."""
        if not 0 <= index < len(self.group_objects):
            return NO_GROUP_SPRITE
        return self.group_objects[index].first_sprite

    def set_group_object(self, index: int) -> None:
        """Select an object of the group by index; out-of-range is ignored."""
        if 0 <= index < len(self.group_objects):
            self.object_id = self.group_objects[index].id

    def remove_object(self, x: float, y: float) -> bool:
        """Remove the first object within 100 units of (x, y) on both axes."""
        for index, thing in enumerate(self.objects):
            if (
                x - REMOVE_DISTANCE < thing.position_x < x + REMOVE_DISTANCE
                and y - REMOVE_DISTANCE < thing.position_y < y + REMOVE_DISTANCE
            ):
                del self.objects[index]
                return True
        return False