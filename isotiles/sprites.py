"""Sprite sheet catalogue: texture files and the sprites cut from them."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterator

from .log import Log, get_log

DEFAULT_GRAPHICS_DIR = Path("assets") / "graphics"

_TEXTURE_TERMS = 4
_SPRITE_TERMS = 14

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def _atoi(text: str) -> int:
    """Parse the leading integer of a string, or 0 if there is none."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    """Parse the leading decimal number of a string, or 0.0 if there is none."""
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _read_table(path: str | Path) -> Iterator[list[str]]:
    """Yield the comma-separated, whitespace-trimmed terms of each non-blank line."""
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            if line.strip():
                yield [term.strip() for term in line.rstrip("\r\n").split(",")]


@dataclass
class GraphicImage:
    """A drawable region of a texture, with its animation state."""

    sprite_id: int = 0
    file_id: int = 0
    source_x: int = 0
    source_y: int = 0
    width: int = 0
    height: int = 0
    scale: float = 1.0
    alpha: int = 255
    angle: float = 0.0
    frame_max: int = 1
    frame_count: int = 0
    update_interval: float = 0.0
    anim_time: float = 0.0
    screen_scale: float = 1.0
    valid: bool = False

    def source_rect(self) -> tuple[int, int, int, int]:
        """Return (left, top, right, bottom) of the current frame on its texture."""
        left = self.source_x
        if self.frame_max > 1:
            left += self.frame_count * self.width
        return (left, self.source_y, left + self.width, self.source_y + self.height)


@dataclass
class TextureFile:
    """A texture entry of the asset file."""

    file_id: int
    filename: str
    description: str = ""


@dataclass
class SpriteData:
    """A sprite entry of the asset file, as written there."""

    sprite_id: int
    file_id: int
    x: float
    y: float
    width: float
    height: float
    scale: float
    angle: float
    alpha: int
    number_frames: int
    frame_count: int
    time_between_frames: float
    description: str = ""

    def to_image(self) -> GraphicImage:
        """Build the drawable image for this entry, starting at frame 1."""
        return GraphicImage(
            sprite_id=self.sprite_id,
            file_id=self.file_id,
            source_x=int(self.x),
            source_y=int(self.y),
            width=int(self.width),
            height=int(self.height),
            scale=self.scale,
            alpha=self.alpha,
            angle=self.angle,
            frame_max=self.number_frames,
            frame_count=1,
            update_interval=self.time_between_frames,
            anim_time=0.0,
            screen_scale=1.0,
            valid=False,
        )


def _parse_texture(terms: list[str]) -> TextureFile:
    return TextureFile(file_id=_atoi(terms[1]), filename=terms[2], description=terms[3])


def _parse_sprite(terms: list[str]) -> SpriteData:
    return SpriteData(
        sprite_id=_atoi(terms[1]),
        file_id=_atoi(terms[2]),
        x=_atof(terms[3]),
        y=_atof(terms[4]),
        width=_atof(terms[5]),
        height=_atof(terms[6]),
        scale=_atof(terms[7]),
        angle=_atof(terms[8]),
        alpha=_atoi(terms[9]),
        number_frames=_atoi(terms[10]),
        frame_count=_atoi(terms[11]),
        time_between_frames=_atof(terms[12]),
        description=terms[13],
    )


class AssetCatalog:
    """Texture files and sprite definitions read from an asset file."""

    def __init__(
        self,
        graphics_dir: str | Path = DEFAULT_GRAPHICS_DIR,
        log: Log | None = None,
    ) -> None:
        self.graphics_dir = Path(graphics_dir)
        self._log = log if log is not None else get_log()
        self.files: list[TextureFile] = []
        self.sprite_data: list[SpriteData] = []
        self.sprites: list[GraphicImage] = []
        self._textures: dict[int, bytes] = {}

    def load(self, path: str | Path) -> None:
        """Read an asset file, load its textures and register its sprites.

        Lines of the form ``texture, id, filename, description`` and
        ``sprite, id, file id, x, y, width, height, scale, angle, alpha,
        frames, start frame, frame interval, description`` are used; other
        lines are ignored. Sprites whose texture id is not listed are dropped.
        """
        new_files: list[TextureFile] = []
        new_sprites: list[SpriteData] = []
        for terms in _read_table(path):
            if len(terms) <= 1:
                continue
            kind = terms[0]
            if kind == "texture" and len(terms) == _TEXTURE_TERMS:
                new_files.append(_parse_texture(terms))
            elif kind == "sprite" and len(terms) == _SPRITE_TERMS:
                new_sprites.append(_parse_sprite(terms))

        self.files.extend(new_files)
        self.sprite_data.extend(new_sprites)

        for entry in new_files:
            self.load_texture(entry.file_id, self.graphics_dir / entry.filename)

        self._log.log("Exit loading of files")

        known_ids = {entry.file_id for entry in self.files}
        for data in new_sprites:
            if data.file_id in known_ids:
                image = data.to_image()
                image.valid = True
                self.sprites.append(image)

    def load_texture(self, file_id: int, path: str | Path) -> bool:
        """Load a texture file under an id; return False if it cannot be read."""
        try:
            data = Path(path).read_bytes()
        except OSError:
            self._log.log("Failed to load texture file ", str(path))
            return False
        self._log.log("Texture loaded correctly!")
        self._textures.setdefault(file_id, data)
        return True

    def texture(self, file_id: int) -> bytes | None:
        """Return the contents of the texture with this id, or None."""
        return self._textures.get(file_id)

    def sprite(self, sprite_id: int) -> GraphicImage:
        """Return a copy of the sprite with this id, or an invalid image."""
        for image in self.sprites:
            if image.sprite_id == sprite_id:
                return replace(image)
        return GraphicImage(valid=False)

    def clear(self) -> None:
        """Forget every texture, sprite and asset entry."""
        self._textures.clear()
        self.sprites.clear()
        self.sprite_data.clear()
        self.files.clear()