"""Screen rectangles, shared game state and the in-game control panel."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


@dataclass(frozen=True)
class UIRect:
    """Axis-aligned screen rectangle given by its two corners."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, width: int, height: int) -> "UIRect":
        """Build a rectangle from its top-left corner and size."""
        return cls(x, y, x + width, y + height)

    def contains(self, x: float, y: float) -> bool:
        """Return True if the point lies strictly inside the rectangle."""
        return self.x1 < x < self.x2 and self.y1 < y < self.y2

    def absolute(self, inner: "UIRect") -> "UIRect":
        """Translate a rectangle given relative to this one's top-left corner."""
        return UIRect(
            self.x1 + inner.x1,
            self.y1 + inner.y1,
            self.x1 + inner.x2,
            self.y1 + inner.y2,
        )


class UIState(IntEnum):
    """Last control activated on the panel."""

    NONE = 0
    SEND_WAVE = 1
    QUIT = 2
    PAUSE_PLAY = 3
    TIMES1 = 4
    TIMES2 = 5
    HELP = 6
    DEF1 = 7
    DEF2 = 8
    DEF3 = 9
    DEF4 = 10
    DEF5 = 11


@dataclass
class GameData:
    """Game-wide state shared between the panel, the level and its objects."""

    left_mouse_down: bool = False
    right_mouse_down: bool = False
    paused: bool = False
    show_map: bool = False
    windowed_y_offset: float = 0.0
    view_mode: int = 0
    pos_x: float = 0.0
    pos_y: float = 0.0


_CLICK_DELAY = 0.4
_PANEL_SPRITE = 1500
_PAUSED_SPRITE = 1502


class UserInterface:
    """Control panel at the bottom of the screen that reacts to mouse clicks."""

    def __init__(self) -> None:
        self.mouse_x = -1
        self.mouse_y = -1
        self.left_button_down = False
        self.right_button_down = False
        self.last_mouse_x = -1
        self.last_mouse_y = -1
        self.last_left_button_down = False
        self.last_right_button_down = False
        self.state = UIState.NONE
        self._pause_time = 0.0
        self._key_time = 0.0
        self._scale_time = 0.0

        # displays
        self.wave_count = UIRect(86, 687, 140, 710)
        self.score = UIRect(134, 733, 239, 755)
        self.credits = UIRect(856, 731, 952, 755)

        # buttons
        self.send_wave_button = UIRect(157, 686, 284, 712)
        self.quit = UIRect(535, 644, 600, 670)
        self.pause_play = UIRect(385, 644, 448, 671)
        self.times1 = UIRect(461, 644, 487, 671)
        self.times2 = UIRect(498, 644, 525, 678)
        self.defences = (
            UIRect(313, 675, 361, 727),
            UIRect(361, 675, 410, 727),
            UIRect(410, 675, 460, 727),
            UIRect(460, 675, 510, 727),
            UIRect(510, 675, 559, 727),
            UIRect(559, 675, 609, 727),
            UIRect(609, 675, 659, 727),
            UIRect(659, 675, 707, 727),
        )
        self.help = UIRect(612, 643, 639, 691)
        self.sound = UIRect(960, 728, 990, 758)
        self.music = UIRect(960, 728, 990, 758)

        defence_states = (
            UIState.DEF1,
            UIState.DEF2,
            UIState.DEF3,
            UIState.DEF4,
            UIState.DEF5,
            UIState.NONE,
            UIState.NONE,
            UIState.NONE,
        )
        self._buttons: tuple[tuple[UIRect, UIState], ...] = (
            (self.send_wave_button, UIState.SEND_WAVE),
            (self.quit, UIState.QUIT),
            (self.times1, UIState.TIMES1),
            (self.times2, UIState.TIMES2),
            (self.help, UIState.HELP),
            *zip(self.defences, defence_states),
        )

    def reset(self) -> None:
        """Forget the mouse position and button state."""
        self.left_button_down = False
        self.right_button_down = False
        self.mouse_x = -1
        self.mouse_y = -1

    def is_inside(self, rect: UIRect) -> bool:
        """Return True if the mouse lies strictly inside the rectangle."""
        return rect.contains(self.mouse_x, self.mouse_y)

    def _clicked_state(self) -> UIState:
        return next(
            (state for rect, state in self._buttons if self.is_inside(rect)),
            UIState.NONE,
        )

    def update(self, time_difference: float, mx: int, my: int, data: GameData) -> None:
        """Track the mouse and act on clicks on the panel's buttons."""
        self._pause_time += time_difference
        self._key_time += time_difference
        self._scale_time += time_difference

        self.mouse_x = mx
        self.mouse_y = my
        self.left_button_down = bool(data.left_mouse_down)
        self.right_button_down = bool(data.right_mouse_down)

        if (
            self.left_button_down
            and self.is_inside(self.pause_play)
            and self._pause_time > _CLICK_DELAY
        ):
            self._pause_time = 0.0
            data.paused = not data.paused
            self.state = UIState.PAUSE_PLAY

        if self.left_button_down and self._key_time > _CLICK_DELAY:
            self._key_time = 0.0
            self.state = self._clicked_state()

        self.last_mouse_x = self.mouse_x
        self.last_mouse_y = self.mouse_y
        self.last_left_button_down = self.left_button_down
        self.last_right_button_down = self.right_button_down

    def render(self, graphics: Any, data: GameData) -> None:
        """Draw the panel, and the pause overlay while the game is paused."""
        graphics.render_sprite(graphics.sprite(_PANEL_SPRITE), 0, 623, 255, 255, 255)
        if data.paused:
            graphics.render_sprite(
                graphics.sprite(_PAUSED_SPRITE), 385, 643, 255, 255, 255
            )

    def hover_state(self) -> int:
        """Return the control under the mouse; hovering is not tracked, so -1."""
        return -1