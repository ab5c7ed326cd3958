"""Display mode selection and depth buffer format choice."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable

from .log import Log, get_log

DEFAULT_FORMAT = "X8R8G8B8"


class DepthFormat(IntEnum):
    """Depth buffer formats, in the device's own numbering."""

    UNKNOWN = 0
    D32 = 71
    D24X8 = 77
    D16 = 80


_DEPTH_PREFERENCE = (DepthFormat.D32, DepthFormat.D24X8, DepthFormat.D16)


@dataclass(frozen=True)
class DisplayMode:
    """One resolution and refresh rate an adapter offers for a pixel format."""

    width: int
    height: int
    refresh_rate: int = 0
    format: str = DEFAULT_FORMAT


@dataclass
class DisplaySettings:
    """The screen configuration a game asks for.

    A ``refresh_rate`` of None means any refresh rate will do: mode matching
    then compares only the resolution, and full-screen output keeps the
    refresh rate of the current mode.
    """

    width: int
    height: int
    refresh_rate: int | None = None
    format: str = DEFAULT_FORMAT
    adapter: int = 0
    full_screen: bool = False
    log: Log | None = field(default=None, repr=False, compare=False)

    def _logger(self) -> Log:
        return self.log if self.log is not None else get_log()

    def aspect_ratio(self) -> float:
        """Return the width divided by the height."""
        if self.height == 0:
            raise ValueError("display height must not be zero")
        return self.width / self.height

    def _matches(self, mode: DisplayMode) -> bool:
        if (mode.width, mode.height) != (self.width, self.height):
            return False
        return self.refresh_rate is None or mode.refresh_rate == self.refresh_rate

    def is_mode_supported(self, modes: Iterable[DisplayMode]) -> bool:
        """Return True if one of the adapter's modes fits these settings.

        Only modes of the requested pixel format are considered. A windowed
        configuration is always accepted.
        """
        log = self._logger()
        if not self.full_screen:
            log.log(
                "Warning: IsDisplayModeSupported() Should only be called "
                "for a full screen application."
            )
            return True

        candidates = [mode for mode in modes if mode.format == self.format]
        log.log("Info: Adapter mode count. ", len(candidates))
        for mode in candidates:
            log.log("Info: Testing Width.       ", mode.width)
            log.log("Info: Testing Height.      ", mode.height)
            log.log("Info: Testing RefreshRate. ", mode.refresh_rate)
            if self._matches(mode):
                return True

        log.log("Warning: Display mode not supported.")
        return False

    def refresh_rate_for(self, current_mode: DisplayMode) -> int:
        """Return the refresh rate to request; 0 when running in a window."""
        if not self.full_screen:
            return 0
        if self.refresh_rate is None:
            return current_mode.refresh_rate
        return self.refresh_rate


def find_depth_stencil_format(supported: Iterable[DepthFormat]) -> DepthFormat:
    """Pick the deepest available depth format: D32, then D24X8, then D16."""
    available = set(supported)
    return next(
        (fmt for fmt in _DEPTH_PREFERENCE if fmt in available),
        DepthFormat.UNKNOWN,
    )