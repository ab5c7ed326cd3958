"""Frame timer measuring elapsed seconds between calls."""

from __future__ import annotations

import time
from typing import Callable


class Timer:
    """Measures time between calls using a monotonic clock in seconds."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._last = clock()
        self._interval_elapsed = 0.0
        self._seconds_elapsed = 0.0

    def _advance(self) -> float:
        now = self._clock()
        delta = now - self._last
        self._last = now
        return delta

    def reset(self) -> None:
        """Restart measurement from the current moment."""
        self._last = self._clock()

    def interval_elapsed(self, interval: float) -> bool:
        """Return True once the accumulated time reaches the interval."""
        self._interval_elapsed += self._advance()
        if self._interval_elapsed >= interval:
            self._interval_elapsed = 0.0
            return True
        return False

    def time_difference(self) -> float:
        """Return the seconds since the previous call."""
        return self._advance()

    def second_elapsed(self) -> bool:
        """Return True once the accumulated time reaches one second."""
        self._seconds_elapsed += self._advance()
        if self._seconds_elapsed >= 1:
            self._seconds_elapsed = 0.0
            return True
        return False