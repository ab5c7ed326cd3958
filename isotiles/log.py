"""Append-only text log with a shared default instance."""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Callable

DEFAULT_FILENAME = "logfile.txt"
DEFAULT_DELIMITER = ","

_SERIES_CONVERTERS: dict[str, Callable[[object], object]] = {
    "i": int,
    "f": float,
    "d": float,
}


def _format_value(value: object) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


class Log:
    """Writes delimiter-separated records, one per line, to a text file."""

    def __init__(
        self,
        filename: str = DEFAULT_FILENAME,
        delimiter: str = DEFAULT_DELIMITER,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.filename = filename
        self.delimiter = delimiter
        self._clock = clock

    def set_delimiter(self, delimiter: str) -> None:
        """Change the separator placed between the fields of a record."""
        self.delimiter = delimiter

    def set_file(self, filename: str) -> None:
        """Direct further records to another file."""
        self.filename = filename

    def _write_line(self, fields: list[str]) -> None:
        with open(self.filename, "a", encoding="utf-8") as handle:
            handle.write(self.delimiter.join(fields) + "\n")

    def log(self, *args: object) -> None:
        """Append one record made of the given values."""
        self._write_line([_format_value(arg) for arg in args])

    def log_date(self) -> None:
        """Append the current local date as MM.DD.YYYY."""
        self.log("Date", self._clock().strftime("%m.%d.%Y"))

    def log_time(self) -> None:
        """Append the current local time as HH:MM:SS."""
        self.log("Time", self._clock().strftime("%H:%M:%S"))

    def log_series(self, typecode: str, *args: object) -> None:
        """Append a record of values of one type: 'i' int, 'f' float, 'd' double."""
        try:
            convert = _SERIES_CONVERTERS[typecode]
        except KeyError:
            raise ValueError(f"unknown series type code: {typecode!r}") from None
        self._write_line([_format_value(convert(arg)) for arg in args])


@lru_cache(maxsize=None)
def get_log() -> Log:
    """Return the shared log instance, creating it on first use."""
    return Log()