from datetime import datetime

import pytest

from isotiles.log import Log, get_log


def _read(path):
    return path.read_text(encoding="utf-8")


def test_log_joins_fields_with_delimiter(tmp_path):
    path = tmp_path / "out.txt"
    log = Log(str(path))
    log.log("Number of tiles loaded", 12)
    assert _read(path) == "Number of tiles loaded,12\n"


def test_log_appends_lines(tmp_path):
    path = tmp_path / "out.txt"
    log = Log(str(path))
    log.log("first")
    log.log("second")
    assert _read(path).splitlines() == ["first", "second"]


def test_set_delimiter_changes_separator(tmp_path):
    path = tmp_path / "out.txt"
    log = Log(str(path))
    log.set_delimiter(";")
    log.log("a", "b", "c")
    assert _read(path) == "a;b;c\n"


def test_set_file_redirects_output(tmp_path):
    first = tmp_path / "first.txt"
    second = tmp_path / "second.txt"
    log = Log(str(first))
    log.log("one")
    log.set_file(str(second))
    log.log("two")
    assert _read(first) == "one\n"
    assert _read(second) == "two\n"


def test_log_date_and_time_use_clock(tmp_path):
    path = tmp_path / "out.txt"
    moment = datetime(2024, 1, 2, 3, 4, 5)
    log = Log(str(path), clock=lambda: moment)
    log.log_date()
    log.log_time()
    assert _read(path).splitlines() == ["Date,01.02.2024", "Time,03:04:05"]


def test_log_series_integers(tmp_path):
    path = tmp_path / "out.txt"
    log = Log(str(path))
    log.log_series("i", 12, 34, 54, 67)
    assert _read(path) == "12,34,54,67\n"


def test_log_series_floats(tmp_path):
    path = tmp_path / "out.txt"
    log = Log(str(path))
    log.log_series("f", 0.5, 2.25)
    log.log_series("d", 1.5)
    assert _read(path).splitlines() == ["0.5,2.25", "1.5"]


def test_log_series_rejects_unknown_typecode(tmp_path):
    log = Log(str(tmp_path / "out.txt"))
    with pytest.raises(ValueError):
        log.log_series("x", 1, 2)


def test_get_log_is_shared():
    assert get_log() is get_log()
    assert get_log().filename == "logfile.txt"