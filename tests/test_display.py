import pytest

from isotiles.display import (
    DepthFormat,
    DisplayMode,
    DisplaySettings,
    find_depth_stencil_format,
)
from isotiles.log import Log


@pytest.fixture
def log(tmp_path):
    return Log(str(tmp_path / "display.log"))


MODES = [
    DisplayMode(800, 600, 60),
    DisplayMode(1024, 768, 60),
    DisplayMode(1024, 768, 75),
    DisplayMode(1280, 1024, 60, "R5G6B5"),
]


def test_windowed_is_always_supported(log):
    settings = DisplaySettings(4000, 3000, 144, full_screen=False, log=log)
    assert settings.is_mode_supported([]) is True
    with open(log.filename, encoding="utf-8") as handle:
        assert "full screen application" in handle.read()


def test_full_screen_exact_match(log):
    settings = DisplaySettings(1024, 768, 75, full_screen=True, log=log)
    assert settings.is_mode_supported(MODES) is True


def test_full_screen_refresh_mismatch(log):
    settings = DisplaySettings(1024, 768, 85, full_screen=True, log=log)
    assert settings.is_mode_supported(MODES) is False
    with open(log.filename, encoding="utf-8") as handle:
        assert "Warning: Display mode not supported." in handle.read()


def test_any_refresh_rate_matches_resolution_only(log):
    settings = DisplaySettings(800, 600, None, full_screen=True, log=log)
    assert settings.is_mode_supported(MODES) is True


def test_other_format_modes_are_ignored(log):
    settings = DisplaySettings(1280, 1024, 60, full_screen=True, log=log)
    assert settings.is_mode_supported(MODES) is False
    matching = DisplaySettings(1280, 1024, 60, "R5G6B5", full_screen=True, log=log)
    assert matching.is_mode_supported(MODES) is True


def test_modes_may_be_a_generator(log):
    settings = DisplaySettings(1024, 768, 60, full_screen=True, log=log)
    assert settings.is_mode_supported(mode for mode in MODES) is True


def test_refresh_rate_windowed_is_zero():
    settings = DisplaySettings(800, 600, 75, full_screen=False)
    assert settings.refresh_rate_for(DisplayMode(800, 600, 60)) == 0


def test_refresh_rate_full_screen_uses_requested():
    settings = DisplaySettings(800, 600, 75, full_screen=True)
    assert settings.refresh_rate_for(DisplayMode(800, 600, 60)) == 75


def test_refresh_rate_full_screen_falls_back_to_current():
    settings = DisplaySettings(800, 600, None, full_screen=True)
    assert settings.refresh_rate_for(DisplayMode(800, 600, 60)) == 60


def test_aspect_ratio():
    assert DisplaySettings(1024, 512).aspect_ratio() == 2.0
    assert DisplaySettings(640, 640).aspect_ratio() == 1.0


def test_aspect_ratio_zero_height():
    with pytest.raises(ValueError):
        DisplaySettings(640, 0).aspect_ratio()


def test_depth_prefers_d32():
    supported = [DepthFormat.D16, DepthFormat.D32, DepthFormat.D24X8]
    assert find_depth_stencil_format(supported) is DepthFormat.D32


def test_depth_falls_back_in_order():
    assert find_depth_stencil_format([DepthFormat.D16, DepthFormat.D24X8]) is DepthFormat.D24X8
    assert find_depth_stencil_format([DepthFormat.D16]) is DepthFormat.D16


def test_depth_unknown_when_none_available():
    assert find_depth_stencil_format([]) is DepthFormat.UNKNOWN
    assert find_depth_stencil_format([DepthFormat.UNKNOWN]) is DepthFormat.UNKNOWN