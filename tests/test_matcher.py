"""Tests for wallpaper selection."""

from pathlib import Path

import pytest

from lightpaper.angles import DegreeRange
from lightpaper.config import Wallpaper
from lightpaper.during import AnyTime, Elevation, Lights
from lightpaper.errors import NoMatchError
from lightpaper.light import Light
from lightpaper.matcher import select_wallpaper


def wallpaper(name, during):
    return Wallpaper(during=during, path=Path(f"/wallpapers/{name}.jpg"))


def lights(*values):
    return Lights(lights=frozenset(values))


class TestSelectWallpaper:

    def test_fallback_does_not_preempt_later_match(self):
        a = wallpaper("a", AnyTime())
        b = wallpaper("b", lights(Light.DAY))
        assert select_wallpaper([a, b], Light.DAY, 40, 120) is b

    def test_fallback_used_when_nothing_matches(self):
        night = wallpaper("night", lights(Light.NIGHT))
        default = wallpaper("default", AnyTime())
        assert select_wallpaper([night, default], Light.DAY, 40, 120) is default

    def test_no_match(self):
        night = wallpaper("night", lights(Light.NIGHT))
        with pytest.raises(NoMatchError, match="day"):
            select_wallpaper([night], Light.DAY, 40, 120)

    def test_empty_list(self):
        with pytest.raises(NoMatchError):
            select_wallpaper([], Light.NIGHT, -40, 0)

    def test_first_match_wins(self):
        first = wallpaper("first", lights(Light.DAY, Light.CIVIL_DUSK))
        second = wallpaper("second", lights(Light.DAY))
        assert select_wallpaper([first, second], Light.DAY, 40, 200) is first

    def test_first_fallback_wins(self):
        first = wallpaper("first", AnyTime())
        second = wallpaper("second", AnyTime())
        assert select_wallpaper([first, second], Light.DAY, 40, 200) is first

    def test_elevation_condition(self):
        low_sun = wallpaper("low", Elevation(rising=(DegreeRange(0, 10),), setting=()))
        day = wallpaper("day", lights(Light.DAY))
        assert select_wallpaper([low_sun, day], Light.DAY, 5, 80) is low_sun
        # Same elevation in the evening is not a rising range
        assert select_wallpaper([low_sun, day], Light.DAY, 5, 280) is day
