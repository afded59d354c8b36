"""Selection of the wallpaper that applies right now."""

import logging
from typing import TYPE_CHECKING, Sequence

from lightpaper.errors import NoMatchError
from lightpaper.light import Light

if TYPE_CHECKING:
    from lightpaper.config import Wallpaper


logger = logging.getLogger(__name__)


def select_wallpaper(
    wallpapers: Sequence["Wallpaper"],
    light: Light,
    elevation: float,
    azimuth: float,
) -> "Wallpaper":
    """
    Pick the first wallpaper whose condition matches, falling back to 'any'.

    Every specific condition is checked before any 'any' entry, wherever
    that entry appears in the list.

    Args:
        wallpapers: Configured wallpapers, in order
        light: Current light state
        elevation: Current solar elevation in degrees
        azimuth: Current solar azimuth in degrees

    Returns:
        Selected Wallpaper

    Raises:
        NoMatchError: If nothing matched and there is no 'any' entry
    """
    for index, wallpaper in enumerate(wallpapers):
        if wallpaper.during.matches(light, elevation, azimuth):
            logger.debug(f"Wallpaper #{index} matched: {wallpaper.path}")
            return wallpaper

    for index, wallpaper in enumerate(wallpapers):
        if wallpaper.during.is_any:
            logger.debug(f"Falling back to 'any' wallpaper #{index}: {wallpaper.path}")
            return wallpaper

    raise NoMatchError(
        f"No configured wallpaper for {light.value} "
        f"(elevation {elevation:.2f}°, azimuth {azimuth:.2f}°). "
        "Add an entry with 'during: any' as a fallback."
    )
