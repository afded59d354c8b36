"""Angle helpers for the circular degree domain."""

import math
from dataclasses import dataclass


FULL_CIRCLE = 360.0
HALF_CIRCLE = 180.0


@dataclass(frozen=True)
class DegreeRange:
    """Half-open range of degrees, [low, high)."""

    low: float
    high: float

    def contains(self, angle: float) -> bool:
        return self.low <= angle < self.high

    @property
    def is_empty(self) -> bool:
        return self.low >= self.high

    def __str__(self) -> str:
        return f"[{self.low:g}, {self.high:g})"


def reduce_angle(value: float) -> float:
    """Truncated modulo 360; keeps the sign of the input."""
    return math.fmod(value, FULL_CIRCLE)


def normalize_angle(value: float) -> float:
    """
    Normalize an angle to [0, 360).

    Args:
        value: Angle in degrees, any real value

    Returns:
        Equivalent angle in [0, 360)
    """
    norm = reduce_angle(value)
    if norm < 0:
        norm += FULL_CIRCLE
    # Tiny negative inputs round up to exactly 360
    if norm >= FULL_CIRCLE:
        norm = 0.0
    return norm


def day_angle(elevation: float, azimuth: float) -> float:
    """
    Unfold a signed solar elevation onto the circular day domain.

    The morning half keeps the elevation as-is (below the horizon it wraps
    past 360 once normalized). The evening half is mirrored around 90, so the
    sun keeps moving forward: 90 at the zenith, 180 on the horizon at sunset,
    past 180 below it.

    Args:
        elevation: Solar elevation in degrees (90 - zenith angle)
        azimuth: Solar azimuth in degrees, [0, 360)

    Returns:
        Angle on the day domain (not yet normalized)
    """
    if azimuth < HALF_CIRCLE:
        return elevation
    return HALF_CIRCLE - elevation
