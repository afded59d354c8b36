"""Wallpaper applicability conditions and their parsing."""

import logging
from dataclasses import dataclass, field
from numbers import Real
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union

from lightpaper.angles import FULL_CIRCLE, HALF_CIRCLE, DegreeRange, reduce_angle
from lightpaper.errors import ConfigurationError
from lightpaper.light import Light


logger = logging.getLogger(__name__)

Token = Union[str, Real]


def _in_ranges(ranges: Iterable[DegreeRange], elevation: float) -> bool:
    return any(r.contains(elevation) for r in ranges)


def _elevation_matches(
    rising: Tuple[DegreeRange, ...],
    setting: Tuple[DegreeRange, ...],
    elevation: float,
    azimuth: float,
) -> bool:
    if azimuth < HALF_CIRCLE:
        return _in_ranges(rising, elevation)
    return _in_ranges(setting, elevation)


class During:
    """Base class for the time a wallpaper applies."""

    is_any = False

    def matches(self, light: Light, elevation: float, azimuth: float) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Lights(During):
    """Applies while the current light state is one of ``lights``."""

    lights: FrozenSet[Light] = frozenset()

    def matches(self, light: Light, elevation: float, azimuth: float) -> bool:
        return light in self.lights


@dataclass(frozen=True)
class Elevation(During):
    """Applies while the elevation is in a rising (morning) or setting (evening) range."""

    rising: Tuple[DegreeRange, ...] = ()
    setting: Tuple[DegreeRange, ...] = ()

    def matches(self, light: Light, elevation: float, azimuth: float) -> bool:
        return _elevation_matches(self.rising, self.setting, elevation, azimuth)


@dataclass(frozen=True)
class LightsAndElevation(During):
    """Applies when either the light state or the elevation test succeeds."""

    lights: FrozenSet[Light] = frozenset()
    rising: Tuple[DegreeRange, ...] = ()
    setting: Tuple[DegreeRange, ...] = ()

    def matches(self, light: Light, elevation: float, azimuth: float) -> bool:
        return light in self.lights or _elevation_matches(
            self.rising, self.setting, elevation, azimuth
        )


@dataclass(frozen=True)
class AnyTime(During):
    """Always applies. Only considered once no other condition matched."""

    is_any = True

    def matches(self, light: Light, elevation: float, azimuth: float) -> bool:
        return False


@dataclass
class FoldResult:
    """Outcome of folding a token sequence into lights and ranges."""

    lights: List[Light] = field(default_factory=list)
    rising: List[DegreeRange] = field(default_factory=list)
    setting: List[DegreeRange] = field(default_factory=list)
    pending: Optional[float] = None
    skipped: List[Tuple[float, float]] = field(default_factory=list)

    def to_during(self) -> During:
        """Pick the During variant from which parts are populated."""
        lights = frozenset(self.lights)
        rising = tuple(self.rising)
        setting = tuple(self.setting)
        has_ranges = bool(rising or setting)

        if lights and has_ranges:
            return LightsAndElevation(lights=lights, rising=rising, setting=setting)
        if has_ranges:
            return Elevation(rising=rising, setting=setting)
        return Lights(lights=lights)


def _is_number(token) -> bool:
    return isinstance(token, Real) and not isinstance(token, bool)


def fold_pair(first: float, second: float) -> Optional[Tuple[bool, List[DegreeRange]]]:
    """
    Turn a pair of raw angles into elevation ranges.

    The sign of ``first`` picks the half of the day: positive is rising,
    negative is setting. Zero takes the sign of the other value, so
    ``(-15, 0)`` is a setting range. Values of opposite sign are rejected.

    Args:
        first: Start angle in degrees
        second: End angle in degrees

    Returns:
        (rising, ranges), or None if the signs differ
    """
    if first < 0 < second or second < 0 < first:
        return None
    rising = first > 0 or (first == 0 and second >= 0)

    low = reduce_angle(first)
    high = reduce_angle(second)
    if rising:
        if low > HALF_CIRCLE:
            low -= FULL_CIRCLE
        if high > HALF_CIRCLE:
            high -= FULL_CIRCLE
    else:
        if low < -HALF_CIRCLE:
            low += FULL_CIRCLE
        if high < -HALF_CIRCLE:
            high += FULL_CIRCLE

    if low > high:
        # Crosses the 0 seam
        ranges = []
        if low != FULL_CIRCLE:
            ranges.append(DegreeRange(0.0, low))
        if high != 0:
            ranges.append(DegreeRange(high, 0.0))
        ranges = [r for r in ranges if not r.is_empty]
    else:
        ranges = [DegreeRange(low, high)]

    return rising, ranges


def fold_tokens(tokens: Iterable[Token]) -> FoldResult:
    """
    Fold a mixed sequence of light names and numbers.

    Light names are collected on their own. Numbers are consumed in pairs;
    an unpaired number waits for the next number, even across light names.

    Args:
        tokens: Light names and numbers in configuration order

    Returns:
        FoldResult with the collected lights and ranges

    Raises:
        ConfigurationError: If a token is neither a light name nor a number
    """
    result = FoldResult()

    for token in tokens:
        if isinstance(token, str):
            light = Light.from_name(token)
            if light not in result.lights:
                result.lights.append(light)
            continue

        if not _is_number(token):
            raise ConfigurationError(
                f"Expected a light name or a number, got: {token!r}"
            )

        if result.pending is None:
            result.pending = float(token)
            continue

        first, second = result.pending, float(token)
        result.pending = None

        folded = fold_pair(first, second)
        if folded is None:
            result.skipped.append((first, second))
            continue

        rising, ranges = folded
        if rising:
            result.rising.extend(ranges)
        else:
            result.setting.extend(ranges)

    return result


def parse_during(value) -> During:
    """
    Parse the 'during' value of a wallpaper entry.

    Accepts 'any', a single light name, or a list mixing light names and
    elevation angle pairs.

    Args:
        value: Deserialized configuration value

    Returns:
        During condition

    Raises:
        ConfigurationError: If the value has the wrong shape or names an
            unknown light state
    """
    if isinstance(value, str):
        if value.strip().lower() == "any":
            return AnyTime()
        return Lights(lights=frozenset([Light.from_name(value)]))

    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(
            "'during' must be 'any', a light name, or a list of light names "
            f"and elevation angles, got: {value!r}"
        )

    result = fold_tokens(value)

    for first, second in result.skipped:
        logger.warning(
            f"Ignoring elevation pair ({first:g}, {second:g}): "
            "both angles must be positive (rising) or negative (setting)"
        )
    if result.pending is not None:
        logger.warning(f"Ignoring unpaired elevation angle: {result.pending:g}")

    during = result.to_during()
    if isinstance(during, Lights) and not during.lights:
        logger.warning(f"Condition {value!r} can never match")
    return during
