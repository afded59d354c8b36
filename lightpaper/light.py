"""Light state definitions and classification of the sun's angle."""

from enum import Enum
from typing import Dict, Tuple

from lightpaper.angles import DegreeRange, day_angle, normalize_angle
from lightpaper.errors import ConfigurationError


class Light(Enum):
    """Light states, in order of progression through the day."""

    ASTRONOMICAL_DAWN = "astronomical dawn"
    NAUTICAL_DAWN = "nautical dawn"
    CIVIL_DAWN = "civil dawn"
    DAY = "day"
    CIVIL_DUSK = "civil dusk"
    NAUTICAL_DUSK = "nautical dusk"
    ASTRONOMICAL_DUSK = "astronomical dusk"
    NIGHT = "night"

    @property
    def bounds(self) -> Tuple[DegreeRange, ...]:
        """Angle ranges owned by this light state on the [0, 360) domain."""
        return ANGLE_BOUNDS[self]

    @classmethod
    def from_name(cls, name: str) -> "Light":
        """
        Parse a light state from its configuration name.

        Args:
            name: Name such as 'civil dawn' (case-insensitive, '_' allowed)

        Returns:
            Matching Light

        Raises:
            ConfigurationError: If the name is not a light state
        """
        key = " ".join(name.replace("_", " ").split()).lower()
        try:
            return cls(key)
        except ValueError:
            valid = ", ".join(f"'{light.value}'" for light in cls)
            raise ConfigurationError(
                f"Unknown light state: '{name}'. Must be one of: {valid}"
            ) from None


# Twilight thresholds, degrees below the horizon
HORIZON = 0.25
CIVIL = 6.0
NAUTICAL = 12.0
ASTRONOMICAL = 18.0

# Dawn sits just below 360, dusk just past 180
ANGLE_BOUNDS: Dict[Light, Tuple[DegreeRange, ...]] = {
    Light.NIGHT: (DegreeRange(180 + ASTRONOMICAL, 360 - ASTRONOMICAL),),
    Light.ASTRONOMICAL_DAWN: (DegreeRange(360 - ASTRONOMICAL, 360 - NAUTICAL),),
    Light.NAUTICAL_DAWN: (DegreeRange(360 - NAUTICAL, 360 - CIVIL),),
    Light.CIVIL_DAWN: (DegreeRange(360 - CIVIL, 360 - HORIZON),),
    Light.DAY: (
        DegreeRange(360 - HORIZON, 360),
        DegreeRange(0, 180 + HORIZON),
    ),
    Light.CIVIL_DUSK: (DegreeRange(180 + HORIZON, 180 + CIVIL),),
    Light.NAUTICAL_DUSK: (DegreeRange(180 + CIVIL, 180 + NAUTICAL),),
    Light.ASTRONOMICAL_DUSK: (DegreeRange(180 + NAUTICAL, 180 + ASTRONOMICAL),),
}


def classify(angle: float) -> Light:
    """
    Determine the light state for an angle on the day domain.

    Args:
        angle: Angle in degrees, any real value

    Returns:
        Light whose ranges contain the normalized angle
    """
    norm = normalize_angle(angle)
    for light in Light:
        if light is Light.NIGHT:
            continue
        if any(bound.contains(norm) for bound in light.bounds):
            return light
    # Everything else is night
    return Light.NIGHT


def light_at(elevation: float, azimuth: float) -> Light:
    """
    Determine the light state for a solar elevation and azimuth.

    Args:
        elevation: Solar elevation in degrees
        azimuth: Solar azimuth in degrees (< 180 is morning)

    Returns:
        Current Light
    """
    return classify(day_angle(elevation, azimuth))
