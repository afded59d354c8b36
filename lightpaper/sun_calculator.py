"""Sun position calculation using astral library."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from astral import LocationInfo
from astral.sun import azimuth, zenith
import pytz

from lightpaper.angles import HALF_CIRCLE
from lightpaper.errors import SolarComputationError
from lightpaper.light import Light, light_at


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolarPosition:
    """Sun position at one instant."""

    zenith_angle: float
    azimuth: float

    @property
    def elevation(self) -> float:
        return 90.0 - self.zenith_angle

    @property
    def is_morning(self) -> bool:
        return self.azimuth < HALF_CIRCLE

    @property
    def light(self) -> Light:
        return light_at(self.elevation, self.azimuth)


class SunCalculator:
    """Calculate sun position for a given location."""

    def __init__(self, latitude: float, longitude: float, timezone: Optional[str] = None):
        """
        Initialize sun calculator.

        Args:
            latitude: Latitude in degrees (-90 to 90)
            longitude: Longitude in degrees (-180 to 180)
            timezone: IANA timezone string used for display (defaults to UTC)
        """
        self.location = LocationInfo(
            latitude=latitude,
            longitude=longitude,
            timezone=timezone or "UTC"
        )
        self.tz = pytz.timezone(timezone) if timezone else pytz.utc

    def now(self) -> datetime:
        """Current time in the configured timezone."""
        return datetime.now(self.tz)

    def as_aware(self, when: Optional[datetime] = None) -> datetime:
        """Return ``when`` as an aware datetime; naive values are UTC, None is now."""
        if when is None:
            return self.now()
        if when.tzinfo is None:
            return pytz.utc.localize(when)
        return when

    def get_position(self, when: Optional[datetime] = None) -> SolarPosition:
        """
        Get the sun position at a given time.

        Args:
            when: Time to calculate for (defaults to now). Naive datetimes are
                treated as UTC.

        Returns:
            SolarPosition

        Raises:
            SolarComputationError: If astral cannot compute the position
        """
        when = self.as_aware(when)
        observer = self.location.observer
        try:
            position = SolarPosition(
                zenith_angle=zenith(observer, when),
                azimuth=azimuth(observer, when),
            )
        except (ValueError, ArithmeticError) as e:
            raise SolarComputationError(
                f"Could not determine solar position for "
                f"{self.location.latitude}, {self.location.longitude} at {when}: {e}"
            ) from e

        logger.debug(
            f"Sun at {when.isoformat()}: elevation {position.elevation:.2f}°, "
            f"azimuth {position.azimuth:.2f}°"
        )
        return position
