"""Configuration loading and validation."""

import json
import logging
import os
import urllib.request
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import pytz

from lightpaper.during import During, parse_during
from lightpaper.errors import ConfigurationError

logger = logging.getLogger(__name__)

METHODS = ('kde', 'hyprpaper')


@dataclass(frozen=True)
class Location:
    """Geographic location the sun is calculated for."""

    latitude: float
    longitude: float
    timezone: Optional[str] = None


@dataclass(frozen=True)
class Method:
    """Desktop backend used to apply the wallpaper."""

    name: str = 'kde'
    monitor: str = ""


@dataclass(frozen=True)
class Wallpaper:
    """A wallpaper and the time it applies."""

    during: During
    path: Path


@dataclass
class Config:
    """Lightpaper configuration."""

    location: Location
    method: Method = field(default_factory=Method)
    wallpapers: List[Wallpaper] = field(default_factory=list)

    @classmethod
    def load(cls, config_path: Path, validate_paths: bool = True) -> "Config":
        """
        Load and validate configuration from YAML file.

        Args:
            config_path: Path to configuration file
            validate_paths: If True, validate that wallpaper files exist

        Returns:
            Config instance

        Raises:
            ConfigurationError: If configuration is invalid
            FileNotFoundError: If config file doesn't exist
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Could not parse YAML: {e}") from e

        if not data:
            raise ConfigurationError("Configuration file is empty")
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a mapping")

        return cls.from_dict(data, validate_paths=validate_paths)

    @classmethod
    def from_dict(cls, data: dict, validate_paths: bool = True) -> "Config":
        """Build a Config from already deserialized data."""
        location = _parse_location(data.get('location') or {})
        method = _parse_method(data.get('method', 'kde'))

        wallpapers_data = data.get('wallpapers')
        if not wallpapers_data:
            raise ConfigurationError("Missing required section: wallpapers")
        if not isinstance(wallpapers_data, list):
            raise ConfigurationError("'wallpapers' must be a list of entries")

        wallpapers = [
            _parse_wallpaper(index, entry, validate_paths)
            for index, entry in enumerate(wallpapers_data)
        ]

        fallbacks = [wp for wp in wallpapers if wp.during.is_any]
        if len(fallbacks) > 1:
            logger.warning(
                f"{len(fallbacks)} wallpapers use 'during: any'; "
                f"only the first ({fallbacks[0].path}) can be selected"
            )
        elif not fallbacks:
            logger.debug("No 'during: any' wallpaper configured")

        return cls(location=location, method=method, wallpapers=wallpapers)


def _parse_location(location: dict) -> Location:
    if not isinstance(location, dict):
        raise ConfigurationError("'location' must be a mapping")

    latitude = location.get('latitude')
    longitude = location.get('longitude')
    timezone = location.get('timezone')

    if latitude is None:
        raise ConfigurationError("Missing required field: location.latitude")
    if longitude is None:
        raise ConfigurationError("Missing required field: location.longitude")

    for name, value in (('latitude', latitude), ('longitude', longitude)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(f"location.{name} must be a number, got: {value!r}")

    # Validate ranges
    if not (-90 <= latitude <= 90):
        raise ConfigurationError(f"Latitude must be between -90 and 90, got: {latitude}")
    if not (-180 <= longitude <= 180):
        raise ConfigurationError(f"Longitude must be between -180 and 180, got: {longitude}")

    # Validate timezone
    if timezone is not None and timezone not in pytz.all_timezones:
        raise ConfigurationError(
            f"Invalid timezone: {timezone}. "
            f"Must be a valid IANA timezone (e.g., 'US/Pacific', 'Europe/London')"
        )

    return Location(latitude=float(latitude), longitude=float(longitude), timezone=timezone)


def _parse_method(method) -> Method:
    # Either a bare name or a mapping with 'name'
    if isinstance(method, str):
        method = {'name': method}
    if not isinstance(method, dict):
        raise ConfigurationError("'method' must be a name or a mapping with 'name'")

    name = method.get('name')
    if name not in METHODS:
        raise ConfigurationError(f"Invalid method: {name}. Must be one of: {', '.join(METHODS)}")

    return Method(name=name, monitor=method.get('monitor', ""))


def _parse_wallpaper(index: int, entry, validate_paths: bool) -> Wallpaper:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Wallpaper #{index} must be a mapping with 'during' and 'path'")

    if 'during' not in entry:
        raise ConfigurationError(f"Missing required field: wallpapers[{index}].during")
    path_str = entry.get('path')
    if not path_str:
        raise ConfigurationError(f"Missing required field: wallpapers[{index}].path")

    try:
        during = parse_during(entry['during'])
    except ConfigurationError as e:
        raise ConfigurationError(f"Invalid 'during' for wallpaper #{index}: {e}") from e

    # Expand ~ and environment variables
    expanded_path = os.path.expanduser(os.path.expandvars(str(path_str)))
    wp_path = Path(expanded_path)

    if validate_paths:
        if not wp_path.exists():
            raise ConfigurationError(f"Wallpaper file not found for entry #{index}: {wp_path}")
        if not wp_path.is_file():
            raise ConfigurationError(f"Wallpaper path for entry #{index} is not a file: {wp_path}")

    return Wallpaper(during=during, path=wp_path)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    xdg_config_home = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
    return Path(xdg_config_home) / 'lightpaper' / 'config.yaml'


def get_location_from_ip() -> Tuple[float, float, str]:
    """Detect user's location via IP geolocation.

    Returns:
        Tuple of (latitude, longitude, timezone)

    Raises:
        Exception: If geolocation fails
    """
    url = "http://ip-api.com/json/?fields=lat,lon,timezone"
    with urllib.request.urlopen(url, timeout=5) as response:
        data = json.loads(response.read().decode())
        return data['lat'], data['lon'], data['timezone']


def create_default_config(config_path: Path, detect_location: bool = True) -> None:
    """Create a default configuration template file.

    Args:
        config_path: Path where the config file should be created
        detect_location: Try IP geolocation before falling back to defaults
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    lat, lon, tz = 51.4769, -0.0005, "Europe/London"
    if detect_location:
        try:
            lat, lon, tz = get_location_from_ip()
            logger.info(f"Detected location: {lat}, {lon}, {tz}")
        except Exception as e:
            logger.warning(f"Could not detect location: {e}, using defaults")

    template = f"""# Lightpaper configuration

location:
  latitude: {lat}
  longitude: {lon}
  timezone: "{tz}"   # Optional, only used when printing times

method:
  name: kde          # kde or hyprpaper
  monitor: ""        # hyprpaper only (empty = all monitors)

# First matching entry wins; 'any' is used when nothing else matches.
# 'during' is 'any', a light state, or a list of light states and
# elevation angle pairs (positive = rising, negative = setting).
# Light states: astronomical dawn, nautical dawn, civil dawn, day,
#               civil dusk, nautical dusk, astronomical dusk, night
wallpapers:
  - during: [astronomical dawn, nautical dawn, civil dawn]
    path: ~/Pictures/backgrounds/dawn.jpg
  - during: [civil dusk, nautical dusk, astronomical dusk]
    path: ~/Pictures/backgrounds/dusk.jpg
  - during: [0, 15, -15, 0]   # Sun low on the horizon
    path: ~/Pictures/backgrounds/golden.jpg
  - during: night
    path: ~/Pictures/backgrounds/night.jpg
  - during: any
    path: ~/Pictures/backgrounds/day.jpg
"""

    config_path.write_text(template)
