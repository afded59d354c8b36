"""Main entry point for Lightpaper."""

import argparse
import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from lightpaper.config import Config, Wallpaper, create_default_config, get_default_config_path
from lightpaper.errors import ConfigurationError, NoMatchError, SolarComputationError
from lightpaper.light import Light
from lightpaper.matcher import select_wallpaper
from lightpaper.sun_calculator import SolarPosition, SunCalculator
from lightpaper.wallpaper_manager import create_wallpaper_manager


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging for stdout."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


@dataclass
class Selection:
    """Result of evaluating the configuration at one instant."""

    when: datetime
    position: SolarPosition
    light: Light
    wallpaper: Wallpaper


def evaluate(config: Config, sun_calc: SunCalculator, when: Optional[datetime] = None) -> Selection:
    """
    Compute the sun position and select the wallpaper for it.

    Args:
        config: Configuration object
        sun_calc: SunCalculator for the configured location
        when: Time to evaluate (defaults to now)

    Returns:
        Selection

    Raises:
        SolarComputationError: If the sun position cannot be computed
        NoMatchError: If no wallpaper applies
    """
    when = sun_calc.as_aware(when)
    position = sun_calc.get_position(when)
    light = position.light
    logger.info(
        f"Light: {light.value} (elevation {position.elevation:.2f}°, "
        f"azimuth {position.azimuth:.2f}°)"
    )

    wallpaper = select_wallpaper(config.wallpapers, light, position.elevation, position.azimuth)
    logger.info(f"Selected wallpaper: {wallpaper.path}")
    return Selection(when=when, position=position, light=light, wallpaper=wallpaper)


def run_once(config: Config, when: Optional[datetime] = None) -> int:
    """
    Select and apply the wallpaper for the current sun position.

    Args:
        config: Configuration object
        when: Time to evaluate (defaults to now)

    Returns:
        Process exit code
    """
    sun_calc = SunCalculator(
        config.location.latitude, config.location.longitude, config.location.timezone
    )
    selection = evaluate(config, sun_calc, when)

    wallpaper_mgr = create_wallpaper_manager(config.method)
    if wallpaper_mgr.set_wallpaper(selection.wallpaper.path):
        logger.info("Wallpaper set successfully")
        return 0

    logger.error("Failed to set wallpaper")
    return 1


def run_test(config: Config, when: Optional[datetime] = None):
    """
    Show the current light state and the wallpaper it selects, without applying it.

    Args:
        config: Configuration object
        when: Time to evaluate (defaults to now)
    """
    sun_calc = SunCalculator(
        config.location.latitude, config.location.longitude, config.location.timezone
    )
    when = sun_calc.as_aware(when)
    position = sun_calc.get_position(when)
    light = position.light

    print(f"\nTime:       {when.astimezone(sun_calc.tz).strftime('%Y-%m-%d %H:%M:%S %Z')}")
    print(f"Elevation:  {position.elevation:.2f}°")
    print(f"Azimuth:    {position.azimuth:.2f}° ({'rising' if position.is_morning else 'setting'})")
    print(f"Light:      {light.value}")

    try:
        wallpaper = select_wallpaper(config.wallpapers, light, position.elevation, position.azimuth)
        print(f"Wallpaper:  {wallpaper.path}\n")
    except NoMatchError as e:
        print(f"Wallpaper:  none ({e})\n")


def show_lights():
    """Print every light state with its angle ranges."""
    for light in Light:
        ranges = " ∪ ".join(str(bound) for bound in light.bounds)
        print(f"{light.value:<18} {ranges}")


def init_config():
    """Generate a configuration template."""
    config_path = get_default_config_path()

    if config_path.exists():
        response = input(f"Config file already exists at {config_path}. Overwrite? [y/N] ")
        if response.lower() != 'y':
            print("Aborted.")
            return

    create_default_config(config_path)
    print(f"Configuration template created at: {config_path}")
    print("\nPlease edit this file with your location and wallpaper paths.")


def parse_time(value: str) -> datetime:
    """Parse an ISO 8601 timestamp for --time."""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid ISO 8601 time: {value}") from None


def cli():
    """Command-line interface entry point."""
    parser = argparse.ArgumentParser(
        description="Lightpaper - set the wallpaper from the sun's light state"
    )
    parser.add_argument(
        '--config', '-c',
        type=Path,
        help='Path to configuration file (default: ~/.config/lightpaper/config.yaml)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--time', '-t',
        type=parse_time,
        help='Evaluate at this ISO 8601 time instead of now (naive times are UTC)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')
    subparsers.add_parser('test', help='Show current light state and selected wallpaper')
    subparsers.add_parser('lights', help='List light states and their angle ranges')
    subparsers.add_parser('init', help='Generate configuration template')

    args = parser.parse_args()
    setup_logging(args.verbose)

    # Commands that don't need config
    if args.command == 'init':
        init_config()
        return
    if args.command == 'lights':
        show_lights()
        return

    config_path = args.config or get_default_config_path()

    try:
        config = Config.load(config_path)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {config_path}", file=sys.stderr)
        print(f"Run 'lightpaper init' to create a template.", file=sys.stderr)
        sys.exit(1)
    except ConfigurationError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == 'test':
            run_test(config, args.time)
        else:
            sys.exit(run_once(config, args.time))
    except SolarComputationError as e:
        logger.error(f"Solar position error: {e}")
        sys.exit(1)
    except NoMatchError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == '__main__':
    cli()
