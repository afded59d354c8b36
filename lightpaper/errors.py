"""Error types raised by Lightpaper."""


class ConfigurationError(ValueError):
    """Configuration file is malformed or incomplete."""


class SolarComputationError(RuntimeError):
    """Solar position could not be computed for the configured location."""


class NoMatchError(LookupError):
    """No wallpaper condition matched and no 'any' fallback is configured."""
