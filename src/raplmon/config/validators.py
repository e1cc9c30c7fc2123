"""Custom Pydantic validators for configuration.

This module provides validators for cross-field validation and
custom type conversions.
"""

from pathlib import Path


def validate_log_level(value: str) -> str:
    """Validate log level is one of the standard levels.

    Args:
        value: Log level string.

    Returns:
        Validated log level.

    Raises:
        ValueError: If log level is not valid.
    """
    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if value.upper() not in valid_levels:
        raise ValueError(f"log_level must be one of {valid_levels}, got {value}")
    return value.upper()


def validate_log_format(value: str) -> str:
    """Validate log format is 'json' or 'console'.

    Args:
        value: Log format string.

    Returns:
        Validated log format.

    Raises:
        ValueError: If log format is not valid.
    """
    valid_formats = {"json", "console"}
    if value.lower() not in valid_formats:
        raise ValueError(f"log_format must be one of {valid_formats}, got {value}")
    return value.lower()


def validate_sensor_prefix(value: str) -> str:
    """Validate the sensor directory prefix.

    An empty prefix would match every powercap entry, including zones
    that do not expose energy counters in microjoules.

    Raises:
        ValueError: If the prefix is empty or contains a path separator.
    """
    if not value:
        raise ValueError("sensor_prefix must not be empty")
    if "/" in value:
        raise ValueError(f"sensor_prefix must be a plain entry name prefix, got {value}")
    return value


def resolve_path(value: Path | str) -> Path:
    """Resolve a path to an absolute path.

    Relative paths are resolved against the current working directory and
    a leading ``~`` is expanded.

    Args:
        value: Path value (can be string or Path).

    Returns:
        Resolved Path object.
    """
    path = Path(value).expanduser()
    return path.resolve()
