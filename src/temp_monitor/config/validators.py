"""Custom Pydantic validators for configuration.

This module provides validators for custom type conversions used by
AppConfig and the bootstrap helpers.
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


def validate_service_name(value: str) -> str:
    """Validate an IOKit service name is non-empty ASCII.

    Args:
        value: Service name (e.g. "AppleSMC").

    Returns:
        Stripped service name.

    Raises:
        ValueError: If the name is empty or not ASCII.
    """
    stripped = value.strip()
    if not stripped:
        raise ValueError("service name must not be empty")
    if not stripped.isascii():
        raise ValueError(f"service name must be ASCII, got {value!r}")
    return stripped


def resolve_path(value: Path | str) -> Path:
    """Resolve user and relative paths to absolute paths.

    Args:
        value: Path value (can be string or Path).

    Returns:
        Resolved Path object.
    """
    path = Path(value).expanduser()

    # If relative, resolve relative to project root
    if not path.is_absolute():
        # Assume we're in src/temp_monitor/config, go up to project root
        project_root = Path(__file__).parent.parent.parent.parent
        path = (project_root / path).resolve()
    else:
        path = path.resolve()

    return path
