"""Logging options available before AppConfig is loaded.

Telemetry is configured the first time any module asks for a logger, which
happens while the package is still importing. These helpers read the same
environment variables AppConfig reads, so early output already lands in the
configured directory at the configured level. They must not import telemetry.
"""

import os
from pathlib import Path

from temp_monitor.config.validators import resolve_path, validate_log_format, validate_log_level

DEFAULT_LOG_DIR = Path("telemetry/logs")
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"


def _env(name: str) -> str | None:
    value = os.getenv(name)
    return value.strip() if value and value.strip() else None


def get_bootstrap_log_level(default: str = DEFAULT_LOG_LEVEL) -> str:
    """APP_LOG_LEVEL, uppercased; default if unset or invalid."""
    value = _env("APP_LOG_LEVEL")
    if value is not None:
        try:
            return validate_log_level(value)
        except ValueError:
            pass
    return validate_log_level(default)


def get_bootstrap_log_format(default: str = DEFAULT_LOG_FORMAT) -> str:
    """APP_LOG_FORMAT ("console" or "json"); default if unset or invalid."""
    value = _env("APP_LOG_FORMAT")
    if value is not None:
        try:
            return validate_log_format(value)
        except ValueError:
            pass
    return validate_log_format(default)


def get_bootstrap_log_dir() -> Path:
    """TEMPMON_LOG_DIR resolved to an absolute path, or <project>/telemetry/logs."""
    return resolve_path(_env("TEMPMON_LOG_DIR") or DEFAULT_LOG_DIR)
