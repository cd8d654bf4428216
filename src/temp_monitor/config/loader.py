"""Shared YAML loading utilities for configuration files."""

from pathlib import Path
from typing import Any

import structlog
import yaml

log = structlog.get_logger(__name__)


class ConfigLoadError(Exception):
    """Base exception for configuration loading errors."""

    pass


def load_yaml_file(
    file_path: Path, error_class: type[Exception] = ConfigLoadError
) -> dict[str, Any]:
    """Load and parse a YAML mapping.

    Args:
        file_path: Path to the YAML file.
        error_class: Exception class to raise on errors. Defaults to ConfigLoadError.

    Returns:
        Parsed YAML content as a dictionary. Returns empty dict if file is empty.

    Raises:
        error_class: If file cannot be read, parsed, or is not a mapping.
    """
    try:
        with file_path.open("r", encoding="utf-8") as f:
            content: Any = yaml.safe_load(f)
    except FileNotFoundError:
        raise error_class(f"Configuration file not found: {file_path}") from None
    except yaml.YAMLError as e:
        raise error_class(f"Failed to parse YAML file {file_path}: {e}") from None
    except OSError as e:
        raise error_class(f"Unexpected error reading {file_path}: {e}") from None

    if content is None:
        log.debug("yaml_file_empty", file_path=str(file_path))
        return {}
    if not isinstance(content, dict):
        raise error_class(f"Expected a mapping in {file_path}, got {type(content).__name__}")
    return content


def dump_yaml_file(
    file_path: Path, data: dict[str, Any], error_class: type[Exception] = ConfigLoadError
) -> None:
    """Write a mapping to a YAML file, creating parent directories.

    Args:
        file_path: Destination path.
        data: Mapping to serialize.
        error_class: Exception class to raise on errors.

    Raises:
        error_class: If the file cannot be written.
    """
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        tmp_path.replace(file_path)
    except OSError as e:
        raise error_class(f"Failed to write {file_path}: {e}") from None
