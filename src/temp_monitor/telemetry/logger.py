"""Structured logging for the temperature monitor.

Two sinks share one structlog processor chain:
- ``<log_dir>/current.jsonl``: JSON lines, rotated at 10 MB with three backups
- stderr: a human-readable console renderer, or JSON when log_format is "json"

Logging configures itself the first time a module asks for a logger. That
happens at import time, before AppConfig exists, so the level, directory and
format are first taken from the environment (see config.bootstrap).
load_app_config() calls configure_logging(config) once settings are
validated, which applies values that only exist in .env files.
"""

import logging
import logging.handlers
import pathlib
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from temp_monitor.config.settings import AppConfig

LOG_FILE_NAME = "current.jsonl"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 3


def _get_log_level() -> str:
    """Log level before settings are loaded."""
    from temp_monitor.config.bootstrap import get_bootstrap_log_level  # noqa: PLC0415

    return get_bootstrap_log_level()


def _get_log_dir() -> pathlib.Path:
    """Log directory before settings are loaded."""
    from temp_monitor.config.bootstrap import get_bootstrap_log_dir  # noqa: PLC0415

    return get_bootstrap_log_dir()


def _get_log_format() -> str:
    """Console format before settings are loaded."""
    from temp_monitor.config.bootstrap import get_bootstrap_log_format  # noqa: PLC0415

    return get_bootstrap_log_format()


def _add_component(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Tag the event with the last segment of its logger name.

    "temp_monitor.smc.channel" becomes "channel". Runs after add_logger_name,
    so both structlog events and plain stdlib records carry the name.
    """
    name = event_dict.get("logger") or getattr(logger, "name", "")
    event_dict["component"] = name.rsplit(".", 1)[-1] if name else "unknown"
    return event_dict


# Applied to records from stdlib loggers that bypass structlog
_FOREIGN_PRE_CHAIN: list[Any] = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    _add_component,
]


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _formatter(renderer: Any) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer, foreign_pre_chain=_FOREIGN_PRE_CHAIN
    )


def _configure_file_handler(log_dir: pathlib.Path) -> logging.handlers.RotatingFileHandler:
    """Create the rotating JSON-lines handler, creating log_dir if needed."""
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        filename=str(log_dir / LOG_FILE_NAME),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
    return handler


def _configure_console_handler(log_format: str = "console") -> logging.StreamHandler[Any]:
    """Create the stderr handler rendering in log_format ("console" or "json")."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(_renderer(log_format)))
    return handler


def _reset_root_handlers(root_logger: logging.Logger) -> None:
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()


def configure_logging(config: "AppConfig | None" = None) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call again; the previous handlers are closed and replaced.

    Args:
        config: Validated settings. If None, level, directory and format are
            read from the environment.
    """
    if config is not None:
        log_level = config.log_level
        log_dir = pathlib.Path(config.log_dir)
        log_format = config.log_format
    else:
        log_level = _get_log_level()
        log_dir = _get_log_dir()
        log_format = _get_log_format()

    configured_level = getattr(logging, log_level, logging.INFO)

    # Handlers gate output; the root logger passes everything through.
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    _reset_root_handlers(root_logger)

    # The file keeps INFO and above even when the console is quieter
    file_handler = _configure_file_handler(log_dir)
    file_handler.setLevel(min(logging.INFO, configured_level))
    root_logger.addHandler(file_handler)

    console_handler = _configure_console_handler(log_format)
    console_handler.setLevel(configured_level)
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            _add_component,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:  # Returns structlog.stdlib.BoundLogger
    """Get a structured logger, configuring logging on first use.

    Example:
        >>> from temp_monitor.telemetry import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("sensor_read", key="TC0P", value=44.0)
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name)
