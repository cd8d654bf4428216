"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Semantic event constants
"""

from temp_monitor.telemetry.events import (
    POLL_LOOP_STARTED,
    POLL_LOOP_STOPPED,
    POLL_TICK_FAILED,
    PREFERENCES_CHANGED,
    PREFERENCES_DEFAULTS_REGISTERED,
    PREFERENCES_LOADED,
    PREFERENCES_SAVED,
    PREFERENCES_SUBSCRIBER_FAILED,
    SENSOR_PROBE_COMPLETED,
    SENSOR_READ,
    SENSOR_READ_FAILED,
    SLOTS_RENDERED,
    SMC_CALL_FAILED,
    SMC_CONNECTION_CLOSED,
    SMC_CONNECTION_FAILED,
    SMC_CONNECTION_OPENED,
    SMC_SERVICE_FALLBACK,
    SMC_SERVICE_NOT_FOUND,
)
from temp_monitor.telemetry.logger import configure_logging, get_logger

__all__ = [
    # Core exports
    "get_logger",
    "configure_logging",
    # Event constants
    "SMC_SERVICE_NOT_FOUND",
    "SMC_SERVICE_FALLBACK",
    "SMC_CONNECTION_OPENED",
    "SMC_CONNECTION_FAILED",
    "SMC_CONNECTION_CLOSED",
    "SMC_CALL_FAILED",
    "SENSOR_READ",
    "SENSOR_READ_FAILED",
    "SENSOR_PROBE_COMPLETED",
    "SLOTS_RENDERED",
    "POLL_LOOP_STARTED",
    "POLL_LOOP_STOPPED",
    "POLL_TICK_FAILED",
    "PREFERENCES_LOADED",
    "PREFERENCES_SAVED",
    "PREFERENCES_CHANGED",
    "PREFERENCES_DEFAULTS_REGISTERED",
    "PREFERENCES_SUBSCRIBER_FAILED",
]
