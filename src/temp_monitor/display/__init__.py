"""Headless display model: slot rendering and periodic refresh."""

from temp_monitor.display.polling import PollingLoop
from temp_monitor.display.slots import (
    PLACEHOLDER_EMPTY,
    PLACEHOLDER_ERROR,
    PLACEHOLDER_UNKNOWN,
    SlotReading,
    format_temperature,
    render_slots,
    slot_line,
)

__all__ = [
    "PollingLoop",
    "SlotReading",
    "render_slots",
    "format_temperature",
    "slot_line",
    "PLACEHOLDER_EMPTY",
    "PLACEHOLDER_UNKNOWN",
    "PLACEHOLDER_ERROR",
]
