"""Slot rendering for the status item.

Turns the active slot assignments into short display strings. A failing
sensor only affects its own slot.
"""

from dataclasses import dataclass
from typing import Protocol

from temp_monitor.preferences import PreferencesStore
from temp_monitor.smc.catalog import Sensor
from temp_monitor.smc.errors import SMCError
from temp_monitor.telemetry import SENSOR_READ_FAILED, SLOTS_RENDERED, get_logger

log = get_logger(__name__)

PLACEHOLDER_EMPTY = "--°"
PLACEHOLDER_UNKNOWN = "??°"
PLACEHOLDER_ERROR = "ER°"


class SlotSource(Protocol):
    def read_temperature(self, key: str) -> float: ...

    def find_sensor(self, key: str) -> Sensor | None: ...


@dataclass(frozen=True)
class SlotReading:
    """What one slot shows."""

    slot: int
    text: str
    key: str | None = None
    value: float | None = None
    error: str | None = None


def format_temperature(value: float) -> str:
    """Format a reading for a slot, e.g. 44.4 -> '44°'."""
    return f"{value:.0f}°"


def render_slot(source: SlotSource, slot: int, key: str | None) -> SlotReading:
    """Read and format a single slot."""
    if not key:
        return SlotReading(slot=slot, text=PLACEHOLDER_EMPTY)

    sensor = source.find_sensor(key)
    if sensor is None:
        log.warning("slot_sensor_not_in_catalog", slot=slot, key=key)
        return SlotReading(slot=slot, text=PLACEHOLDER_UNKNOWN, key=key, error="not in catalog")

    try:
        value = source.read_temperature(sensor.key)
    except SMCError as e:
        log.warning(
            SENSOR_READ_FAILED,
            slot=slot,
            key=key,
            sensor=sensor.name,
            error=str(e),
            error_type=type(e).__name__,
        )
        return SlotReading(slot=slot, text=PLACEHOLDER_ERROR, key=key, error=str(e))

    return SlotReading(slot=slot, text=format_temperature(value), key=key, value=value)


def render_slots(source: SlotSource, preferences: PreferencesStore) -> list[SlotReading]:
    """Render every slot of the current layout, in slot order."""
    readings = [
        render_slot(source, index, key)
        for index, key in enumerate(preferences.active_slot_keys(), start=1)
    ]
    log.debug(SLOTS_RENDERED, slots=[r.text for r in readings])
    return readings


def slot_line(readings: list[SlotReading]) -> str:
    """Join slot texts the way a single-line status item shows them."""
    return " ".join(r.text for r in readings)
