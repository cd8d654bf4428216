"""Sensor availability probe.

Finds which catalog entries currently produce a reading, so callers can
offer only working sensors without knowing anything about the SMC.
"""

from collections.abc import Iterable
from typing import Protocol

from temp_monitor.smc.catalog import KNOWN_SENSORS, Sensor
from temp_monitor.smc.errors import SMCError
from temp_monitor.telemetry import SENSOR_PROBE_COMPLETED, get_logger

log = get_logger(__name__)


class TemperatureReader(Protocol):
    def read_temperature(self, key: str) -> float: ...


def probe_available_sensors(
    reader: TemperatureReader,
    catalog: Iterable[Sensor] = KNOWN_SENSORS,
    selected_keys: Iterable[str] | None = None,
) -> list[Sensor]:
    """Return the catalog entries that read successfully, in catalog order.

    Any SMC failure excludes the sensor; nothing is raised.

    Args:
        reader: Object with a read_temperature(key) method.
        catalog: Sensors to try.
        selected_keys: If given, only sensors with these keys are tried.

    Returns:
        The subset of catalog whose read succeeded.
    """
    wanted = set(selected_keys) if selected_keys is not None else None
    available: list[Sensor] = []
    skipped: list[str] = []

    for sensor in catalog:
        if wanted is not None and sensor.key not in wanted:
            continue
        try:
            reader.read_temperature(sensor.key)
        except SMCError as e:
            log.debug("sensor_unavailable", key=sensor.key, error_type=type(e).__name__)
            skipped.append(sensor.key)
            continue
        available.append(sensor)

    log.info(
        SENSOR_PROBE_COMPLETED,
        available=[s.key for s in available],
        unavailable=skipped,
    )
    return available
