"""Tests for the sensor availability probe."""

from __future__ import annotations

from typing import TYPE_CHECKING

from temp_monitor.smc.catalog import KNOWN_SENSORS, Sensor
from temp_monitor.smc.errors import KeyNotFoundError, TransportError
from temp_monitor.smc.monitor import Monitor
from temp_monitor.smc.probe import probe_available_sensors

if TYPE_CHECKING:
    from conftest import FakeSMC


class StubReader:
    """Reader that fails for configured keys."""

    def __init__(self, failures: dict[str, Exception]) -> None:
        self.failures = failures
        self.reads: list[str] = []

    def read_temperature(self, key: str) -> float:
        self.reads.append(key)
        if key in self.failures:
            raise self.failures[key]
        return 40.0


def test_returns_readable_subset_in_catalog_order(monitor: Monitor) -> None:
    available = monitor.list_available_sensors()
    # TM0S is implemented but not a temperature encoding
    assert [s.key for s in available] == ["TC0P", "TG0D", "TA0P"]


def test_selected_keys_restrict_probe(monitor: Monitor, fake_smc: FakeSMC) -> None:
    available = monitor.list_available_sensors(["TA0P", "TC0P", "TC0D"])

    assert [s.key for s in available] == ["TC0P", "TA0P"]
    probed = {key for key, _ in fake_smc.calls}
    assert probed == {"TC0P", "TA0P", "TC0D"}


def test_empty_selection_probes_nothing(monitor: Monitor, fake_smc: FakeSMC) -> None:
    assert monitor.list_available_sensors([]) == []
    assert fake_smc.calls == []


def test_failures_are_swallowed() -> None:
    catalog = (
        Sensor(key="AAAA", name="A"),
        Sensor(key="BBBB", name="B"),
        Sensor(key="CCCC", name="C"),
    )
    reader = StubReader(
        {"AAAA": KeyNotFoundError("AAAA"), "CCCC": TransportError(-1, key="CCCC")}
    )

    available = probe_available_sensors(reader, catalog)

    assert available == [catalog[1]]
    assert reader.reads == ["AAAA", "BBBB", "CCCC"]


def test_default_catalog() -> None:
    reader = StubReader({})
    assert probe_available_sensors(reader) == list(KNOWN_SENSORS)
