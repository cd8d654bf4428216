"""Tests for the polling loop."""

import asyncio

import pytest

from temp_monitor.display.polling import PollingLoop
from temp_monitor.display.slots import SlotReading
from temp_monitor.preferences import PreferencesStore
from temp_monitor.smc.monitor import Monitor


@pytest.fixture
def assigned_store(store: PreferencesStore) -> PreferencesStore:
    store.set_slot_key(1, "TC0P")
    store.set_slot_key(2, "TG0D")
    return store


def test_rejects_non_positive_interval(monitor: Monitor, store: PreferencesStore) -> None:
    with pytest.raises(ValueError):
        PollingLoop(monitor, store, on_update=lambda r: None, interval_seconds=0)


@pytest.mark.asyncio
async def test_tick_delivers_readings(monitor: Monitor, assigned_store: PreferencesStore) -> None:
    received: list[list[SlotReading]] = []
    loop = PollingLoop(monitor, assigned_store, on_update=received.append)

    readings = await loop.tick()

    assert [r.text for r in readings] == ["44°", "52°"]
    assert received == [readings]
    assert loop.last_readings == readings
    assert loop.ticks == 1


@pytest.mark.asyncio
async def test_tick_picks_up_preference_changes(
    monitor: Monitor, assigned_store: PreferencesStore
) -> None:
    loop = PollingLoop(monitor, assigned_store, on_update=lambda r: None)

    await loop.tick()
    assigned_store.set_slot_key(2, "TA0P")
    readings = await loop.tick()

    assert [r.text for r in readings] == ["44°", "36°"]


@pytest.mark.asyncio
async def test_callback_error_is_contained(
    monitor: Monitor, assigned_store: PreferencesStore
) -> None:
    def broken(readings: list[SlotReading]) -> None:
        raise RuntimeError("display gone")

    loop = PollingLoop(monitor, assigned_store, on_update=broken)

    readings = await loop.tick()

    assert len(readings) == 2
    assert loop.ticks == 1


@pytest.mark.asyncio
async def test_start_and_stop(monitor: Monitor, assigned_store: PreferencesStore) -> None:
    received: list[list[SlotReading]] = []
    loop = PollingLoop(monitor, assigned_store, on_update=received.append, interval_seconds=0.01)

    await loop.start()
    assert loop.running
    await loop.start()  # second start is ignored

    for _ in range(200):
        if loop.ticks >= 3:
            break
        await asyncio.sleep(0.01)
    await loop.stop()

    assert not loop.running
    assert loop.ticks >= 3
    assert all(slot_texts == ["44°", "52°"] for slot_texts in ([r.text for r in b] for b in received))

    ticks = loop.ticks
    await asyncio.sleep(0.05)
    assert loop.ticks == ticks


@pytest.mark.asyncio
async def test_stop_without_start(monitor: Monitor, store: PreferencesStore) -> None:
    loop = PollingLoop(monitor, store, on_update=lambda r: None)
    await loop.stop()
    assert not loop.running
