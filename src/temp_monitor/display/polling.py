"""Periodic slot refresh.

PollingLoop replaces the UI timer: it re-renders the active slots at a
fixed interval and hands the result to a callback. Reads are blocking,
so each sweep runs in a worker thread.
"""

import asyncio
from collections.abc import Callable

from temp_monitor.display.slots import SlotReading, SlotSource, render_slots
from temp_monitor.preferences import PreferencesStore
from temp_monitor.telemetry import (
    POLL_LOOP_STARTED,
    POLL_LOOP_STOPPED,
    POLL_TICK_FAILED,
    get_logger,
)

log = get_logger(__name__)

UpdateCallback = Callable[[list[SlotReading]], None]


class PollingLoop:
    """Background refresh of slot readings.

    Usage:
        >>> loop = PollingLoop(monitor, store, on_update=print, interval_seconds=2.0)
        >>> await loop.start()
        >>> # ... later ...
        >>> await loop.stop()

    Attributes:
        interval_seconds: Delay between sweeps.
        ticks: Number of completed sweeps.
        last_readings: Result of the most recent sweep.
    """

    def __init__(
        self,
        source: SlotSource,
        preferences: PreferencesStore,
        on_update: UpdateCallback,
        interval_seconds: float = 2.0,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._source = source
        self._preferences = preferences
        self._on_update = on_update
        self.interval_seconds = interval_seconds
        self.ticks = 0
        self.last_readings: list[SlotReading] = []
        self._task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the background refresh task."""
        if self._running:
            log.warning("poll_loop_already_running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run())
        log.info(POLL_LOOP_STARTED, interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Stop the refresh task and wait for it to finish."""
        if not self._running:
            return

        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass  # Expected
        self._task = None
        log.info(POLL_LOOP_STOPPED, ticks=self.ticks)

    async def tick(self) -> list[SlotReading]:
        """Run one sweep and deliver it to the callback."""
        readings = await asyncio.to_thread(render_slots, self._source, self._preferences)
        self.last_readings = readings
        self.ticks += 1
        try:
            self._on_update(readings)
        except Exception as e:
            log.error(
                POLL_TICK_FAILED,
                stage="on_update",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
        return readings

    async def _run(self) -> None:
        while self._running:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # A failed sweep must not end polling
                log.error(
                    POLL_TICK_FAILED,
                    stage="render",
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )
            await asyncio.sleep(self.interval_seconds)
