"""Command-line front end for the temperature monitor."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from temp_monitor.config.settings import AppConfig, get_settings
from temp_monitor.display.polling import PollingLoop
from temp_monitor.display.slots import SlotReading, slot_line
from temp_monitor.preferences import LayoutMode, PreferencesError, PreferencesStore
from temp_monitor.smc.errors import SensorError, SMCConnectionError, SMCError
from temp_monitor.smc.monitor import Monitor

console = Console()
app = typer.Typer(help="Read SMC temperature sensors")
prefs_app = typer.Typer(help="Manage display layout and slot assignments")
app.add_typer(prefs_app, name="prefs")

EXIT_SENSOR_ERROR = 1
EXIT_STARTUP_ERROR = 2

PrefsOption = typer.Option(None, "--prefs", help="Preferences file (overrides configuration).")


def _open_monitor(config: AppConfig) -> Monitor:
    """Open the SMC or exit with a critical message."""
    try:
        return Monitor.initialize(config=config)
    except SMCConnectionError as error:
        console.print(f"[bold red]Hardware monitor error:[/bold red] {error}")
        console.print("[red]No sensors can be read; exiting.[/red]")
        raise typer.Exit(EXIT_STARTUP_ERROR) from error


def _load_store(config: AppConfig, prefs_path: Path | None) -> PreferencesStore:
    store = PreferencesStore(prefs_path or config.preferences_path)
    try:
        store.load()
    except PreferencesError as error:
        console.print(f"[red]{error}[/red]")
        raise typer.Exit(EXIT_SENSOR_ERROR) from error
    return store


def _bootstrap_defaults(monitor: Monitor, store: PreferencesStore) -> None:
    """First-run defaults: monitor every catalog sensor, fill slots 1-2."""
    store.register_default_monitored_keys(s.key for s in monitor.catalog)
    available = monitor.list_available_sensors(store.preferences.monitored_keys)
    store.register_default_slot_keys(available)


@app.command()
def read(key: str = typer.Argument(..., help="Four-character SMC key, e.g. TC0P")) -> None:
    """Read one sensor."""
    config = get_settings()
    with _open_monitor(config) as monitor:
        sensor = monitor.find_sensor(key)
        name = sensor.name if sensor else "uncatalogued"
        try:
            value = monitor.read_temperature(key)
        except SensorError as error:
            console.print(f"[red]{key} {name}: {error}[/red]")
            raise typer.Exit(EXIT_SENSOR_ERROR) from error
        console.print(f"{key} {name}: {value:.1f} °C")


@app.command("list")
def list_sensors(
    show_all: bool = typer.Option(
        False, "--all", help="Show every catalog sensor, including unavailable ones."
    ),
) -> None:
    """List sensors that currently produce a reading."""
    config = get_settings()
    table = Table(title="SMC temperature sensors")
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Reading", justify="right")

    with _open_monitor(config) as monitor:
        if show_all:
            for sensor in monitor.catalog:
                try:
                    reading = f"{monitor.read_temperature(sensor.key):.1f} °C"
                except SMCError as error:
                    reading = f"[dim]{type(error).__name__}[/dim]"
                table.add_row(sensor.key, sensor.name, reading)
        else:
            for sensor in monitor.list_available_sensors():
                table.add_row(sensor.key, sensor.name, "available")

    console.print(table)


@app.command()
def watch(
    interval: float | None = typer.Option(
        None, "--interval", min=0.1, help="Seconds between refreshes (default from config)."
    ),
    count: int | None = typer.Option(
        None, "--count", min=1, help="Stop after this many refreshes."
    ),
    prefs_path: Path | None = PrefsOption,
) -> None:
    """Continuously show the configured slots."""
    config = get_settings()
    store = _load_store(config, prefs_path)
    with _open_monitor(config) as monitor:
        _bootstrap_defaults(monitor, store)

        def show(readings: list[SlotReading]) -> None:
            console.print(slot_line(readings))

        loop = PollingLoop(
            monitor,
            store,
            on_update=show,
            interval_seconds=interval or config.poll_interval_seconds,
        )
        try:
            asyncio.run(_watch(loop, count))
        except KeyboardInterrupt:
            console.print("[dim]stopped[/dim]")


async def _watch(loop: PollingLoop, count: int | None) -> None:
    if count is not None:
        # Deterministic sweeps, spaced by the interval
        for remaining in range(count, 0, -1):
            await loop.tick()
            if remaining > 1:
                await asyncio.sleep(loop.interval_seconds)
        return

    await loop.start()
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await loop.stop()


@prefs_app.command("show")
def prefs_show(prefs_path: Path | None = PrefsOption) -> None:
    """Print the current preferences."""
    store = _load_store(get_settings(), prefs_path)
    prefs = store.preferences
    console.print(f"file: {store.path}")
    console.print(f"layout: {prefs.layout.slot_count} slot(s)")
    for slot, key in enumerate(prefs.slot_keys, start=1):
        console.print(f"slot {slot}: {key or '-'}")
    monitored = "not configured" if prefs.monitored_keys is None else ", ".join(prefs.monitored_keys)
    console.print(f"monitored: {monitored}")


@prefs_app.command("layout")
def prefs_layout(
    slots: int = typer.Argument(..., help="Number of slots: 1, 2 or 4"),
    prefs_path: Path | None = PrefsOption,
) -> None:
    """Set the display layout."""
    if slots not in {mode.value for mode in LayoutMode}:
        console.print("[red]Layout must be 1, 2 or 4 slots.[/red]")
        raise typer.Exit(EXIT_SENSOR_ERROR)
    store = _load_store(get_settings(), prefs_path)
    store.set_layout(LayoutMode(slots))
    console.print(f"layout: {slots} slot(s)")


@prefs_app.command("assign")
def prefs_assign(
    slot: int = typer.Argument(..., help="Slot number, 1-4"),
    key: str = typer.Argument(..., help="SMC key, or 'none' to clear the slot"),
    prefs_path: Path | None = PrefsOption,
) -> None:
    """Assign a sensor to a slot."""
    store = _load_store(get_settings(), prefs_path)
    value = None if key.lower() == "none" else key
    try:
        store.set_slot_key(slot, value)
    except ValueError as error:
        console.print(f"[red]{error}[/red]")
        raise typer.Exit(EXIT_SENSOR_ERROR) from error
    console.print(f"slot {slot}: {value or '-'}")


@prefs_app.command("monitor")
def prefs_monitor(
    keys: list[str] = typer.Argument(..., help="SMC keys to monitor"),
    prefs_path: Path | None = PrefsOption,
) -> None:
    """Choose which sensors are offered for slots."""
    store = _load_store(get_settings(), prefs_path)
    store.set_monitored_keys(keys)
    console.print(f"monitored: {', '.join(store.preferences.monitored_keys or [])}")


@prefs_app.command("reset")
def prefs_reset(prefs_path: Path | None = PrefsOption) -> None:
    """Delete saved preferences; defaults apply on next start."""
    path = prefs_path or get_settings().preferences_path
    if path.exists():
        path.unlink()
        console.print(f"removed {path}")
    else:
        console.print("No saved preferences")


if __name__ == "__main__":
    app()
