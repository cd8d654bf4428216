"""Tests for the tempmon command line."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

import temp_monitor.config.settings as settings_module
from temp_monitor.config.settings import AppConfig
from temp_monitor.smc.errors import ConnectionFailedError, ServiceNotFoundError
from temp_monitor.smc.monitor import Monitor
from temp_monitor.ui.cli import EXIT_SENSOR_ERROR, EXIT_STARTUP_ERROR, app

if TYPE_CHECKING:
    from conftest import FakeSMC

runner = CliRunner()


@pytest.fixture(autouse=True)
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AppConfig:
    """Cached settings for the CLI, logging into the test directory."""
    config = AppConfig(log_dir=tmp_path / "logs")
    monkeypatch.setattr(settings_module, "_settings", config)
    return config


@pytest.fixture
def patched_monitor(fake_smc: FakeSMC) -> Iterator[Monitor]:
    """Make the CLI open a monitor over the fake SMC."""
    monitor = Monitor.initialize(transport=fake_smc)
    with patch("temp_monitor.ui.cli.Monitor.initialize", return_value=monitor):
        yield monitor


@pytest.fixture
def prefs_file(tmp_path: Path) -> Path:
    return tmp_path / "preferences.yaml"


class TestRead:
    def test_read_known_sensor(self, patched_monitor: Monitor) -> None:
        result = runner.invoke(app, ["read", "TC0P"])

        assert result.exit_code == 0
        assert "CPU Proximity" in result.output
        assert "44.0" in result.output
        assert not patched_monitor.is_open

    def test_read_missing_sensor(self, patched_monitor: Monitor) -> None:
        result = runner.invoke(app, ["read", "ZZZZ"])

        assert result.exit_code == EXIT_SENSOR_ERROR
        assert "not found" in result.output

    @pytest.mark.parametrize(
        "error",
        [
            ServiceNotFoundError(("AppleSMC", "com.apple.driver.AppleSMC")),
            ConnectionFailedError("Failed to open SMC connection", code=-1),
        ],
    )
    def test_startup_failure_is_critical(self, error: Exception) -> None:
        with patch("temp_monitor.ui.cli.Monitor.initialize", side_effect=error):
            result = runner.invoke(app, ["read", "TC0P"])

        assert result.exit_code == EXIT_STARTUP_ERROR
        assert "Hardware monitor error" in result.output


class TestList:
    def test_lists_available_sensors(self, patched_monitor: Monitor) -> None:
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        for name in ("CPU Proximity", "GPU Diode", "Ambient"):
            assert name in result.output
        assert "Memory Slot 1" not in result.output

    def test_list_all_shows_failures(self, patched_monitor: Monitor) -> None:
        result = runner.invoke(app, ["list", "--all"])

        assert result.exit_code == 0
        assert "Memory Slot 1" in result.output
        assert "KeyNotFoundError" in result.output


class TestWatch:
    def test_watch_bootstraps_defaults(self, patched_monitor: Monitor, prefs_file: Path) -> None:
        result = runner.invoke(
            app, ["watch", "--count", "2", "--interval", "0.1", "--prefs", str(prefs_file)]
        )

        assert result.exit_code == 0
        assert result.output.count("44° 52°") == 2

        data = yaml.safe_load(prefs_file.read_text())
        assert data["slot_keys"] == ["TC0P", "TG0D", None, None]
        assert "TA0P" in data["monitored_keys"]

    def test_watch_uses_saved_layout(self, patched_monitor: Monitor, prefs_file: Path) -> None:
        prefs_file.write_text("layout: 4\nslot_keys: [TA0P, ZZZZ, TM0S]\n")

        result = runner.invoke(app, ["watch", "--count", "1", "--prefs", str(prefs_file)])

        assert result.exit_code == 0
        assert "36° ??° ER° --°" in result.output


class TestPrefs:
    def test_show_defaults(self, prefs_file: Path) -> None:
        result = runner.invoke(app, ["prefs", "show", "--prefs", str(prefs_file)])

        assert result.exit_code == 0
        assert "layout: 2 slot(s)" in result.output
        assert "monitored: not configured" in result.output

    def test_layout_and_assign(self, prefs_file: Path) -> None:
        assert runner.invoke(app, ["prefs", "layout", "4", "--prefs", str(prefs_file)]).exit_code == 0
        assert (
            runner.invoke(app, ["prefs", "assign", "3", "TA0P", "--prefs", str(prefs_file)]).exit_code
            == 0
        )

        result = runner.invoke(app, ["prefs", "show", "--prefs", str(prefs_file)])

        assert "layout: 4 slot(s)" in result.output
        assert "slot 3: TA0P" in result.output

    def test_assign_none_clears_slot(self, prefs_file: Path) -> None:
        runner.invoke(app, ["prefs", "assign", "1", "TC0P", "--prefs", str(prefs_file)])
        runner.invoke(app, ["prefs", "assign", "1", "none", "--prefs", str(prefs_file)])

        data = yaml.safe_load(prefs_file.read_text())
        assert data["slot_keys"][0] is None

    def test_invalid_layout(self, prefs_file: Path) -> None:
        result = runner.invoke(app, ["prefs", "layout", "3", "--prefs", str(prefs_file)])
        assert result.exit_code == EXIT_SENSOR_ERROR
        assert not prefs_file.exists()

    def test_invalid_slot(self, prefs_file: Path) -> None:
        result = runner.invoke(app, ["prefs", "assign", "5", "TC0P", "--prefs", str(prefs_file)])
        assert result.exit_code == EXIT_SENSOR_ERROR

    def test_monitor_keys(self, prefs_file: Path) -> None:
        result = runner.invoke(
            app, ["prefs", "monitor", "TC0P", "TA0P", "TC0P", "--prefs", str(prefs_file)]
        )

        assert result.exit_code == 0
        assert "monitored: TC0P, TA0P" in result.output

    def test_reset(self, prefs_file: Path) -> None:
        runner.invoke(app, ["prefs", "layout", "1", "--prefs", str(prefs_file)])
        assert prefs_file.exists()

        result = runner.invoke(app, ["prefs", "reset", "--prefs", str(prefs_file)])

        assert result.exit_code == 0
        assert not prefs_file.exists()
        result = runner.invoke(app, ["prefs", "reset", "--prefs", str(prefs_file)])
        assert "No saved preferences" in result.output
