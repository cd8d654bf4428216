"""Hardware monitor: the core read API over an SMC channel.

Usage:
    >>> with Monitor.initialize() as monitor:
    ...     monitor.read_temperature("TC0P")
    44.0
"""

import threading
from collections.abc import Iterable
from types import TracebackType

from temp_monitor.config.settings import AppConfig
from temp_monitor.smc.catalog import KNOWN_SENSORS, Sensor, find_sensor, is_valid_key
from temp_monitor.smc.channel import (
    CMD_GET_KEY_INFO,
    CMD_READ_KEY,
    DEFAULT_FALLBACK_SERVICE_NAME,
    DEFAULT_SERVICE_NAME,
    RESULT_KEY_NOT_FOUND,
    RESULT_SUCCESS,
    SMCChannel,
)
from temp_monitor.smc.decoder import decode
from temp_monitor.smc.errors import (
    ConnectionFailedError,
    KeyNotFoundError,
    OperationFailedError,
    SensorError,
    TransportError,
)
from temp_monitor.smc.frame import SMCCallFrame, SMCKeyInfo
from temp_monitor.smc.iokit import SMCTransport
from temp_monitor.smc.probe import probe_available_sensors
from temp_monitor.telemetry import SENSOR_READ, SENSOR_READ_FAILED, get_logger

log = get_logger(__name__)


class Monitor:
    """Reads catalogued temperature sensors through one SMC channel.

    Reads are serialized: a lock is held across both phases of each read
    so concurrent callers never interleave key-info and read calls.

    Attributes:
        catalog: Sensors this monitor knows about.
    """

    def __init__(self, channel: SMCChannel, catalog: tuple[Sensor, ...] = KNOWN_SENSORS) -> None:
        """Wrap an open channel. Prefer Monitor.initialize()."""
        self._channel = channel
        self._lock = threading.Lock()
        self.catalog = catalog

    @classmethod
    def initialize(
        cls,
        config: AppConfig | None = None,
        transport: SMCTransport | None = None,
        catalog: tuple[Sensor, ...] = KNOWN_SENSORS,
    ) -> "Monitor":
        """Open the SMC and return a ready monitor.

        Args:
            config: Supplies the SMC service names; defaults are used if None.
            transport: Kernel transport override (tests).
            catalog: Sensor catalog.

        Raises:
            ServiceNotFoundError: If no SMC service exists.
            ConnectionFailedError: If the service refused the connection.
        """
        service_name = config.smc_service_name if config else DEFAULT_SERVICE_NAME
        fallback = config.smc_fallback_service_name if config else DEFAULT_FALLBACK_SERVICE_NAME
        channel = SMCChannel.open(service_name, fallback, transport=transport)
        return cls(channel, catalog)

    @property
    def is_open(self) -> bool:
        return self._channel.is_open

    def read_temperature(self, key: str) -> float:
        """Read one sensor in degrees Celsius.

        Args:
            key: Four-character SMC key.

        Returns:
            Temperature value.

        Raises:
            ConnectionFailedError: If the monitor has been shut down.
            KeyNotFoundError: If the SMC does not implement the key.
            OperationFailedError: If the SMC reports another failure.
            TransportError: If the kernel call itself fails.
            UnsupportedFormatError: If the key's type is not a temperature encoding.
        """
        if not self._channel.is_open:
            raise ConnectionFailedError("SMC connection is not open")
        if not is_valid_key(key):
            raise KeyNotFoundError(key)

        try:
            with self._lock:
                info = self._read_key_info(key)
                data = self._read_bytes(key, info)
            value = decode(info.data_type_code, info.data_size, data)
        except SensorError as e:
            log.debug(SENSOR_READ_FAILED, key=key, error=str(e), error_type=type(e).__name__)
            raise

        log.debug(SENSOR_READ, key=key, value=value, data_type=info.data_type_code)
        return value

    def _read_key_info(self, key: str) -> SMCKeyInfo:
        frame = self._call(SMCCallFrame.for_key(key), CMD_GET_KEY_INFO, key)
        return frame.key_info

    def _read_bytes(self, key: str, info: SMCKeyInfo) -> bytes:
        request = SMCCallFrame.for_key(key)
        request.key_info = SMCKeyInfo(data_size=info.data_size, data_type=info.data_type)
        frame = self._call(request, CMD_READ_KEY, key)
        return frame.data[: info.data_size]

    def _call(self, frame: SMCCallFrame, sub_opcode: int, key: str) -> SMCCallFrame:
        """Run one call and classify the SMC result byte."""
        try:
            self._channel.call(frame, sub_opcode)
        except TransportError as e:
            raise TransportError(e.code, key=key) from None

        if frame.result == RESULT_KEY_NOT_FOUND:
            raise KeyNotFoundError(key)
        if frame.result != RESULT_SUCCESS:
            raise OperationFailedError(key, frame.result)
        return frame

    def find_sensor(self, key: str) -> Sensor | None:
        """Look up a key in this monitor's catalog."""
        return find_sensor(key, self.catalog)

    def list_available_sensors(self, selected_keys: Iterable[str] | None = None) -> list[Sensor]:
        """Return catalog sensors that currently read successfully.

        Args:
            selected_keys: Restrict the probe to these keys.
        """
        return probe_available_sensors(self, self.catalog, selected_keys)

    def shutdown(self) -> None:
        """Close the SMC connection. Safe to call more than once."""
        with self._lock:
            self._channel.close()

    def __enter__(self) -> "Monitor":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()
