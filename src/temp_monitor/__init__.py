"""Temperature monitor: read SMC temperature sensors on macOS.

Example:
    >>> from temp_monitor import Monitor
    >>> with Monitor.initialize() as monitor:
    ...     for sensor in monitor.list_available_sensors():
    ...         print(sensor.name, monitor.read_temperature(sensor.key))
"""

from temp_monitor.smc import (
    KNOWN_SENSORS,
    ConnectionFailedError,
    DecodeError,
    KeyNotFoundError,
    Monitor,
    OperationFailedError,
    Sensor,
    SensorError,
    ServiceNotFoundError,
    SMCConnectionError,
    SMCError,
    TransportError,
    UnsupportedFormatError,
    decode,
)

__version__ = "0.1.0"

__all__ = [
    "Monitor",
    "Sensor",
    "KNOWN_SENSORS",
    "decode",
    "SMCError",
    "SMCConnectionError",
    "ServiceNotFoundError",
    "ConnectionFailedError",
    "SensorError",
    "KeyNotFoundError",
    "OperationFailedError",
    "TransportError",
    "DecodeError",
    "UnsupportedFormatError",
]
