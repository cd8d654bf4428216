"""SMC access: catalog, wire frame, decoder, channel and monitor.

Structure:
- catalog.py: static table of known temperature keys
- frame.py: the 80-byte parameter block and four-char code helpers
- decoder.py: sp78 and flt value decoding
- iokit.py: ctypes bindings to IOKit
- channel.py: open/call/close over the AppleSMC user client
- monitor.py: two-phase temperature reads
- probe.py: which sensors currently work
"""

from temp_monitor.smc.catalog import KNOWN_SENSORS, Sensor, find_sensor
from temp_monitor.smc.channel import SMCChannel
from temp_monitor.smc.decoder import decode
from temp_monitor.smc.errors import (
    ConnectionFailedError,
    DecodeError,
    KeyNotFoundError,
    OperationFailedError,
    SensorError,
    ServiceNotFoundError,
    SMCConnectionError,
    SMCError,
    TransportError,
    UnsupportedFormatError,
)
from temp_monitor.smc.frame import SMCCallFrame, SMCKeyInfo
from temp_monitor.smc.monitor import Monitor
from temp_monitor.smc.probe import probe_available_sensors

__all__ = [
    "KNOWN_SENSORS",
    "Sensor",
    "find_sensor",
    "SMCChannel",
    "SMCCallFrame",
    "SMCKeyInfo",
    "decode",
    "Monitor",
    "probe_available_sensors",
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
