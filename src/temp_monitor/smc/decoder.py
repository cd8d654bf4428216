"""Decoding of raw SMC values into temperatures.

Only two encodings carry temperatures:

- ``sp78``: signed fixed point, 7 integer bits and 8 fractional bits, big-endian.
- ``flt ``: IEEE-754 single precision, big-endian.
"""

import struct

from temp_monitor.smc.errors import DecodeError, UnsupportedFormatError

TYPE_SP78 = "sp78"
TYPE_FLT = "flt "

SUPPORTED_FORMATS = frozenset({(TYPE_SP78, 2), (TYPE_FLT, 4)})


def decode(data_type: str, data_size: int, data: bytes | bytearray | list[int]) -> float:
    """Convert the leading data_size bytes of an SMC value into a float.

    Args:
        data_type: Four-character SMC type tag.
        data_size: Byte count reported by the key-info call.
        data: Raw value buffer; only the first data_size bytes are used.

    Returns:
        The decoded temperature.

    Raises:
        UnsupportedFormatError: If (data_type, data_size) is not a known encoding.
        DecodeError: If the buffer is shorter than data_size.
    """
    if (data_type, data_size) not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(data_type, data_size)

    raw = bytes(data)
    if len(raw) < data_size:
        raise DecodeError(
            f"SMC value of type {data_type!r} needs {data_size} bytes, got {len(raw)}"
        )

    if data_type == TYPE_SP78:
        return int.from_bytes(raw[:2], "big", signed=True) / 256.0

    # flt: reassemble the bit pattern, then reinterpret it as a float32
    bits = (raw[0] << 24) | (raw[1] << 16) | (raw[2] << 8) | raw[3]
    (value,) = struct.unpack(">f", bits.to_bytes(4, "big"))
    return float(value)
