"""Tests for SMC value decoding."""

import math
import struct

import pytest

from temp_monitor.smc.decoder import decode
from temp_monitor.smc.errors import DecodeError, SensorError, UnsupportedFormatError


class TestSp78:
    """Signed 7.8 fixed point."""

    def test_positive_whole_degrees(self) -> None:
        assert decode("sp78", 2, [0x20, 0x00]) == 32.0

    def test_negative_value(self) -> None:
        assert decode("sp78", 2, [0xFF, 0x00]) == -1.0

    def test_fractional_part(self) -> None:
        assert decode("sp78", 2, bytes([0x2C, 0x80])) == 44.5
        assert decode("sp78", 2, bytes([0x00, 0x01])) == 1 / 256

    def test_extremes(self) -> None:
        assert decode("sp78", 2, bytes([0x7F, 0xFF])) == 32767 / 256
        assert decode("sp78", 2, bytes([0x80, 0x00])) == -128.0

    @pytest.mark.parametrize("b0", [0x00, 0x13, 0x7F, 0x80, 0xC4, 0xFF])
    @pytest.mark.parametrize("b1", [0x00, 0x01, 0x80, 0xFF])
    def test_matches_signed_big_endian(self, b0: int, b1: int) -> None:
        expected = struct.unpack(">h", bytes([b0, b1]))[0] / 256.0
        assert decode("sp78", 2, bytes([b0, b1])) == expected

    def test_ignores_trailing_buffer_bytes(self) -> None:
        buffer = bytes([0x2C, 0x00]) + b"\xAA" * 30
        assert decode("sp78", 2, buffer) == 44.0


class TestFlt:
    """Big-endian IEEE-754 single precision."""

    def test_known_value(self) -> None:
        assert decode("flt ", 4, struct.pack(">f", 36.5)) == 36.5

    def test_raw_bit_pattern(self) -> None:
        # 0x42120000 is 36.5
        assert decode("flt ", 4, bytes([0x42, 0x12, 0x00, 0x00])) == 36.5

    def test_negative_and_zero(self) -> None:
        assert decode("flt ", 4, struct.pack(">f", -12.25)) == -12.25
        assert decode("flt ", 4, bytes(4)) == 0.0

    def test_widens_single_precision(self) -> None:
        value = decode("flt ", 4, struct.pack(">f", 0.1))
        assert value == struct.unpack(">f", struct.pack(">f", 0.1))[0]
        assert isinstance(value, float)

    def test_nan_pattern(self) -> None:
        assert math.isnan(decode("flt ", 4, bytes([0x7F, 0xC0, 0x00, 0x00])))

    def test_is_deterministic(self) -> None:
        raw = struct.pack(">f", 58.125)
        assert decode("flt ", 4, raw) == decode("flt ", 4, raw)


class TestUnsupportedFormats:
    """Anything but (sp78, 2) and (flt , 4) is rejected."""

    @pytest.mark.parametrize(
        ("data_type", "data_size"),
        [
            ("sp78", 4),
            ("flt ", 2),
            ("flt", 4),
            ("ui16", 2),
            ("fpe2", 2),
            ("\x00\x00\x00\x00", 0),
            ("sp78", 0),
        ],
    )
    def test_rejected(self, data_type: str, data_size: int) -> None:
        with pytest.raises(UnsupportedFormatError) as exc_info:
            decode(data_type, data_size, bytes(32))
        assert exc_info.value.data_type == data_type
        assert exc_info.value.data_size == data_size

    def test_is_a_sensor_error(self) -> None:
        with pytest.raises(SensorError):
            decode("ui8 ", 1, bytes(1))

    def test_short_buffer(self) -> None:
        with pytest.raises(DecodeError):
            decode("flt ", 4, bytes(2))
