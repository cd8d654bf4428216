"""Shared fixtures: an in-memory SMC standing in for IOKit."""

import struct
from dataclasses import dataclass, field
from typing import ClassVar
from pathlib import Path

import pytest

from temp_monitor.smc.channel import (
    CMD_GET_KEY_INFO,
    CMD_READ_KEY,
    RESULT_KEY_NOT_FOUND,
    SMCChannel,
)
from temp_monitor.smc.frame import DATA_BUFFER_SIZE, SMCCallFrame, fourcc_to_int
from temp_monitor.smc.monitor import Monitor
from temp_monitor.preferences import PreferencesStore


def sp78(value: float) -> bytes:
    """Encode a temperature as sp78."""
    return int(round(value * 256)).to_bytes(2, "big", signed=True)


def flt(value: float) -> bytes:
    """Encode a temperature as big-endian float32."""
    return struct.pack(">f", value)


@dataclass
class FakeSMC:
    """SMCTransport backed by a dict of key -> (type, raw bytes).

    Attributes:
        values: Implemented keys.
        services: Registered service names; (name, by_name) -> service id.
        calls: (key, sub_opcode) for every struct-method call.
        result_overrides: Forced SMC result byte per (key, sub_opcode).
        transport_failures: Forced kern_return per (key, sub_opcode).
        IO_ERROR: kIOReturnError as a signed kern_return_t, for forcing failures.
    """

    IO_ERROR: ClassVar[int] = -536870165

    values: dict[str, tuple[str, bytes]] = field(default_factory=dict)
    services: dict[tuple[str, bool], int] = field(
        default_factory=lambda: {("AppleSMC", False): 101}
    )
    open_result: int = 0
    connection: int = 7
    calls: list[tuple[str, int]] = field(default_factory=list)
    lookups: list[tuple[str, bool]] = field(default_factory=list)
    released: list[int] = field(default_factory=list)
    closed: list[int] = field(default_factory=list)
    result_overrides: dict[tuple[str, int], int] = field(default_factory=dict)
    transport_failures: dict[tuple[str, int], int] = field(default_factory=dict)

    def find_service(self, name: str, by_name: bool = False) -> int:
        self.lookups.append((name, by_name))
        return self.services.get((name, by_name), 0)

    def open_service(self, service: int) -> tuple[int, int]:
        if self.open_result != 0:
            return self.open_result, 0
        return 0, self.connection

    def release(self, obj: int) -> None:
        self.released.append(obj)

    def close_service(self, connection: int) -> int:
        self.closed.append(connection)
        return 0

    def call_struct_method(self, connection: int, selector: int, payload: bytes) -> tuple[int, bytes]:
        assert selector == 2
        assert len(payload) == 80
        request = SMCCallFrame.unpack(payload)
        key = request.key_code
        op = request.data8
        self.calls.append((key, op))

        if (key, op) in self.transport_failures:
            return self.transport_failures[(key, op)], bytes(80)

        response = SMCCallFrame(key=request.key, data8=op)
        if (key, op) in self.result_overrides:
            response.result = self.result_overrides[(key, op)]
        elif key not in self.values:
            response.result = RESULT_KEY_NOT_FOUND
        else:
            data_type, raw = self.values[key]
            response.key_info.data_size = len(raw)
            response.key_info.data_type = fourcc_to_int(data_type)
            if op == CMD_READ_KEY:
                # The kernel only honours reads that declare the right shape
                assert request.key_info.data_size == len(raw)
                assert request.key_info.data_type == fourcc_to_int(data_type)
                response.data = raw.ljust(DATA_BUFFER_SIZE, b"\x00")
            else:
                assert op == CMD_GET_KEY_INFO
        return 0, response.pack()

    def ops_for(self, key: str) -> list[int]:
        return [op for k, op in self.calls if k == key]

    def set_sp78(self, key: str, value: float) -> None:
        self.values[key] = ("sp78", sp78(value))

    def set_flt(self, key: str, value: float) -> None:
        self.values[key] = ("flt ", flt(value))


@pytest.fixture
def make_fake_smc() -> type[FakeSMC]:
    """The FakeSMC class, for tests that need a custom service table."""
    return FakeSMC


@pytest.fixture
def fake_smc() -> FakeSMC:
    """A fake SMC with a few sensors implemented."""
    return FakeSMC(
        values={
            "TC0P": ("sp78", bytes([0x2C, 0x00])),  # 44.0
            "TG0D": ("sp78", sp78(51.5)),
            "TA0P": ("flt ", flt(36.5)),
            "TM0S": ("ui16", bytes([0x00, 0x10])),  # not a temperature encoding
        }
    )


@pytest.fixture
def monitor(fake_smc: FakeSMC) -> Monitor:
    """A monitor opened over the fake SMC."""
    mon = Monitor.initialize(transport=fake_smc)
    yield mon
    mon.shutdown()


@pytest.fixture
def channel(fake_smc: FakeSMC) -> SMCChannel:
    chan = SMCChannel.open(transport=fake_smc)
    yield chan
    chan.close()


@pytest.fixture
def store(tmp_path: Path) -> PreferencesStore:
    """A preferences store backed by a temp file."""
    return PreferencesStore(tmp_path / "prefs" / "preferences.yaml")
