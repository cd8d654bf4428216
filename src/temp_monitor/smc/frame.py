"""Fixed-layout SMC parameter block.

The AppleSMC user client exchanges an 80-byte C struct (SMCKeyData_t)
through IOConnectCallStructMethod. Fields are laid out with natural C
alignment in host byte order, which is little-endian on every Mac
(x86_64 and arm64):

    offset  size  field
         0     4  key                (uint32 four-char code)
         4     6  vers               (major, minor, build, reserved: u8; release: u16)
        10     2  padding
        12    16  p_limit_data       (version, length: u16; cpu, gpu, mem: u32)
        28     4  key_info.data_size (uint32)
        32     4  key_info.data_type (uint32 four-char code)
        36     1  key_info.attributes
        37     3  padding
        40     1  result
        41     1  status
        42     1  data8              (sub-opcode)
        43     1  padding
        44     4  data32
        48    32  bytes
"""

import struct
from dataclasses import dataclass, field

FRAME_SIZE = 80
DATA_BUFFER_SIZE = 32

_LAYOUT = struct.Struct("<I4BH2x2H3I2IB3x3BxI32s")

# Byte offsets, used by tests and by anything inspecting raw frames
OFFSET_KEY = 0
OFFSET_KEY_INFO = 28
OFFSET_RESULT = 40
OFFSET_DATA8 = 42
OFFSET_DATA32 = 44
OFFSET_BYTES = 48

assert _LAYOUT.size == FRAME_SIZE


def fourcc_to_int(code: str) -> int:
    """Pack a four-character code into a uint32, first character most significant.

    Raises:
        ValueError: If code is not four ASCII characters.
    """
    raw = code.encode("ascii") if code.isascii() else b""
    if len(raw) != 4:
        raise ValueError(f"four-char code must be 4 ASCII characters, got {code!r}")
    return int.from_bytes(raw, "big")


def int_to_fourcc(value: int) -> str:
    """Unpack a uint32 into its four-character code."""
    return (value & 0xFFFFFFFF).to_bytes(4, "big").decode("latin-1")


@dataclass
class SMCVersion:
    major: int = 0
    minor: int = 0
    build: int = 0
    reserved: int = 0
    release: int = 0


@dataclass
class SMCPLimitData:
    version: int = 0
    length: int = 0
    cpu_p_limit: int = 0
    gpu_p_limit: int = 0
    mem_p_limit: int = 0


@dataclass
class SMCKeyInfo:
    """Shape of an SMC key's value, as reported by the key-info call."""

    data_size: int = 0
    data_type: int = 0  # four-char code as uint32
    attributes: int = 0

    @property
    def data_type_code(self) -> str:
        """Data type as a four-character string, e.g. 'sp78'."""
        return int_to_fourcc(self.data_type)


@dataclass
class SMCCallFrame:
    """Python view of the 80-byte parameter block."""

    key: int = 0
    vers: SMCVersion = field(default_factory=SMCVersion)
    p_limit_data: SMCPLimitData = field(default_factory=SMCPLimitData)
    key_info: SMCKeyInfo = field(default_factory=SMCKeyInfo)
    result: int = 0
    status: int = 0
    data8: int = 0
    data32: int = 0
    data: bytes = bytes(DATA_BUFFER_SIZE)

    @classmethod
    def for_key(cls, key: str) -> "SMCCallFrame":
        """Build a zeroed frame addressed to a four-character key."""
        return cls(key=fourcc_to_int(key))

    @property
    def key_code(self) -> str:
        return int_to_fourcc(self.key)

    def pack(self) -> bytes:
        """Serialize to the 80-byte wire layout.

        Raises:
            ValueError: If data is longer than 32 bytes.
            struct.error: If an integer field is out of range.
        """
        if len(self.data) > DATA_BUFFER_SIZE:
            raise ValueError(f"data buffer holds at most {DATA_BUFFER_SIZE} bytes")
        v = self.vers
        p = self.p_limit_data
        k = self.key_info
        return _LAYOUT.pack(
            self.key,
            v.major,
            v.minor,
            v.build,
            v.reserved,
            v.release,
            p.version,
            p.length,
            p.cpu_p_limit,
            p.gpu_p_limit,
            p.mem_p_limit,
            k.data_size,
            k.data_type,
            k.attributes,
            self.result,
            self.status,
            self.data8,
            self.data32,
            bytes(self.data),  # struct pads short buffers with zeros
        )

    @classmethod
    def unpack(cls, raw: bytes) -> "SMCCallFrame":
        """Parse an 80-byte wire buffer.

        Raises:
            ValueError: If raw is not exactly 80 bytes.
        """
        if len(raw) != FRAME_SIZE:
            raise ValueError(f"SMC frame must be {FRAME_SIZE} bytes, got {len(raw)}")
        (
            key,
            major,
            minor,
            build,
            reserved,
            release,
            p_version,
            p_length,
            cpu_limit,
            gpu_limit,
            mem_limit,
            data_size,
            data_type,
            attributes,
            result,
            status,
            data8,
            data32,
            data,
        ) = _LAYOUT.unpack(raw)
        return cls(
            key=key,
            vers=SMCVersion(major, minor, build, reserved, release),
            p_limit_data=SMCPLimitData(p_version, p_length, cpu_limit, gpu_limit, mem_limit),
            key_info=SMCKeyInfo(data_size, data_type, attributes),
            result=result,
            status=status,
            data8=data8,
            data32=data32,
            data=data,
        )
