"""IOKit bindings for the AppleSMC user client via ctypes.

The frameworks are loaded when an IOKitTransport is constructed, not at
import time, so the rest of the package imports on any platform.
"""

import ctypes
from typing import Protocol

IOKIT_PATH = "/System/Library/Frameworks/IOKit.framework/IOKit"
LIBSYSTEM_PATH = "/usr/lib/libSystem.B.dylib"

KERN_SUCCESS = 0
MAIN_PORT_DEFAULT = 0  # kIOMainPortDefault


class SMCTransport(Protocol):
    """Kernel-facing operations the SMC channel needs.

    IOKitTransport is the real implementation; tests substitute an
    in-memory SMC.
    """

    def find_service(self, name: str, by_name: bool = False) -> int:
        """Return an io_service_t for the first match, or 0 if none."""
        ...

    def open_service(self, service: int) -> tuple[int, int]:
        """Open a user client; returns (kern_return, connection)."""
        ...

    def release(self, obj: int) -> None:
        """Release an io_object_t."""
        ...

    def call_struct_method(self, connection: int, selector: int, payload: bytes) -> tuple[int, bytes]:
        """Run IOConnectCallStructMethod; returns (kern_return, output bytes)."""
        ...

    def close_service(self, connection: int) -> int:
        """Close a user client connection; returns kern_return."""
        ...


class IOKitTransport:
    """SMCTransport backed by the real IOKit framework.

    Raises:
        OSError: On construction, if IOKit cannot be loaded (non-macOS hosts).
    """

    def __init__(self) -> None:  # noqa: D107
        iokit = ctypes.cdll.LoadLibrary(IOKIT_PATH)
        libc = ctypes.cdll.LoadLibrary(LIBSYSTEM_PATH)

        iokit.IOServiceMatching.restype = ctypes.c_void_p
        iokit.IOServiceMatching.argtypes = [ctypes.c_char_p]

        iokit.IOServiceNameMatching.restype = ctypes.c_void_p
        iokit.IOServiceNameMatching.argtypes = [ctypes.c_char_p]

        # Consumes one reference to the matching dictionary
        iokit.IOServiceGetMatchingService.restype = ctypes.c_uint32
        iokit.IOServiceGetMatchingService.argtypes = [ctypes.c_uint32, ctypes.c_void_p]

        iokit.IOServiceOpen.restype = ctypes.c_int
        iokit.IOServiceOpen.argtypes = [
            ctypes.c_uint32,
            ctypes.c_uint32,
            ctypes.c_uint32,
            ctypes.POINTER(ctypes.c_uint32),
        ]

        iokit.IOServiceClose.restype = ctypes.c_int
        iokit.IOServiceClose.argtypes = [ctypes.c_uint32]

        iokit.IOObjectRelease.restype = ctypes.c_int
        iokit.IOObjectRelease.argtypes = [ctypes.c_uint32]

        iokit.IOConnectCallStructMethod.restype = ctypes.c_int
        iokit.IOConnectCallStructMethod.argtypes = [
            ctypes.c_uint32,
            ctypes.c_uint32,
            ctypes.c_void_p,
            ctypes.c_size_t,
            ctypes.c_void_p,
            ctypes.POINTER(ctypes.c_size_t),
        ]

        libc.mach_task_self.restype = ctypes.c_uint32
        libc.mach_task_self.argtypes = []

        self._iokit = iokit
        self._libc = libc

    def find_service(self, name: str, by_name: bool = False) -> int:
        encoded = name.encode("ascii")
        if by_name:
            matching = self._iokit.IOServiceNameMatching(encoded)
        else:
            matching = self._iokit.IOServiceMatching(encoded)
        if not matching:
            return 0
        return int(self._iokit.IOServiceGetMatchingService(MAIN_PORT_DEFAULT, matching))

    def open_service(self, service: int) -> tuple[int, int]:
        connection = ctypes.c_uint32(0)
        kr = self._iokit.IOServiceOpen(
            service, self._libc.mach_task_self(), 0, ctypes.byref(connection)
        )
        return int(kr), int(connection.value)

    def release(self, obj: int) -> None:
        self._iokit.IOObjectRelease(obj)

    def call_struct_method(self, connection: int, selector: int, payload: bytes) -> tuple[int, bytes]:
        size = len(payload)
        in_buf = ctypes.create_string_buffer(payload, size)
        out_buf = ctypes.create_string_buffer(size)
        out_size = ctypes.c_size_t(size)
        kr = self._iokit.IOConnectCallStructMethod(
            connection,
            selector,
            in_buf,
            size,
            out_buf,
            ctypes.byref(out_size),
        )
        return int(kr), out_buf.raw[:size]

    def close_service(self, connection: int) -> int:
        return int(self._iokit.IOServiceClose(connection))
