"""Exception hierarchy for SMC access.

Startup failures derive from SMCConnectionError and are fatal to the
application. Per-key failures derive from SensorError and are local to
the sensor being read.
"""


class SMCError(Exception):
    """Base class for all SMC errors."""

    pass


class SMCConnectionError(SMCError):
    """The SMC user client could not be reached."""

    pass


class ServiceNotFoundError(SMCConnectionError):
    """No AppleSMC service matched the primary or fallback name."""

    def __init__(self, names: tuple[str, ...]) -> None:  # noqa: D107
        self.names = names
        super().__init__(f"SMC service not found (tried: {', '.join(names)})")


class ConnectionFailedError(SMCConnectionError):
    """The service exists but the connection is closed or was rejected."""

    def __init__(self, message: str, code: int | None = None) -> None:  # noqa: D107
        self.code = code
        if code is not None:
            message = f"{message} (kern_return=0x{code & 0xFFFFFFFF:08x})"
        super().__init__(message)


class SensorError(SMCError):
    """A single sensor read failed; other sensors are unaffected."""

    pass


class KeyNotFoundError(SensorError):
    """The SMC does not implement this key on this machine."""

    def __init__(self, key: str) -> None:  # noqa: D107
        self.key = key
        super().__init__(f"SMC key {key!r} not found")


class OperationFailedError(SensorError):
    """The SMC rejected the operation with a result other than not-found."""

    def __init__(self, key: str, code: int) -> None:  # noqa: D107
        self.key = key
        self.code = code
        super().__init__(f"SMC operation failed for key {key!r} (result=0x{code:02x})")


class TransportError(SensorError):
    """IOConnectCallStructMethod itself failed; code is the raw kern_return_t."""

    def __init__(self, code: int, key: str | None = None) -> None:  # noqa: D107
        self.code = code
        self.key = key
        target = f" for key {key!r}" if key is not None else ""
        super().__init__(f"SMC transport failed{target} (kern_return=0x{code & 0xFFFFFFFF:08x})")


class DecodeError(SensorError):
    """Raw bytes could not be turned into a temperature."""

    pass


class UnsupportedFormatError(DecodeError):
    """The (data_type, data_size) pair is not a known temperature encoding."""

    def __init__(self, data_type: str, data_size: int) -> None:  # noqa: D107
        self.data_type = data_type
        self.data_size = data_size
        super().__init__(f"Unsupported SMC format {data_type!r} with size {data_size}")
