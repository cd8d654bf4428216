"""Request/response channel to the AppleSMC kernel service.

One SMCChannel owns one user-client connection. Opening and closing are
paired; use the channel as a context manager or call close() explicitly.
"""

from types import TracebackType

from temp_monitor.smc.errors import ConnectionFailedError, ServiceNotFoundError, TransportError
from temp_monitor.smc.frame import FRAME_SIZE, SMCCallFrame
from temp_monitor.smc.iokit import KERN_SUCCESS, IOKitTransport, SMCTransport
from temp_monitor.telemetry import (
    SMC_CALL_FAILED,
    SMC_CONNECTION_CLOSED,
    SMC_CONNECTION_FAILED,
    SMC_CONNECTION_OPENED,
    SMC_SERVICE_FALLBACK,
    SMC_SERVICE_NOT_FOUND,
    get_logger,
)

log = get_logger(__name__)

# IOConnectCallStructMethod selector for SMC key operations (kSMCHandleYPCEvent)
SMC_SELECTOR = 2

# Sub-opcodes carried in data8
CMD_READ_KEY = 5
CMD_GET_KEY_INFO = 9

# SMC result byte
RESULT_SUCCESS = 0x00
RESULT_KEY_NOT_FOUND = 0x84

DEFAULT_SERVICE_NAME = "AppleSMC"
DEFAULT_FALLBACK_SERVICE_NAME = "com.apple.driver.AppleSMC"


class SMCChannel:
    """Open connection to the SMC user client.

    Attributes:
        connection: io_connect_t handle; 0 once closed.
        service_name: Name of the service that was opened.
    """

    def __init__(self, transport: SMCTransport, connection: int, service_name: str) -> None:
        """Wrap an already-open connection. Prefer SMCChannel.open()."""
        self._transport = transport
        self.connection = connection
        self.service_name = service_name

    @classmethod
    def open(
        cls,
        service_name: str = DEFAULT_SERVICE_NAME,
        fallback_service_name: str = DEFAULT_FALLBACK_SERVICE_NAME,
        transport: SMCTransport | None = None,
    ) -> "SMCChannel":
        """Locate the SMC service and open a connection to it.

        The primary name is matched by IOKit class; the fallback by
        service name.

        Args:
            service_name: IOKit class to match first.
            fallback_service_name: Service name to match if the class yields nothing.
            transport: Kernel transport; defaults to the real IOKit bindings.

        Returns:
            An open SMCChannel.

        Raises:
            ServiceNotFoundError: If neither name matches a service.
            ConnectionFailedError: If IOServiceOpen is rejected.
        """
        names = (service_name, fallback_service_name)
        if transport is None:
            try:
                transport = IOKitTransport()
            except OSError as e:
                log.error(SMC_SERVICE_NOT_FOUND, names=list(names), error=str(e))
                raise ServiceNotFoundError(names) from e

        matched_name = service_name
        service = transport.find_service(service_name, by_name=False)
        if not service:
            log.warning(SMC_SERVICE_FALLBACK, primary=service_name, fallback=fallback_service_name)
            matched_name = fallback_service_name
            service = transport.find_service(fallback_service_name, by_name=True)
        if not service:
            log.error(SMC_SERVICE_NOT_FOUND, names=list(names))
            raise ServiceNotFoundError(names)

        try:
            kr, connection = transport.open_service(service)
        finally:
            transport.release(service)

        if kr != KERN_SUCCESS or not connection:
            log.error(SMC_CONNECTION_FAILED, service=matched_name, kern_return=kr)
            raise ConnectionFailedError(
                f"Failed to open connection to {matched_name}",
                code=kr if kr != KERN_SUCCESS else None,
            )

        log.info(SMC_CONNECTION_OPENED, service=matched_name)
        return cls(transport, connection, matched_name)

    @property
    def is_open(self) -> bool:
        return self.connection != 0

    def call(self, frame: SMCCallFrame, sub_opcode: int) -> SMCCallFrame:
        """Perform one round trip through the SMC user client.

        On success the response's result byte, key info and data buffer
        are copied into frame, which is returned.

        Args:
            frame: Request frame; updated in place.
            sub_opcode: Operation to perform (CMD_GET_KEY_INFO, CMD_READ_KEY).

        Returns:
            The same frame, updated with the response.

        Raises:
            ConnectionFailedError: If the channel is closed.
            TransportError: If the kernel call fails; code is the raw kern_return_t.
        """
        if not self.is_open:
            raise ConnectionFailedError("SMC connection is not open")

        frame.data8 = sub_opcode
        kr, raw = self._transport.call_struct_method(self.connection, SMC_SELECTOR, frame.pack())
        if kr != KERN_SUCCESS:
            log.debug(
                SMC_CALL_FAILED,
                key=frame.key_code,
                sub_opcode=sub_opcode,
                kern_return=kr,
            )
            raise TransportError(kr)

        response = SMCCallFrame.unpack(raw[:FRAME_SIZE])
        frame.result = response.result
        frame.key_info = response.key_info
        frame.data = response.data
        return frame

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        if not self.connection:
            return
        connection, self.connection = self.connection, 0
        kr = self._transport.close_service(connection)
        log.info(SMC_CONNECTION_CLOSED, service=self.service_name, kern_return=kr)

    def __enter__(self) -> "SMCChannel":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:
        # Release a leaked handle; no logging, the interpreter may be shutting down.
        connection = getattr(self, "connection", 0)
        if connection:
            self.connection = 0
            self._transport.close_service(connection)
