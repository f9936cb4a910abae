"""
High-level protocol client.

Provides the request/response API for announcing sessions, recordings,
time synchronization and event markers to NetStation.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Optional

from .constants import Command, Response, RESPONSE_PAYLOAD_SIZE
from .exceptions import ConnectionError, DeviceFailure, FrameError, ProtocolViolation
from .frame import BytesLike, FrameBuilder
from .transport import TCPTransport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a single command exchange.

    Truthy only when NetStation accepted the command, so it can be used
    anywhere a plain success flag is expected.
    """
    success: bool
    command: int
    response: Optional[int] = None
    error_code: Optional[int] = None
    version: Optional[int] = None
    reason: str = ""

    def __bool__(self) -> bool:
        return self.success

    def raise_for_status(self) -> None:
        """
        Raise if the exchange did not succeed.

        Raises:
            DeviceFailure: NetStation answered with a failure code
            ProtocolViolation: NetStation answered with an unknown code
            ConnectionError: The exchange did not complete
        """
        if self.success:
            return
        if self.error_code is not None:
            raise DeviceFailure(self.error_code, self.command)
        if self.response is not None and self.response not in RESPONSE_PAYLOAD_SIZE:
            raise ProtocolViolation(self.response)
        raise ConnectionError(f"{Command.name_of(self.command)} failed: {self.reason}")


class NetStationClient:
    """High-level client for the NetStation event-synchronization protocol."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize NetStation client.

        Args:
            timeout: Socket timeout in seconds for each send/receive
                (None waits indefinitely)
        """
        self.transport = TCPTransport(timeout=timeout)
        self.protocol_version: Optional[int] = None

    # === Connection ===

    def connect(self, address: str, port: int) -> bool:
        """
        Connect to NetStation, dropping any existing connection first.

        Args:
            address: IPv4 address of the NetStation host
            port: TCP port

        Returns:
            True if connected
        """
        self.protocol_version = None
        try:
            self.transport.open(address, port)
        except ConnectionError as e:
            logger.error(str(e))
            return False
        return True

    def disconnect(self) -> None:
        """Close the connection. Safe to call repeatedly."""
        self.transport.close()

    @property
    def is_connected(self) -> bool:
        return self.transport.is_open

    # === Exchange ===

    def send_command(self, frame: bytes) -> CommandResult:
        """
        Send a complete frame and read its response.

        A short send, short receive or unrecognized response leaves the
        stream out of step with the command sequence, so the connection
        is closed and later commands fail until the next connect().

        Args:
            frame: Frame bytes to send

        Returns:
            CommandResult describing the exchange

        Raises:
            FrameError: If frame is empty
        """
        if not frame:
            raise FrameError("Empty frame")
        command = frame[0]

        def failed(reason: str, **kwargs) -> CommandResult:
            logger.warning(f"{Command.name_of(command)} failed: {reason}")
            return CommandResult(False, command, reason=reason, **kwargs)

        def dropped(reason: str, **kwargs) -> CommandResult:
            self.transport.close()
            return failed(reason, **kwargs)

        try:
            if self.transport.send_all(frame) != len(frame):
                return dropped("short send")

            code = self.transport.recv_all(1)
            if len(code) != 1:
                return dropped("no response")
            response = code[0]

            extra = RESPONSE_PAYLOAD_SIZE.get(response)
            if extra is None:
                return dropped(
                    f"unexpected response {Response.name_of(response)}",
                    response=response,
                )

            payload = self.transport.recv_all(extra) if extra else b""
            if len(payload) != extra:
                return dropped(
                    f"truncated {Response.name_of(response)} response",
                    response=response,
                )
        except ConnectionError as e:
            return failed(str(e))

        if response == Response.FAILURE:
            error_code = int.from_bytes(payload, sys.byteorder)
            return failed(
                f"error code 0x{error_code:04X}",
                response=response,
                error_code=error_code,
            )

        version = None
        if response == Response.QUERY_SUCCESS:
            version = payload[0]
            self.protocol_version = version
            logger.debug(f"NetStation protocol version: {version}")

        return CommandResult(True, command, response=response, version=version)

    # === Commands ===

    def send_begin_session(self, system_spec: Optional[BytesLike] = None) -> CommandResult:
        """
        Begin a session by announcing this host's byte order.

        Args:
            system_spec: 4-byte token such as LITTLE_ENDIAN or BIG_ENDIAN
                (None uses this host's native order)

        Returns:
            CommandResult
        """
        result = self.send_command(FrameBuilder.build_begin_session(system_spec))
        if result:
            logger.info(f"Session started, protocol version {result.version}")
        return result

    def send_end_session(self) -> CommandResult:
        """End the session."""
        result = self.send_command(FrameBuilder.build_end_session())
        if result:
            logger.info("Session ended")
        return result

    def send_begin_recording(self) -> CommandResult:
        """Start recording."""
        result = self.send_command(FrameBuilder.build_begin_recording())
        if result:
            logger.info("Recording started")
        return result

    def send_end_recording(self) -> CommandResult:
        """Stop recording."""
        result = self.send_command(FrameBuilder.build_end_recording())
        if result:
            logger.info("Recording stopped")
        return result

    def send_attention(self) -> CommandResult:
        """Take NetStation's attention ahead of a synch or event."""
        return self.send_command(FrameBuilder.build_attention())

    def send_synch(self, timestamp: int) -> CommandResult:
        """
        Send a time synchronization point.

        Args:
            timestamp: Local clock value, milliseconds

        Returns:
            CommandResult
        """
        logger.debug(f"Synch at {timestamp}")
        return self.send_command(FrameBuilder.build_synch(timestamp))

    def send_trigger(
        self,
        code: BytesLike,
        timestamp: int,
        duration_ms: int
    ) -> CommandResult:
        """
        Inject an event marker into the recording.

        Args:
            code: Event code, at least 4 bytes (only 4 are sent)
            timestamp: Event onset, milliseconds
            duration_ms: Event duration in milliseconds

        Returns:
            CommandResult

        Raises:
            FrameError: If the code is shorter than 4 bytes
        """
        frame = FrameBuilder.build_trigger(code, timestamp, duration_ms)
        logger.debug(f"Trigger {frame[11:15]!r} at {timestamp} for {duration_ms} ms")
        return self.send_command(frame)

    # === Lifetime ===

    def __enter__(self) -> 'NetStationClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()

    def __del__(self):
        transport = getattr(self, "transport", None)
        if transport is not None:
            transport.close()

    def __repr__(self) -> str:
        return f"NetStationClient({self.transport!r})"
