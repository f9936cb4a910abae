"""
Custom exceptions for NetStation protocol.
"""

from .constants import Command, Response


class NetStationError(Exception):
    """Base exception for NetStation protocol errors."""
    pass


class FrameError(NetStationError):
    """Frame building error (caller supplied an unencodable field)."""
    pass


class ConnectionError(NetStationError):
    """Socket connection error."""
    pass


class DeviceFailure(NetStationError):
    """NetStation answered a command with a failure response."""

    def __init__(self, error_code: int, command: int = 0):
        self.error_code = error_code
        self.command = command
        msg = f"NetStation failure: error code 0x{error_code:04X}"
        if command:
            msg += f" for {Command.name_of(command)}"
        super().__init__(msg)


class ProtocolViolation(NetStationError):
    """NetStation sent a response that is not part of the protocol."""

    def __init__(self, response: int):
        self.response = response
        super().__init__(
            f"Unexpected response code: {Response.name_of(response)}"
        )
