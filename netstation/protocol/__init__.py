"""
NetStation Protocol - Python implementation of the EGI NetStation
event-synchronization protocol.

This package provides:
- Protocol constants and system-spec tokens
- Command frame building and decoding
- TCP transport layer
- High-level protocol client
"""

from .constants import (
    MAX_FRAME_SIZE, EVENT_PAYLOAD_SIZE, EVENT_FRAME_SIZE,
    LITTLE_ENDIAN, BIG_ENDIAN, BIG_ENDIAN_MAC,
    Command, Response, native_system_spec
)
from .exceptions import (
    NetStationError, FrameError, ConnectionError, DeviceFailure, ProtocolViolation
)
from .frame import Frame, FrameBuilder, EventData
from .transport import TCPTransport
from .client import CommandResult, NetStationClient

__version__ = "1.0.0"
__all__ = [
    # Constants
    "MAX_FRAME_SIZE", "EVENT_PAYLOAD_SIZE", "EVENT_FRAME_SIZE",
    "LITTLE_ENDIAN", "BIG_ENDIAN", "BIG_ENDIAN_MAC",
    "Command", "Response", "native_system_spec",
    # Exceptions
    "NetStationError", "FrameError", "ConnectionError",
    "DeviceFailure", "ProtocolViolation",
    # Frame
    "Frame", "FrameBuilder", "EventData",
    # Transport
    "TCPTransport",
    # Client
    "CommandResult", "NetStationClient",
]
