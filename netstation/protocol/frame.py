"""
Command frame building and decoding.

Frame Format: [TAG][PAYLOAD...]
- TAG: single ASCII command byte
- PAYLOAD: command-specific fixed layout (may be empty)

Event data stream payload (after TAG):
- LEN: uint16, always 25
- TIMESTAMP: int32
- DURATION: int32, milliseconds
- CODE: 4 bytes, copied verbatim
- PADDING: 13 zero bytes

Multi-byte fields use the host's native byte order; NetStation learns
which order to expect from the system-spec token sent with QUERY.
"""

import struct
from dataclasses import dataclass, field
from typing import Optional, Union

from .constants import (
    MAX_FRAME_SIZE, SYSTEM_SPEC_SIZE,
    EVENT_PAYLOAD_SIZE, EVENT_CODE_SIZE, EVENT_PADDING_SIZE, EVENT_FRAME_SIZE,
    Command, native_system_spec,
)
from .exceptions import FrameError

BytesLike = Union[bytes, bytearray, memoryview, str]

_INT32 = struct.Struct("=i")
_EVENT = struct.Struct(f"=Hii{EVENT_CODE_SIZE}s{EVENT_PADDING_SIZE}x")


def _as_bytes(value: BytesLike, what: str) -> bytes:
    if isinstance(value, str):
        try:
            return value.encode("ascii")
        except UnicodeEncodeError as e:
            raise FrameError(f"{what} must be ASCII: {value!r}") from e
    return bytes(value)


@dataclass
class Frame:
    """Protocol frame structure."""
    cmd: int
    payload: bytes = field(default_factory=bytes)

    def __post_init__(self):
        if isinstance(self.payload, (list, tuple, bytearray, memoryview)):
            self.payload = bytes(self.payload)
        if 1 + len(self.payload) > MAX_FRAME_SIZE:
            raise FrameError(f"Frame exceeds maximum size ({MAX_FRAME_SIZE})")

    @property
    def payload_len(self) -> int:
        return len(self.payload)

    def to_bytes(self) -> bytes:
        return bytes([self.cmd]) + self.payload

    @classmethod
    def from_bytes(cls, data: bytes) -> "Frame":
        """Split a complete frame into tag and payload."""
        if not data:
            raise FrameError("Empty frame")
        return cls(data[0], bytes(data[1:]))


@dataclass(frozen=True)
class EventData:
    """Decoded event data stream payload."""
    timestamp: int
    duration_ms: int
    code: bytes

    @classmethod
    def from_payload(cls, payload: bytes) -> "EventData":
        """
        Decode the payload of an EVENT_DATA_STREAM frame.

        Raises:
            FrameError: If the payload size or length field is wrong
        """
        if len(payload) != _EVENT.size:
            raise FrameError(
                f"Event payload must be {_EVENT.size} bytes, got {len(payload)}"
            )
        length, timestamp, duration, code = _EVENT.unpack(payload)
        if length != EVENT_PAYLOAD_SIZE:
            raise FrameError(f"Event length field is {length}, expected {EVENT_PAYLOAD_SIZE}")
        return cls(timestamp, duration, code)


def frame_size(cmd: int) -> int:
    """Total wire size of a frame for the given command tag."""
    sizes = {
        Command.QUERY: 1 + SYSTEM_SPEC_SIZE,
        Command.TIME_SYNCH: 1 + _INT32.size,
        Command.EVENT_DATA_STREAM: EVENT_FRAME_SIZE,
    }
    return sizes.get(cmd, 1)


def decode_int32(payload: bytes) -> int:
    """Decode the timestamp carried by a TIME_SYNCH frame."""
    if len(payload) != _INT32.size:
        raise FrameError(f"Expected {_INT32.size} bytes, got {len(payload)}")
    return _INT32.unpack(payload)[0]


class FrameBuilder:
    """Builds frames for transmission."""

    @staticmethod
    def build(frame: Frame) -> bytes:
        """
        Build complete frame.

        Args:
            frame: Frame object with cmd and payload

        Returns:
            Complete frame bytes ready for transmission
        """
        return frame.to_bytes()

    @staticmethod
    def build_begin_session(system_spec: Optional[BytesLike] = None) -> bytes:
        """
        Build QUERY command frame.

        Args:
            system_spec: 4-byte byte order token (None uses this host's)

        Raises:
            FrameError: If the token is not exactly 4 bytes
        """
        if system_spec is None:
            system_spec = native_system_spec()
        token = _as_bytes(system_spec, "System spec")
        if len(token) != SYSTEM_SPEC_SIZE:
            raise FrameError(
                f"System spec must be {SYSTEM_SPEC_SIZE} bytes, got {len(token)}"
            )
        return FrameBuilder.build(Frame(Command.QUERY, token))

    @staticmethod
    def build_end_session() -> bytes:
        """Build EXIT command frame."""
        return FrameBuilder.build(Frame(Command.EXIT))

    @staticmethod
    def build_begin_recording() -> bytes:
        """Build BEGIN_RECORDING command frame."""
        return FrameBuilder.build(Frame(Command.BEGIN_RECORDING))

    @staticmethod
    def build_end_recording() -> bytes:
        """Build END_RECORDING command frame."""
        return FrameBuilder.build(Frame(Command.END_RECORDING))

    @staticmethod
    def build_attention() -> bytes:
        """Build ATTENTION command frame."""
        return FrameBuilder.build(Frame(Command.ATTENTION))

    @staticmethod
    def build_synch(timestamp: int) -> bytes:
        """Build TIME_SYNCH command frame."""
        try:
            payload = _INT32.pack(timestamp)
        except struct.error as e:
            raise FrameError(f"Invalid timestamp {timestamp!r}: {e}") from e
        return FrameBuilder.build(Frame(Command.TIME_SYNCH, payload))

    @staticmethod
    def build_trigger(code: BytesLike, timestamp: int, duration_ms: int) -> bytes:
        """
        Build EVENT_DATA_STREAM command frame.

        Only the first 4 bytes of the code are sent.

        Args:
            code: Event code, at least 4 bytes (str is ASCII-encoded)
            timestamp: Event onset
            duration_ms: Event duration in milliseconds

        Raises:
            FrameError: If the code is shorter than 4 bytes or a number
                does not fit in 32 bits
        """
        raw = _as_bytes(code, "Event code")
        if len(raw) < EVENT_CODE_SIZE:
            raise FrameError(
                f"Event code must be at least {EVENT_CODE_SIZE} bytes, got {len(raw)}"
            )
        try:
            payload = _EVENT.pack(
                EVENT_PAYLOAD_SIZE, timestamp, duration_ms, raw[:EVENT_CODE_SIZE]
            )
        except struct.error as e:
            raise FrameError(f"Invalid event fields: {e}") from e
        return FrameBuilder.build(Frame(Command.EVENT_DATA_STREAM, payload))
