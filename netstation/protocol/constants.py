"""
Protocol constants for the NetStation event-synchronization protocol.

Reference: EGI GES 122106, "Net Station ECI" chapter.
"""

import sys
from enum import IntEnum

# Scratch limit for a single outgoing frame (tag + length field + payload)
MAX_FRAME_SIZE = 65536 + 3

# Event data stream: declared payload length and its fixed layout
EVENT_PAYLOAD_SIZE = 25
EVENT_CODE_SIZE = 4
EVENT_PADDING_SIZE = 13
EVENT_FRAME_SIZE = 1 + 2 + EVENT_PAYLOAD_SIZE

# System-spec tokens sent with the Query command.
# NetStation accepts "UNIX" and "MAC-" as synonyms for big endian.
LITTLE_ENDIAN = b"NTEL"
BIG_ENDIAN = b"UNIX"
BIG_ENDIAN_MAC = b"MAC-"
SYSTEM_SPEC_SIZE = 4


def native_system_spec() -> bytes:
    """Return the system-spec token matching this host's byte order."""
    return LITTLE_ENDIAN if sys.byteorder == "little" else BIG_ENDIAN


class Command(IntEnum):
    """Command tags (Host -> NetStation)."""
    QUERY = ord("Q")
    EXIT = ord("X")
    BEGIN_RECORDING = ord("B")
    END_RECORDING = ord("E")
    ATTENTION = ord("A")
    TIME_SYNCH = ord("T")
    EVENT_DATA_STREAM = ord("D")

    @classmethod
    def name_of(cls, tag: int) -> str:
        """Get command name from tag."""
        try:
            return cls(tag).name
        except ValueError:
            return f"Unknown(0x{tag:02X})"


class Response(IntEnum):
    """Response codes (NetStation -> Host)."""
    QUERY_SUCCESS = ord("I")    # followed by 1-byte protocol version
    SUCCESS = ord("Z")
    FAILURE = ord("F")          # followed by 2-byte error code

    @classmethod
    def name_of(cls, code: int) -> str:
        """Get response name from code."""
        names = {
            cls.QUERY_SUCCESS: "QUERY_SUCCESS",
            cls.SUCCESS: "SUCCESS",
            cls.FAILURE: "FAILURE",
        }
        return names.get(code, f"Unknown(0x{code:02X})")


# Bytes that follow each response code on the wire
RESPONSE_PAYLOAD_SIZE = {
    Response.QUERY_SUCCESS: 1,
    Response.SUCCESS: 0,
    Response.FAILURE: 2,
}
