"""Tests for the demo CLI."""

from conftest import FakeNetStation, failure_reply
from netstation.main import event_code, main
from netstation.protocol import Command, EventData


def test_event_code():
    assert event_code(0) == b"A\0\0\0"
    assert event_code(25) == b"Z\0\0\0"
    assert event_code(26) == b"A\0\0\0"


def test_demo_run(netstation: FakeNetStation):
    argv = [
        "--host", netstation.address, "--port", str(netstation.port),
        "--count", "3", "--interval", "0", "--duration", "20", "--timeout", "2",
    ]
    assert main(argv) == 0

    assert netstation.commands == [
        Command.QUERY, Command.BEGIN_RECORDING,
        *[Command.ATTENTION, Command.TIME_SYNCH, Command.EVENT_DATA_STREAM] * 3,
        Command.END_RECORDING, Command.EXIT,
    ]
    events = [EventData.from_payload(f.payload) for f in netstation.frames
              if f.cmd == Command.EVENT_DATA_STREAM]
    assert events == [
        EventData(0, 20, b"A\0\0\0"),
        EventData(1, 20, b"B\0\0\0"),
        EventData(2, 20, b"C\0\0\0"),
    ]
    assert netstation.wait_for(lambda: netstation.closed == 1)


def test_demo_stops_on_rejected_command(netstation: FakeNetStation):
    def responder(frame):
        if frame.cmd == Command.TIME_SYNCH:
            return failure_reply(0x0004)
        return b"I\x01" if frame.cmd == Command.QUERY else b"Z"

    netstation.responder = responder
    argv = ["--host", netstation.address, "--port", str(netstation.port), "--interval", "0"]
    assert main(argv) == 1
    assert netstation.commands[-1] == Command.TIME_SYNCH


def test_demo_connection_failure():
    assert main(["--host", "127.0.0.1", "--port", "1", "--timeout", "1"]) == 1
