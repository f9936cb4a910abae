"""pytest configuration and fixtures for NetStation tests.

Provides:
- FakeNetStation: threaded TCP server speaking the device side of the protocol
- ChunkedSocket: socket stand-in that moves at most a few bytes per call
"""

import socket
import sys
import threading
import time
from collections.abc import Callable, Generator

import pytest

from netstation.protocol import Command, Frame
from netstation.protocol.frame import frame_size

Reply = bytes | tuple[bytes, bool]


def default_responder(frame: Frame) -> Reply:
    """Answer QUERY with version 1 and everything else with SUCCESS."""
    if frame.cmd == Command.QUERY:
        return b"I\x01"
    return b"Z"


def failure_reply(error_code: int) -> bytes:
    return b"F" + error_code.to_bytes(2, sys.byteorder)


def _recv_exact(conn: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            break
        data.extend(chunk)
    return bytes(data)


class FakeNetStation:
    """Minimal NetStation stand-in listening on localhost.

    Every received frame is recorded in ``frames``. The responder maps a
    frame to the bytes sent back; returning ``(data, True)`` sends data
    and then hangs up.
    """

    def __init__(self, responder: Callable[[Frame], Reply] = default_responder) -> None:
        self.responder = responder
        self.frames: list[Frame] = []
        self.accepted = 0
        self.closed = 0
        self._lock = threading.Lock()
        self._conns: list[socket.socket] = []
        self._running = False
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen()
        self._listener.settimeout(0.05)
        self.address, self.port = self._listener.getsockname()

    def start(self) -> None:
        self._running = True
        threading.Thread(target=self._accept_loop, daemon=True).start()

    def stop(self) -> None:
        self._running = False
        with self._lock:
            conns = list(self._conns)
        for conn in conns:
            try:
                conn.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            conn.close()
        self._listener.close()

    def wait_for(self, predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    def _accept_loop(self) -> None:
        while self._running:
            try:
                conn, _ = self._listener.accept()
            except TimeoutError:
                continue
            except OSError:
                break
            conn.settimeout(None)
            with self._lock:
                self._conns.append(conn)
                self.accepted += 1
            threading.Thread(target=self._serve, args=(conn,), daemon=True).start()

    def _serve(self, conn: socket.socket) -> None:
        try:
            while True:
                tag = _recv_exact(conn, 1)
                if not tag:
                    break
                rest = _recv_exact(conn, frame_size(tag[0]) - 1)
                frame = Frame.from_bytes(tag + rest)
                with self._lock:
                    self.frames.append(frame)

                reply = self.responder(frame)
                hang_up = False
                if isinstance(reply, tuple):
                    reply, hang_up = reply
                if reply:
                    conn.sendall(reply)
                if hang_up:
                    break
        except OSError:
            pass
        finally:
            conn.close()
            with self._lock:
                self.closed += 1

    @property
    def commands(self) -> list[int]:
        with self._lock:
            return [f.cmd for f in self.frames]


class ChunkedSocket:
    """Socket stand-in that sends and receives at most ``chunk`` bytes per call."""

    def __init__(self, incoming: bytes = b"", chunk: int = 1, send_limit: int | None = None) -> None:
        self.incoming = bytearray(incoming)
        self.outgoing = bytearray()
        self.chunk = chunk
        self.send_limit = send_limit
        self.send_calls = 0
        self.recv_calls = 0
        self.closed = False

    def send(self, data) -> int:
        self.send_calls += 1
        if self.send_limit is not None and len(self.outgoing) >= self.send_limit:
            raise BrokenPipeError("peer gone")
        count = min(len(data), self.chunk)
        self.outgoing.extend(bytes(data[:count]))
        return count

    def recv(self, size: int) -> bytes:
        self.recv_calls += 1
        count = min(size, self.chunk, len(self.incoming))
        data = bytes(self.incoming[:count])
        del self.incoming[:count]
        return data

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def netstation() -> Generator[FakeNetStation, None, None]:
    server = FakeNetStation()
    server.start()
    yield server
    server.stop()
