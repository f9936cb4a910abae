"""
TCP transport layer.

Owns the single stream socket to NetStation and moves exact byte counts
over it, looping over partial sends and receives.
"""

import socket
import logging
from typing import Optional

from .exceptions import ConnectionError

logger = logging.getLogger(__name__)


class TCPTransport:
    """TCP stream transport layer."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize TCP transport.

        Args:
            timeout: Per-operation socket timeout in seconds
                (None blocks indefinitely)
        """
        self.timeout = timeout
        self.address: Optional[str] = None
        self.port: Optional[int] = None
        self._socket: Optional[socket.socket] = None

    def open(self, address: str, port: int) -> None:
        """
        Open a TCP connection with Nagle's algorithm disabled.

        Any connection already open is closed first.

        Raises:
            ConnectionError: If the socket cannot be created or connected
        """
        self.close()

        sock = None
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            sock.settimeout(self.timeout)
            sock.connect((address, port))
        except OSError as e:
            if sock is not None:
                sock.close()
            raise ConnectionError(f"Failed to connect to {address}:{port}: {e}") from e

        self._socket = sock
        self.address = address
        self.port = port
        logger.info(f"Opened TCP connection to {address}:{port}")

    def close(self) -> None:
        """Close the socket. Does nothing if already closed."""
        if self._socket is None:
            return

        try:
            self._socket.close()
        except OSError as e:
            logger.debug(f"Error while closing socket: {e}")
        self._socket = None
        logger.info(f"Closed TCP connection to {self.address}:{self.port}")

    def send_all(self, data: bytes) -> int:
        """
        Send data, retrying until all of it is away or the socket fails.

        Args:
            data: Bytes to send

        Returns:
            Number of bytes actually sent

        Raises:
            ConnectionError: If socket is not open
        """
        sock = self._require_socket()
        view = memoryview(data)
        sent = 0

        while sent < len(view):
            try:
                count = sock.send(view[sent:])
            except OSError as e:
                logger.warning(f"Send failed after {sent}/{len(view)} bytes: {e}")
                break
            if count <= 0:
                break
            sent += count

        logger.debug(f"TX ({sent} bytes): {bytes(view[:sent]).hex(' ')}")
        return sent

    def recv_all(self, size: int) -> bytes:
        """
        Receive exactly size bytes unless the peer closes or the socket fails.

        Args:
            size: Number of bytes wanted

        Returns:
            Received bytes (shorter than size on failure)

        Raises:
            ConnectionError: If socket is not open
        """
        sock = self._require_socket()
        data = bytearray()

        while len(data) < size:
            try:
                chunk = sock.recv(size - len(data))
            except OSError as e:
                logger.warning(f"Receive failed after {len(data)}/{size} bytes: {e}")
                break
            if not chunk:
                logger.debug("Peer closed connection")
                break
            data.extend(chunk)

        logger.debug(f"RX ({len(data)} bytes): {data.hex(' ')}")
        return bytes(data)

    def _require_socket(self) -> socket.socket:
        if self._socket is None:
            raise ConnectionError("Socket not open")
        return self._socket

    @property
    def is_open(self) -> bool:
        """Check if socket is open."""
        return self._socket is not None

    def __enter__(self) -> 'TCPTransport':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        return f"TCPTransport({self.address}:{self.port}, {status})"
