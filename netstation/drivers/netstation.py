"""
NetStation Driver Module

Async driver for marking events in an EGI NetStation recording over TCP.
Wraps the netstation.protocol client for use from asyncio code.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from .base import BaseDriver
from ..protocol import NetStationClient

logger = logging.getLogger(__name__)

DEFAULT_HOST = "10.10.10.42"
DEFAULT_PORT = 55513


class NetStationDriver(BaseDriver):
    """
    NetStation driver.

    Opens a session on connect and closes it on disconnect. Every blocking
    protocol call runs in the default executor, one at a time.

    Attributes:
        host: NetStation IPv4 address
        port: NetStation ECI port
        timeout: Socket timeout in seconds (None blocks)
    """

    def __init__(
        self,
        name: str = "NetStationDriver",
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize NetStation driver.

        Args:
            name: Driver name
            config: Configuration with keys:
                - host: NetStation address (default: "10.10.10.42")
                - port: TCP port (default: 55513)
                - timeout: Socket timeout (default: None)
                - system_spec: Byte order token (default: this host's)
        """
        super().__init__(name=name, config=config)

        self.host: str = self.config.get("host", DEFAULT_HOST)
        self.port: int = self.config.get("port", DEFAULT_PORT)
        self.timeout: Optional[float] = self.config.get("timeout")
        self.system_spec = self.config.get("system_spec")

        self._client: Optional[NetStationClient] = None
        self._lock = asyncio.Lock()

    async def connect(self) -> bool:
        """
        Connect to NetStation and begin a session.

        Returns:
            bool: True if connected and the session was accepted
        """
        if self._client:
            await self.disconnect()

        logger.info(f"Connecting to NetStation at {self.host}:{self.port}")

        self._client = NetStationClient(timeout=self.timeout)
        connected = await self._run_sync(self._client.connect, self.host, self.port)
        if not connected:
            await self.disconnect()
            return False

        result = await self._run_sync(self._client.send_begin_session, self.system_spec)
        if not result:
            logger.error(f"NetStation rejected session: {result.reason}")
            await self.disconnect()
            return False

        self._connected = True
        logger.info(f"Connected to NetStation, protocol v{self._client.protocol_version}")
        return True

    async def disconnect(self) -> None:
        """End the session and close the connection."""
        if self._client:
            if self._connected:
                await self._run_sync(self._client.send_end_session)
            self._client.disconnect()
            self._client = None

        self._connected = False
        logger.info("Disconnected from NetStation")

    async def reset(self) -> None:
        """Re-take NetStation's attention."""
        client = self._require_client()
        result = await self._run_sync(client.send_attention)
        if not result:
            raise RuntimeError(f"NetStation did not respond to attention: {result.reason}")

    async def identify(self) -> str:
        """
        Return NetStation identification string.

        Returns:
            str: e.g. "NetStation,10.10.10.42:55513,Protocol-1"
        """
        version = self._client.protocol_version if self._client else None
        if version is None:
            return f"NetStation,{self.host}:{self.port},Unknown"
        return f"NetStation,{self.host}:{self.port},Protocol-{version}"

    # === Event Methods ===

    async def begin_recording(self) -> bool:
        client = self._require_client()
        return bool(await self._run_sync(client.send_begin_recording))

    async def end_recording(self) -> bool:
        client = self._require_client()
        return bool(await self._run_sync(client.send_end_recording))

    async def synch(self, timestamp: int) -> bool:
        """
        Take attention, then send a time synchronization point.

        Args:
            timestamp: Local clock value, milliseconds

        Returns:
            bool: True if both commands were accepted
        """
        client = self._require_client()
        if not await self._run_sync(client.send_attention):
            return False
        return bool(await self._run_sync(client.send_synch, timestamp))

    async def trigger(self, code: str, timestamp: int, duration_ms: int = 1) -> bool:
        """
        Send an event marker.

        Codes shorter than 4 characters are padded with spaces.

        Returns:
            bool: True if NetStation accepted the event
        """
        client = self._require_client()
        return bool(await self._run_sync(
            client.send_trigger, code.ljust(4), timestamp, duration_ms
        ))

    # === Helper Methods ===

    def _require_client(self) -> NetStationClient:
        if not self._connected or not self._client:
            raise RuntimeError("Not connected to NetStation")
        return self._client

    async def _run_sync(self, func, *args, **kwargs) -> Any:
        """
        Run synchronous function in executor.

        The protocol client blocks on its socket, so calls run in a
        thread pool and are serialized to keep one command in flight.
        """
        async with self._lock:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, lambda: func(*args, **kwargs))
