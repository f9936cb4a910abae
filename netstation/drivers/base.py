"""
Base Driver Module

Abstract base class for all hardware drivers.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class BaseDriver(ABC):
    """
    Abstract base driver class.

    Drivers wrap a blocking device client behind an async interface so
    acquisition code can await device commands.

    Attributes:
        name: Driver identifier name
        config: Configuration dictionary
    """

    def __init__(
        self,
        name: str = "BaseDriver",
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize driver.

        Args:
            name: Driver identifier name
            config: Configuration dictionary (host, port, timeout, etc.)
        """
        self.name = name
        self.config = config or {}
        self._connected = False

    @abstractmethod
    async def connect(self) -> bool:
        """
        Connect to the device and open a session.

        Returns:
            bool: True if connection successful
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """
        Close the session and the connection.

        Safe to call when not connected.
        """
        ...

    @abstractmethod
    async def reset(self) -> None:
        """
        Bring the device back to a known state.

        Raises:
            RuntimeError: If not connected or the device refuses
        """
        ...

    async def identify(self) -> str:
        """
        Return device identification string.

        Returns:
            str: Device ID string (e.g., "Name,Address,Version")
        """
        return "Unknown"

    async def is_connected(self) -> bool:
        """
        Check connection status.

        Returns:
            bool: True if connected
        """
        return self._connected

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, connected={self._connected})"
