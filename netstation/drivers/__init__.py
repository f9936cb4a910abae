"""Hardware drivers."""

from .base import BaseDriver
from .netstation import NetStationDriver

__all__ = ["BaseDriver", "NetStationDriver"]
