"""
NetStation Package

Client for the EGI NetStation event-synchronization protocol, with an
async driver for use inside acquisition sequences.
"""

from .drivers import NetStationDriver
from .protocol import NetStationClient

__all__ = ["NetStationClient", "NetStationDriver"]
