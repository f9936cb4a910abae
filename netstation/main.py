#!/usr/bin/env python3
"""
NetStation event marker demo - CLI Entry Point

Opens a session and recording, then sends one attention/synch/trigger
round per letter of the alphabet.

Usage:
    python -m netstation.main --host 10.10.10.42 --port 55513
    python -m netstation.main --count 5 --interval 0.5 -v
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from netstation.drivers.netstation import DEFAULT_HOST, DEFAULT_PORT
from netstation.protocol import NetStationClient

logger = logging.getLogger(__name__)


def event_code(index: int) -> bytes:
    """Single-letter event code, NUL padded to 4 bytes."""
    return bytes([ord("A") + index % 26]).ljust(4, b"\0")


def run(
    client: NetStationClient,
    count: int,
    interval: float,
    duration_ms: int
) -> bool:
    """Run the marker loop on a connected client. Returns False on first failure."""
    if not client.send_begin_session():
        return False
    if not client.send_begin_recording():
        return False

    for i in range(count):
        if not (client.send_attention()
                and client.send_synch(i)
                and client.send_trigger(event_code(i), i, duration_ms)):
            logger.error(f"Event {i} was not accepted, stopping")
            return False
        logger.info(f"Sent event {event_code(i)[:1].decode()} ({i + 1}/{count})")
        if interval > 0 and i < count - 1:
            time.sleep(interval)

    return bool(client.send_end_recording()) and bool(client.send_end_session())


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Send demo event markers to NetStation")
    parser.add_argument(
        "--host", type=str, default=DEFAULT_HOST,
        help=f"NetStation IPv4 address (default: {DEFAULT_HOST})")
    parser.add_argument(
        "--port", type=int, default=DEFAULT_PORT,
        help=f"NetStation ECI port (default: {DEFAULT_PORT})")
    parser.add_argument(
        "--count", type=int, default=26,
        help="Number of events to send (default: 26)")
    parser.add_argument(
        "--interval", type=float, default=5.0,
        help="Seconds between events (default: 5.0)")
    parser.add_argument(
        "--duration", type=int, default=50,
        help="Event duration in ms (default: 50)")
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Socket timeout in seconds (default: wait forever)")
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with NetStationClient(timeout=args.timeout) as client:
        if not client.connect(args.host, args.port):
            return 1
        ok = run(client, args.count, args.interval, args.duration)

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
