"""Quick demo script for the real-time frame driver.

Prints the frame ticks published by :class:`marbles.drivers.FrameClock` so
the timing source can be compared with the virtual clock used in tests.

Examples
--------
Run at 60 frames per second for two seconds::

    python scripts/demo_frame_clock.py --fps 60 --duration 2

Press Ctrl+C to stop early.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import time
from typing import Iterable

from marbles.drivers import FrameClock, FrameTick
from marbles.utils import configure_logging

LOG = logging.getLogger("marbles.demo")


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="marbles frame clock demo")
    parser.add_argument("--fps", type=float, default=60.0, help="Frames per second.")
    parser.add_argument(
        "--duration",
        type=float,
        default=1.0,
        help="Duration in seconds; 0 means run until interrupted.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log marbles internals at DEBUG.",
    )
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(harness_level=logging.DEBUG if args.debug else None)

    clock = FrameClock(interval=1.0 / args.fps)

    def _on_frame(frame: FrameTick) -> None:
        LOG.info("frame t=%.4f delta=%.4f", frame.timestamp, frame.delta)

    clock.frames.subscribe(on_next=_on_frame)

    stop_requested = False

    def _handle_signal(signum, frame):  # type: ignore[override]
        nonlocal stop_requested
        stop_requested = True

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    clock.start()
    try:
        start_time = time.monotonic()
        while not stop_requested:
            time.sleep(0.1)
            if args.duration > 0 and time.monotonic() - start_time >= args.duration:
                break
    finally:
        clock.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(main())
