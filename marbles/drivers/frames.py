"""
Real-time frame driver.

This is the production counterpart of the virtual clock: it publishes
``FrameTick`` records against a monotonic host clock.  The virtual-time engine
never uses it.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from reactivex.subject import Subject

LOG = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL = 1.0 / 60.0

MonotonicCallable = Callable[[], float]
SleepCallable = Callable[[float], None]


@dataclass(frozen=True, slots=True)
class FrameTick:
    timestamp: float
    delta: float

    def to_dict(self) -> dict:
        return {"timestamp": float(self.timestamp), "delta": float(self.delta)}


class FrameClock:
    """
    Emit a :class:`FrameTick` on :attr:`frames` once per ``interval`` seconds.
    """

    def __init__(
        self,
        *,
        interval: float = DEFAULT_FRAME_INTERVAL,
        monotonic: Optional[MonotonicCallable] = None,
        sleep: Optional[SleepCallable] = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = float(interval)
        self.frames: Subject[FrameTick] = Subject()
        self._monotonic: MonotonicCallable = monotonic if monotonic is not None else time.monotonic
        self._sleep: SleepCallable = sleep if sleep is not None else time.sleep
        self._previous = self._monotonic()
        self._lock = threading.RLock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._disposed = False

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def tick(self, timestamp: Optional[float] = None) -> FrameTick:
        """
        Publish one frame.  ``timestamp`` defaults to the monotonic clock.
        """

        with self._lock:
            if timestamp is None:
                timestamp = self._monotonic()
            frame = FrameTick(timestamp=timestamp, delta=timestamp - self._previous)
            self._previous = timestamp
        self.frames.on_next(frame)
        return frame

    def start(self) -> None:
        if self._disposed:
            raise RuntimeError("FrameClock has been disposed")
        if self.running:
            return

        self._stop.clear()
        self._previous = self._monotonic()

        def _loop() -> None:
            timestamp: Optional[float] = self._previous
            while not self._stop.is_set():
                self.tick(timestamp)
                self._sleep(self.interval)
                timestamp = None

        thread = threading.Thread(target=_loop, name="marbles-frame-clock", daemon=True)
        thread.start()
        self._thread = thread
        LOG.debug("Frame clock started (interval=%.4fs)", self.interval)

    def dispose(self) -> None:
        self._stop.set()
        thread = self._thread
        if thread and thread.is_alive() and threading.current_thread() is not thread:
            thread.join(timeout=1.0)
        self._thread = None
        if not self._disposed:
            self._disposed = True
            self.frames.on_completed()
            LOG.debug("Frame clock disposed")
