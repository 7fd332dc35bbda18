"""
Virtual clock and schedule for deterministic replay.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Set, Tuple

from reactivex import abc

from .diagram import EventKind
from .errors import ScheduleError, ScheduleOrderError, ScheduleOverflow

LOG = logging.getLogger(__name__)

DEFAULT_MAX_DISPATCHES = 100_000


@dataclass(frozen=True, slots=True)
class ScheduledEvent:
    """
    An event waiting to be delivered to ``target`` at virtual ``time``.
    """

    time: int
    kind: EventKind
    target: abc.ObserverBase[Any]
    payload: Any = None


class VirtualClock:
    """
    Replays scheduled events in time order against a virtual "now".

    Events with equal time are delivered in the order they were pushed.
    Events pushed while a dispatch is in progress are honoured by the same
    :meth:`run` call.
    """

    def __init__(self, *, max_dispatches: Optional[int] = DEFAULT_MAX_DISPATCHES) -> None:
        self._now = 0
        self._queue: List[Tuple[int, int, ScheduledEvent]] = []
        self._sequence = itertools.count()
        self._terminated: Set[abc.ObserverBase[Any]] = set()
        self._running = False
        self._max_dispatches = max_dispatches

    # ------------------------------------------------------------------ helpers

    def _dispatch(self, event: ScheduledEvent) -> None:
        target = event.target
        if target in self._terminated:
            raise ScheduleOrderError(
                f"{event.kind.value} at {event.time} targets a stream that already terminated"
            )

        LOG.debug("t=%s dispatch %s %r", event.time, event.kind.value, event.payload)
        if event.kind is EventKind.NEXT:
            target.on_next(event.payload)
        elif event.kind is EventKind.COMPLETE:
            self._terminated.add(target)
            target.on_completed()
        elif event.kind is EventKind.ERROR:
            self._terminated.add(target)
            target.on_error(event.payload)
        else:
            raise ScheduleError(f"Unknown event kind {event.kind!r}")

    # ------------------------------------------------------------------ public API

    @property
    def now(self) -> int:
        return self._now

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def running(self) -> bool:
        return self._running

    def push(self, event: ScheduledEvent) -> None:
        if event.time < self._now:
            raise ScheduleOrderError(
                f"cannot schedule {event.kind.value} at {event.time}, clock is already at {self._now}"
            )
        heapq.heappush(self._queue, (event.time, next(self._sequence), event))
        LOG.debug("scheduled %s at %s (now=%s)", event.kind.value, event.time, self._now)

    def schedule(
        self,
        time: int,
        kind: EventKind,
        target: abc.ObserverBase[Any],
        payload: Any = None,
    ) -> ScheduledEvent:
        event = ScheduledEvent(time=int(time), kind=kind, target=target, payload=payload)
        self.push(event)
        return event

    def run(self) -> int:
        """
        Dispatch every pending event, including ones scheduled along the way.

        Returns the number of dispatched events.
        """

        if self._running:
            raise ScheduleError("run() is already in progress on this clock")

        self._running = True
        dispatched = 0
        try:
            while self._queue:
                if self._max_dispatches is not None and dispatched >= self._max_dispatches:
                    raise ScheduleOverflow(
                        f"exceeded {self._max_dispatches} dispatches, {len(self._queue)} still pending"
                    )
                time, _, event = heapq.heappop(self._queue)
                self._now = time
                self._dispatch(event)
                dispatched += 1
        finally:
            self._running = False

        LOG.debug("replay finished at t=%s after %s events", self._now, dispatched)
        return dispatched
