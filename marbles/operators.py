"""
Time based operators that run on a :class:`~marbles.clock.VirtualClock`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from reactivex import Observable, abc

from .clock import VirtualClock
from .diagram import EventKind

LOG = logging.getLogger(__name__)


def scheduled_delay(
    clock: VirtualClock,
    offset: int,
) -> Callable[[Observable[Any]], Observable[Any]]:
    """
    Shift values and completion ``offset`` virtual milliseconds later.

    Nothing is emitted on receipt: every shifted event goes back onto the
    clock's schedule so it interleaves correctly with other streams. Errors
    are forwarded immediately.
    """

    if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
        raise ValueError(f"offset must be a non-negative integer, got {offset!r}")

    def _delay(source: Observable[Any]) -> Observable[Any]:
        def subscribe(
            observer: abc.ObserverBase[Any],
            scheduler: Optional[abc.SchedulerBase] = None,
        ) -> abc.DisposableBase:
            def on_next(value: Any) -> None:
                LOG.debug("t=%s delaying %r by %s", clock.now, value, offset)
                clock.schedule(clock.now + offset, EventKind.NEXT, observer, value)

            def on_completed() -> None:
                clock.schedule(clock.now + offset, EventKind.COMPLETE, observer)

            return source.subscribe(
                on_next=on_next,
                on_error=observer.on_error,
                on_completed=on_completed,
                scheduler=scheduler,
            )

        return Observable(subscribe)

    return _delay
