"""
Bind diagrams to stream sources and record what streams under test emit.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Tuple

from reactivex import Observable, abc
from reactivex.subject import Subject

from .clock import VirtualClock
from .diagram import DEFAULT_TIME_UNIT, EventKind, Marble, parse

LOG = logging.getLogger(__name__)

DoneCallback = Callable[["Recorder"], None]


class DiagramSubject(Subject[Any]):
    """
    A subject whose emissions are driven by a parsed diagram.
    """

    def __init__(self, diagram: str, marbles: Tuple[Marble, ...]) -> None:
        super().__init__()
        self.diagram = diagram
        self.marbles = marbles

    def __repr__(self) -> str:
        return f"DiagramSubject({self.diagram!r})"


def bind_diagram(
    clock: VirtualClock,
    diagram: str,
    time_unit: int = DEFAULT_TIME_UNIT,
) -> DiagramSubject:
    """
    Create a subject and schedule every event of ``diagram`` against it.
    """

    marbles = parse(diagram, time_unit)
    subject = DiagramSubject(diagram, marbles)
    for marble in marbles:
        clock.schedule(marble.time, marble.kind, subject, marble.payload)
    LOG.debug("bound diagram %r (%s events)", diagram, len(marbles))
    return subject


class Recorder:
    """
    Subscribe to ``stream`` and keep every emission stamped with ``clock.now``.

    ``on_done`` fires once, on completion or on error, whichever comes first.
    """

    def __init__(
        self,
        clock: VirtualClock,
        stream: Observable[Any],
        on_done: Optional[DoneCallback] = None,
    ) -> None:
        self._clock = clock
        self._on_done = on_done
        self.marbles: List[Marble] = []
        self.finished = False
        self.error: Optional[Exception] = None
        self._subscription: Optional[abc.DisposableBase] = None
        self._subscription = stream.subscribe(
            on_next=self._on_next,
            on_error=self._on_error,
            on_completed=self._on_completed,
        )

    # ------------------------------------------------------------------ helpers

    def _record(self, kind: EventKind, payload: Any = None) -> None:
        self.marbles.append(Marble(self._clock.now, kind, payload))

    def _finish(self) -> None:
        self.finished = True
        if self._on_done is not None:
            callback, self._on_done = self._on_done, None
            callback(self)

    def _on_next(self, value: Any) -> None:
        if self.finished:
            return
        self._record(EventKind.NEXT, value)

    def _on_error(self, error: Exception) -> None:
        if self.finished:
            return
        LOG.debug("t=%s captured error %r", self._clock.now, error)
        self.error = error
        self._record(EventKind.ERROR, error)
        self._finish()

    def _on_completed(self) -> None:
        if self.finished:
            return
        self._record(EventKind.COMPLETE)
        self._finish()

    # ------------------------------------------------------------------ public API

    def dispose(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None
