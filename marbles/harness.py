"""
Per-test entry point tying diagrams, the virtual clock and comparisons together.

Typical use::

    time = VirtualTime()
    source = time.from_diagram("-a----b-----|")
    comparison = time.compare(source.pipe(time.delay(40)), "---a----b---|")
    time.run()
    comparison.result()
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Tuple

from reactivex import Observable

from .binder import DiagramSubject, bind_diagram
from .clock import VirtualClock
from .comparator import Comparison, Expected, OutcomeCallback, compare
from .config import HarnessConfig
from .diagram import Marble, parse, render
from .errors import ScheduleError
from .operators import scheduled_delay

LOG = logging.getLogger(__name__)


class VirtualTime:
    """
    Owns one virtual clock.  Create a fresh instance for every test.

    Diagrams are bound at time zero, so every :meth:`from_diagram` call must
    happen before :meth:`run`.  Binding after a replay raises
    :class:`~marbles.errors.ScheduleError`.
    """

    def __init__(
        self,
        config: Optional[HarnessConfig] = None,
        *,
        time_unit: Optional[int] = None,
    ) -> None:
        config = config or HarnessConfig()
        if time_unit is not None:
            config = HarnessConfig(**{**config.model_dump(), "time_unit": time_unit})
        self.config = config
        self.clock = VirtualClock(max_dispatches=config.max_dispatches)
        self._replayed = False

    @property
    def time_unit(self) -> int:
        return self.config.time_unit

    @property
    def now(self) -> int:
        return self.clock.now

    def parse(self, diagram: str) -> Tuple[Marble, ...]:
        return parse(diagram, self.time_unit)

    def render(self, marbles: Iterable[Marble]) -> str:
        return render(marbles, self.time_unit)

    def from_diagram(self, diagram: str) -> DiagramSubject:
        if self._replayed:
            raise ScheduleError(
                f"cannot bind {diagram!r} after run() (clock at t={self.clock.now}); "
                "create a new VirtualTime for each test"
            )
        return bind_diagram(self.clock, diagram, self.time_unit)

    def compare(
        self,
        actual: Observable[Any],
        expected: Expected,
        done: Optional[OutcomeCallback] = None,
    ) -> Comparison:
        return compare(
            self.clock,
            actual,
            expected,
            time_unit=self.time_unit,
            completion_gap_significant=self.config.completion_gap_significant,
            done=done,
        )

    def delay(self, offset: int) -> Callable[[Observable[Any]], Observable[Any]]:
        return scheduled_delay(self.clock, offset)

    def run(self) -> int:
        self._replayed = True
        dispatched = self.clock.run()
        LOG.debug("Virtual run finished at t=%s (%s events)", self.clock.now, dispatched)
        return dispatched
