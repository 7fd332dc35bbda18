"""
Compare a stream under test with an expected diagram.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union

from reactivex import Observable

from .binder import DiagramSubject, Recorder
from .clock import VirtualClock
from .diagram import DEFAULT_TIME_UNIT, Marble, canonical, collapse_completion_gap, render
from .errors import ComparisonPending, DiagramMismatch

LOG = logging.getLogger(__name__)

Expected = Union[DiagramSubject, str]


@dataclass(frozen=True, slots=True)
class ComparisonOutcome:
    """
    Result of a single comparison.

    ``expected`` and ``actual`` hold the canonical notation of both sides.
    ``actual`` is ``None`` when the stream errored before completing.
    """

    passed: bool
    expected: str
    actual: Optional[str] = None
    error: Optional[BaseException] = None


OutcomeCallback = Callable[[ComparisonOutcome], None]


class Comparison:
    """
    Pending comparison that settles exactly once.
    """

    def __init__(
        self,
        expected: str,
        *,
        time_unit: int = DEFAULT_TIME_UNIT,
        completion_gap_significant: bool = False,
    ) -> None:
        self._time_unit = time_unit
        self._completion_gap_significant = completion_gap_significant
        self.expected = canonical(
            expected, time_unit, completion_gap_significant=completion_gap_significant
        )
        self.outcome: Optional[ComparisonOutcome] = None
        self._callbacks: List[OutcomeCallback] = []
        self._recorder: Optional[Recorder] = None

    # ------------------------------------------------------------------ helpers

    def _canonical(self, rendered: str) -> str:
        if self._completion_gap_significant:
            return rendered
        return collapse_completion_gap(rendered)

    def _settle(self, outcome: ComparisonOutcome) -> None:
        if self.outcome is not None:
            return
        self.outcome = outcome
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(outcome)

    def _on_recorder_done(self, recorder: Recorder) -> None:
        if recorder.error is not None:
            LOG.info("Stream under test errored: %r", recorder.error)
            self._settle(
                ComparisonOutcome(passed=False, expected=self.expected, error=recorder.error)
            )
            return

        actual = self._canonical(render(recorder.marbles, self._time_unit))
        if actual == self.expected:
            LOG.info("Diagram matched: %s", actual)
            self._settle(ComparisonOutcome(passed=True, expected=self.expected, actual=actual))
            return

        LOG.warning("Diagram mismatch: expected %s, got %s", self.expected, actual)
        self._settle(
            ComparisonOutcome(
                passed=False,
                expected=self.expected,
                actual=actual,
                error=DiagramMismatch(self.expected, actual),
            )
        )

    # ------------------------------------------------------------------ public API

    @property
    def done(self) -> bool:
        return self.outcome is not None

    @property
    def recorded(self) -> List[Marble]:
        if self._recorder is None:
            return []
        return list(self._recorder.marbles)

    def attach(self, clock: VirtualClock, actual: Observable[Any]) -> "Comparison":
        self._recorder = Recorder(clock, actual, on_done=self._on_recorder_done)
        return self

    def add_done_callback(self, callback: OutcomeCallback) -> None:
        if self.outcome is not None:
            callback(self.outcome)
            return
        self._callbacks.append(callback)

    def result(self) -> ComparisonOutcome:
        """
        Return the passing outcome or raise the failure.
        """

        if self.outcome is None:
            raise ComparisonPending(
                f"stream under test has not terminated (expected {self.expected!r})"
            )
        if self.outcome.error is not None:
            raise self.outcome.error
        return self.outcome


def compare(
    clock: VirtualClock,
    actual: Observable[Any],
    expected: Expected,
    *,
    time_unit: int = DEFAULT_TIME_UNIT,
    completion_gap_significant: bool = False,
    done: Optional[OutcomeCallback] = None,
) -> Comparison:
    """
    Start comparing ``actual`` against ``expected``.

    The comparison settles while :meth:`VirtualClock.run` replays the
    schedule. ``done`` receives the outcome once it is known.
    """

    diagram = expected.diagram if isinstance(expected, DiagramSubject) else str(expected)
    comparison = Comparison(
        diagram,
        time_unit=time_unit,
        completion_gap_significant=completion_gap_significant,
    )
    if done is not None:
        comparison.add_done_callback(done)
    return comparison.attach(clock, actual)
