"""End-to-end marble tests driven through :class:`marbles.VirtualTime`."""

from __future__ import annotations

import pytest
import reactivex
from reactivex import operators as ops

from marbles import HarnessConfig, MalformedDiagram, ScheduleError, VirtualTime


def test_allows_testing_streams() -> None:
    time = VirtualTime()

    stream1 = time.from_diagram("-a----c-----|")
    stream2 = time.from_diagram("---b-----d--|")
    expected = time.from_diagram("-a-b--c--d--|")

    outcomes = []
    comparison = time.compare(reactivex.merge(stream1, stream2), expected, outcomes.append)
    time.run()

    assert comparison.result().actual == "-a-b--c--d|"
    assert len(outcomes) == 1
    assert time.render(comparison.recorded) == "-a-b--c--d--|"


def test_can_test_time_based_operators() -> None:
    time = VirtualTime()

    stream = time.from_diagram("-a----b-----|")
    expected = time.from_diagram("---a----b---|")

    comparison = time.compare(stream.pipe(time.delay(40)), expected)
    time.run()

    assert comparison.result().passed is True


def test_library_operators_run_synchronously_in_virtual_time() -> None:
    time = VirtualTime()

    stream = time.from_diagram("-a-b-c-|")

    comparison = time.compare(stream.pipe(ops.map(str.upper)), "-A-B-C-|")
    time.run()

    assert comparison.result().passed is True


def test_same_diagrams_give_identical_outcomes() -> None:
    def run_once():
        time = VirtualTime()
        left = time.from_diagram("-a--(bc)|")
        right = time.from_diagram("--x-y---|")
        comparison = time.compare(reactivex.merge(left, right), "-ax-(by)(c|)")
        time.run()
        outcome = comparison.outcome
        assert outcome is not None
        return outcome.passed, outcome.actual, [marble.payload for marble in comparison.recorded]

    first = run_once()
    second = run_once()

    assert first == second
    assert first == (False, "-ax-(bcy)|", ["a", "x", "b", "c", "y", None])


def test_time_unit_override() -> None:
    time = VirtualTime(time_unit=50)

    stream = time.from_diagram("--a|")
    comparison = time.compare(stream.pipe(time.delay(50)), "---a|")
    time.run()

    assert time.time_unit == 50
    assert time.now == 200
    assert comparison.result().passed is True


def test_config_drives_comparison_policy() -> None:
    time = VirtualTime(HarnessConfig(completion_gap_significant=True))

    stream = time.from_diagram("-a----b-----|")
    comparison = time.compare(stream.pipe(time.delay(40)), "---a----b-----|")
    time.run()

    assert comparison.result().passed is True


def test_instances_do_not_share_clocks() -> None:
    first = VirtualTime()
    second = VirtualTime()

    first.from_diagram("a|")
    first.run()

    assert first.now == 20
    assert second.now == 0
    assert second.clock is not first.clock
    assert second.clock.pending == 0


def test_simultaneous_start_leaves_clock_at_zero() -> None:
    time = VirtualTime()

    time.from_diagram("(a|)")
    time.run()

    assert time.now == 0


def test_binding_after_replay_is_rejected() -> None:
    time = VirtualTime()
    time.from_diagram("-a|")
    time.run()

    with pytest.raises(ScheduleError, match="new VirtualTime"):
        time.from_diagram("a|")
    assert time.clock.pending == 0


def test_malformed_diagram_fails_fast() -> None:
    time = VirtualTime()

    with pytest.raises(MalformedDiagram):
        time.from_diagram("-a-|-")
    assert time.clock.pending == 0
