import pytest
from reactivex.subject import Subject

from marbles.binder import bind_diagram
from marbles.clock import VirtualClock
from marbles.comparator import ComparisonOutcome, compare
from marbles.diagram import EventKind
from marbles.errors import ComparisonPending, DiagramMismatch


def test_matching_stream_passes() -> None:
    clock = VirtualClock()
    actual = bind_diagram(clock, "-a-b-|")
    expected = bind_diagram(clock, "-a-b-|")
    outcomes = []

    comparison = compare(clock, actual, expected, done=outcomes.append)
    clock.run()

    assert comparison.done
    assert outcomes == [ComparisonOutcome(passed=True, expected="-a-b|", actual="-a-b|")]
    assert comparison.result().passed is True


def test_expected_may_be_plain_notation() -> None:
    clock = VirtualClock()
    actual = bind_diagram(clock, "ab|")

    comparison = compare(clock, actual, "ab|")
    clock.run()

    assert comparison.result().actual == "ab|"


def test_mismatch_reports_both_diagrams() -> None:
    clock = VirtualClock()
    actual = bind_diagram(clock, "-a--b|")

    comparison = compare(clock, actual, "-a-b|")
    clock.run()

    outcome = comparison.outcome
    assert outcome is not None
    assert outcome.passed is False
    assert outcome.expected == "-a-b|"
    assert outcome.actual == "-a--b|"

    with pytest.raises(DiagramMismatch) as excinfo:
        comparison.result()
    assert excinfo.value.expected == "-a-b|"
    assert excinfo.value.actual == "-a--b|"
    assert isinstance(excinfo.value, AssertionError)


def test_error_short_circuits_comparison() -> None:
    clock = VirtualClock()
    source: Subject = Subject()
    failure = RuntimeError("stream exploded")
    clock.schedule(20, EventKind.NEXT, source, "a")
    clock.schedule(40, EventKind.ERROR, source, failure)
    outcomes = []

    comparison = compare(clock, source, "-a--b|", done=outcomes.append)
    clock.run()

    assert len(outcomes) == 1
    assert outcomes[0].passed is False
    assert outcomes[0].error is failure
    assert outcomes[0].actual is None
    with pytest.raises(RuntimeError, match="stream exploded"):
        comparison.result()


def test_result_before_run_is_pending() -> None:
    clock = VirtualClock()
    actual = bind_diagram(clock, "a|")

    comparison = compare(clock, actual, "a|")

    assert comparison.done is False
    with pytest.raises(ComparisonPending):
        comparison.result()


def test_stream_without_completion_never_settles() -> None:
    clock = VirtualClock()
    actual = bind_diagram(clock, "-a-b")

    comparison = compare(clock, actual, "-a-b")
    clock.run()

    assert comparison.done is False
    assert [marble.payload for marble in comparison.recorded] == ["a", "b"]


def test_late_callback_receives_settled_outcome() -> None:
    clock = VirtualClock()
    actual = bind_diagram(clock, "a|")
    comparison = compare(clock, actual, "a|")
    clock.run()

    received = []
    comparison.add_done_callback(received.append)

    assert received == [comparison.outcome]


def test_completion_gap_can_be_significant() -> None:
    clock = VirtualClock()
    actual = bind_diagram(clock, "-a---|")

    lenient = compare(clock, actual, "-a-|")
    strict = compare(clock, actual, "-a-|", completion_gap_significant=True)
    clock.run()

    assert lenient.result().passed is True
    assert strict.outcome is not None
    assert strict.outcome.passed is False
    assert strict.outcome.actual == "-a---|"
