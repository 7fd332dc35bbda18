"""
Marble diagram notation.

A diagram is read one bucket at a time, each bucket lasting ``time_unit``
virtual milliseconds:

``-``      an empty bucket
``|``      completion, nothing may follow it
``(ab)``   several simultaneous events in a single bucket
other      a value carrying that character

:func:`render` writes an error as ``#``, but :func:`parse` reads ``#`` as an
ordinary value.  A rendered trace therefore cannot tell a ``#`` value from an
error, and an expected diagram has no way to state one.  Comparisons never
need to, since an error settles them as a failure before anything is rendered.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from itertools import groupby
from typing import Any, Iterable, List, Optional, Tuple

DEFAULT_TIME_UNIT = 20

EMPTY = "-"
COMPLETE = "|"
ERROR = "#"
GROUP_OPEN = "("
GROUP_CLOSE = ")"


class MalformedDiagram(ValueError):
    """Raised when a diagram cannot be parsed."""

    def __init__(self, diagram: str, index: int, reason: str) -> None:
        super().__init__(f"{reason} at index {index} of diagram {diagram!r}")
        self.diagram = diagram
        self.index = index
        self.reason = reason


class EventKind(str, Enum):
    """Signals a stream can carry."""

    NEXT = "next"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Marble:
    """
    A single event positioned in virtual time.

    Used both for parsed diagrams and for emissions captured from a stream
    under test.
    """

    time: int
    kind: EventKind
    payload: Any = None

    @property
    def is_terminal(self) -> bool:
        return self.kind is not EventKind.NEXT

    def symbol(self) -> str:
        if self.kind is EventKind.NEXT:
            return str(self.payload)
        if self.kind is EventKind.COMPLETE:
            return COMPLETE
        if self.kind is EventKind.ERROR:
            return ERROR
        raise ValueError(f"Unknown event kind {self.kind!r}")


def _check_time_unit(time_unit: int) -> int:
    if isinstance(time_unit, bool) or not isinstance(time_unit, int) or time_unit <= 0:
        raise ValueError(f"time_unit must be a positive integer, got {time_unit!r}")
    return time_unit


def parse(diagram: str, time_unit: int = DEFAULT_TIME_UNIT) -> Tuple[Marble, ...]:
    """
    Turn ``diagram`` into marbles ordered by time.

    Raises :class:`MalformedDiagram` on whitespace, anything after ``|`` and
    unbalanced, nested or empty groups.
    """

    _check_time_unit(time_unit)
    marbles: List[Marble] = []
    bucket = 0
    group_start: Optional[int] = None
    group_size = 0
    completed_at: Optional[int] = None

    for index, character in enumerate(diagram):
        if completed_at is not None and not (group_start is not None and character == GROUP_CLOSE):
            raise MalformedDiagram(diagram, index, "event after completion")
        if character.isspace():
            raise MalformedDiagram(diagram, index, "whitespace is not allowed")

        time = bucket * time_unit

        if character == GROUP_OPEN:
            if group_start is not None:
                raise MalformedDiagram(diagram, index, "nested group")
            group_start = index
            group_size = 0
            continue

        if character == GROUP_CLOSE:
            if group_start is None:
                raise MalformedDiagram(diagram, index, "unmatched ')'")
            if group_size == 0:
                raise MalformedDiagram(diagram, index, "empty group")
            group_start = None
            bucket += 1
            continue

        if character == EMPTY:
            if group_start is not None:
                raise MalformedDiagram(diagram, index, "'-' inside a group")
            bucket += 1
            continue

        if character == COMPLETE:
            marbles.append(Marble(time, EventKind.COMPLETE))
            completed_at = index
        else:
            marbles.append(Marble(time, EventKind.NEXT, character))

        if group_start is not None:
            group_size += 1
        else:
            bucket += 1

    if group_start is not None:
        raise MalformedDiagram(diagram, group_start, "unmatched '('")

    return tuple(marbles)


def render(marbles: Iterable[Marble], time_unit: int = DEFAULT_TIME_UNIT) -> str:
    """
    Render marbles back into notation.

    Events sharing a bucket are parenthesised in the order they were given.
    Every bucket up to the latest event is emitted.
    """

    _check_time_unit(time_unit)
    events = list(marbles)
    if not events:
        return ""

    buckets = {
        bucket: list(group)
        for bucket, group in groupby(
            sorted(events, key=lambda marble: marble.time // time_unit),
            key=lambda marble: marble.time // time_unit,
        )
    }
    last_bucket = max(buckets)

    parts: List[str] = []
    for bucket in range(last_bucket + 1):
        values = buckets.get(bucket)
        if not values:
            parts.append(EMPTY)
        elif len(values) == 1:
            parts.append(values[0].symbol())
        else:
            parts.append(GROUP_OPEN + "".join(value.symbol() for value in values) + GROUP_CLOSE)
    return "".join(parts)


def collapse_completion_gap(diagram: str) -> str:
    """
    Drop the empty buckets directly in front of a trailing ``|``.
    """

    if not diagram.endswith(COMPLETE):
        return diagram
    return diagram[:-1].rstrip(EMPTY) + COMPLETE


def canonical(
    diagram: str,
    time_unit: int = DEFAULT_TIME_UNIT,
    *,
    completion_gap_significant: bool = False,
) -> str:
    """
    Normalise notation so equivalent diagrams compare equal as strings.
    """

    rendered = render(parse(diagram, time_unit), time_unit)
    if completion_gap_significant:
        return rendered
    return collapse_completion_gap(rendered)
