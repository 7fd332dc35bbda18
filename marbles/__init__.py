"""
Marble testing for reactive streams on a virtual clock.

Diagrams such as ``"-a--b-|"`` describe when a stream emits.  The harness
binds them to ``reactivex`` subjects, replays every scheduled event in virtual
time order and checks what a stream under test emitted against an expected
diagram.
"""

from __future__ import annotations

from .clock import ScheduledEvent, VirtualClock
from .comparator import Comparison, ComparisonOutcome
from .config import HarnessConfig, resolve_config
from .diagram import EventKind, MalformedDiagram, Marble, canonical, parse, render
from .errors import (
    ComparisonPending,
    ConfigError,
    DiagramMismatch,
    MarblesError,
    ScheduleError,
    ScheduleOrderError,
    ScheduleOverflow,
)
from .harness import VirtualTime

__all__ = [
    "Comparison",
    "ComparisonOutcome",
    "ComparisonPending",
    "ConfigError",
    "DiagramMismatch",
    "EventKind",
    "HarnessConfig",
    "MalformedDiagram",
    "Marble",
    "MarblesError",
    "ScheduleError",
    "ScheduleOrderError",
    "ScheduleOverflow",
    "ScheduledEvent",
    "VirtualClock",
    "VirtualTime",
    "canonical",
    "parse",
    "render",
    "resolve_config",
]
