"""
Exception hierarchy shared across the harness.
"""

from __future__ import annotations


class MarblesError(RuntimeError):
    """Base class for harness related errors."""


class ScheduleError(MarblesError):
    """Raised when the virtual clock is driven incorrectly."""


class ScheduleOrderError(ScheduleError):
    """Raised when an event would be replayed out of time order."""


class ScheduleOverflow(ScheduleError):
    """Raised when a run dispatches more events than allowed."""


class ComparisonError(MarblesError):
    """Base class for comparison failures."""


class DiagramMismatch(AssertionError, ComparisonError):
    """Raised when the actual stream does not match the expected diagram."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"expected {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


class ComparisonPending(ComparisonError):
    """Raised when a comparison result is requested before the stream terminated."""


class ConfigError(MarblesError):
    """Raised when a configuration profile cannot be resolved."""
