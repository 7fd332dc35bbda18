"""Tests covering the real-time frame driver."""

import threading

import pytest

from marbles.drivers import FrameClock, FrameTick


class FakeClock:
    def __init__(self) -> None:
        self.value = 0.0

    def now(self) -> float:
        return self.value

    def advance(self, delta: float) -> None:
        self.value += delta


def test_tick_reports_delta_since_previous_frame() -> None:
    clock = FakeClock()
    frames = FrameClock(monotonic=clock.now)
    received = []
    frames.frames.subscribe(on_next=received.append)

    clock.advance(0.25)
    frames.tick()
    clock.advance(0.5)
    frames.tick()

    assert received == [FrameTick(timestamp=0.25, delta=0.25), FrameTick(timestamp=0.75, delta=0.5)]
    assert received[1].to_dict() == {"timestamp": 0.75, "delta": 0.5}


def test_explicit_timestamp() -> None:
    frames = FrameClock(monotonic=lambda: 1.0)

    frame = frames.tick(1.5)

    assert frame == FrameTick(timestamp=1.5, delta=0.5)


def test_start_and_dispose() -> None:
    frames = FrameClock(interval=0.001)
    first_frame = threading.Event()
    received = []
    completed = []

    def on_next(frame: FrameTick) -> None:
        received.append(frame)
        first_frame.set()

    frames.frames.subscribe(on_next=on_next, on_completed=lambda: completed.append(True))

    frames.start()
    assert first_frame.wait(timeout=2.0)
    frames.dispose()

    assert frames.running is False
    assert received[0].delta == 0.0
    assert completed == [True]

    with pytest.raises(RuntimeError):
        frames.start()


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        FrameClock(interval=0)
