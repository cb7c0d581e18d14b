"""Shared test fixtures for courtboard."""

import pytest

from courtboard.game.models import default_snapshot
from courtboard.sync.store import MemoryStore
from courtboard.sync.timers import ManualTimer


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class TimerRecorder:
    """Timer factory that hands out ManualTimers and remembers them."""

    def __init__(self):
        self.timers: list[ManualTimer] = []

    def __call__(self, interval_s, callback) -> ManualTimer:
        timer = ManualTimer(interval_s, callback)
        self.timers.append(timer)
        return timer

    def by_interval(self, interval_s: float) -> ManualTimer:
        return next(t for t in self.timers if t.interval_s == interval_s)


@pytest.fixture
def snapshot():
    return default_snapshot()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timers():
    return TimerRecorder()


@pytest.fixture
def tmp_output(tmp_path):
    """Provide a temporary output directory for journal files."""
    return tmp_path / "output"
