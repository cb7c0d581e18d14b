"""Tests for the coordinator's periodic timers."""

import threading

import pytest

from courtboard.sync.timers import IntervalTimer, ManualTimer


class TestManualTimer:
    def test_fires_only_when_started(self):
        calls = []
        timer = ManualTimer(1.0, lambda: calls.append(1))
        assert not timer.fire()
        timer.start()
        assert timer.fire()
        assert calls == [1]

    def test_cancelled_timer_does_not_fire(self):
        calls = []
        timer = ManualTimer(1.0, lambda: calls.append(1))
        timer.start()
        timer.cancel()
        assert not timer.fire()
        assert calls == []


class TestIntervalTimer:
    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            IntervalTimer(0, lambda: None)

    def test_runs_until_cancelled(self):
        fired = threading.Event()
        count = []

        def callback():
            count.append(1)
            if len(count) >= 3:
                fired.set()

        timer = IntervalTimer(0.01, callback)
        timer.start()
        assert fired.wait(timeout=5)
        timer.cancel()
        assert not timer.running
        settled = len(count)
        threading.Event().wait(0.05)
        assert len(count) == settled

    def test_callback_errors_do_not_stop_timer(self):
        fired = threading.Event()
        calls = []

        def callback():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first call fails")
            fired.set()

        timer = IntervalTimer(0.01, callback)
        timer.start()
        assert fired.wait(timeout=5)
        timer.cancel()
