"""Periodic timers for the coordinator.

The coordinator never sleeps itself; it asks a timer factory for a
cancellable periodic timer and supplies the callback. ``IntervalTimer``
runs on a daemon thread for real use, ``ManualTimer`` fires only when a
test calls ``fire()``.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class PeriodicTimer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], PeriodicTimer]


class IntervalTimer:
    """Call ``callback`` every ``interval_s`` seconds until cancelled."""

    def __init__(
        self, interval_s: float, callback: Callable[[], None], name: str = "interval-timer"
    ) -> None:
        if interval_s <= 0:
            raise ValueError(f"interval must be positive, got {interval_s}")
        self._interval_s = interval_s
        self._callback = callback
        self._name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, daemon=True, name=self._name)
        self._thread.start()

    def cancel(self) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=5)

    def _run(self) -> None:
        while not self._stop.wait(self._interval_s):
            try:
                self._callback()
            except Exception:
                logger.exception("Timer %s callback failed", self._name)


class ManualTimer:
    """Test timer: ``fire()`` runs the callback once if started and not cancelled."""

    def __init__(self, interval_s: float, callback: Callable[[], None]) -> None:
        self.interval_s = interval_s
        self._callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> bool:
        if not self.started or self.cancelled:
            return False
        self._callback()
        return True
