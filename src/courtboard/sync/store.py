"""SharedStore — the only channel between scoreboard instances.

A store holds whole text values under string keys and notifies
subscribers when a value changes. Reads and writes are atomic per key;
there is no field-level access. Every write carries an optional
``source`` (the writing instance's id) and subscribers registered with the
same source are not notified of their own writes, mirroring how browser
storage events skip the tab that made the change.

Class hierarchy:
    SharedStore (ABC)
    ├── MemoryStore: in-process, thread-safe, synchronous notifications
    └── MongoStore: shared across processes (see mongo_store.py)
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)

# callback(key, new_value); new_value is None when the key was removed
ChangeCallback = Callable[[str, "str | None"], None]


class Subscription:
    """Handle returned by ``SharedStore.subscribe``; ``close()`` is idempotent."""

    def __init__(self, on_close: Callable[[], None]) -> None:
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._on_close()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class SharedStore(ABC):
    """Abstract key-value store with change notification."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored text for ``key`` or None."""

    @abstractmethod
    def set(self, key: str, value: str, *, source: str | None = None) -> None:
        """Replace the whole value under ``key``."""

    @abstractmethod
    def delete(self, key: str, *, source: str | None = None) -> None:
        """Remove ``key``; a no-op when absent."""

    @abstractmethod
    def subscribe(
        self, callback: ChangeCallback, *, source: str | None = None
    ) -> Subscription:
        """Call ``callback`` for every change not written by ``source``."""

    def close(self) -> None:
        """Release backend resources. Default: nothing to release."""


class MemoryStore(SharedStore):
    """In-process store shared by several instances in one interpreter.

    Notifications are delivered synchronously on the writer's thread, but
    only after the store's own lock is released, so a callback may freely
    read or write the store.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()
        self._subscribers: dict[int, tuple[ChangeCallback, str | None]] = {}
        self._next_id = 0

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str, *, source: str | None = None) -> None:
        with self._lock:
            changed = self._data.get(key) != value
            self._data[key] = value
            targets = self._targets(source) if changed else []
        self._notify(targets, key, value)

    def delete(self, key: str, *, source: str | None = None) -> None:
        with self._lock:
            if key not in self._data:
                return
            del self._data[key]
            targets = self._targets(source)
        self._notify(targets, key, None)

    def subscribe(
        self, callback: ChangeCallback, *, source: str | None = None
    ) -> Subscription:
        with self._lock:
            sub_id = self._next_id
            self._next_id += 1
            self._subscribers[sub_id] = (callback, source)

        def _remove() -> None:
            with self._lock:
                self._subscribers.pop(sub_id, None)

        return Subscription(_remove)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _targets(self, source: str | None) -> list[ChangeCallback]:
        return [
            cb
            for cb, sub_source in self._subscribers.values()
            if source is None or sub_source != source
        ]

    @staticmethod
    def _notify(targets: list[ChangeCallback], key: str, value: str | None) -> None:
        for cb in targets:
            try:
                cb(key, value)
            except Exception:
                # a failing subscriber never breaks the writer
                logger.exception("Store subscriber failed for key %s", key)
