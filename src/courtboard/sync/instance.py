"""ScoreboardInstance — one running copy of the scoreboard.

Holds the current snapshot and is the single dispatch point for both
operator actions and the coordinator's synthetic ticks. Every applied
action that changes the snapshot is stamped with a strictly increasing
``updated_at`` and written to the shared store under both snapshot keys.
Snapshots received from other instances are applied only when strictly
newer, and are never written back.

Locking: ``_state_lock`` guards the in-memory snapshot and is never held
while talking to the store. ``_write_lock`` serializes store writes; the
store may synchronously notify other instances, which only ever take
their own state lock, so two instances writing at once cannot deadlock.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from dataclasses import replace
from typing import Callable

from courtboard.game.actions import Action, Hydrate
from courtboard.game.models import GameSnapshot
from courtboard.game.reducer import reduce
from courtboard.sync import codec
from courtboard.sync.store import SharedStore

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[GameSnapshot], None]


def now_ms() -> int:
    return int(time.time() * 1000)


def new_instance_id(clock: Callable[[], int] = now_ms) -> str:
    """Return a fresh id such as ``1718000000000-a1b2c3``."""
    return f"{clock()}-{secrets.token_hex(3)}"


class ScoreboardInstance:
    """Serialized dispatch over a snapshot persisted in a SharedStore."""

    def __init__(
        self,
        store: SharedStore,
        instance_id: str | None = None,
        *,
        clock: Callable[[], int] | None = None,
        journal=None,
    ) -> None:
        self._store = store
        self._clock = clock or now_ms
        self.instance_id = instance_id or new_instance_id(self._clock)
        self._journal = journal
        self._state_lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._listeners: list[SnapshotListener] = []
        self._snapshot = codec.load_latest(store)
        # updated_at of the newest snapshot already in the store
        self._saved_at = self._snapshot.updated_at

    @property
    def store(self) -> SharedStore:
        return self._store

    @property
    def snapshot(self) -> GameSnapshot:
        with self._state_lock:
            return self._snapshot

    @property
    def clock(self) -> Callable[[], int]:
        return self._clock

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, action: Action) -> GameSnapshot:
        """Apply ``action`` and persist the result if anything changed."""
        with self._state_lock:
            before = self._snapshot
            after = reduce(before, action)
            if after == before:
                return before
            after = replace(after, updated_at=max(self._clock(), before.updated_at + 1))
            self._snapshot = after

        self._flush()
        if self._journal is not None:
            self._journal.log_action(action, after, self.instance_id)
        self._notify(after)
        return after

    def hydrate(self, incoming: GameSnapshot | None) -> bool:
        """Replace local state with ``incoming`` if it is strictly newer."""
        if incoming is None:
            return False
        with self._state_lock:
            current = self._snapshot
            if incoming.updated_at <= current.updated_at:
                logger.debug(
                    "Ignoring stale snapshot %d (local %d)",
                    incoming.updated_at, current.updated_at,
                )
                return False
            self._snapshot = reduce(current, Hydrate(snapshot=incoming))
            # already in the store; never write it back
            self._saved_at = max(self._saved_at, incoming.updated_at)
        logger.debug("Hydrated snapshot %d", incoming.updated_at)
        self._notify(incoming)
        return True

    def reload(self) -> bool:
        """Hydrate from whatever the store currently holds."""
        return self.hydrate(codec.load_latest(self._store))

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register ``listener``; returns a function that removes it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def close(self) -> None:
        self._listeners.clear()
        if self._journal is not None:
            self._journal.finalize_game(self.snapshot, self.instance_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _flush(self) -> None:
        # Always write the newest snapshot; a slower concurrent dispatch
        # must not overwrite it with an older one.
        with self._write_lock:
            with self._state_lock:
                latest = self._snapshot
                if latest.updated_at <= self._saved_at:
                    return
                self._saved_at = latest.updated_at
            codec.save(self._store, latest, source=self.instance_id)

    def _notify(self, snapshot: GameSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")
