"""InstanceCoordinator — leader election, remote commands and hydration.

Several instances may share one store; exactly one of them should drive
the real-time clock. Every ``tick_interval_ms`` each coordinator reads the
ownership record under ``TICK_OWNER_KEY``. When the record is absent,
malformed, stale (older than ``stale_after_ms``) or already its own, the
coordinator claims it by writing ``{"id": ..., "ts": now}`` and dispatches
one ``Tick``. Otherwise it stays passive.

This is a soft lock: two instances can both claim around the staleness
boundary and double-tick once. The next heartbeat settles it.

A second, faster timer polls ``COMMAND_KEY``. Only a fresh leader
consumes a command: it deletes the key, then dispatches the mapped action.
Unknown commands are deleted and dropped.

The coordinator also subscribes to the store and hands any foreign write
to either snapshot key to ``ScoreboardInstance.hydrate``.
"""

from __future__ import annotations

import json
import logging
import math
import threading
from dataclasses import dataclass

from courtboard.game.actions import Action, Tick
from courtboard.game.commands import command_to_action
from courtboard.sync import codec
from courtboard.sync.instance import ScoreboardInstance
from courtboard.sync.store import SharedStore, Subscription
from courtboard.sync.timers import IntervalTimer, PeriodicTimer, TimerFactory

logger = logging.getLogger(__name__)

TICK_OWNER_KEY = "scoreboard_tick_owner_v1"
COMMAND_KEY = "scoreboard_command"

TICK_INTERVAL_MS = 1000
STALE_AFTER_MS = 2200
COMMAND_POLL_MS = 150


@dataclass(frozen=True)
class OwnerRecord:
    id: str
    ts: int


def read_owner(store: SharedStore) -> OwnerRecord | None:
    """Return the ownership record, or None when absent or malformed."""
    raw = store.get(TICK_OWNER_KEY)
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        logger.debug("Malformed tick owner record: %r", raw)
        return None
    if not isinstance(parsed, dict):
        return None
    owner_id = parsed.get("id")
    ts = parsed.get("ts")
    if (
        not isinstance(owner_id, str)
        or isinstance(ts, bool)
        or not isinstance(ts, (int, float))
        or not math.isfinite(ts)
    ):
        return None
    return OwnerRecord(id=owner_id, ts=int(ts))


def send_command(store: SharedStore, command: str, *, source: str | None = None) -> None:
    """Post a remote command for the current leader to pick up."""
    store.set(COMMAND_KEY, command, source=source)


class InstanceCoordinator:
    """Drives one ScoreboardInstance against its shared store."""

    def __init__(
        self,
        instance: ScoreboardInstance,
        *,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        stale_after_ms: int = STALE_AFTER_MS,
        command_poll_ms: int = COMMAND_POLL_MS,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        self._instance = instance
        self._store = instance.store
        self._clock = instance.clock
        self._tick_interval_ms = tick_interval_ms
        self._stale_after_ms = stale_after_ms
        self._command_poll_ms = command_poll_ms
        self._timer_factory = timer_factory or _interval_timer
        self._heartbeat_timer: PeriodicTimer | None = None
        self._command_timer: PeriodicTimer | None = None
        self._subscription: Subscription | None = None
        self._was_leader = False
        self._lock = threading.Lock()

    @property
    def instance_id(self) -> str:
        return self._instance.instance_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        with self._lock:
            if self._heartbeat_timer is not None:
                return
            self._subscription = self._store.subscribe(
                self._on_store_change, source=self.instance_id,
            )
            self._heartbeat_timer = self._timer_factory(
                self._tick_interval_ms / 1000, self.heartbeat,
            )
            self._command_timer = self._timer_factory(
                self._command_poll_ms / 1000, self.poll_commands,
            )
            self._heartbeat_timer.start()
            self._command_timer.start()
        logger.debug("Coordinator %s started", self.instance_id)

    def stop(self) -> None:
        """Cancel timers, drop the subscription, and release leadership."""
        with self._lock:
            timers = [t for t in (self._heartbeat_timer, self._command_timer) if t]
            subscription = self._subscription
            self._heartbeat_timer = None
            self._command_timer = None
            self._subscription = None
        for timer in timers:
            timer.cancel()
        if subscription is not None:
            subscription.close()

        owner = read_owner(self._store)
        if owner is not None and owner.id == self.instance_id:
            self._store.delete(TICK_OWNER_KEY, source=self.instance_id)
            logger.info("Instance %s released tick ownership", self.instance_id)
        self._was_leader = False

    def __enter__(self) -> InstanceCoordinator:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Leader election
    # ------------------------------------------------------------------

    def is_leader(self) -> bool:
        """True when the store holds a fresh record owned by this instance."""
        owner = read_owner(self._store)
        return (
            owner is not None
            and owner.id == self.instance_id
            and not self._is_stale(owner)
        )

    def heartbeat(self) -> bool:
        """Run one election round; claim and tick when allowed.

        Returns True when this instance claimed the record this round.
        """
        owner = read_owner(self._store)
        now = self._clock()
        claim = (
            owner is None
            or now - owner.ts > self._stale_after_ms
            or owner.id == self.instance_id
        )
        if not claim:
            self._set_leader(False, owner)
            return False

        self._store.set(
            TICK_OWNER_KEY,
            json.dumps({"id": self.instance_id, "ts": now}),
            source=self.instance_id,
        )
        self._set_leader(True, owner)
        self._instance.dispatch(Tick())
        return True

    # ------------------------------------------------------------------
    # Remote commands
    # ------------------------------------------------------------------

    def poll_commands(self) -> Action | None:
        """Consume one pending command if this instance is the fresh leader."""
        if not self.is_leader():
            return None
        command = self._store.get(COMMAND_KEY)
        if not command:
            return None
        self._store.delete(COMMAND_KEY, source=self.instance_id)

        action = command_to_action(command)
        if action is None:
            logger.debug("Ignoring unknown command %r", command)
            return None
        logger.debug("Applying remote command %r", command)
        self._instance.dispatch(action)
        return action

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_stale(self, owner: OwnerRecord) -> bool:
        return self._clock() - owner.ts > self._stale_after_ms

    def _set_leader(self, leader: bool, previous: OwnerRecord | None) -> None:
        if leader == self._was_leader:
            return
        self._was_leader = leader
        if leader:
            if previous is not None and previous.id != self.instance_id:
                logger.info(
                    "Instance %s took over stale tick ownership from %s",
                    self.instance_id, previous.id,
                )
            else:
                logger.info("Instance %s is now tick owner", self.instance_id)
        else:
            holder = previous.id if previous is not None else "nobody"
            logger.info("Instance %s lost tick ownership to %s", self.instance_id, holder)

    def _on_store_change(self, key: str, value: str | None) -> None:
        if key not in codec.SNAPSHOT_KEYS or not value:
            return
        self._instance.hydrate(codec.decode(value))


def _interval_timer(interval_s: float, callback) -> IntervalTimer:
    return IntervalTimer(interval_s, callback, name="coordinator-timer")
