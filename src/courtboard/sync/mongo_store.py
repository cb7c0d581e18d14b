"""MongoStore — SharedStore backed by a MongoDB collection.

Lets scoreboard instances in different processes or hosts share state.
Each key is one document ``{_id: key, value: str, source: str, rev: int}``.
Change notification is done by polling: every subscription runs a daemon
thread that re-reads the collection and reports keys whose value changed
since the previous pass.

If the initial connection fails the store disables itself: reads return
None and writes are dropped. All pymongo errors are caught and logged as
warnings and never reach the caller.
"""

from __future__ import annotations

import logging
import threading

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from courtboard.sync.store import ChangeCallback, SharedStore, Subscription

logger = logging.getLogger(__name__)

_DEFAULT_POLL_INTERVAL_S = 0.25


class _ChangePoller:
    """Tracks the last seen value per key for one subscriber."""

    def __init__(
        self,
        store: MongoStore,
        callback: ChangeCallback,
        source: str | None,
    ) -> None:
        self._store = store
        self._callback = callback
        self._source = source
        self._seen: dict[str, str] = store._read_all_values()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self, interval_s: float) -> None:
        self._thread = threading.Thread(
            target=self._run, args=(interval_s,), daemon=True,
            name="mongo-store-poller",
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=5)

    def poll_once(self) -> None:
        docs = self._store._read_all_docs()
        if docs is None:
            return
        current = {d["_id"]: d for d in docs}

        for key, doc in current.items():
            value = doc.get("value")
            if self._seen.get(key) == value:
                continue
            self._seen[key] = value
            if self._source is not None and doc.get("source") == self._source:
                continue
            self._deliver(key, value)

        for key in [k for k in self._seen if k not in current]:
            del self._seen[key]
            self._deliver(key, None)

    def _deliver(self, key: str, value: str | None) -> None:
        try:
            self._callback(key, value)
        except Exception:
            logger.exception("Store subscriber failed for key %s", key)

    def _run(self, interval_s: float) -> None:
        while not self._stop.wait(interval_s):
            self.poll_once()


class MongoStore(SharedStore):
    """Key-value store in one MongoDB collection.

    ``poll_interval_s=0`` disables the background poller threads; call
    ``poll()`` to deliver pending notifications by hand.
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        collection: str = "kv",
        *,
        poll_interval_s: float = _DEFAULT_POLL_INTERVAL_S,
    ) -> None:
        self._poll_interval_s = poll_interval_s
        self._pollers: list[_ChangePoller] = []
        self._lock = threading.Lock()
        self._disabled = False
        self._client = None
        self._collection = None

        try:
            self._client = MongoClient(uri, serverSelectionTimeoutMS=5000)
            self._client.admin.command("ping")
        except PyMongoError as exc:
            logger.warning("MongoDB connection failed, store disabled: %s", exc)
            self._disabled = True
            return

        self._collection = self._client[db_name][collection]

    @property
    def disabled(self) -> bool:
        return self._disabled

    # ------------------------------------------------------------------
    # SharedStore
    # ------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        if self._disabled:
            return None
        try:
            doc = self._collection.find_one({"_id": key})
        except PyMongoError as exc:
            logger.warning("Failed to read %s: %s", key, exc)
            return None
        return doc.get("value") if doc else None

    def set(self, key: str, value: str, *, source: str | None = None) -> None:
        if self._disabled:
            return
        try:
            self._collection.update_one(
                {"_id": key},
                {"$set": {"value": value, "source": source}, "$inc": {"rev": 1}},
                upsert=True,
            )
        except PyMongoError as exc:
            logger.warning("Failed to write %s: %s", key, exc)

    def delete(self, key: str, *, source: str | None = None) -> None:
        if self._disabled:
            return
        try:
            self._collection.delete_one({"_id": key})
        except PyMongoError as exc:
            logger.warning("Failed to delete %s: %s", key, exc)

    def subscribe(
        self, callback: ChangeCallback, *, source: str | None = None
    ) -> Subscription:
        poller = _ChangePoller(self, callback, source)
        with self._lock:
            self._pollers.append(poller)
        if self._poll_interval_s > 0 and not self._disabled:
            poller.start(self._poll_interval_s)

        def _remove() -> None:
            poller.stop()
            with self._lock:
                if poller in self._pollers:
                    self._pollers.remove(poller)

        return Subscription(_remove)

    def poll(self) -> None:
        """Run one notification pass for every subscription."""
        with self._lock:
            pollers = list(self._pollers)
        for poller in pollers:
            poller.poll_once()

    def close(self) -> None:
        with self._lock:
            pollers = list(self._pollers)
            self._pollers.clear()
        for poller in pollers:
            poller.stop()
        if self._client is not None:
            self._client.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read_all_docs(self) -> list[dict] | None:
        if self._disabled:
            return None
        try:
            return list(self._collection.find({}, {"value": 1, "source": 1}))
        except PyMongoError as exc:
            logger.warning("Failed to poll store: %s", exc)
            return None

    def _read_all_values(self) -> dict[str, str]:
        docs = self._read_all_docs() or []
        return {d["_id"]: d.get("value") for d in docs}
