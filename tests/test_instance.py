"""Tests for ScoreboardInstance — dispatch, persistence and hydration."""

import json
from dataclasses import replace

from courtboard.core.journal import ActionJournal
from courtboard.game import actions as a
from courtboard.game.models import default_snapshot
from courtboard.sync import codec
from courtboard.sync.instance import ScoreboardInstance, new_instance_id


class RecordingStore:
    """Wraps a store and records every set() call."""

    def __init__(self, inner):
        self.inner = inner
        self.writes = []

    def get(self, key):
        return self.inner.get(key)

    def set(self, key, value, *, source=None):
        self.writes.append((key, source))
        self.inner.set(key, value, source=source)

    def delete(self, key, *, source=None):
        self.inner.delete(key, source=source)

    def subscribe(self, callback, *, source=None):
        return self.inner.subscribe(callback, source=source)

    def close(self):
        self.inner.close()


class TestDispatch:
    def test_loads_defaults_from_empty_store(self, store, clock):
        inst = ScoreboardInstance(store, "alpha", clock=clock)
        assert inst.snapshot == default_snapshot()

    def test_loads_existing_snapshot(self, store, clock):
        saved = replace(default_snapshot(updated_at=77), action_log=("hello",))
        codec.save(store, saved)
        assert ScoreboardInstance(store, "alpha", clock=clock).snapshot == saved

    def test_change_is_stamped_and_saved(self, store, clock):
        inst = ScoreboardInstance(store, "alpha", clock=clock)
        s = inst.dispatch(a.AddPoints(team="A", points=2))
        assert s.updated_at == clock.now
        for key in codec.SNAPSHOT_KEYS:
            assert codec.decode(store.get(key)) == s

    def test_stamps_strictly_increase(self, store, clock):
        inst = ScoreboardInstance(store, "alpha", clock=clock)
        first = inst.dispatch(a.AddPoints(team="A", points=2))
        second = inst.dispatch(a.AddPoints(team="A", points=2))
        assert second.updated_at == first.updated_at + 1

    def test_noop_does_not_write(self, store, clock):
        recording = RecordingStore(store)
        inst = ScoreboardInstance(recording, "alpha", clock=clock)
        before = inst.snapshot
        assert inst.dispatch(a.EndOverlay()) is before
        assert inst.dispatch(a.Tick()) is before
        assert recording.writes == []

    def test_writes_carry_source(self, store, clock):
        recording = RecordingStore(store)
        inst = ScoreboardInstance(recording, "alpha", clock=clock)
        inst.dispatch(a.StartGame())
        assert recording.writes == [
            (codec.STORAGE_KEY_V5, "alpha"),
            (codec.STORAGE_KEY_V3, "alpha"),
        ]

    def test_listeners(self, store, clock):
        inst = ScoreboardInstance(store, "alpha", clock=clock)
        seen = []
        remove = inst.add_listener(seen.append)
        s = inst.dispatch(a.StartGame())
        remove()
        inst.dispatch(a.StopGame())
        assert seen == [s]

    def test_generated_id(self, store, clock):
        inst = ScoreboardInstance(store, clock=clock)
        assert inst.instance_id.startswith(f"{clock.now}-")
        assert new_instance_id(clock) != new_instance_id(clock)


class TestHydration:
    def test_newer_snapshot_replaces_local(self, store, clock):
        inst = ScoreboardInstance(store, "alpha", clock=clock)
        incoming = replace(default_snapshot(updated_at=clock.now + 5), action_log=("x",))
        assert inst.hydrate(incoming)
        assert inst.snapshot == incoming

    def test_older_or_equal_snapshot_ignored(self, store, clock):
        inst = ScoreboardInstance(store, "alpha", clock=clock)
        current = inst.dispatch(a.StartGame())
        assert not inst.hydrate(replace(default_snapshot(), updated_at=current.updated_at))
        assert not inst.hydrate(replace(default_snapshot(), updated_at=current.updated_at - 1))
        assert not inst.hydrate(None)
        assert inst.snapshot == current

    def test_hydration_is_not_written_back(self, store, clock):
        recording = RecordingStore(store)
        inst = ScoreboardInstance(recording, "alpha", clock=clock)
        inst.hydrate(default_snapshot(updated_at=clock.now + 10))
        assert recording.writes == []

    def test_reload_from_store(self, store, clock):
        inst = ScoreboardInstance(store, "alpha", clock=clock)
        newer = replace(default_snapshot(updated_at=clock.now + 1), action_log=("remote",))
        codec.save(store, newer, source="beta")
        assert inst.reload()
        assert inst.snapshot.action_log == ("remote",)

    def test_last_write_wins_across_instances(self, store, clock):
        base = default_snapshot(updated_at=100)
        codec.save(store, base)
        alpha = ScoreboardInstance(store, "alpha", clock=clock)
        beta = ScoreboardInstance(store, "beta", clock=clock)
        observer = ScoreboardInstance(store, "observer", clock=clock)
        assert alpha.snapshot.updated_at == beta.snapshot.updated_at == 100

        from_alpha = replace(
            base, state=replace(base.state, quarter=2), updated_at=150
        )
        codec.save(store, from_alpha, source="alpha")

        # beta sees the notification while still holding 100
        assert beta.hydrate(codec.decode(store.get(codec.STORAGE_KEY_V5)))
        assert beta.snapshot == from_alpha

        # a write built from beta's pre-notification copy loses everywhere
        assert observer.hydrate(from_alpha)
        stale = replace(base, action_log=("late edit",), updated_at=120)
        assert not observer.hydrate(stale)
        assert observer.snapshot == from_alpha


class TestJournal:
    def test_dispatch_is_journaled(self, store, clock, tmp_output):
        journal = ActionJournal(tmp_output, game_id="g1")
        inst = ScoreboardInstance(store, "alpha", clock=clock, journal=journal)
        inst.dispatch(a.AddPoints(team="B", points=3))
        inst.dispatch(a.EndOverlay())  # no-op, not journaled
        inst.close()

        lines = [json.loads(l) for l in journal.file_path.read_text().splitlines()]
        assert len(lines) == 2
        assert lines[0]["action"] == {"type": "ADD_POINTS", "team": "B", "points": 3,
                                      "player_id": None}
        assert lines[0]["instance_id"] == "alpha"
        assert lines[1]["record_type"] == "game_summary"
        assert lines[1]["teams"]["B"]["score"] == 3
        assert lines[1]["actions_logged"] == 1
