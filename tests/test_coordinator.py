"""Tests for InstanceCoordinator — heartbeat election and remote commands."""

import json
import logging

import pytest

from courtboard.game import actions as a
from courtboard.sync.coordinator import (
    COMMAND_KEY,
    TICK_OWNER_KEY,
    InstanceCoordinator,
    OwnerRecord,
    read_owner,
    send_command,
)
from courtboard.sync.instance import ScoreboardInstance


@pytest.fixture
def make_coordinator(store, clock, timers):
    def _make(instance_id: str) -> InstanceCoordinator:
        instance = ScoreboardInstance(store, instance_id, clock=clock)
        return InstanceCoordinator(instance, timer_factory=timers)
    return _make


def _game_clock(coordinator):
    return coordinator._instance.snapshot.state.game_clock_seconds


class TestOwnerRecord:
    def test_absent(self, store):
        assert read_owner(store) is None

    def test_valid(self, store):
        store.set(TICK_OWNER_KEY, json.dumps({"id": "x", "ts": 5}))
        assert read_owner(store) == OwnerRecord(id="x", ts=5)

    @pytest.mark.parametrize("raw", [
        "garbage",
        "[]",
        json.dumps({"id": 5, "ts": 1}),
        json.dumps({"id": "x"}),
        json.dumps({"id": "x", "ts": "1"}),
        json.dumps({"id": "x", "ts": True}),
        '{"id": "x", "ts": Infinity}',
        '{"id": "x", "ts": NaN}',
        "[" * 100_000 + "]" * 100_000,
    ])
    def test_malformed_is_absent(self, store, raw):
        store.set(TICK_OWNER_KEY, raw)
        assert read_owner(store) is None


class TestElection:
    def test_first_heartbeat_claims(self, make_coordinator, store, clock):
        alpha = make_coordinator("alpha")
        assert alpha.heartbeat()
        assert read_owner(store) == OwnerRecord(id="alpha", ts=clock.now)
        assert alpha.is_leader()

    def test_claim_dispatches_tick(self, make_coordinator):
        alpha = make_coordinator("alpha")
        alpha._instance.dispatch(a.StartGame())
        alpha.heartbeat()
        assert _game_clock(alpha) == 599

    def test_fresh_owner_blocks_others(self, make_coordinator, clock):
        alpha = make_coordinator("alpha")
        beta = make_coordinator("beta")
        alpha.heartbeat()
        clock.advance(2200)
        assert not beta.heartbeat()
        assert not beta.is_leader()

    def test_stale_owner_is_replaced(self, make_coordinator, store, clock):
        alpha = make_coordinator("alpha")
        beta = make_coordinator("beta")
        alpha.heartbeat()
        clock.advance(2201)
        assert not alpha.is_leader()
        assert beta.heartbeat()
        assert read_owner(store).id == "beta"
        assert not alpha.heartbeat()

    def test_owner_keeps_renewing(self, make_coordinator, store, clock):
        alpha = make_coordinator("alpha")
        alpha.heartbeat()
        clock.advance(1000)
        assert alpha.heartbeat()
        assert read_owner(store).ts == clock.now

    def test_malformed_record_is_claimed(self, make_coordinator, store):
        store.set(TICK_OWNER_KEY, "{not json")
        assert make_coordinator("alpha").heartbeat()

    def test_only_leader_ticks(self, make_coordinator, clock):
        alpha = make_coordinator("alpha")
        beta = make_coordinator("beta")
        alpha.start()
        beta.start()
        alpha._instance.dispatch(a.StartGame())
        for _ in range(3):
            clock.advance(1000)
            alpha.heartbeat()
            beta.heartbeat()
        assert _game_clock(alpha) == 597
        # beta follows through hydration, never by ticking itself
        assert _game_clock(beta) == 597
        alpha.stop()
        beta.stop()

    def test_leadership_change_is_logged(self, make_coordinator, clock, caplog):
        alpha = make_coordinator("alpha")
        beta = make_coordinator("beta")
        with caplog.at_level(logging.INFO, logger="courtboard.sync.coordinator"):
            alpha.heartbeat()
            clock.advance(5000)
            beta.heartbeat()
        assert "alpha is now tick owner" in caplog.text
        assert "beta took over stale tick ownership from alpha" in caplog.text


class TestLifecycle:
    def test_start_creates_timers(self, make_coordinator, timers):
        alpha = make_coordinator("alpha")
        alpha.start()
        assert sorted(t.interval_s for t in timers.timers) == [0.15, 1.0]
        assert all(t.started for t in timers.timers)
        alpha.stop()

    def test_heartbeat_timer_drives_election(self, make_coordinator, store, timers):
        alpha = make_coordinator("alpha")
        alpha.start()
        timers.by_interval(1.0).fire()
        assert read_owner(store).id == "alpha"
        alpha.stop()

    def test_stop_releases_ownership(self, make_coordinator, store, timers):
        alpha = make_coordinator("alpha")
        alpha.start()
        alpha.heartbeat()
        alpha.stop()
        assert store.get(TICK_OWNER_KEY) is None
        assert all(t.cancelled for t in timers.timers)

    def test_stop_leaves_foreign_record(self, make_coordinator, store):
        alpha = make_coordinator("alpha")
        beta = make_coordinator("beta")
        alpha.heartbeat()
        beta.start()
        beta.stop()
        assert read_owner(store).id == "alpha"

    def test_successor_claims_immediately_after_release(self, make_coordinator):
        alpha = make_coordinator("alpha")
        beta = make_coordinator("beta")
        alpha.heartbeat()
        alpha.stop()
        assert beta.heartbeat()

    def test_stopped_coordinator_stops_hydrating(self, make_coordinator):
        alpha = make_coordinator("alpha")
        beta = make_coordinator("beta")
        beta.start()
        beta.stop()
        alpha._instance.dispatch(a.AddPoints(team="A", points=2))
        assert beta._instance.snapshot.state.team_a.score == 0

    def test_context_manager(self, make_coordinator, store):
        alpha = make_coordinator("alpha")
        with alpha:
            alpha.heartbeat()
            assert alpha.is_leader()
        assert store.get(TICK_OWNER_KEY) is None


class TestRemoteCommands:
    def test_leader_consumes_command(self, make_coordinator, store):
        alpha = make_coordinator("alpha")
        alpha.heartbeat()
        send_command(store, "startGame")
        assert alpha.poll_commands() == a.StartGame()
        assert store.get(COMMAND_KEY) is None
        assert alpha._instance.snapshot.state.game_clock_running

    def test_command_applied_exactly_once(self, make_coordinator, store):
        alpha = make_coordinator("alpha")
        alpha.heartbeat()
        send_command(store, "foulA")
        alpha.poll_commands()
        assert alpha.poll_commands() is None
        assert alpha._instance.snapshot.state.team_a.fouls == 1

    def test_follower_ignores_command(self, make_coordinator, store):
        alpha = make_coordinator("alpha")
        beta = make_coordinator("beta")
        alpha.heartbeat()
        send_command(store, "startGame")
        assert beta.poll_commands() is None
        assert store.get(COMMAND_KEY) == "startGame"

    def test_stale_leader_does_not_consume(self, make_coordinator, store, clock):
        alpha = make_coordinator("alpha")
        alpha.heartbeat()
        clock.advance(2201)
        send_command(store, "startGame")
        assert alpha.poll_commands() is None
        assert store.get(COMMAND_KEY) == "startGame"

    def test_unknown_command_is_discarded(self, make_coordinator, store):
        alpha = make_coordinator("alpha")
        alpha.heartbeat()
        before = alpha._instance.snapshot
        send_command(store, "dance")
        assert alpha.poll_commands() is None
        assert store.get(COMMAND_KEY) is None
        assert alpha._instance.snapshot is before

    def test_timeout_command(self, make_coordinator, store):
        alpha = make_coordinator("alpha")
        alpha.heartbeat()
        send_command(store, "timeoutB")
        alpha.poll_commands()
        overlay = alpha._instance.snapshot.state.overlay
        assert overlay.mode == "timeout"
        assert overlay.remaining_seconds == 60

    def test_command_timer_polls(self, make_coordinator, store, timers):
        alpha = make_coordinator("alpha")
        alpha.start()
        alpha.heartbeat()
        send_command(store, "reset14")
        timers.by_interval(0.15).fire()
        assert alpha._instance.snapshot.state.shot_clock_seconds == 14
        alpha.stop()
