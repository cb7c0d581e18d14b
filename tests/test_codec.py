"""Tests for the persisted payload codec."""

import json
from dataclasses import replace

import pytest

from courtboard.game import actions as a
from courtboard.game.models import default_snapshot
from courtboard.game.reducer import reduce
from courtboard.sync import codec


def _busy_snapshot():
    """A snapshot exercising overlays, highlights, roster edits and the log."""
    s = default_snapshot(updated_at=42)
    steps = [
        a.StartGame(),
        a.AddPoints(team="A", points=3, player_id="A-0"),
        a.IncPlayerStat(team="B", player_id="B-1", stat="fls", amount=2),
        a.SetTeamColor(team="A", color="#123"),
        a.DeletePlayer(team="B", player_id="B-6"),
        a.AddPlayer(team="A", name="Rookie", number=0),
        a.StartGame(),
        a.OpenTimeout(team="B", seconds=30),
        a.Tick(),
        a.ShowStarPlayer(team="A", player_id="A-0"),
    ]
    for action in steps:
        s = reduce(s, action)
    return s


class TestRoundTrip:
    def test_default_snapshot(self):
        s = default_snapshot(updated_at=7)
        assert codec.decode(codec.encode(s)) == s

    def test_busy_snapshot(self):
        s = _busy_snapshot()
        assert s.state.overlay is not None
        assert s.state.star_player is not None
        assert codec.decode(codec.encode(s)) == s

    def test_team_comparison(self):
        s = reduce(default_snapshot(), a.AddFastBreakPoints(team="B", points=8))
        assert s.state.team_comparison is not None
        assert codec.decode(codec.encode(s)) == s

    def test_short_roster_after_load_game(self):
        s = reduce(default_snapshot(), a.LoadGame(
            home=a.TeamSetup(name="H", players=(a.RosterEntry(name="Solo", number=1),)),
            away=a.TeamSetup(name="V"),
        ))
        decoded = codec.decode(codec.encode(s))
        assert len(decoded.players_a) == 1
        assert decoded == s

    def test_non_string_fields_never_enter_state(self):
        s = default_snapshot(updated_at=3)
        for action in (
            a.SetTeamLogo(team="A", logo_url=5),
            a.AddPlayer(team="B", name=None, number=4),
            a.UpdatePlayer(team="A", player_id="A-1", name=12),
        ):
            s = reduce(s, action)
        assert codec.decode(codec.encode(s)) == s


class TestWireFormat:
    def test_camel_case_fields(self):
        payload = codec.to_payload(_busy_snapshot())
        state = payload["state"]
        assert state["overlayMode"] == "timeout"
        assert state["overlayLabel"] == "AWAY TIMEOUT"
        assert state["tvStarPlayer"]["playerId"] == "A-0"
        assert state["teamA"]["color"] == "#112233"
        assert payload["players"]["A"][0]["imageUrl"] == ""
        assert payload["updatedAt"] == 42


class TestDefaultsMerge:
    def test_missing_fields_take_defaults(self):
        raw = json.dumps({
            "state": {
                "teamA": {"name": "Legacy", "score": 12},
                "teamB": {},
                "gameClockSeconds": 300,
                "shotClockSeconds": 10,
            },
            "updatedAt": 99,
        })
        s = codec.decode(raw)
        assert s.state.team_a.name == "Legacy"
        assert s.state.team_a.score == 12
        assert s.state.team_a.timeouts == 3
        assert s.state.team_a.color == "#FFB347"
        assert s.state.team_b.name == "Away"
        assert s.state.game_clock_seconds == 300
        assert s.state.total_quarters == 4
        assert s.state.overlay is None
        assert s.players_a == default_snapshot().players_a
        assert s.updated_at == 99

    def test_player_fields_padded_from_default(self):
        raw = json.dumps({
            "state": {"teamA": {}, "teamB": {}, "gameClockSeconds": 1, "shotClockSeconds": 1},
            "players": {"A": [{"id": "A-0", "pts": 9}], "B": []},
        })
        s = codec.decode(raw)
        player = s.players_a[0]
        assert player.pts == 9
        assert player.name == "Player A1"
        assert player.number == 1
        assert player.tpm == 0
        assert s.players_b == ()

    def test_wrong_types_fall_back(self):
        raw = json.dumps({
            "state": {
                "teamA": {"score": "ten", "name": 5},
                "teamB": {"fouls": None, "timeouts": 2.0},
                "gameClockSeconds": 100,
                "shotClockSeconds": 5,
                "possession": "C",
                "timingMode": "NCAA",
                "gameClockRunning": "yes",
                "overlayMode": "intermission",
            },
        })
        s = codec.decode(raw)
        assert s.state.team_a.score == 0
        assert s.state.team_a.name == "Home"
        assert s.state.team_b.fouls == 0
        assert s.state.team_b.timeouts == 2
        assert s.state.possession == "A"
        assert s.state.timing_mode == "NBA"
        assert not s.state.game_clock_running
        assert s.state.overlay is None

    def test_missing_updated_at_is_zero(self):
        raw = json.dumps({
            "state": {"teamA": {}, "teamB": {}, "gameClockSeconds": 1, "shotClockSeconds": 1},
        })
        assert codec.decode(raw).updated_at == 0


class TestMalformed:
    @pytest.mark.parametrize("raw", [
        None,
        "",
        "not json",
        "[]",
        "42",
        '{"players": {}}',
        '{"state": {"teamA": {}, "teamB": {}}}',
        '{"state": {"teamA": 1, "teamB": {}, "gameClockSeconds": 1, "shotClockSeconds": 1}}',
        '{"state": {"teamA": {}, "teamB": {}, "gameClockSeconds": "1", "shotClockSeconds": 1}}',
    ])
    def test_decode_returns_none(self, raw):
        assert codec.decode(raw) is None

    def test_deeply_nested_text(self):
        assert codec.decode("[" * 200_000 + "]" * 200_000) is None

    def test_load_latest_survives_deeply_nested_text(self, store):
        store.set(codec.STORAGE_KEY_V5, "[" * 200_000 + "]" * 200_000)
        assert codec.load_latest(store) == default_snapshot()


class TestStoreHelpers:
    def test_save_writes_both_keys(self, store):
        s = default_snapshot(updated_at=5)
        codec.save(store, s)
        assert store.get(codec.STORAGE_KEY_V5) == store.get(codec.STORAGE_KEY_V3)
        assert codec.decode(store.get(codec.STORAGE_KEY_V3)) == s

    def test_load_latest_empty_store(self, store):
        assert codec.load_latest(store) == default_snapshot()

    def test_load_latest_prefers_newer(self, store):
        old = default_snapshot(updated_at=10)
        new = replace(default_snapshot(updated_at=20), action_log=("[Q1 - 10:00] new",))
        store.set(codec.STORAGE_KEY_V5, codec.encode(old))
        store.set(codec.STORAGE_KEY_V3, codec.encode(new))
        assert codec.load_latest(store) == new

    def test_load_latest_tie_goes_to_current_key(self, store):
        current = replace(default_snapshot(updated_at=10), action_log=("v5",))
        legacy = replace(default_snapshot(updated_at=10), action_log=("v3",))
        store.set(codec.STORAGE_KEY_V5, codec.encode(current))
        store.set(codec.STORAGE_KEY_V3, codec.encode(legacy))
        assert codec.load_latest(store).action_log == ("v5",)

    def test_load_latest_skips_malformed_key(self, store):
        legacy = default_snapshot(updated_at=3)
        store.set(codec.STORAGE_KEY_V5, "{broken")
        store.set(codec.STORAGE_KEY_V3, codec.encode(legacy))
        assert codec.load_latest(store) == legacy
