"""Persisted payload codec.

Snapshots are stored as JSON text using the camelCase field names of the
browser storage format, under two compatibility keys that are
always written together. Decoding never raises: anything that is not a
recognizable payload yields ``None`` and the caller falls back to
defaults. Recognizable payloads are merged field by field with a default
snapshot (player -> team -> state -> root), so records written before a
field existed still decode into a complete snapshot.
"""

from __future__ import annotations

import json
import logging
import math

import jsonschema

from courtboard.core.schemas import package_schema
from courtboard.game.models import (
    ACTION_LOG_LIMIT,
    COMPARISON_METRICS,
    OVERLAY_MODES,
    TEAMS,
    TIMING_MODES,
    GameSnapshot,
    GameState,
    Overlay,
    PlayerRecord,
    StarPlayerHighlight,
    TeamComparison,
    TeamRecord,
    default_snapshot,
)
from courtboard.game.highlights import SEEN_LIMIT

logger = logging.getLogger(__name__)

STORAGE_KEY_V5 = "basketball_scoreboard_state_v5b"
STORAGE_KEY_V3 = "basketball_scoreboard_state_v3"
SNAPSHOT_KEYS = (STORAGE_KEY_V5, STORAGE_KEY_V3)


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------

def _team_to_dict(team: TeamRecord) -> dict:
    return {
        "name": team.name,
        "score": team.score,
        "fouls": team.fouls,
        "timeouts": team.timeouts,
        "fastBreakPoints": team.fast_break_points,
        "color": team.color,
        "logoUrl": team.logo_url,
    }


def _player_to_dict(p: PlayerRecord) -> dict:
    return {
        "id": p.id,
        "number": p.number,
        "name": p.name,
        "imageUrl": p.image_url,
        "pts": p.pts,
        "reb": p.reb,
        "ast": p.ast,
        "stl": p.stl,
        "blk": p.blk,
        "tpm": p.tpm,
        "fls": p.fls,
        "secondsPlayed": p.seconds_played,
        "onCourt": p.on_court,
        "fouledOut": p.fouled_out,
    }


def _state_to_dict(s: GameState) -> dict:
    overlay = s.overlay
    star = s.star_player
    comparison = s.team_comparison
    return {
        "teamA": _team_to_dict(s.team_a),
        "teamB": _team_to_dict(s.team_b),
        "possession": s.possession,
        "quarter": s.quarter,
        "totalQuarters": s.total_quarters,
        "quarterLengthMinutes": s.quarter_length_minutes,
        "foulLimit": s.foul_limit,
        "gameClockSeconds": s.game_clock_seconds,
        "shotClockDefault": s.shot_clock_default,
        "shotClockSeconds": s.shot_clock_seconds,
        "gameClockRunning": s.game_clock_running,
        "shotClockRunning": s.shot_clock_running,
        "timingMode": s.timing_mode,
        "shotViolation": s.shot_violation,
        "gameFinal": s.game_final,
        "overlayMode": overlay.mode if overlay else None,
        "overlayLabel": overlay.label if overlay else "",
        "overlayRemainingSeconds": overlay.remaining_seconds if overlay else 0,
        "overlayResumeGame": overlay.resume_game if overlay else False,
        "tvAutoCooldownSeconds": s.auto_cooldown_seconds,
        "tvAutoSeen": list(s.auto_seen),
        "tvStarPlayer": None if star is None else {
            "team": star.team,
            "playerId": star.player_id,
            "remainingSeconds": star.remaining_seconds,
            "reason": star.reason,
            "auto": star.auto,
        },
        "tvTeamComparison": None if comparison is None else {
            "metric": comparison.metric,
            "teamAValue": comparison.team_a_value,
            "teamBValue": comparison.team_b_value,
            "leadingTeam": comparison.leading_team,
            "remainingSeconds": comparison.remaining_seconds,
        },
    }


def to_payload(snapshot: GameSnapshot) -> dict:
    """Return the JSON-ready payload dict for a snapshot."""
    return {
        "state": _state_to_dict(snapshot.state),
        "players": {
            "A": [_player_to_dict(p) for p in snapshot.players_a],
            "B": [_player_to_dict(p) for p in snapshot.players_b],
        },
        "actionLog": list(snapshot.action_log),
        "updatedAt": snapshot.updated_at,
    }


def encode(snapshot: GameSnapshot) -> str:
    return json.dumps(to_payload(snapshot))


# ----------------------------------------------------------------------
# Decoding: typed field readers
# ----------------------------------------------------------------------

def _int(value, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(value)


def _bool(value, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _str(value, default: str) -> str:
    return value if isinstance(value, str) else default


def _choice(value, choices: tuple, default):
    return value if value in choices else default


def _dict(value) -> dict:
    return value if isinstance(value, dict) else {}


# ----------------------------------------------------------------------
# Decoding: layered merge with defaults
# ----------------------------------------------------------------------

def _merge_player(raw: dict, base: PlayerRecord) -> PlayerRecord:
    return PlayerRecord(
        id=_str(raw.get("id"), base.id),
        number=_int(raw.get("number"), base.number),
        name=_str(raw.get("name"), base.name),
        image_url=_str(raw.get("imageUrl"), base.image_url),
        pts=_int(raw.get("pts"), base.pts),
        reb=_int(raw.get("reb"), base.reb),
        ast=_int(raw.get("ast"), base.ast),
        stl=_int(raw.get("stl"), base.stl),
        blk=_int(raw.get("blk"), base.blk),
        tpm=_int(raw.get("tpm"), 0),
        fls=_int(raw.get("fls"), base.fls),
        seconds_played=_int(raw.get("secondsPlayed"), base.seconds_played),
        on_court=_bool(raw.get("onCourt"), base.on_court),
        fouled_out=_bool(raw.get("fouledOut"), base.fouled_out),
    )


def _merge_players(raw, fallback: tuple[PlayerRecord, ...]) -> tuple[PlayerRecord, ...]:
    """Merge each stored player over the default at the same index.

    A missing or non-list value yields the default roster. Entries past
    the end of the default roster merge over its first player.
    """
    if not isinstance(raw, list):
        return fallback
    merged = []
    for idx, entry in enumerate(raw):
        if not isinstance(entry, dict):
            continue
        base = fallback[idx] if idx < len(fallback) else fallback[0]
        merged.append(_merge_player(entry, base))
    return tuple(merged)


def _merge_team(raw: dict, base: TeamRecord) -> TeamRecord:
    return TeamRecord(
        name=_str(raw.get("name"), base.name),
        score=_int(raw.get("score"), base.score),
        fouls=_int(raw.get("fouls"), base.fouls),
        timeouts=_int(raw.get("timeouts"), base.timeouts),
        fast_break_points=_int(raw.get("fastBreakPoints"), base.fast_break_points),
        color=_str(raw.get("color"), base.color),
        logo_url=_str(raw.get("logoUrl"), base.logo_url),
    )


def _merge_overlay(raw: dict) -> Overlay | None:
    mode = raw.get("overlayMode")
    if mode not in OVERLAY_MODES:
        return None
    return Overlay(
        mode=mode,
        label=_str(raw.get("overlayLabel"), ""),
        remaining_seconds=_int(raw.get("overlayRemainingSeconds"), 0),
        resume_game=_bool(raw.get("overlayResumeGame"), False),
    )


def _merge_star_player(raw) -> StarPlayerHighlight | None:
    if not isinstance(raw, dict):
        return None
    if raw.get("team") not in TEAMS or not isinstance(raw.get("playerId"), str):
        return None
    return StarPlayerHighlight(
        team=raw["team"],
        player_id=raw["playerId"],
        remaining_seconds=_int(raw.get("remainingSeconds"), 0),
        reason=_str(raw.get("reason"), ""),
        auto=_bool(raw.get("auto"), False),
    )


def _merge_team_comparison(raw) -> TeamComparison | None:
    if not isinstance(raw, dict) or raw.get("metric") not in COMPARISON_METRICS:
        return None
    return TeamComparison(
        metric=raw["metric"],
        team_a_value=_int(raw.get("teamAValue"), 0),
        team_b_value=_int(raw.get("teamBValue"), 0),
        leading_team=_choice(raw.get("leadingTeam"), TEAMS, None),
        remaining_seconds=_int(raw.get("remainingSeconds"), 0),
    )


def _merge_state(raw: dict, base: GameState) -> GameState:
    seen = raw.get("tvAutoSeen")
    auto_seen = (
        tuple(k for k in seen if isinstance(k, str))[:SEEN_LIMIT]
        if isinstance(seen, list)
        else base.auto_seen
    )
    return GameState(
        team_a=_merge_team(_dict(raw.get("teamA")), base.team_a),
        team_b=_merge_team(_dict(raw.get("teamB")), base.team_b),
        possession=_choice(raw.get("possession"), TEAMS, base.possession),
        quarter=_int(raw.get("quarter"), base.quarter),
        total_quarters=_int(raw.get("totalQuarters"), base.total_quarters),
        quarter_length_minutes=_int(raw.get("quarterLengthMinutes"), base.quarter_length_minutes),
        foul_limit=_int(raw.get("foulLimit"), base.foul_limit),
        game_clock_seconds=_int(raw.get("gameClockSeconds"), base.game_clock_seconds),
        shot_clock_default=_int(raw.get("shotClockDefault"), base.shot_clock_default),
        shot_clock_seconds=_int(raw.get("shotClockSeconds"), base.shot_clock_seconds),
        game_clock_running=_bool(raw.get("gameClockRunning"), base.game_clock_running),
        shot_clock_running=_bool(raw.get("shotClockRunning"), base.shot_clock_running),
        timing_mode=_choice(raw.get("timingMode"), TIMING_MODES, base.timing_mode),
        shot_violation=_bool(raw.get("shotViolation"), base.shot_violation),
        game_final=_bool(raw.get("gameFinal"), base.game_final),
        overlay=_merge_overlay(raw),
        auto_cooldown_seconds=_int(raw.get("tvAutoCooldownSeconds"), base.auto_cooldown_seconds),
        auto_seen=auto_seen,
        star_player=_merge_star_player(raw.get("tvStarPlayer")),
        team_comparison=_merge_team_comparison(raw.get("tvTeamComparison")),
    )


def from_payload(parsed: object) -> GameSnapshot | None:
    """Build a snapshot from an already-parsed payload object, or None."""
    try:
        jsonschema.validate(parsed, package_schema("sync/payload_schema.json"))
    except jsonschema.ValidationError as e:
        logger.debug("Rejected payload: %s", e.message)
        return None

    base = default_snapshot()
    players = _dict(parsed.get("players"))
    log = parsed.get("actionLog")
    return GameSnapshot(
        state=_merge_state(parsed["state"], base.state),
        players_a=_merge_players(players.get("A"), base.players_a),
        players_b=_merge_players(players.get("B"), base.players_b),
        action_log=(
            tuple(str(line) for line in log)[:ACTION_LOG_LIMIT]
            if isinstance(log, list)
            else ()
        ),
        updated_at=_int(parsed.get("updatedAt"), 0),
    )


def decode(raw: str | None) -> GameSnapshot | None:
    """Parse stored text into a snapshot; None when absent or malformed."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        logger.debug("Rejected payload text: %s", e)
        return None
    return from_payload(parsed)


# ----------------------------------------------------------------------
# Store helpers
# ----------------------------------------------------------------------

def load_latest(store) -> GameSnapshot:
    """Return the fresher of the two stored snapshots, or the defaults.

    Ties go to the current (v5) key.
    """
    current = decode(store.get(STORAGE_KEY_V5))
    legacy = decode(store.get(STORAGE_KEY_V3))
    if current is None and legacy is None:
        return default_snapshot()
    if current is None:
        return legacy
    if legacy is None:
        return current
    return current if current.updated_at >= legacy.updated_at else legacy


def save(store, snapshot: GameSnapshot, source: str | None = None) -> None:
    """Write the snapshot to both compatibility keys."""
    raw = encode(snapshot)
    for key in SNAPSHOT_KEYS:
        store.set(key, raw, source=source)
