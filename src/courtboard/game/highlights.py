"""Auto-highlight detector.

Runs after stat-changing actions. Two independent paths:

* player milestones: the highest reached threshold of a tracked stat,
  fired only for the strict game-wide leader of that stat;
* team comparisons: rebound and fast-break margins, deduplicated by a
  coarse margin bucket.

Both are gated by "nothing currently showing" and a shared cooldown, and
every fired key is remembered in ``GameState.auto_seen`` so the same
milestone never fires twice.
"""

from __future__ import annotations

from dataclasses import replace

from courtboard.game.log import with_log
from courtboard.game.models import (
    GameSnapshot,
    GameState,
    StarPlayerHighlight,
    TeamComparison,
)

HIGHLIGHT_COOLDOWN_SECONDS = 22
PLAYER_HIGHLIGHT_SECONDS = 10
TEAM_HIGHLIGHT_SECONDS = 10
SEEN_LIMIT = 400

# (stat, milestones, reason template) in evaluation order
_PLAYER_MILESTONES = (
    ("pts", (10, 15, 20, 25, 30, 35, 40), "High Scorer {value} PTS"),
    ("reb", (8, 10, 12, 15, 18, 20), "Top Rebounder {value} REB"),
    ("stl", (3, 4, 5, 6), "Steals Impact {value} STL"),
    ("blk", (3, 4, 5, 6), "Rim Protection {value} BLK"),
    ("tpm", (3, 4, 5, 6, 7, 8), "Deep Range {value} 3PM"),
)

# (metric, min margin, min combined, bucket size, log label)
_REBOUND_RULE = ("rebounds", 6, 18, 3, "Rebounds edge")
_FAST_BREAK_RULE = ("fastBreakPoints", 4, 8, 2, "Fast break edge")


def highest_milestone(value: int, milestones: tuple[int, ...]) -> int:
    """Return the largest milestone <= value, or 0 if none reached."""
    result = 0
    for m in milestones:
        if value >= m:
            result = m
    return result


def can_auto_highlight(state: GameState) -> bool:
    return not state.highlight_active and state.auto_cooldown_seconds <= 0


def mark_seen(state: GameState, key: str) -> GameState:
    """Move ``key`` to the front of the seen list, keeping it bounded."""
    seen = (key,) + tuple(k for k in state.auto_seen if k != key)
    return replace(state, auto_seen=seen[:SEEN_LIMIT])


def _is_strict_leader(snapshot: GameSnapshot, player_id: str, stat: str, value: int) -> bool:
    for other in snapshot.all_players():
        if other.id == player_id:
            continue
        if getattr(other, stat) >= value:
            return False
    return True


def maybe_player_highlight(
    snapshot: GameSnapshot, team: str, player_id: str
) -> GameSnapshot:
    """Fire the first eligible milestone highlight for one player."""
    if not can_auto_highlight(snapshot.state):
        return snapshot
    player = snapshot.find_player(team, player_id)
    if player is None:
        return snapshot

    for stat, milestones, reason in _PLAYER_MILESTONES:
        value = getattr(player, stat)
        milestone = highest_milestone(value, milestones)
        if milestone <= 0:
            continue
        if not _is_strict_leader(snapshot, player.id, stat, value):
            continue
        key = f"player:{team}:{player.id}:{stat}:{milestone}"
        if key in snapshot.state.auto_seen:
            continue

        team_name = snapshot.state.team(team).name
        label = reason.format(value=value)
        state = replace(
            mark_seen(snapshot.state, key),
            auto_cooldown_seconds=HIGHLIGHT_COOLDOWN_SECONDS,
            star_player=StarPlayerHighlight(
                team=team,
                player_id=player.id,
                remaining_seconds=PLAYER_HIGHLIGHT_SECONDS,
                reason=label,
                auto=True,
            ),
            team_comparison=None,
        )
        return with_log(
            replace(snapshot, state=state),
            f"TV Auto Highlight: {player.name} #{player.number} ({team_name}) - {label}",
        )

    return snapshot


def _team_rebounds(snapshot: GameSnapshot, team: str) -> int:
    return sum(p.reb for p in snapshot.players(team))


def _evaluate_team_rule(
    snapshot: GameSnapshot, rule: tuple, value_a: int, value_b: int
) -> GameSnapshot | None:
    metric, min_margin, min_combined, bucket_size, label = rule
    if value_a == value_b:
        return None
    leader = "A" if value_a > value_b else "B"
    margin = abs(value_a - value_b)
    if margin < min_margin or value_a + value_b < min_combined:
        return None

    bucket = (margin // bucket_size) * bucket_size
    key = f"team:{metric}:{leader}:{bucket}"
    if key in snapshot.state.auto_seen:
        return None

    state = replace(
        mark_seen(snapshot.state, key),
        auto_cooldown_seconds=HIGHLIGHT_COOLDOWN_SECONDS,
        star_player=None,
        team_comparison=TeamComparison(
            metric=metric,
            team_a_value=value_a,
            team_b_value=value_b,
            leading_team=leader,
            remaining_seconds=TEAM_HIGHLIGHT_SECONDS,
        ),
    )
    leader_name = snapshot.state.team(leader).name
    return with_log(
        replace(snapshot, state=state),
        f"TV Auto Team Comparison: {label} for {leader_name}",
    )


def maybe_team_comparison(snapshot: GameSnapshot) -> GameSnapshot:
    """Fire a rebound or fast-break comparison, rebounds first."""
    if not can_auto_highlight(snapshot.state):
        return snapshot

    fired = _evaluate_team_rule(
        snapshot,
        _REBOUND_RULE,
        _team_rebounds(snapshot, "A"),
        _team_rebounds(snapshot, "B"),
    )
    if fired is not None:
        return fired

    fired = _evaluate_team_rule(
        snapshot,
        _FAST_BREAK_RULE,
        snapshot.state.team_a.fast_break_points,
        snapshot.state.team_b.fast_break_points,
    )
    return fired if fired is not None else snapshot
