"""Scoreboard reducer — pure ``(snapshot, action) -> snapshot`` transitions.

``reduce`` is total: it never raises and never mutates its input. Actions
whose preconditions fail (unknown team, fouled-out player, sixth player on
the floor, starting a clock during an overlay, ...) return the input
snapshot unchanged. Every branch keeps these invariants:

* a team's ``fouls`` is recomputed from its players' ``fls`` whenever a
  player's fouls change or a player is edited/removed;
* at most five players per team are on court;
* a fouled-out player is never on court and never changes stats again.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Callable

from courtboard.core.formatting import normalize_hex_color
from courtboard.game import actions as a
from courtboard.game.highlights import maybe_player_highlight, maybe_team_comparison
from courtboard.game.log import with_log
from courtboard.game.models import (
    MAX_ON_COURT,
    TEAMS,
    TIMING_MODES,
    GameSnapshot,
    GameState,
    Overlay,
    PlayerRecord,
    StarPlayerHighlight,
    TeamRecord,
    other_team,
)

logger = logging.getLogger(__name__)

INCREMENTABLE_STATS = ("reb", "ast", "stl", "blk", "fls")
STAR_PLAYER_SECONDS = 10
DEFAULT_TIMEOUT_SECONDS = 60
_DEFAULT_TEAM_NAMES = {"A": "Home", "B": "Away"}


def reduce(snapshot: GameSnapshot, action: a.Action) -> GameSnapshot:
    """Apply ``action`` to ``snapshot`` and return the next snapshot."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        logger.debug("Ignoring unknown action %r", action)
        return snapshot
    if hasattr(action, "team") and action.team not in TEAMS:
        logger.debug("Ignoring %s for unknown team %r", action.type_name, action.team)
        return snapshot
    try:
        return handler(snapshot, action)
    except (TypeError, ValueError, AttributeError, OverflowError) as exc:
        # malformed payload fields (e.g. a string where a number belongs)
        logger.debug("Rejected malformed %s: %s", action.type_name, exc)
        return snapshot


# ----------------------------------------------------------------------
# Shared helpers
# ----------------------------------------------------------------------

def _replace_player(
    players: tuple[PlayerRecord, ...], updated: PlayerRecord
) -> tuple[PlayerRecord, ...]:
    return tuple(updated if p.id == updated.id else p for p in players)


def _on_court_count(players: tuple[PlayerRecord, ...]) -> int:
    return sum(1 for p in players if p.on_court)


def _update_team(snapshot: GameSnapshot, team: str, **changes) -> GameSnapshot:
    state = snapshot.state
    record = replace(state.team(team), **changes)
    return replace(snapshot, state=state.with_team(team, record))


def _recalc_team_fouls(snapshot: GameSnapshot, team: str) -> GameSnapshot:
    total = sum(p.fls for p in snapshot.players(team))
    return _update_team(snapshot, team, fouls=total)


def _set_possession(snapshot: GameSnapshot, team: str) -> GameSnapshot:
    state = snapshot.state
    should_run_shot = state.game_clock_running and not state.shot_violation
    return replace(
        snapshot,
        state=replace(
            state,
            possession=team,
            shot_clock_seconds=state.shot_clock_default,
            shot_violation=False,
            shot_clock_running=should_run_shot,
        ),
    )


def _reset_quarter(snapshot: GameSnapshot) -> GameSnapshot:
    state = snapshot.state
    return replace(
        snapshot,
        state=replace(
            state,
            game_clock_seconds=state.quarter_length_minutes * 60,
            shot_clock_seconds=state.shot_clock_default,
            game_clock_running=False,
            shot_clock_running=False,
            shot_violation=False,
            game_final=False,
            overlay=None,
            auto_cooldown_seconds=0,
            star_player=None,
            team_comparison=None,
        ),
    )


def _begin_overlay(
    snapshot: GameSnapshot, mode: str, label: str, seconds: int
) -> GameSnapshot:
    state = snapshot.state
    # a nested overlay keeps the outer one's resume decision
    resume = state.game_clock_running or (
        state.overlay is not None and state.overlay.resume_game
    )
    return replace(
        snapshot,
        state=replace(
            state,
            game_clock_running=False,
            shot_clock_running=False,
            overlay=Overlay(
                mode=mode,
                label=label.upper(),
                remaining_seconds=max(0, int(seconds)),
                resume_game=resume,
            ),
        ),
    )


def _end_overlay(snapshot: GameSnapshot) -> GameSnapshot:
    overlay = snapshot.state.overlay
    if overlay is None:
        return snapshot

    state = replace(snapshot.state, overlay=None)

    if overlay.mode == "halftime":
        if state.quarter == 2 and state.total_quarters >= 3:
            state = replace(
                state,
                quarter=3,
                game_clock_seconds=state.quarter_length_minutes * 60,
                shot_clock_seconds=state.shot_clock_default,
                possession="A",
                shot_violation=False,
            )
        return with_log(replace(snapshot, state=state), "Halftime ended.")

    state = replace(
        state,
        game_clock_running=overlay.resume_game,
        shot_clock_running=overlay.resume_game,
    )
    return with_log(replace(snapshot, state=state), "Timeout ended.")


def _count_down(highlight):
    if highlight is None or highlight.remaining_seconds <= 1:
        return None
    return replace(highlight, remaining_seconds=highlight.remaining_seconds - 1)


def _positive(value: int | None, fallback: int) -> int:
    if value is None:
        return fallback
    return max(1, int(value))


# ----------------------------------------------------------------------
# Scoring
# ----------------------------------------------------------------------

def _add_points(snapshot: GameSnapshot, action: a.AddPoints) -> GameSnapshot:
    state = snapshot.state
    points = int(action.points)
    if state.game_final or points == 0:
        return snapshot

    player = None
    if action.player_id:
        player = snapshot.find_player(action.team, action.player_id)
        if player is not None and player.fouled_out:
            return snapshot

    team_record = state.team(action.team)
    nxt = _update_team(
        snapshot, action.team, score=max(0, team_record.score + points)
    )

    if player is not None:
        player = replace(
            player,
            pts=max(0, player.pts + points),
            tpm=player.tpm + (1 if points == 3 else 0),
        )
        nxt = nxt.with_players(
            action.team, _replace_player(nxt.players(action.team), player)
        )

    if points > 0:
        team_name = nxt.state.team(action.team).name
        if player is not None:
            nxt = with_log(
                nxt,
                f"{player.name} #{player.number} hits {points} for {team_name} "
                f"({player.pts} pts)",
            )
        else:
            suffix = "" if points == 1 else "s"
            nxt = with_log(nxt, f"{team_name} scores {points} point{suffix}.")

        nxt = _set_possession(nxt, other_team(action.team))

        # NBA timing: the clock stops after a made basket
        if nxt.state.timing_mode == "NBA" and nxt.state.game_clock_running:
            nxt = replace(
                nxt,
                state=replace(
                    nxt.state, game_clock_running=False, shot_clock_running=False
                ),
            )

    if player is not None:
        nxt = maybe_player_highlight(nxt, action.team, player.id)
    return maybe_team_comparison(nxt)


def _add_fast_break_points(
    snapshot: GameSnapshot, action: a.AddFastBreakPoints
) -> GameSnapshot:
    points = int(action.points)
    if snapshot.state.game_final or points == 0:
        return snapshot
    record = snapshot.state.team(action.team)
    nxt = _update_team(
        snapshot,
        action.team,
        score=max(0, record.score + points),
        fast_break_points=max(0, record.fast_break_points + points),
    )
    nxt = with_log(nxt, f"{record.name} fast break +{points}")
    nxt = _set_possession(nxt, other_team(action.team))
    return maybe_team_comparison(nxt)


# ----------------------------------------------------------------------
# Teams and game setup
# ----------------------------------------------------------------------

def _set_team_name(snapshot: GameSnapshot, action: a.SetTeamName) -> GameSnapshot:
    name = (action.name or "").strip() or _DEFAULT_TEAM_NAMES[action.team]
    return _update_team(snapshot, action.team, name=name)


def _set_team_color(snapshot: GameSnapshot, action: a.SetTeamColor) -> GameSnapshot:
    record = snapshot.state.team(action.team)
    color = normalize_hex_color(action.color, fallback=record.color)
    if color == record.color:
        return snapshot
    nxt = _update_team(snapshot, action.team, color=color)
    return with_log(nxt, f"{record.name} color set to {color}")


def _set_team_logo(snapshot: GameSnapshot, action: a.SetTeamLogo) -> GameSnapshot:
    if action.logo_url is not None and not isinstance(action.logo_url, str):
        return snapshot
    return _update_team(snapshot, action.team, logo_url=action.logo_url or "")


def _build_live_players(
    team: str, roster: tuple[a.RosterEntry, ...]
) -> tuple[PlayerRecord, ...]:
    entries = roster or tuple(
        a.RosterEntry(name=f"Player {team}{n}", number=n) for n in range(1, 6)
    )
    players: list[PlayerRecord] = []
    used: set[str] = set()
    for idx, entry in enumerate(entries):
        player_id = entry.id if entry.id and entry.id not in used else f"{team}-{idx}"
        used.add(player_id)
        players.append(
            PlayerRecord(
                id=player_id,
                number=int(entry.number),
                name=entry.name,
                image_url=entry.image_url or "",
                on_court=idx < MAX_ON_COURT,
            )
        )
    return tuple(players)


def _load_game(snapshot: GameSnapshot, action: a.LoadGame) -> GameSnapshot:
    state = snapshot.state
    rules = action.rules or a.RuleOverrides()

    quarter_length = _positive(rules.quarter_length_minutes, state.quarter_length_minutes)
    total_quarters = _positive(rules.total_quarters, state.total_quarters)
    shot_default = _positive(rules.shot_clock_default, state.shot_clock_default)
    foul_limit = _positive(rules.foul_limit, state.foul_limit)
    timing_mode = (
        rules.timing_mode if rules.timing_mode in TIMING_MODES else state.timing_mode
    )

    def team_record(setup: a.TeamSetup, current: TeamRecord, team: str) -> TeamRecord:
        color = (
            normalize_hex_color(setup.color, fallback=current.color)
            if setup.color
            else current.color
        )
        return TeamRecord(
            name=setup.name or _DEFAULT_TEAM_NAMES[team],
            color=color,
            logo_url=setup.logo_url or "",
        )

    new_state = GameState(
        team_a=team_record(action.home, state.team_a, "A"),
        team_b=team_record(action.away, state.team_b, "B"),
        quarter_length_minutes=quarter_length,
        total_quarters=total_quarters,
        foul_limit=foul_limit,
        shot_clock_default=shot_default,
        game_clock_seconds=quarter_length * 60,
        shot_clock_seconds=shot_default,
        timing_mode=timing_mode,
    )
    nxt = replace(
        snapshot,
        state=new_state,
        players_a=_build_live_players("A", action.home.players),
        players_b=_build_live_players("B", action.away.players),
        action_log=(),
    )
    return with_log(
        nxt,
        f"New game loaded: {new_state.team_a.name} vs {new_state.team_b.name}",
    )


def _set_possession_action(
    snapshot: GameSnapshot, action: a.SetPossession
) -> GameSnapshot:
    return _set_possession(snapshot, action.team)


# ----------------------------------------------------------------------
# Clocks and periods
# ----------------------------------------------------------------------

def _start_game(snapshot: GameSnapshot, action: a.StartGame) -> GameSnapshot:
    if snapshot.state.overlay is not None:
        return snapshot
    return replace(
        snapshot,
        state=replace(
            snapshot.state,
            game_clock_running=True,
            shot_clock_running=True,
            game_final=False,
        ),
    )


def _stop_game(snapshot: GameSnapshot, action: a.StopGame) -> GameSnapshot:
    return replace(
        snapshot,
        state=replace(
            snapshot.state, game_clock_running=False, shot_clock_running=False
        ),
    )


def _finish_game(snapshot: GameSnapshot, action: a.FinishGame) -> GameSnapshot:
    return replace(
        snapshot,
        state=replace(
            snapshot.state,
            game_clock_running=False,
            shot_clock_running=False,
            game_final=True,
            overlay=None,
            star_player=None,
            team_comparison=None,
        ),
    )


def _start_shot(snapshot: GameSnapshot, action: a.StartShot) -> GameSnapshot:
    if snapshot.state.overlay is not None:
        return snapshot
    return replace(snapshot, state=replace(snapshot.state, shot_clock_running=True))


def _stop_shot(snapshot: GameSnapshot, action: a.StopShot) -> GameSnapshot:
    return replace(snapshot, state=replace(snapshot.state, shot_clock_running=False))


def _reset_quarter_action(
    snapshot: GameSnapshot, action: a.ResetQuarter
) -> GameSnapshot:
    return _reset_quarter(snapshot)


def _change_quarter(snapshot: GameSnapshot, target: int) -> GameSnapshot:
    state = snapshot.state
    target = max(1, min(state.total_quarters, target))
    if target == state.quarter:
        return snapshot
    return _reset_quarter(replace(snapshot, state=replace(state, quarter=target)))


def _prev_quarter(snapshot: GameSnapshot, action: a.PrevQuarter) -> GameSnapshot:
    return _change_quarter(snapshot, snapshot.state.quarter - 1)


def _next_quarter(snapshot: GameSnapshot, action: a.NextQuarter) -> GameSnapshot:
    return _change_quarter(snapshot, snapshot.state.quarter + 1)


def _reset_shot(snapshot: GameSnapshot, action: a.ResetShot) -> GameSnapshot:
    return replace(
        snapshot,
        state=replace(
            snapshot.state,
            shot_clock_seconds=max(0, int(action.seconds)),
            shot_clock_running=False,
            shot_violation=False,
        ),
    )


def _inc_foul(snapshot: GameSnapshot, action: a.IncFoul) -> GameSnapshot:
    record = snapshot.state.team(action.team)
    return _update_team(snapshot, action.team, fouls=record.fouls + 1)


# ----------------------------------------------------------------------
# Overlays
# ----------------------------------------------------------------------

def _open_timeout(snapshot: GameSnapshot, action: a.OpenTimeout) -> GameSnapshot:
    seconds = int(action.seconds)
    record = snapshot.state.team(action.team)
    nxt = _begin_overlay(snapshot, "timeout", f"{record.name} Timeout", seconds)
    nxt = _update_team(nxt, action.team, timeouts=max(0, record.timeouts - 1))
    kind = "30-second" if seconds == 30 else "full"
    return with_log(nxt, f"{record.name} takes a {kind} timeout")


def _use_timeout(snapshot: GameSnapshot, action: a.UseTimeout) -> GameSnapshot:
    return _open_timeout(
        snapshot, a.OpenTimeout(team=action.team, seconds=DEFAULT_TIMEOUT_SECONDS)
    )


def _start_halftime(snapshot: GameSnapshot, action: a.StartHalftime) -> GameSnapshot:
    minutes = max(1, math.floor(action.minutes))
    nxt = with_log(snapshot, f"Halftime begins ({minutes} minutes)")
    return _begin_overlay(nxt, "halftime", "Halftime", minutes * 60)


def _end_overlay_action(snapshot: GameSnapshot, action: a.EndOverlay) -> GameSnapshot:
    return _end_overlay(snapshot)


# ----------------------------------------------------------------------
# TV highlights
# ----------------------------------------------------------------------

def _show_star_player(snapshot: GameSnapshot, action: a.ShowStarPlayer) -> GameSnapshot:
    player = snapshot.find_player(action.team, action.player_id)
    if player is None:
        return snapshot
    team_name = snapshot.state.team(action.team).name
    nxt = replace(
        snapshot,
        state=replace(
            snapshot.state,
            star_player=StarPlayerHighlight(
                team=action.team,
                player_id=player.id,
                remaining_seconds=STAR_PLAYER_SECONDS,
                reason="Star Player",
                auto=False,
            ),
            team_comparison=None,
        ),
    )
    return with_log(nxt, f"TV Star Player: {player.name} #{player.number} ({team_name})")


def _dismiss_star_player(
    snapshot: GameSnapshot, action: a.DismissStarPlayer
) -> GameSnapshot:
    if not snapshot.state.highlight_active:
        return snapshot
    return replace(
        snapshot,
        state=replace(snapshot.state, star_player=None, team_comparison=None),
    )


# ----------------------------------------------------------------------
# Players
# ----------------------------------------------------------------------

def _inc_player_stat(snapshot: GameSnapshot, action: a.IncPlayerStat) -> GameSnapshot:
    if action.stat not in INCREMENTABLE_STATS:
        return snapshot
    player = snapshot.find_player(action.team, action.player_id)
    if player is None or player.fouled_out:
        return snapshot

    amount = int(action.amount)
    updated = replace(player, **{action.stat: max(0, getattr(player, action.stat) + amount)})
    fouled_out = action.stat == "fls" and updated.fls >= snapshot.state.foul_limit
    if fouled_out:
        updated = replace(updated, fouled_out=True, on_court=False)

    nxt = snapshot.with_players(
        action.team, _replace_player(snapshot.players(action.team), updated)
    )
    if action.stat == "fls":
        nxt = _recalc_team_fouls(nxt, action.team)
    else:
        sign = "+" if amount >= 0 else "-"
        nxt = with_log(
            nxt, f"{updated.name} #{updated.number} {sign}{action.stat.upper()}"
        )

    if fouled_out:
        nxt = with_log(nxt, f"{updated.name} #{updated.number} fouled out.")

    nxt = maybe_player_highlight(nxt, action.team, updated.id)
    return maybe_team_comparison(nxt)


def _set_player_on_court(
    snapshot: GameSnapshot, action: a.SetPlayerOnCourt
) -> GameSnapshot:
    players = snapshot.players(action.team)
    target = snapshot.find_player(action.team, action.player_id)
    if target is None or target.fouled_out:
        return snapshot
    on_court = bool(action.on_court)
    if on_court == target.on_court:
        return snapshot
    if on_court and _on_court_count(players) >= MAX_ON_COURT:
        return snapshot
    return snapshot.with_players(
        action.team, _replace_player(players, replace(target, on_court=on_court))
    )


def _substitute_player(
    snapshot: GameSnapshot, action: a.SubstitutePlayer
) -> GameSnapshot:
    players = snapshot.players(action.team)
    player_out = snapshot.find_player(action.team, action.player_out_id)
    player_in = snapshot.find_player(action.team, action.player_in_id)
    if (
        player_out is None
        or player_in is None
        or not player_out.on_court
        or player_in.on_court
        or player_in.fouled_out
    ):
        return snapshot

    players = _replace_player(players, replace(player_out, on_court=False))
    players = _replace_player(players, replace(player_in, on_court=True))
    nxt = snapshot.with_players(action.team, players)
    return with_log(
        nxt,
        f"{player_out.name} #{player_out.number} subbed out for "
        f"{player_in.name} #{player_in.number}.",
    )


def _next_player_id(players: tuple[PlayerRecord, ...], team: str) -> str:
    used = {p.id for p in players}
    idx = len(players)
    while f"{team}-{idx}" in used:
        idx += 1
    return f"{team}-{idx}"


def _add_player(snapshot: GameSnapshot, action: a.AddPlayer) -> GameSnapshot:
    if not isinstance(action.name, str):
        return snapshot
    players = snapshot.players(action.team)
    number = action.number
    if isinstance(number, bool) or not isinstance(number, (int, float)) or not math.isfinite(number):
        number = 0
    on_court = bool(action.on_court) and _on_court_count(players) < MAX_ON_COURT
    player = PlayerRecord(
        id=_next_player_id(players, action.team),
        number=int(number),
        name=action.name,
        on_court=on_court,
    )
    return snapshot.with_players(action.team, players + (player,))


def _update_player(snapshot: GameSnapshot, action: a.UpdatePlayer) -> GameSnapshot:
    players = snapshot.players(action.team)
    target = snapshot.find_player(action.team, action.player_id)
    if target is None:
        return snapshot

    if action.name is not None and not isinstance(action.name, str):
        return snapshot

    on_court = target.on_court if action.on_court is None else bool(action.on_court)
    if on_court and not target.on_court and (
        target.fouled_out or _on_court_count(players) >= MAX_ON_COURT
    ):
        return snapshot

    updated = replace(
        target,
        name=action.name if action.name is not None else target.name,
        number=int(action.number) if action.number is not None else target.number,
        on_court=on_court,
    )
    nxt = snapshot.with_players(action.team, _replace_player(players, updated))
    return _recalc_team_fouls(nxt, action.team)


def _delete_player(snapshot: GameSnapshot, action: a.DeletePlayer) -> GameSnapshot:
    players = snapshot.players(action.team)
    remaining = tuple(p for p in players if p.id != action.player_id)
    if len(remaining) == len(players):
        return snapshot
    return _recalc_team_fouls(snapshot.with_players(action.team, remaining), action.team)


def _add_log(snapshot: GameSnapshot, action: a.AddLog) -> GameSnapshot:
    return with_log(snapshot, str(action.text))


# ----------------------------------------------------------------------
# Time
# ----------------------------------------------------------------------

def _tick(snapshot: GameSnapshot, action: a.Tick) -> GameSnapshot:
    state = snapshot.state
    cooldown = max(0, state.auto_cooldown_seconds - 1)
    star_player = _count_down(state.star_player)
    team_comparison = _count_down(state.team_comparison)

    if state.overlay is not None:
        remaining = max(0, state.overlay.remaining_seconds - 1)
        nxt = replace(
            snapshot,
            state=replace(
                state,
                overlay=replace(state.overlay, remaining_seconds=remaining),
                auto_cooldown_seconds=cooldown,
                star_player=star_player,
                team_comparison=team_comparison,
            ),
        )
        if remaining <= 0:
            return _end_overlay(nxt)
        return nxt

    game_next = (
        max(0, state.game_clock_seconds - 1)
        if state.game_clock_running
        else state.game_clock_seconds
    )
    shot_next = (
        max(0, state.shot_clock_seconds - 1)
        if state.shot_clock_running
        else state.shot_clock_seconds
    )
    reached_end = state.game_clock_running and game_next == 0

    new_state = replace(
        state,
        game_clock_seconds=game_next,
        shot_clock_seconds=shot_next,
        game_clock_running=state.game_clock_running if game_next > 0 else False,
        shot_clock_running=(
            state.shot_clock_running if game_next > 0 and shot_next > 0 else False
        ),
        shot_violation=True if shot_next == 0 else state.shot_violation,
        auto_cooldown_seconds=cooldown,
        star_player=star_player,
        team_comparison=team_comparison,
    )

    nxt = replace(snapshot, state=new_state)
    if state.game_clock_running:
        for team in TEAMS:
            nxt = nxt.with_players(
                team,
                tuple(
                    replace(p, seconds_played=p.seconds_played + 1) if p.on_court else p
                    for p in nxt.players(team)
                ),
            )

    if reached_end and state.quarter < state.total_quarters:
        advanced = state.quarter + 1
        nxt = replace(
            nxt,
            state=replace(
                new_state,
                quarter=advanced,
                game_clock_seconds=state.quarter_length_minutes * 60,
                shot_clock_seconds=state.shot_clock_default,
                game_clock_running=False,
                shot_clock_running=False,
                shot_violation=False,
            ),
        )
        nxt = with_log(nxt, f"Quarter ended. Advanced to Q{advanced}.")
    elif reached_end:
        nxt = replace(nxt, state=replace(new_state, game_final=True))
        nxt = with_log(nxt, "Final buzzer.")

    return nxt


def _hydrate(snapshot: GameSnapshot, action: a.Hydrate) -> GameSnapshot:
    if not isinstance(action.snapshot, GameSnapshot):
        return snapshot
    return action.snapshot


_HANDLERS: dict[type, Callable[[GameSnapshot, a.Action], GameSnapshot]] = {
    a.AddPoints: _add_points,
    a.AddFastBreakPoints: _add_fast_break_points,
    a.SetTeamName: _set_team_name,
    a.SetTeamColor: _set_team_color,
    a.SetTeamLogo: _set_team_logo,
    a.LoadGame: _load_game,
    a.SetPossession: _set_possession_action,
    a.StartGame: _start_game,
    a.StopGame: _stop_game,
    a.FinishGame: _finish_game,
    a.StartShot: _start_shot,
    a.StopShot: _stop_shot,
    a.ResetQuarter: _reset_quarter_action,
    a.PrevQuarter: _prev_quarter,
    a.NextQuarter: _next_quarter,
    a.ResetShot: _reset_shot,
    a.IncFoul: _inc_foul,
    a.UseTimeout: _use_timeout,
    a.OpenTimeout: _open_timeout,
    a.StartHalftime: _start_halftime,
    a.EndOverlay: _end_overlay_action,
    a.ShowStarPlayer: _show_star_player,
    a.DismissStarPlayer: _dismiss_star_player,
    a.IncPlayerStat: _inc_player_stat,
    a.SetPlayerOnCourt: _set_player_on_court,
    a.SubstitutePlayer: _substitute_player,
    a.AddPlayer: _add_player,
    a.UpdatePlayer: _update_player,
    a.DeletePlayer: _delete_player,
    a.AddLog: _add_log,
    a.Tick: _tick,
    a.Hydrate: _hydrate,
}
