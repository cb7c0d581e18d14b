"""Scoreboard actions — one frozen dataclass per action kind.

The set is closed: ``reduce`` dispatches on the concrete class and treats
anything it does not know as the identity transition. ``ACTION_TYPES``
maps the wire name (``ADD_POINTS`` etc.) to its class for the parser and
the journal.
"""

from __future__ import annotations

from dataclasses import dataclass

from courtboard.game.models import GameSnapshot


@dataclass(frozen=True)
class RosterEntry:
    name: str
    number: int
    image_url: str = ""
    id: str | None = None


@dataclass(frozen=True)
class TeamSetup:
    """One side of a ``LoadGame`` action."""

    name: str
    players: tuple[RosterEntry, ...] = ()
    color: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True)
class RuleOverrides:
    quarter_length_minutes: int | None = None
    total_quarters: int | None = None
    shot_clock_default: int | None = None
    foul_limit: int | None = None
    timing_mode: str | None = None


class Action:
    """Marker base for every scoreboard action."""

    type_name: str = ""


@dataclass(frozen=True)
class AddPoints(Action):
    team: str
    points: int
    player_id: str | None = None
    type_name = "ADD_POINTS"


@dataclass(frozen=True)
class AddFastBreakPoints(Action):
    team: str
    points: int
    type_name = "ADD_FAST_BREAK_POINTS"


@dataclass(frozen=True)
class SetTeamName(Action):
    team: str
    name: str
    type_name = "SET_TEAM_NAME"


@dataclass(frozen=True)
class SetTeamColor(Action):
    team: str
    color: str
    type_name = "SET_TEAM_COLOR"


@dataclass(frozen=True)
class SetTeamLogo(Action):
    team: str
    logo_url: str
    type_name = "SET_TEAM_LOGO"


@dataclass(frozen=True)
class LoadGame(Action):
    home: TeamSetup
    away: TeamSetup
    rules: RuleOverrides | None = None
    type_name = "LOAD_GAME"


@dataclass(frozen=True)
class SetPossession(Action):
    team: str
    type_name = "SET_POSSESSION"


@dataclass(frozen=True)
class StartGame(Action):
    type_name = "START_GAME"


@dataclass(frozen=True)
class StopGame(Action):
    type_name = "STOP_GAME"


@dataclass(frozen=True)
class FinishGame(Action):
    type_name = "FINISH_GAME"


@dataclass(frozen=True)
class StartShot(Action):
    type_name = "START_SHOT"


@dataclass(frozen=True)
class StopShot(Action):
    type_name = "STOP_SHOT"


@dataclass(frozen=True)
class ResetQuarter(Action):
    type_name = "RESET_QUARTER"


@dataclass(frozen=True)
class PrevQuarter(Action):
    type_name = "PREV_QUARTER"


@dataclass(frozen=True)
class NextQuarter(Action):
    type_name = "NEXT_QUARTER"


@dataclass(frozen=True)
class ResetShot(Action):
    seconds: int
    type_name = "RESET_SHOT"


@dataclass(frozen=True)
class IncFoul(Action):
    team: str
    type_name = "INC_FOUL"


@dataclass(frozen=True)
class UseTimeout(Action):
    team: str
    type_name = "USE_TIMEOUT"


@dataclass(frozen=True)
class OpenTimeout(Action):
    team: str
    seconds: int
    type_name = "OPEN_TIMEOUT"


@dataclass(frozen=True)
class StartHalftime(Action):
    minutes: float
    type_name = "START_HALFTIME"


@dataclass(frozen=True)
class EndOverlay(Action):
    manual: bool = False
    type_name = "END_OVERLAY"


@dataclass(frozen=True)
class ShowStarPlayer(Action):
    team: str
    player_id: str
    type_name = "SHOW_TV_STAR_PLAYER"


@dataclass(frozen=True)
class DismissStarPlayer(Action):
    type_name = "DISMISS_TV_STAR_PLAYER"


@dataclass(frozen=True)
class IncPlayerStat(Action):
    team: str
    player_id: str
    stat: str  # "reb" | "ast" | "stl" | "blk" | "fls"
    amount: int = 1
    type_name = "INC_PLAYER_STAT"


@dataclass(frozen=True)
class SetPlayerOnCourt(Action):
    team: str
    player_id: str
    on_court: bool
    type_name = "SET_PLAYER_ON_COURT"


@dataclass(frozen=True)
class SubstitutePlayer(Action):
    team: str
    player_out_id: str
    player_in_id: str
    type_name = "SUBSTITUTE_PLAYER"


@dataclass(frozen=True)
class AddPlayer(Action):
    team: str
    name: str
    number: int
    on_court: bool = False
    type_name = "ADD_PLAYER"


@dataclass(frozen=True)
class UpdatePlayer(Action):
    team: str
    player_id: str
    name: str | None = None
    number: int | None = None
    on_court: bool | None = None
    type_name = "UPDATE_PLAYER"


@dataclass(frozen=True)
class DeletePlayer(Action):
    team: str
    player_id: str
    type_name = "DELETE_PLAYER"


@dataclass(frozen=True)
class AddLog(Action):
    text: str
    type_name = "ADD_LOG"


@dataclass(frozen=True)
class Tick(Action):
    """Synthetic one-second time advance dispatched by the leader."""

    type_name = "TICK"


@dataclass(frozen=True)
class Hydrate(Action):
    snapshot: GameSnapshot
    type_name = "HYDRATE"


ACTION_TYPES: dict[str, type[Action]] = {
    cls.type_name: cls
    for cls in (
        AddPoints, AddFastBreakPoints, SetTeamName, SetTeamColor,
        SetTeamLogo, LoadGame, SetPossession, StartGame, StopGame,
        FinishGame, StartShot, StopShot, ResetQuarter, PrevQuarter,
        NextQuarter, ResetShot, IncFoul, UseTimeout, OpenTimeout,
        StartHalftime, EndOverlay, ShowStarPlayer, DismissStarPlayer,
        IncPlayerStat, SetPlayerOnCourt, SubstitutePlayer, AddPlayer,
        UpdatePlayer, DeletePlayer, AddLog, Tick, Hydrate,
    )
}
