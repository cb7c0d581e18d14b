"""Game snapshot records.

All records are frozen dataclasses; the reducer produces new instances
with ``dataclasses.replace`` and never mutates in place. Sequences are
tuples so snapshots compare and hash structurally.

Hierarchy:
    GameSnapshot
    ├── GameState
    │   ├── TeamRecord (team_a, team_b)
    │   ├── Overlay | None
    │   ├── StarPlayerHighlight | None
    │   └── TeamComparison | None
    └── players: {"A": (PlayerRecord, ...), "B": (...)}
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

TEAMS = ("A", "B")
TIMING_MODES = ("NBA", "FIBA")
OVERLAY_MODES = ("timeout", "halftime")
COMPARISON_METRICS = ("rebounds", "fastBreakPoints")

COUNTING_STATS = ("pts", "reb", "ast", "stl", "blk", "tpm", "fls")

MAX_ON_COURT = 5
ACTION_LOG_LIMIT = 250
DEFAULT_TIMEOUTS = 3

DEFAULT_ROSTER_A = (
    (1, "Player A1"),
    (3, "Player A2"),
    (5, "Player A3"),
    (7, "Player A4"),
    (9, "Player A5"),
    (11, "Player A6"),
    (13, "Player A7"),
)

DEFAULT_ROSTER_B = (
    (2, "Player B1"),
    (4, "Player B2"),
    (6, "Player B3"),
    (8, "Player B4"),
    (10, "Player B5"),
    (12, "Player B6"),
    (14, "Player B7"),
)


@dataclass(frozen=True)
class TeamRecord:
    name: str
    score: int = 0
    fouls: int = 0
    timeouts: int = DEFAULT_TIMEOUTS
    fast_break_points: int = 0
    color: str = ""
    logo_url: str = ""


@dataclass(frozen=True)
class PlayerRecord:
    id: str
    number: int
    name: str
    image_url: str = ""
    pts: int = 0
    reb: int = 0
    ast: int = 0
    stl: int = 0
    blk: int = 0
    tpm: int = 0
    fls: int = 0
    seconds_played: int = 0
    on_court: bool = False
    fouled_out: bool = False


@dataclass(frozen=True)
class Overlay:
    """A clock-suspending timeout or halftime."""

    mode: str  # "timeout" | "halftime"
    label: str
    remaining_seconds: int
    resume_game: bool = False


@dataclass(frozen=True)
class StarPlayerHighlight:
    team: str
    player_id: str
    remaining_seconds: int
    reason: str = ""
    auto: bool = False


@dataclass(frozen=True)
class TeamComparison:
    metric: str  # "rebounds" | "fastBreakPoints"
    team_a_value: int
    team_b_value: int
    leading_team: str | None
    remaining_seconds: int


@dataclass(frozen=True)
class GameState:
    team_a: TeamRecord = field(
        default_factory=lambda: TeamRecord(name="Home", color="#FFB347")
    )
    team_b: TeamRecord = field(
        default_factory=lambda: TeamRecord(name="Away", color="#7EC4CF")
    )
    possession: str = "A"
    quarter: int = 1
    total_quarters: int = 4
    quarter_length_minutes: int = 10
    foul_limit: int = 5
    game_clock_seconds: int = 10 * 60
    shot_clock_default: int = 24
    shot_clock_seconds: int = 24
    game_clock_running: bool = False
    shot_clock_running: bool = False
    timing_mode: str = "NBA"
    shot_violation: bool = False
    game_final: bool = False
    overlay: Overlay | None = None
    auto_cooldown_seconds: int = 0
    auto_seen: tuple[str, ...] = ()
    star_player: StarPlayerHighlight | None = None
    team_comparison: TeamComparison | None = None

    def team(self, team: str) -> TeamRecord:
        return self.team_a if team == "A" else self.team_b

    def with_team(self, team: str, record: TeamRecord) -> GameState:
        if team == "A":
            return replace(self, team_a=record)
        return replace(self, team_b=record)

    @property
    def highlight_active(self) -> bool:
        return self.star_player is not None or self.team_comparison is not None


@dataclass(frozen=True)
class GameSnapshot:
    """The unit of persistence and synchronization."""

    state: GameState = field(default_factory=GameState)
    players_a: tuple[PlayerRecord, ...] = ()
    players_b: tuple[PlayerRecord, ...] = ()
    action_log: tuple[str, ...] = ()
    updated_at: int = 0

    def players(self, team: str) -> tuple[PlayerRecord, ...]:
        return self.players_a if team == "A" else self.players_b

    def with_players(
        self, team: str, players: tuple[PlayerRecord, ...]
    ) -> GameSnapshot:
        if team == "A":
            return replace(self, players_a=tuple(players))
        return replace(self, players_b=tuple(players))

    def find_player(self, team: str, player_id: str) -> PlayerRecord | None:
        for p in self.players(team):
            if p.id == player_id:
                return p
        return None

    def all_players(self) -> tuple[PlayerRecord, ...]:
        return self.players_a + self.players_b


def other_team(team: str) -> str:
    return "B" if team == "A" else "A"


def build_roster(
    team: str, entries: tuple[tuple[int, str], ...] | list
) -> tuple[PlayerRecord, ...]:
    """Build fresh players from ``(number, name)`` pairs; first five start."""
    return tuple(
        PlayerRecord(
            id=f"{team}-{idx}",
            number=number,
            name=name,
            on_court=idx < MAX_ON_COURT,
        )
        for idx, (number, name) in enumerate(entries)
    )


def default_snapshot(updated_at: int = 0) -> GameSnapshot:
    """Fresh snapshot with the default teams, rules and rosters."""
    return GameSnapshot(
        state=GameState(),
        players_a=build_roster("A", DEFAULT_ROSTER_A),
        players_b=build_roster("B", DEFAULT_ROSTER_B),
        action_log=(),
        updated_at=updated_at,
    )
