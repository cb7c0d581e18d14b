"""Live terminal scoreboard.

Renders a GameSnapshot as a rich renderable: header with clocks, team
score panel, overlay and TV highlight banners, box scores and the recent
action log. ``watch`` keeps a ``rich.live.Live`` display in sync with a
ScoreboardInstance.
"""

from __future__ import annotations

import time

from rich.align import Align
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from courtboard.core.formatting import format_clock, format_minutes, normalize_hex_color
from courtboard.game.models import TEAMS, GameSnapshot, PlayerRecord

REFRESH_RATE = 0.25
LOG_LINES = 10

_METRIC_LABELS = {"rebounds": "Rebounds", "fastBreakPoints": "Fast Break Points"}


def team_style(snapshot: GameSnapshot, team: str) -> str:
    return f"bold {normalize_hex_color(snapshot.state.team(team).color)}"


def build_header(snapshot: GameSnapshot, leader: bool | None = None) -> Panel:
    """Clocks, quarter and possession."""
    s = snapshot.state
    title = Text()
    if s.game_final:
        title.append("FINAL  ", style="bold red")
    elif s.game_clock_running:
        title.append("LIVE  ", style="bold green")
    else:
        title.append("PAUSED  ", style="bold yellow")
    title.append(s.team_a.name, style=team_style(snapshot, "A"))
    title.append("  vs  ", style="dim")
    title.append(s.team_b.name, style=team_style(snapshot, "B"))

    sub = Text()
    sub.append(f"Q{s.quarter}/{s.total_quarters}", style="bold")
    sub.append("  |  ", style="dim")
    sub.append(format_clock(s.game_clock_seconds), style="bold white")
    sub.append("  |  ", style="dim")
    shot_style = "bold red" if s.shot_violation else "bold yellow"
    sub.append(f"Shot {s.shot_clock_seconds}", style=shot_style)
    sub.append("  |  ", style="dim")
    sub.append("Poss ", style="dim")
    sub.append(s.team(s.possession).name, style=team_style(snapshot, s.possession))
    sub.append("  |  ", style="dim")
    sub.append(s.timing_mode, style="dim")
    if leader is not None:
        sub.append("  |  ", style="dim")
        sub.append("tick owner" if leader else "follower", style="dim italic")

    return Panel(
        Group(Align.center(title), Align.center(sub)),
        border_style="red" if s.game_final else "bright_white",
        padding=(0, 1),
    )


def build_score_panel(snapshot: GameSnapshot) -> Panel:
    table = Table(show_edge=False, expand=True)
    table.add_column("Team", no_wrap=True)
    table.add_column("Score", justify="right")
    table.add_column("Fouls", justify="right")
    table.add_column("TOL", justify="right")
    table.add_column("FB Pts", justify="right")
    for team in TEAMS:
        rec = snapshot.state.team(team)
        label = Text()
        if snapshot.state.possession == team:
            label.append("> ", style="bold yellow")
        label.append(rec.name, style=team_style(snapshot, team))
        table.add_row(
            label,
            Text(str(rec.score), style="bold"),
            str(rec.fouls),
            str(rec.timeouts),
            str(rec.fast_break_points),
        )
    return Panel(table, title="[bold]Score[/bold]", border_style="green", padding=(0, 1))


def build_overlay_panel(snapshot: GameSnapshot) -> Panel | None:
    overlay = snapshot.state.overlay
    if overlay is None:
        return None
    text = Text()
    text.append(overlay.label.upper(), style="bold white")
    text.append(f"  {format_clock(overlay.remaining_seconds)}", style="bold yellow")
    return Panel(Align.center(text), border_style="yellow", padding=(0, 1))


def build_highlight_panel(snapshot: GameSnapshot) -> Panel | None:
    s = snapshot.state
    if s.star_player is not None:
        star = s.star_player
        player = snapshot.find_player(star.team, star.player_id)
        if player is None:
            return None
        text = Text()
        text.append(f"#{player.number} {player.name}", style=team_style(snapshot, star.team))
        text.append(f"  {player.pts} PTS  {player.reb} REB  {player.ast} AST", style="bold")
        if star.reason:
            text.append(f"\n{star.reason}", style="italic")
        title = "AUTO HIGHLIGHT" if star.auto else "STAR PLAYER"
        return Panel(Align.center(text), title=f"[bold]{title}[/bold]", border_style="magenta")

    if s.team_comparison is not None:
        cmp = s.team_comparison
        text = Text()
        text.append(f"{s.team_a.name} {cmp.team_a_value}", style=team_style(snapshot, "A"))
        text.append("  -  ", style="dim")
        text.append(f"{cmp.team_b_value} {s.team_b.name}", style=team_style(snapshot, "B"))
        title = _METRIC_LABELS.get(cmp.metric, cmp.metric)
        return Panel(Align.center(text), title=Text(title, style="bold"), border_style="magenta")
    return None


def _player_row(p: PlayerRecord) -> list:
    name = Text(f"#{p.number} {p.name}")
    if p.fouled_out:
        name.stylize("strike dim")
    elif p.on_court:
        name.stylize("bold")
    return [
        name,
        str(p.pts), str(p.reb), str(p.ast), str(p.stl), str(p.blk),
        str(p.tpm), str(p.fls), format_minutes(p.seconds_played),
    ]


def build_box_score(snapshot: GameSnapshot, team: str) -> Panel:
    table = Table(show_edge=False, expand=True, pad_edge=False)
    table.add_column("Player", no_wrap=True)
    for col in ("PTS", "REB", "AST", "STL", "BLK", "3PM", "PF", "MIN"):
        table.add_column(col, justify="right")
    for p in snapshot.players(team):
        table.add_row(*_player_row(p))
    rec = snapshot.state.team(team)
    return Panel(
        table,
        title=Text(rec.name, style=team_style(snapshot, team)),
        border_style=normalize_hex_color(rec.color),
        padding=(0, 1),
    )


def build_log_panel(snapshot: GameSnapshot, lines: int = LOG_LINES) -> Panel:
    text = Text()
    entries = snapshot.action_log[:lines]
    if not entries:
        text.append("No actions yet.", style="dim italic")
    for idx, line in enumerate(entries):
        if idx:
            text.append("\n")
        text.append(line, style="bold" if idx == 0 else "")
    return Panel(text, title="[bold]Play-by-Play[/bold]", border_style="blue", padding=(0, 1))


def build_footer(snapshot: GameSnapshot) -> Text:
    footer = Text()
    if snapshot.state.game_final:
        footer.append(" GAME COMPLETE ", style="bold white on red")
    else:
        footer.append(" LIVE ", style="bold white on green")
        footer.append(f"  Refreshing every {REFRESH_RATE}s", style="dim")
        footer.append("  |  Ctrl+C to exit", style="dim")
    return footer


def render(snapshot: GameSnapshot, leader: bool | None = None) -> Group:
    """Build the full display."""
    parts = [build_header(snapshot, leader), build_score_panel(snapshot)]
    for optional in (build_overlay_panel(snapshot), build_highlight_panel(snapshot)):
        if optional is not None:
            parts.append(optional)
    parts.append(build_box_score(snapshot, "A"))
    parts.append(build_box_score(snapshot, "B"))
    parts.append(build_log_panel(snapshot))
    parts.append(build_footer(snapshot))
    return Group(*parts)


def watch(instance, coordinator=None, console: Console | None = None) -> None:
    """Redraw until Ctrl+C."""
    console = console or Console()

    def _leader() -> bool | None:
        return coordinator.is_leader() if coordinator is not None else None

    with Live(render(instance.snapshot, _leader()), console=console,
              refresh_per_second=4, screen=True) as live:
        try:
            while True:
                live.update(render(instance.snapshot, _leader()))
                time.sleep(REFRESH_RATE)
        except KeyboardInterrupt:
            pass
