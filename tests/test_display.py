"""Smoke tests for the rich scoreboard display."""

from rich.console import Console

from courtboard.display import (
    build_box_score,
    build_highlight_panel,
    build_overlay_panel,
    render,
)
from courtboard.game import actions as a
from courtboard.game.models import default_snapshot
from courtboard.game.reducer import reduce


def _text(renderable) -> str:
    console = Console(record=True, width=120, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestRender:
    def test_default_board(self):
        out = _text(render(default_snapshot(), leader=True))
        assert "Home" in out
        assert "Away" in out
        assert "10:00" in out
        assert "tick owner" in out
        assert "No actions yet." in out

    def test_overlay_and_highlight(self):
        s = reduce(default_snapshot(), a.OpenTimeout(team="A", seconds=60))
        s = reduce(s, a.ShowStarPlayer(team="B", player_id="B-0"))
        assert build_overlay_panel(s) is not None
        assert build_highlight_panel(s) is not None
        out = _text(render(s))
        assert "HOME TIMEOUT" in out
        assert "STAR PLAYER" in out
        assert "Home takes a full timeout" in out

    def test_no_optional_panels_by_default(self):
        s = default_snapshot()
        assert build_overlay_panel(s) is None
        assert build_highlight_panel(s) is None

    def test_team_name_with_brackets(self):
        s = reduce(default_snapshot(), a.SetTeamName(team="A", name="[/] Bulls [b"))
        panel = build_box_score(s, "A")
        assert panel.title.plain == "[/] Bulls [b"
        assert "[/] Bulls [b" in _text(render(s))

    def test_final(self):
        s = reduce(default_snapshot(), a.FinishGame())
        assert "GAME COMPLETE" in _text(render(s))
