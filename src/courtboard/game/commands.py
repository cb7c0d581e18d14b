"""Remote command channel — literal command strings to reducer actions."""

from __future__ import annotations

from courtboard.game import actions as a

COMMANDS: dict[str, a.Action] = {
    "startGame": a.StartGame(),
    "stopGame": a.StopGame(),
    "resetQuarter": a.ResetQuarter(),
    "nextQuarter": a.NextQuarter(),
    "startShot": a.StartShot(),
    "stopShot": a.StopShot(),
    "reset24": a.ResetShot(seconds=24),
    "reset14": a.ResetShot(seconds=14),
    "possessionA": a.SetPossession(team="A"),
    "possessionB": a.SetPossession(team="B"),
    "foulA": a.IncFoul(team="A"),
    "foulB": a.IncFoul(team="B"),
    "timeoutA": a.OpenTimeout(team="A", seconds=60),
    "timeoutB": a.OpenTimeout(team="B", seconds=60),
}


def command_to_action(command: str | None) -> a.Action | None:
    """Return the action for a recognized command string, else None."""
    if not isinstance(command, str):
        return None
    return COMMANDS.get(command.strip())
