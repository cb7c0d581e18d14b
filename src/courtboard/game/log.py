"""Action log helper."""

from dataclasses import replace

from courtboard.core.formatting import format_clock
from courtboard.game.models import ACTION_LOG_LIMIT, GameSnapshot


def with_log(snapshot: GameSnapshot, text: str) -> GameSnapshot:
    """Prepend a ``[Q2 - 7:41] text`` line, dropping the oldest past the cap."""
    state = snapshot.state
    stamp = f"[Q{state.quarter} - {format_clock(state.game_clock_seconds)}]"
    log = (f"{stamp} {text}",) + snapshot.action_log
    return replace(snapshot, action_log=log[:ACTION_LOG_LIMIT])
