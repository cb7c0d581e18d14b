"""ActionJournal — JSONL record of applied scoreboard actions.

One journal per game. Writes one JSONL line per applied action plus a
game summary as the final line. All entries include schema version and
game ID. Write failures are logged and never interrupt dispatch.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

import courtboard
from courtboard.game.actions import Action
from courtboard.game.models import GameSnapshot

logger = logging.getLogger(__name__)

_SCHEMA_VERSION = "1.0.0"


def action_to_dict(action: Action) -> dict:
    record = {"type": action.type_name}
    record.update(asdict(action))
    return record


class ActionJournal:
    """Writes JSONL journal entries for a single game."""

    def __init__(self, output_dir: Path, game_id: str):
        self._output_dir = Path(output_dir)
        self._game_id = game_id
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._output_dir / f"{game_id}.jsonl"
        self._entries = 0
        self._finalized = False

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def game_id(self) -> str:
        return self._game_id

    def log_action(self, action: Action, snapshot: GameSnapshot, instance_id: str) -> None:
        state = snapshot.state
        record = {
            "schema_version": _SCHEMA_VERSION,
            "game_id": self._game_id,
            "instance_id": instance_id,
            "action": action_to_dict(action),
            "updated_at": snapshot.updated_at,
            "quarter": state.quarter,
            "game_clock_seconds": state.game_clock_seconds,
            "score": {"A": state.team_a.score, "B": state.team_b.score},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if self._append(record):
            self._entries += 1

    def finalize_game(self, snapshot: GameSnapshot, instance_id: str) -> None:
        if self._finalized:
            return
        self._finalized = True
        state = snapshot.state
        record = {
            "schema_version": _SCHEMA_VERSION,
            "record_type": "game_summary",
            "game_id": self._game_id,
            "instance_id": instance_id,
            "teams": {
                "A": {"name": state.team_a.name, "score": state.team_a.score,
                      "fouls": state.team_a.fouls},
                "B": {"name": state.team_b.name, "score": state.team_b.score,
                      "fouls": state.team_b.fouls},
            },
            "quarter": state.quarter,
            "game_final": state.game_final,
            "actions_logged": self._entries,
            "updated_at": snapshot.updated_at,
            "engine_version": courtboard.__version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        self._append(record)

    def _append(self, record: dict) -> bool:
        try:
            with open(self._file_path, "a") as f:
                f.write(json.dumps(record, default=str) + "\n")
        except OSError as exc:
            logger.warning("Journal write failed for %s: %s", self._file_path, exc)
            return False
        return True
