"""ActionParser — build scoreboard actions from JSON objects.

Actions arrive on the wire with camelCase keys (``{"type": "ADD_POINTS",
"team": "A", "points": 3, "playerId": "A-0"}``). The object is validated
against ``game/schema.json`` and then mapped field by field onto the
matching action dataclass. ``HYDRATE`` is not accepted here; snapshots
travel through the codec instead.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

import jsonschema

from courtboard.core.schemas import package_schema
from courtboard.game import actions as a

# type -> ((json key, dataclass field, required), ...)
_FIELDS: dict[str, tuple[tuple[str, str, bool], ...]] = {
    "ADD_POINTS": (("team", "team", True), ("points", "points", True), ("playerId", "player_id", False)),
    "ADD_FAST_BREAK_POINTS": (("team", "team", True), ("points", "points", True)),
    "SET_TEAM_NAME": (("team", "team", True), ("name", "name", True)),
    "SET_TEAM_COLOR": (("team", "team", True), ("color", "color", True)),
    "SET_TEAM_LOGO": (("team", "team", True), ("logoUrl", "logo_url", True)),
    "SET_POSSESSION": (("team", "team", True),),
    "RESET_SHOT": (("seconds", "seconds", True),),
    "INC_FOUL": (("team", "team", True),),
    "USE_TIMEOUT": (("team", "team", True),),
    "OPEN_TIMEOUT": (("team", "team", True), ("seconds", "seconds", True)),
    "START_HALFTIME": (("minutes", "minutes", True),),
    "END_OVERLAY": (("manual", "manual", False),),
    "SHOW_TV_STAR_PLAYER": (("team", "team", True), ("playerId", "player_id", True)),
    "INC_PLAYER_STAT": (
        ("team", "team", True),
        ("playerId", "player_id", True),
        ("stat", "stat", True),
        ("amount", "amount", False),
    ),
    "SET_PLAYER_ON_COURT": (
        ("team", "team", True),
        ("playerId", "player_id", True),
        ("onCourt", "on_court", True),
    ),
    "SUBSTITUTE_PLAYER": (
        ("team", "team", True),
        ("playerOutId", "player_out_id", True),
        ("playerInId", "player_in_id", True),
    ),
    "ADD_PLAYER": (
        ("team", "team", True),
        ("name", "name", True),
        ("number", "number", True),
        ("onCourt", "on_court", False),
    ),
    "DELETE_PLAYER": (("team", "team", True), ("playerId", "player_id", True)),
    "ADD_LOG": (("text", "text", True),),
}


@dataclass(frozen=True)
class ParseResult:
    """Result of parsing one action object."""

    success: bool
    action: a.Action | None
    error: str | None


class ActionParser:
    """Validate JSON action objects and turn them into action dataclasses."""

    def __init__(self, schema: dict | None = None) -> None:
        self._schema = schema or package_schema("game/schema.json")

    def parse_text(self, raw_text: str) -> ParseResult:
        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as e:
            return ParseResult(success=False, action=None, error=f"JSON parse error: {e}")
        return self.parse(data)

    def parse(self, data: object) -> ParseResult:
        if not isinstance(data, dict):
            return ParseResult(success=False, action=None, error="Action is not an object")
        try:
            jsonschema.validate(data, self._schema)
        except jsonschema.ValidationError as e:
            return ParseResult(success=False, action=None, error=f"Schema validation: {e.message}")

        type_name = data["type"]
        if type_name == "LOAD_GAME":
            return self._parse_load_game(data)
        if type_name == "UPDATE_PLAYER":
            return self._parse_update_player(data)

        kwargs = {}
        for key, field_name, required in _FIELDS.get(type_name, ()):
            if key in data:
                kwargs[field_name] = data[key]
            elif required:
                return ParseResult(
                    success=False, action=None,
                    error=f"{type_name} requires {key!r}",
                )
        return ParseResult(success=True, action=a.ACTION_TYPES[type_name](**kwargs), error=None)

    # ------------------------------------------------------------------
    # Nested actions
    # ------------------------------------------------------------------

    def _parse_update_player(self, data: dict) -> ParseResult:
        for key in ("team", "playerId"):
            if key not in data:
                return ParseResult(False, None, f"UPDATE_PLAYER requires {key!r}")
        updates = data.get("updates", {})
        return ParseResult(
            success=True,
            action=a.UpdatePlayer(
                team=data["team"],
                player_id=data["playerId"],
                name=updates.get("name"),
                number=updates.get("number"),
                on_court=updates.get("onCourt"),
            ),
            error=None,
        )

    def _parse_load_game(self, data: dict) -> ParseResult:
        for key in ("home", "away"):
            if key not in data:
                return ParseResult(False, None, f"LOAD_GAME requires {key!r}")
        rules = data.get("rules")
        overrides = None
        if rules is not None:
            overrides = a.RuleOverrides(
                quarter_length_minutes=rules.get("quarterLengthMinutes"),
                total_quarters=rules.get("totalQuarters"),
                shot_clock_default=rules.get("shotClockDefault"),
                foul_limit=rules.get("foulLimit"),
                timing_mode=rules.get("timingMode"),
            )
        return ParseResult(
            success=True,
            action=a.LoadGame(
                home=_team_setup(data["home"]),
                away=_team_setup(data["away"]),
                rules=overrides,
            ),
            error=None,
        )


def _team_setup(raw: dict) -> a.TeamSetup:
    return a.TeamSetup(
        name=raw["name"],
        color=raw.get("color"),
        logo_url=raw.get("logoUrl"),
        players=tuple(
            a.RosterEntry(
                name=p["name"],
                number=p["number"],
                image_url=p.get("imageUrl", ""),
                id=p.get("id"),
            )
            for p in raw.get("players", [])
        ),
    )
