"""Scoreboard configuration loader."""

import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path

from courtboard.game.models import TIMING_MODES

STORE_BACKENDS = ("memory", "mongo")


@dataclass
class RulesConfig:
    quarter_length_minutes: int = 10
    total_quarters: int = 4
    shot_clock_default: int = 24
    foul_limit: int = 5
    timing_mode: str = "NBA"  # "NBA" or "FIBA"


@dataclass
class SyncConfig:
    tick_interval_ms: int = 1000
    stale_after_ms: int = 2200  # ~2.2x the tick interval
    command_poll_ms: int = 150


@dataclass
class StoreConfig:
    backend: str = "memory"  # "memory" or "mongo"
    uri_env: str | None = "COURTBOARD_MONGO_URI"  # env var that overrides uri
    uri: str = "mongodb://localhost:27017"
    db_name: str = "courtboard"
    collection: str = "kv"
    poll_interval_s: float = 0.25

    def resolve_uri(self) -> str:
        if self.uri_env:
            return os.environ.get(self.uri_env) or self.uri
        return self.uri


@dataclass
class JournalConfig:
    output_dir: Path | None = None  # None disables the journal


@dataclass
class ScoreboardConfig:
    instance_id: str | None = None
    rules: RulesConfig = field(default_factory=RulesConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    journal: JournalConfig = field(default_factory=JournalConfig)


def _positive_int(section: str, raw: dict, key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{section}.{key} must be a positive integer, got {value!r}")
    return value


def load_config(path: Path) -> ScoreboardConfig:
    """Load scoreboard config from YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(raw).__name__}")

    inst = raw.get("instance") or {}
    r = raw.get("rules") or {}
    s = raw.get("sync") or {}
    st = raw.get("store") or {}
    j = raw.get("journal") or {}

    timing_mode = r.get("timing_mode", "NBA")
    if timing_mode not in TIMING_MODES:
        raise ValueError(
            f"rules.timing_mode must be one of {', '.join(TIMING_MODES)}, got {timing_mode!r}"
        )
    rules = RulesConfig(
        quarter_length_minutes=_positive_int("rules", r, "quarter_length_minutes", 10),
        total_quarters=_positive_int("rules", r, "total_quarters", 4),
        shot_clock_default=_positive_int("rules", r, "shot_clock_default", 24),
        foul_limit=_positive_int("rules", r, "foul_limit", 5),
        timing_mode=timing_mode,
    )

    sync = SyncConfig(
        tick_interval_ms=_positive_int("sync", s, "tick_interval_ms", 1000),
        stale_after_ms=_positive_int("sync", s, "stale_after_ms", 2200),
        command_poll_ms=_positive_int("sync", s, "command_poll_ms", 150),
    )
    if sync.stale_after_ms <= sync.tick_interval_ms:
        raise ValueError(
            "sync.stale_after_ms must exceed sync.tick_interval_ms "
            f"({sync.stale_after_ms} <= {sync.tick_interval_ms})"
        )

    backend = st.get("backend", "memory")
    if backend not in STORE_BACKENDS:
        raise ValueError(
            f"store.backend must be one of {', '.join(STORE_BACKENDS)}, got {backend!r}"
        )
    store = StoreConfig(
        backend=backend,
        uri_env=st.get("uri_env", "COURTBOARD_MONGO_URI"),
        uri=st.get("uri", "mongodb://localhost:27017"),
        db_name=st.get("db_name", "courtboard"),
        collection=st.get("collection", "kv"),
        poll_interval_s=float(st.get("poll_interval_s", 0.25)),
    )

    output_dir = j.get("output_dir")

    return ScoreboardConfig(
        instance_id=inst.get("id"),
        rules=rules,
        sync=sync,
        store=store,
        journal=JournalConfig(output_dir=Path(output_dir) if output_dir else None),
    )
