"""CLI entry point: python -m courtboard <command> [options]"""

import argparse
import logging
import sys
import threading
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console

from courtboard.config import ScoreboardConfig, StoreConfig, load_config
from courtboard.core.journal import ActionJournal
from courtboard.game.actions import LoadGame, RuleOverrides, TeamSetup
from courtboard.game.commands import COMMANDS
from courtboard.game.parser import ActionParser
from courtboard.sync.coordinator import InstanceCoordinator, send_command
from courtboard.sync.instance import ScoreboardInstance, new_instance_id
from courtboard.sync.store import MemoryStore, SharedStore

DEFAULT_CONFIG = Path("courtboard.yaml")


def _build_store(cfg: StoreConfig) -> SharedStore:
    if cfg.backend == "mongo":
        from courtboard.sync.mongo_store import MongoStore

        return MongoStore(
            cfg.resolve_uri(),
            cfg.db_name,
            cfg.collection,
            poll_interval_s=cfg.poll_interval_s,
        )
    return MemoryStore()


def _require_shared_store(config: ScoreboardConfig, command: str) -> bool:
    """One-shot commands only make sense against a store other processes share."""
    if config.store.backend == "memory":
        print(
            f"Error: '{command}' requires store.backend: mongo "
            "(the memory store lives only inside one process)",
            file=sys.stderr,
        )
        return False
    return True


def _new_game_action(config: ScoreboardConfig, home: str, away: str) -> LoadGame:
    r = config.rules
    return LoadGame(
        home=TeamSetup(name=home),
        away=TeamSetup(name=away),
        rules=RuleOverrides(
            quarter_length_minutes=r.quarter_length_minutes,
            total_quarters=r.total_quarters,
            shot_clock_default=r.shot_clock_default,
            foul_limit=r.foul_limit,
            timing_mode=r.timing_mode,
        ),
    )


def _cmd_run(config: ScoreboardConfig, args) -> int:
    """Run one live instance with the terminal display."""
    store = _build_store(config.store)
    instance_id = config.instance_id or new_instance_id()
    journal = None
    if config.journal.output_dir is not None:
        journal = ActionJournal(config.journal.output_dir, game_id=f"game-{instance_id}")
    instance = ScoreboardInstance(store, instance_id, journal=journal)

    if args.new_game:
        instance.dispatch(_new_game_action(config, args.home, args.away))

    coordinator = InstanceCoordinator(
        instance,
        tick_interval_ms=config.sync.tick_interval_ms,
        stale_after_ms=config.sync.stale_after_ms,
        command_poll_ms=config.sync.command_poll_ms,
    )
    try:
        with coordinator:
            if args.no_display:
                print(f"Instance {instance_id} running. Ctrl+C to exit.")
                try:
                    threading.Event().wait()
                except KeyboardInterrupt:
                    pass
            else:
                from courtboard.display import watch

                watch(instance, coordinator)
    finally:
        instance.close()
        store.close()
    if journal is not None:
        print(f"Journal: {journal.file_path}")
    return 0


def _cmd_show(config: ScoreboardConfig, args) -> int:
    """Render the stored snapshot once."""
    from courtboard.display import render

    if not _require_shared_store(config, "show"):
        return 1
    store = _build_store(config.store)
    try:
        instance = ScoreboardInstance(store, config.instance_id)
        Console().print(render(instance.snapshot))
    finally:
        store.close()
    return 0


def _cmd_command(config: ScoreboardConfig, args) -> int:
    """Post a remote command for the current tick owner."""
    if args.name not in COMMANDS:
        print(f"Error: unknown command {args.name!r}", file=sys.stderr)
        print(f"Known commands: {', '.join(COMMANDS)}", file=sys.stderr)
        return 1
    if not _require_shared_store(config, "command"):
        return 1
    store = _build_store(config.store)
    try:
        send_command(store, args.name)
    finally:
        store.close()
    print(f"Sent {args.name}")
    return 0


def _cmd_dispatch(config: ScoreboardConfig, args) -> int:
    """Apply one JSON action directly to the stored snapshot."""
    result = ActionParser().parse_text(args.action)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    if not _require_shared_store(config, "dispatch"):
        return 1
    store = _build_store(config.store)
    try:
        instance = ScoreboardInstance(store, config.instance_id)
        before = instance.snapshot
        after = instance.dispatch(result.action)
    finally:
        store.close()
    if after is before:
        print(f"{result.action.type_name}: no change")
    else:
        print(f"{result.action.type_name}: applied (updatedAt={after.updated_at})")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="courtboard",
        description="Multi-instance basketball scoreboard",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help=f"Path to YAML config file (default: {DEFAULT_CONFIG} if present)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run_p = sub.add_parser("run", help="Run a live scoreboard instance")
    run_p.add_argument("--new-game", action="store_true", help="Start a fresh game")
    run_p.add_argument("--home", default="Home", help="Home team name for --new-game")
    run_p.add_argument("--away", default="Away", help="Away team name for --new-game")
    run_p.add_argument("--no-display", action="store_true", help="Run headless")
    run_p.set_defaults(handler=_cmd_run)

    show_p = sub.add_parser("show", help="Print the stored scoreboard once")
    show_p.set_defaults(handler=_cmd_show)

    cmd_p = sub.add_parser("command", help="Send a remote command to the tick owner")
    cmd_p.add_argument("name", help=f"One of: {', '.join(COMMANDS)}")
    cmd_p.set_defaults(handler=_cmd_command)

    disp_p = sub.add_parser("dispatch", help="Apply a JSON action to the stored snapshot")
    disp_p.add_argument("action", help='e.g. \'{"type": "ADD_POINTS", "team": "A", "points": 2}\'')
    disp_p.set_defaults(handler=_cmd_dispatch)

    args = parser.parse_args()

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path = args.config
    if config_path is None and DEFAULT_CONFIG.exists():
        config_path = DEFAULT_CONFIG
    if config_path is not None:
        if not config_path.exists():
            print(f"Error: config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        try:
            config = load_config(config_path)
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
    else:
        config = ScoreboardConfig()

    sys.exit(args.handler(config, args))


if __name__ == "__main__":
    main()
