"""
stepsync CLI - Command-line tools for the synchronization core.

Usage:
    stepsync validate <snapshot.json>    Check a snapshot payload and summarize it
    stepsync types [--race RACE]         List the unit type catalog
"""

import argparse
import json
import sys

from .config import CoreConfig, configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="stepsync - Step synchronization core for RTS agents",
        prog="stepsync",
    )
    parser.add_argument("--log-level", help="Log level (default from STEPSYNC_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a snapshot payload")
    validate_parser.add_argument("snapshot_file", help="Path to snapshot JSON file")

    # Types command
    types_parser = subparsers.add_parser("types", help="List cataloged unit types")
    types_parser.add_argument("--race", help="Only list types of this race")

    args = parser.parse_args(argv)

    config = CoreConfig.from_env()
    configure_logging(args.log_level or config.log_level)

    if args.command == "validate":
        return cmd_validate(args)
    elif args.command == "types":
        return cmd_types(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_validate(args):
    """Validate a snapshot and print its partitions."""
    from .agents import IdleAgent
    from .errors import SnapshotValidationError
    from .session import SessionManager

    try:
        with open(args.snapshot_file, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {args.snapshot_file}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}")
        sys.exit(1)

    manager = SessionManager()
    session = manager.create_session(IdleAgent(), session_id="validate")

    try:
        result = session.loop.process_snapshot(payload)
    except SnapshotValidationError as e:
        print(f"Invalid snapshot: {e}")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)
    finally:
        manager.end_session(session.session_id)

    world = result.world
    print(f"Step: {world.step} ({world.time:.1f}s)")
    print(f"Minerals: {world.minerals}  Vespene: {world.vespene}  Supply: {world.supply_used:g}/{world.supply_cap:g}")
    print(f"Mine: {len(world.mine)} ({len(world.mine.structures)} structures, {len(world.mine.workers)} workers)")
    print(f"Enemy visible: {len(world.enemy)}")
    print(f"Enemy cached: {len(world.cached)}")
    print(f"Neutral: {len(world.neutral)} ({len(world.neutral.resources)} resources)")

    unclassified = [e.tag for e in world.all_units if not e.is_classified]
    if unclassified:
        print(f"Unclassified: {len(unclassified)}")

    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")
    return 0


def cmd_types(args):
    """List cataloged unit types."""
    from .catalog import Race, UNIT_TYPES

    race = None
    if args.race:
        names = [r.value for r in Race]
        name = args.race.strip().lower()
        if name not in names:
            print(f"Error: Unknown race: {args.race} (expected one of: {', '.join(names)})")
            sys.exit(1)
        race = Race(name)
    for type_id, data in sorted(UNIT_TYPES.items()):
        if race is not None and data.race != race:
            continue
        categories = ",".join(sorted(c.value for c in data.categories))
        cost = data.cost
        print(
            f"{int(type_id):>5}  {type_id.name:<24} {str(data.race):<8} "
            f"{cost.minerals:>4}/{cost.vespene:<4} {cost.supply:>4g}  {categories}"
        )
    return 0


if __name__ == "__main__":
    main()
