"""
Command line runner for the assignment engine.

Usage:
    python -m assignment_engine.run --config configs/config.yaml optimize
    python -m assignment_engine.run optimize --group-tag Alpha --output proposals.json
    python -m assignment_engine.run apply proposals.json
    python -m assignment_engine.run rooms
    python -m assignment_engine.run suggest-peers 12
    python -m assignment_engine.run suggest-supervisors 12 --role mentor --role counselor
    python -m assignment_engine.run assign-supervisor 12 S3
    python -m assignment_engine.run rate sup-1 4 --notes "Steady progress"

Results are printed as JSON. The roster is loaded from the CSV files named in
the config; the assignment store is read from and written back to the
configured JSON file.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def _load_settings(config_path: Optional[str]) -> Dict[str, Any]:
    from .configs import DEFAULT_CONFIG, load_config, validate_config

    if config_path and Path(config_path).exists():
        config = load_config(config_path)
    else:
        logger.warning(f"Configuration file {config_path} not found; using defaults")
        config = DEFAULT_CONFIG

    for issue in validate_config(config):
        logger.warning(f"Config issue: {issue}")

    setup_logging(config.get("global", {}).get("log_level", "INFO"))
    return config


def run_command(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Execute one CLI command.

    Args:
        args: Parsed command line arguments

    Returns:
        JSON-serializable result of the command
    """
    # Import modules here so logging is configured first
    from .data_loading import load_roster
    from .roster import CohortFilter, PoolFilter
    from .service import AssignmentService
    from .store import AssignmentStore

    config = _load_settings(args.config)
    roster = load_roster(config, base_dir=args.base_dir)
    store_path = config.get("store", {}).get("path")
    if store_path and args.base_dir:
        store_path = str(Path(args.base_dir) / store_path)
    store = AssignmentStore.open(store_path)
    service = AssignmentService(roster, store, config)

    if args.command == "optimize":
        cohort_filter = CohortFilter(
            group_tags=set(args.group_tag) if args.group_tag else None,
            include_inactive=args.include_inactive,
        )
        result = service.optimize_cohort(cohort_filter)
        if args.output:
            with open(args.output, "w") as f:
                json.dump(result, f, indent=2)
            logger.info(f"Saved {result['total_rooms']} proposed rooms to {args.output}")
        return result

    if args.command == "apply":
        with open(args.proposals, "r") as f:
            payload = json.load(f)
        proposals = payload["proposals"] if isinstance(payload, dict) else payload
        result = service.apply_pairing(proposals)
        store.save()
        return result

    if args.command == "rooms":
        return service.get_room_assignments()

    if args.command == "suggest-peers":
        return service.get_peer_suggestions(args.person_id, top_k=args.top_k)

    if args.command == "suggest-supervisors":
        pool_filter = None
        if args.role:
            pool_filter = PoolFilter(roles=set(args.role))
        return service.get_supervisor_suggestions(args.person_id, pool_filter, top_k=args.top_k)

    if args.command == "assign-supervisor":
        result = service.create_supervisor_assignment(args.person_id, args.supervisor_id)
        store.save()
        return result

    if args.command == "rate":
        result = service.rate_supervisor_assignment(args.assignment_id, args.rating, args.notes)
        store.save()
        return result

    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compatibility-based room pairing and supervisor assignment"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--base-dir",
        type=str,
        default=None,
        help="Directory that relative data and store paths are resolved against"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    optimize_parser = subparsers.add_parser("optimize", help="Propose a room pairing")
    optimize_parser.add_argument("--group-tag", action="append", help="Restrict to a group tag")
    optimize_parser.add_argument(
        "--include-inactive", action="store_true", help="Include inactive people"
    )
    optimize_parser.add_argument("--output", type=str, default=None, help="Write proposals to JSON")

    apply_parser = subparsers.add_parser("apply", help="Apply proposals from a JSON file")
    apply_parser.add_argument("proposals", type=str, help="JSON file written by 'optimize'")

    subparsers.add_parser("rooms", help="Show current room assignments")

    peers_parser = subparsers.add_parser("suggest-peers", help="Suggest roommates for a person")
    peers_parser.add_argument("person_id", type=str)
    peers_parser.add_argument("--top-k", type=int, default=None)

    sup_parser = subparsers.add_parser("suggest-supervisors", help="Suggest supervisors for a person")
    sup_parser.add_argument("person_id", type=str)
    sup_parser.add_argument("--role", action="append", help="Restrict to a staff role")
    sup_parser.add_argument("--top-k", type=int, default=None)

    assign_parser = subparsers.add_parser("assign-supervisor", help="Assign a supervisor")
    assign_parser.add_argument("person_id", type=str)
    assign_parser.add_argument("supervisor_id", type=str)

    rate_parser = subparsers.add_parser("rate", help="Rate a supervisor assignment")
    rate_parser.add_argument("assignment_id", type=str)
    rate_parser.add_argument("rating", type=int)
    rate_parser.add_argument("--notes", type=str, default=None)

    return parser


def main(argv=None):
    """Main entry point for the command line."""
    from .exceptions import AssignmentEngineError

    args = build_parser().parse_args(argv)

    try:
        result = run_command(args)
    except AssignmentEngineError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
