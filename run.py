#!/usr/bin/env python3
"""
ArchivesSpace Resource Migrator — Entry Point.

Copies published resources modified in a source ArchivesSpace instance into a
destination instance. Configuration comes from a JSON event file (--event) or
from environment variables / a .env file, and CLI flags override both.

Each run performs:
  1. Log in to the source and destination, resolve both repositories
  2. List source resources for the modification window
  3. For each resource: fetch EAD, convert to JSON on the destination,
     delete any existing destination copy (or skip it), import

Usage:
    python run.py                       # Configuration from ./.env
    python run.py --event event.json    # Configuration from a JSON event
    python run.py --recent-only         # Only resources modified in the last day
    python run.py --skip-existing       # Leave existing destination copies alone
    python run.py --dry-run             # Log deletes/imports without issuing them
    python run.py --debug               # Verbose output
    python run.py --version             # Show version
"""

import argparse
import json
import sys

from aspace_migrator import __version__
from aspace_migrator.exceptions import ConfigurationError, FatalSyncError
from aspace_migrator.handler import run_migration
from aspace_migrator.logging_setup import configure_logging, get_run_logger
from aspace_migrator.sync_config import event_from_env


def load_event(args) -> dict:
    """Build the event from --event or the environment, then apply CLI overrides."""
    if args.event:
        with open(args.event) as f:
            event = json.load(f)
    else:
        event = event_from_env(args.env)

    if args.recent_only:
        event["recent_only"] = True
    if args.skip_existing:
        event["destination_skip_existing"] = True
    if args.dry_run:
        event["dry_run"] = True
    if args.id_generator:
        event["id_generator"] = args.id_generator
    return event


def main(argv=None):
    """Parse CLI arguments and run the migration."""
    parser = argparse.ArgumentParser(
        description="ArchivesSpace Resource Migrator - Copy resources between ArchivesSpace instances"
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--event", help="Path to a JSON event file (overrides .env)")
    parser.add_argument("--recent-only", action="store_true", help="Only resources modified in the last day")
    parser.add_argument("--skip-existing", action="store_true", help="Skip resources already in the destination")
    parser.add_argument("--id-generator", choices=["smushed", "four_part"], help="Matching identifier strategy")
    parser.add_argument("--dry-run", action="store_true", help="Do not delete or import destination records")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")

    args = parser.parse_args(argv)

    if args.version:
        print(f"aspace-migrator {__version__}")
        sys.exit(0)

    configure_logging(args.debug)
    logger = get_run_logger()

    try:
        event = load_event(args)
        summary = run_migration(event, logger)
    except ConfigurationError as e:
        print("\nConfiguration Errors:")
        for problem in e.problems:
            print(f"  - {problem}")
        sys.exit(1)
    except FatalSyncError as e:
        print(f"\nFATAL: {e}")
        sys.exit(1)

    print(f"\n{'='*60}")
    print("MIGRATION COMPLETE")
    print("="*60)
    print(f"Considered: {summary.considered}")
    print(f"Migrated:   {summary.migrated}")
    print(f"Skipped:    {summary.skipped}")
    print(f"Failed:     {summary.failed}")
    for reason, count in sorted(summary.reasons.items()):
        print(f"  {reason}: {count}")


if __name__ == "__main__":
    main()
