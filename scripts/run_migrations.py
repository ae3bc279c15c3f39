#!/usr/bin/env python3
"""
Apply pending schema migrations from migrations/ to the hosted database.

Usage:
    python scripts/run_migrations.py            # apply pending migrations
    python scripts/run_migrations.py --status   # show applied/pending
    python scripts/run_migrations.py --dry-run  # list what would be applied

Requires DATABASE_URL (the Postgres connection string from the Supabase
project settings) in the environment or .env.
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.config import get_migration_settings
from lib.migrations import MigrationError, MigrationRunner

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Apply versioned SQL migrations")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="show applied and pending migrations")
    group.add_argument("--dry-run", action="store_true", help="list pending migrations without applying")
    parser.add_argument("--dir", help="migrations directory (default: MIGRATIONS_DIR setting)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = get_migration_settings()
    migrations_dir = args.dir or settings.MIGRATIONS_DIR

    try:
        runner = MigrationRunner.from_url(migrations_dir, settings.DATABASE_URL)

        if args.status:
            status = runner.status()
            print(f"Applied: {', '.join(status.applied) or '(none)'}")
            print(f"Pending: {', '.join(m.filename for m in status.pending) or '(none)'}")
            return 0

        applied = runner.run(dry_run=args.dry_run)
        verb = "Would apply" if args.dry_run else "Applied"
        print(f"{verb} {len(applied)} migration(s)")
        return 0

    except MigrationError as e:
        logger.error(f"Migration failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
