"""Apply or roll back database migrations using yoyo-migrations.

Usage:
    python scripts/migrate.py
    python scripts/migrate.py --list
    python scripts/migrate.py --rollback
"""

import argparse
import logging
import sys
from pathlib import Path

from yoyo import get_backend, read_migrations

# Add project root to path so config is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def main() -> None:
    """Apply pending migrations, list them, or roll back the latest one."""
    parser = argparse.ArgumentParser(description="Manage tax rule table migrations")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--list", action="store_true", help="List pending migrations")
    group.add_argument("--rollback", action="store_true", help="Roll back the latest migration")
    args = parser.parse_args()

    logger.info("Connecting to database...")
    backend = get_backend(settings.database_url_sync)
    migrations = read_migrations(str(MIGRATIONS_DIR))

    with backend.lock():
        if args.rollback:
            to_rollback = backend.to_rollback(migrations)
            if not to_rollback:
                logger.info("Nothing to roll back.")
                return
            latest = to_rollback[0]
            logger.info("Rolling back %s...", latest.id)
            backend.rollback_one(latest)
            return

        to_apply = backend.to_apply(migrations)
        if not to_apply:
            logger.info("No pending migrations.")
            return

        if args.list:
            for migration in to_apply:
                logger.info("Pending: %s", migration.id)
            return

        logger.info("Applying %d migration(s)...", len(to_apply))
        backend.apply_migrations(to_apply)
        logger.info("Migrations applied successfully.")


if __name__ == "__main__":
    main()
