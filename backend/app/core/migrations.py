"""
Migration runner.

Applies the Alembic revisions under backend/alembic/ to a database.
Every revision only creates what is missing, so upgrading an up-to-date
database (or one created by the old raw SQL scripts) is a no-op.

Usage:
    python -m app.core.migrations upgrade
    python -m app.core.migrations downgrade 004_performance_ticker_type
    python -m app.core.migrations current
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import create_engine

from app.core.config import settings

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parents[2]
ALEMBIC_DIR = BACKEND_DIR / "alembic"


def alembic_config(database_url: Optional[str] = None) -> Config:
    """Alembic config pointing at our revisions, without touching logging."""
    cfg = Config()
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    # ConfigParser interpolation: escape '%' in passwords
    cfg.set_main_option("sqlalchemy.url", (database_url or settings.DATABASE_URL).replace("%", "%%"))
    cfg.attributes["configure_logger"] = False
    return cfg


def run_migrations(database_url: Optional[str] = None, revision: str = "head") -> None:
    """Upgrade the database to `revision`."""
    logger.info("Upgrading database schema to %s", revision)
    command.upgrade(alembic_config(database_url), revision)


def downgrade(revision: str, database_url: Optional[str] = None) -> None:
    """Downgrade the database to `revision` ("base" removes every table)."""
    logger.info("Downgrading database schema to %s", revision)
    command.downgrade(alembic_config(database_url), revision)


def current_revision(database_url: Optional[str] = None) -> Optional[str]:
    """Revision stamped in the database, or None for an unversioned one."""
    engine = create_engine(database_url or settings.DATABASE_URL)
    try:
        with engine.connect() as connection:
            return MigrationContext.configure(connection).get_current_revision()
    finally:
        engine.dispose()


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entrypoint for the migration runner."""
    from app.core.logging import configure_logging

    parser = argparse.ArgumentParser(description="Manage the stock-themes database schema")
    parser.add_argument("action", choices=["upgrade", "downgrade", "current"])
    parser.add_argument("revision", nargs="?", default=None, help="Target revision")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    configure_logging()

    try:
        if args.action == "upgrade":
            run_migrations(args.database_url, args.revision or "head")
        elif args.action == "downgrade":
            if not args.revision:
                parser.error("downgrade needs a target revision")
            downgrade(args.revision, args.database_url)
        else:
            print(current_revision(args.database_url) or "<unversioned>")
    except Exception:
        logger.exception("Migration %s failed", args.action)
        sys.exit(1)


if __name__ == "__main__":
    main()
