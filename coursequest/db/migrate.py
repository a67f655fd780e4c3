"""Apply the catalog schema migrations.

Each file in `coursequest/db/migrations/` is one migration. Files run in filename order, each in its
own transaction, and the names of applied files are recorded in `schema_migrations` so a rerun
only applies what is new.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import LiteralString, cast

import psycopg
from dotenv import load_dotenv
from psycopg import sql

from coursequest.config.logging import configure_logging
from coursequest.db.connection import connect, require_database_url

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

# Dropped by --recreate.
MANAGED_TABLES: tuple[str, ...] = ("courses", "schema_migrations")

_CREATE_LEDGER_SQL = """
    CREATE TABLE IF NOT EXISTS schema_migrations
    (
        filename   TEXT PRIMARY KEY,
        applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""


def migration_files(directory: Path = MIGRATIONS_DIR) -> list[Path]:
    """Return the `.sql` files of `directory` in apply order."""

    if not directory.is_dir():
        raise RuntimeError(f"Migrations directory does not exist: {directory}")

    files = sorted(directory.glob("*.sql"), key=lambda p: p.name)
    if not files:
        raise RuntimeError(f"No .sql migration files found in {directory}")
    return files


def _drop_managed_tables(conn: psycopg.Connection) -> None:
    with conn.transaction():
        for table in MANAGED_TABLES:
            conn.execute(sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(table)))
    logger.info("dropped tables=%s", ",".join(MANAGED_TABLES))


def _applied_filenames(conn: psycopg.Connection) -> set[str]:
    with conn.transaction():
        conn.execute(_CREATE_LEDGER_SQL, prepare=False)
        rows = conn.execute("SELECT filename FROM schema_migrations", prepare=False).fetchall()
    return {filename for (filename,) in rows}


def _apply(conn: psycopg.Connection, path: Path) -> None:
    with conn.transaction():
        conn.execute(cast(LiteralString, path.read_text(encoding="utf-8")), prepare=False)
        conn.execute(
            "INSERT INTO schema_migrations (filename) VALUES (%s)",
            (path.name,),
            prepare=False,
        )


def migrate(*, recreate: bool) -> list[str]:
    """Apply pending migrations to the `DATABASE_URL` database; return the applied filenames."""

    load_dotenv(".env")
    database_url = require_database_url()
    files = migration_files()

    applied_now: list[str] = []
    with connect(database_url) as conn:
        if recreate:
            _drop_managed_tables(conn)

        already_applied = _applied_filenames(conn)
        for path in files:
            if path.name in already_applied:
                continue
            _apply(conn, path)
            applied_now.append(path.name)
            logger.info("applied migration=%s", path.name)

    if not applied_now:
        logger.info("schema up to date migrations=%d", len(files))
    return applied_now


def main() -> None:
    """CLI entry point for applying migrations."""

    parser = argparse.ArgumentParser(description="Apply the course catalog schema migrations.")
    parser.add_argument(
        "--recreate",
        action="store_true",
        help="Drop the courses table and migration ledger first (destructive).",
    )
    args = parser.parse_args()

    configure_logging()
    migrate(recreate=args.recreate)


if __name__ == "__main__":
    main()
