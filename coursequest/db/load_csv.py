"""Load a course catalog CSV into Postgres.

The CSV must have a header row naming the `courses` columns. Rows are upserted by `course_id`;
a row that fails conversion or insertion is counted as failed and skipped, the rest still load.
"""

from __future__ import annotations

import argparse
import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path

import psycopg
from dotenv import load_dotenv

from coursequest.config.logging import configure_logging
from coursequest.db.connection import connect, require_database_url
from coursequest.db.course_rows import RowError, course_row
from coursequest.sql.columns import COURSE_COLUMNS

logger = logging.getLogger(__name__)

_UPSERT_SQL = """
    INSERT INTO courses (course_id, course_name, department, level, delivery_mode,
                         credits, duration_weeks, rating, tuition_fee_inr, year_offered)
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s) ON CONFLICT (course_id) DO
    UPDATE SET
        course_name = EXCLUDED.course_name,
        department = EXCLUDED.department,
        level = EXCLUDED.level,
        delivery_mode = EXCLUDED.delivery_mode,
        credits = EXCLUDED.credits,
        duration_weeks = EXCLUDED.duration_weeks,
        rating = EXCLUDED.rating,
        tuition_fee_inr = EXCLUDED.tuition_fee_inr,
        year_offered = EXCLUDED.year_offered
    RETURNING (xmax = 0) AS inserted
"""


@dataclass
class LoadReport:
    inserted: int = 0
    updated: int = 0
    failed: int = 0
    failed_rows: list[tuple[int, str]] = field(default_factory=list)

    @property
    def total_processed(self) -> int:
        return self.inserted + self.updated + self.failed


def load_catalog(*, path: str, truncate: bool) -> LoadReport:
    """Upsert every CSV record into `courses` and report what happened."""

    load_dotenv(".env")
    database_url = require_database_url()

    report = LoadReport()
    with Path(path).open(newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        unknown = set(reader.fieldnames or ()) - set(COURSE_COLUMNS)
        if unknown:
            logger.warning("ignoring unknown columns=%s", sorted(unknown))

        with connect(database_url) as conn:
            with conn.transaction():
                if truncate:
                    conn.execute("TRUNCATE courses", prepare=False)

                # Header is line 1; data starts on line 2.
                for line_no, record in enumerate(reader, start=2):
                    try:
                        row = course_row(record)
                        # Savepoint per row: a failed row rolls back alone.
                        with conn.transaction():
                            inserted = conn.execute(_UPSERT_SQL, row).fetchone()[0]
                    except (RowError, psycopg.DataError, psycopg.IntegrityError) as exc:
                        report.failed += 1
                        report.failed_rows.append((line_no, str(exc)))
                        logger.warning("row failed line=%d reason=%s", line_no, exc)
                        continue

                    if inserted:
                        report.inserted += 1
                    else:
                        report.updated += 1

    return report


def main() -> None:
    """CLI entry point for loading a course catalog CSV."""

    parser = argparse.ArgumentParser(description="Load a course catalog CSV into Postgres.")
    parser.add_argument("--path", required=True, help="Path to the catalog CSV file.")
    parser.add_argument(
        "--truncate",
        action="store_true",
        help="TRUNCATE the courses table before loading (destructive).",
    )
    args = parser.parse_args()

    configure_logging()
    report = load_catalog(path=args.path, truncate=args.truncate)
    print(
        f"inserted={report.inserted} updated={report.updated} failed={report.failed} "
        f"total_processed={report.total_processed}"
    )


if __name__ == "__main__":
    main()
