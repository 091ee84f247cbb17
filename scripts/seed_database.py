#!/usr/bin/env python3
"""Populate the database with a deterministic demo dataset."""
from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from benefits.core.logger import get_logger, init_logging, log_context, timeit  # noqa: E402
from benefits.db import create_sync_engine, session_scope  # noqa: E402
from benefits.models import Base  # noqa: E402
from benefits.seed import clear_tables, generate_dataset, write_dataset  # noqa: E402

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--workers", type=int, default=1000, help="Number of workers to create")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--today", type=date.fromisoformat, default=None, help="Reference date (YYYY-MM-DD), defaults to today")
    parser.add_argument("--chunk-size", type=int, default=1000, help="Rows per INSERT batch")
    parser.add_argument("--create-tables", action="store_true", help="Create missing tables before seeding")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.create_tables:
        logger.info("Creating missing tables")
        Base.metadata.create_all(create_sync_engine())

    with timeit("dataset build", logger=logger, unit="workers", total=args.workers):
        dataset = generate_dataset(seed=args.seed, workers=args.workers, today=args.today)

    with session_scope() as session:
        logger.info("Clearing tables")
        clear_tables(session)
        counts = write_dataset(session, dataset, chunk_size=args.chunk_size)

    logger.info(
        "Seed complete: %s workers, %s enrollments, %s time entries",
        f"{counts['workers']:,}",
        f"{counts['enrollments']:,}",
        f"{counts['timeEntries']:,}",
    )


if __name__ == "__main__":
    init_logging(app_name="seed-database")
    log_context.bind(job="seed_database")
    try:
        main()
    except Exception:
        logger.exception("Seed failed")
        sys.exit(1)
