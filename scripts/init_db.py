#!/usr/bin/env python
"""
Create the marketplace database and optionally load demo data.

Usage:
    python scripts/init_db.py [options]

Options:
    --db PATH           Custom database path
    --seed              Insert demo listings and advisors
    --listings N        Number of demo listings (default 40)
    --advisors N        Number of demo advisors (default 12)
    --reset             Drop existing tables first
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import config
from config.logging_config import setup_logging, get_logger
from src.database import (
    drop_all_tables,
    get_connection,
    get_table_counts,
    initialize_database,
    seed_demo_data,
)


def main(argv=None) -> int:
    """Main entry point for database initialization."""
    parser = argparse.ArgumentParser(
        description="Create the marketplace DuckDB database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--db", type=Path, default=config.database.path, help="Custom database path")
    parser.add_argument("--seed", action="store_true", help="Insert demo data")
    parser.add_argument("--listings", type=int, default=40, help="Number of demo listings")
    parser.add_argument("--advisors", type=int, default=12, help="Number of demo advisors")
    parser.add_argument("--random-seed", type=int, default=7, help="Random seed for demo data")
    parser.add_argument("--reset", action="store_true", help="Drop existing tables first")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=config.app.log_level.upper(),
        help="Logging level",
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = get_logger("init_db")

    with get_connection(args.db) as conn:
        if args.reset:
            logger.warning(f"Dropping all tables in {args.db}")
            drop_all_tables(conn)
        initialize_database(conn)

        if args.seed:
            if get_table_counts(conn)["listings"] and not args.reset:
                logger.error("Database already has listings; use --reset to reseed")
                return 1
            seed_demo_data(conn, args.listings, args.advisors, seed=args.random_seed)

        for table, count in get_table_counts(conn).items():
            logger.info(f"{table}: {count:,} rows")

    return 0


if __name__ == "__main__":
    sys.exit(main())
