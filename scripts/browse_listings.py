#!/usr/bin/env python
"""
Browse listings from the console.

Builds a filter with the filter editor, then pages through the results
with the pagination controller, one page per Enter key press.

Usage:
    python scripts/browse_listings.py [options]

Examples:
    python scripts/browse_listings.py --status pending --type business,startup
    python scripts/browse_listings.py --preset featured --min-price 500000
    python scripts/browse_listings.py --search cafe --country IN --state Karnataka
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from api.services.database import DatabaseService
from api.services.fetchers import ServicePageFetcher
from api.services.listing_query import ListingQueryService
from config import config, get_table_config
from config.constants import (
    LISTING_PLAN_LABELS,
    LISTING_STATUS_LABELS,
    LISTING_TYPE_LABELS,
    get_label,
)
from config.logging_config import setup_logging
from src.filters.editor import FilterEditor
from src.filters.filter_state import ListingFilterState
from src.filters.presets import get_preset
from src.pagination.controller import ResultPaginationController, ViewState
from src.pagination.notifications import RecordingNotifier


def build_editor(args) -> FilterEditor:
    """Apply command line filters to a fresh editor and commit them."""
    editor = FilterEditor(ListingFilterState, initial_search=args.search)

    if args.preset:
        preset = get_preset(args.preset)
        if preset is None:
            raise SystemExit(f"Unknown preset: {args.preset}")
        editor.apply_preset(preset)

    for field_name in ("type", "status", "industries", "plan"):
        for value in _split(getattr(args, field_name)):
            editor.toggle(field_name, value)
    if args.featured is not None:
        editor.set_tri_state("is_featured", args.featured == "include")
    if args.verified is not None:
        editor.set_tri_state("is_verified", args.verified == "include")
    for part in ("country", "state", "city"):
        if getattr(args, part):
            editor.set_location(part, getattr(args, part))
    for field_name, bound, value in (
        ("price_range", "min", args.min_price),
        ("price_range", "max", args.max_price),
        ("date_range", "from", args.date_from),
        ("date_range", "to", args.date_to),
    ):
        if value is not None:
            editor.set_range(field_name, bound, value)

    editor.apply()
    return editor


def _split(value: Optional[str]) -> list:
    return [v.strip() for v in value.split(",") if v.strip()] if value else []


def print_records(records: list, offset: int) -> None:
    for i, record in enumerate(records, start=offset + 1):
        price = f"{record['price']:,.0f} {record['currency']}" if record.get("price") is not None else "-"
        flags = "".join([
            "F" if record.get("is_featured") else "-",
            "V" if record.get("is_verified") else "-",
        ])
        status = get_label(LISTING_STATUS_LABELS, record["status"])
        listing_type = get_label(LISTING_TYPE_LABELS, record["type"])
        plan = get_label(LISTING_PLAN_LABELS, record["plan"])
        print(
            f"{i:4d}. [{status:<9}] {flags} {record['name'][:40]:<40} "
            f"{listing_type:<13} {plan:<9} {record.get('city') or '':<14} {price}"
        )


def print_status_counts(counts: dict) -> None:
    tabs = [f"{get_label(LISTING_STATUS_LABELS, status)} {count}" for status, count in counts.items()]
    print(" | ".join(tabs))


async def browse(args) -> int:
    editor = build_editor(args)
    notifier = RecordingNotifier()
    service = ListingQueryService(DatabaseService(args.db, initialize=False))
    controller = ResultPaginationController(
        ServicePageFetcher(service), page_size=args.page_size, notifier=notifier
    )

    print(f"Filters ({editor.active_filter_count}): {editor.committed.summary()}")
    await controller.commit(editor.committed)
    if controller.state is not ViewState.ERROR:
        print_status_counts(service.fetch_counts("status"))

    shown = 0
    try:
        while True:
            if controller.state is ViewState.ERROR:
                print(f"Error: {notifier.errors[-1]}")
                return 1
            if controller.is_empty:
                print("No listings match these filters.")
                return 0

            records = controller.records
            print_records(records[shown:], shown)
            shown = len(records)

            if not controller.has_more:
                print(f"-- end of results ({shown} listings) --")
                return 0
            if args.all:
                await controller.load_more()
                continue

            answer = await asyncio.to_thread(input, "-- more? [Enter / q] ")
            if answer.strip().lower().startswith("q"):
                return 0
            await controller.load_more()
    finally:
        controller.close()
        service.db.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Browse marketplace listings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--db", type=Path, default=config.database.path, help="Database path")
    parser.add_argument("--preset", help="Start from a built-in preset")
    parser.add_argument("--search", help="Free-text search")
    parser.add_argument("--type", help="Comma-separated listing types")
    parser.add_argument("--status", help="Comma-separated statuses")
    parser.add_argument("--industries", help="Comma-separated industries")
    parser.add_argument("--plan", help="Comma-separated plans")
    parser.add_argument("--featured", choices=["include", "exclude"])
    parser.add_argument("--verified", choices=["include", "exclude"])
    parser.add_argument("--country")
    parser.add_argument("--state")
    parser.add_argument("--city")
    parser.add_argument("--min-price")
    parser.add_argument("--max-price")
    parser.add_argument("--date-from")
    parser.add_argument("--date-to")
    parser.add_argument("--page-size", type=int, default=get_table_config().default_page_size)
    parser.add_argument("--all", action="store_true", help="Print every page without prompting")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    args = parser.parse_args(argv)

    args.page_size = max(1, min(args.page_size, get_table_config().max_page_size))

    setup_logging(args.log_level)
    return asyncio.run(browse(args))


if __name__ == "__main__":
    sys.exit(main())
