"""Deterministic demo data for local development and tests."""

import json
import random
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import duckdb

from config.constants import POPULAR_COUNTRIES
from config.logging_config import get_logger
from src.database.schema import ADVISOR_COLUMNS, LISTING_COLUMNS
from src.listings.schemas import slugify
from src.listings.types import (
    AdvisorStatus,
    CommissionTier,
    ListingPlan,
    ListingStatus,
    ListingType,
)

logger = get_logger("seed")

INDUSTRIES = [
    "retail", "technology", "food_beverage", "healthcare", "education",
    "manufacturing", "hospitality", "logistics", "finance", "real_estate",
]

LOCATIONS = {
    "IN": {"Maharashtra": ["Mumbai", "Pune"], "Karnataka": ["Bengaluru", "Mysuru"]},
    "US": {"California": ["San Francisco", "Los Angeles"], "Texas": ["Austin"]},
    "GB": {"England": ["London", "Manchester"]},
    "AE": {"Dubai": ["Dubai"]},
}

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


def build_listing(
    index: int,
    rng: random.Random,
    created_at: Optional[datetime] = None,
    **overrides,
) -> Dict:
    """
    Build one listing row.

    Args:
        index: Sequence number, used for the id and name.
        rng: Random source.
        created_at: Creation time (defaults to BASE_TIME + index hours).
        **overrides: Column values to force.

    Returns:
        Row dictionary keyed by LISTING_COLUMNS.
    """
    listing_type = ListingType(overrides.get("type") or rng.choice(list(ListingType)))
    country = rng.choice(list(LOCATIONS))
    state = rng.choice(list(LOCATIONS[country]))
    city = overrides.get("city") or rng.choice(LOCATIONS[country][state])
    status = rng.choice(list(ListingStatus))
    created = created_at or BASE_TIME + timedelta(hours=index)
    name = f"{listing_type.value.replace('_', ' ').title()} Listing {index:03d}"

    row = {
        "id": f"lst-{index:04d}",
        "type": listing_type.value,
        "name": name,
        "slug": slugify(name),
        "description": f"Demo {listing_type.value} listing number {index} located in {city}.",
        "short_description": f"{listing_type.value} in {city}",
        "status": status.value,
        "status_reason": None,
        "plan": rng.choice(list(ListingPlan)).value,
        "industries": rng.sample(INDUSTRIES, rng.randint(1, 3)),
        "country": country,
        "state": state,
        "city": city,
        "price": float(rng.randrange(100_000, 50_000_000, 50_000)),
        "currency": "INR",
        "is_featured": rng.random() < 0.2,
        "featured_until": None,
        "is_verified": rng.random() < 0.5,
        "is_deleted": False,
        "owner_id": f"user-{rng.randint(1, 20):03d}",
        "created_at": created,
        "updated_at": created,
        "published_at": created if status is ListingStatus.PUBLISHED else None,
    }
    row.update(overrides)
    if row.get("details") is None:
        row["details"] = json.dumps({"type": row["type"]})
    if row["is_featured"] and row["featured_until"] is None:
        row["featured_until"] = created + timedelta(days=30)
    return row


def build_advisor(index: int, rng: random.Random, **overrides) -> Dict:
    created = BASE_TIME + timedelta(hours=index)
    row = {
        "id": f"adv-{index:04d}",
        "name": f"Advisor {index:03d}",
        "email": f"advisor{index}@example.com",
        "status": rng.choice(list(AdvisorStatus)).value,
        "commission_tier": rng.choice(list(CommissionTier)).value,
        "commission_rate": round(rng.uniform(1, 20), 1),
        "country": rng.choice(POPULAR_COUNTRIES[:6]),
        "currency": rng.choice(["INR", "USD", "AED"]),
        "is_verified": rng.random() < 0.5,
        "created_at": created,
        "updated_at": created,
    }
    row.update(overrides)
    return row


def insert_listings(conn: duckdb.DuckDBPyConnection, rows: List[Dict]) -> int:
    placeholders = ", ".join("?" for _ in LISTING_COLUMNS)
    conn.executemany(
        f"INSERT INTO listings ({', '.join(LISTING_COLUMNS)}) VALUES ({placeholders})",
        [[row[c] for c in LISTING_COLUMNS] for row in rows],
    )
    return len(rows)


def insert_advisors(conn: duckdb.DuckDBPyConnection, rows: List[Dict]) -> int:
    placeholders = ", ".join("?" for _ in ADVISOR_COLUMNS)
    conn.executemany(
        f"INSERT INTO advisors ({', '.join(ADVISOR_COLUMNS)}) VALUES ({placeholders})",
        [[row[c] for c in ADVISOR_COLUMNS] for row in rows],
    )
    return len(rows)


def seed_demo_data(
    conn: duckdb.DuckDBPyConnection,
    listing_count: int = 40,
    advisor_count: int = 12,
    seed: int = 7,
) -> Dict[str, int]:
    """
    Insert demo listings and advisors.

    Args:
        conn: Connection with the schema already created.
        listing_count: Number of listings.
        advisor_count: Number of advisors.
        seed: Random seed; the same seed produces the same rows.

    Returns:
        Number of rows inserted per table.
    """
    rng = random.Random(seed)
    listings = [build_listing(i, rng) for i in range(1, listing_count + 1)]
    advisors = [build_advisor(i, rng) for i in range(1, advisor_count + 1)]

    inserted = {
        "listings": insert_listings(conn, listings),
        "advisors": insert_advisors(conn, advisors),
    }
    logger.info(f"Seeded {inserted['listings']} listings and {inserted['advisors']} advisors")
    return inserted
