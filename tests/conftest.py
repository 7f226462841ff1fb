"""Pytest configuration and fixtures for Marketplace Admin tests."""

import random
from datetime import datetime, timedelta

import pytest
import duckdb

from api.services.cache import TTLCache
from api.services.database import DatabaseService
from api.services.listing_query import ListingQueryService
from api.services.advisor_query import AdvisorQueryService
from src.database.schema import initialize_database
from src.database.seed import build_advisor, build_listing, insert_advisors, insert_listings

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)
FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0)

# (type, status, plan, industries, country, state, city, price, featured, verified)
LISTING_FIXTURES = {
    1: ("business", "published", "free", ["retail"], "IN", "Maharashtra", "Mumbai", 1_000_000, False, True),
    2: ("franchise", "pending", "basic", ["food_beverage"], "IN", "Maharashtra", "Pune", 2_500_000, False, False),
    3: ("startup", "draft", "premium", ["technology"], "US", "California", "San Francisco", 5_000_000, True, True),
    4: ("investor", "published", "platinum", ["finance", "technology"], "US", "Texas", "Austin", 10_000_000, True, False),
    5: ("digital_asset", "rejected", "advanced", ["technology", "retail"], "GB", "England", "London", 300_000, False, False),
    6: ("business", "archived", "free", ["hospitality"], "IN", "Karnataka", "Bengaluru", 750_000, False, True),
    7: ("business", "published", "basic", ["retail", "logistics"], "IN", "Karnataka", "Mysuru", 1_500_000, False, True),
    8: ("startup", "pending", "free", ["healthcare"], "AE", "Dubai", "Dubai", 4_000_000, False, False),
    9: ("franchise", "published", "premium", ["food_beverage", "retail"], "US", "California", "Los Angeles", 3_000_000, True, True),
    10: ("business", "draft", "free", ["manufacturing"], "GB", "England", "Manchester", 8_000_000, False, False),
    11: ("digital_asset", "published", "basic", ["technology"], "IN", "Maharashtra", "Mumbai", 200_000, False, True),
    12: ("investor", "pending", "advanced", ["finance"], "US", "Texas", "Austin", 20_000_000, False, False),
    13: ("business", "published", "free", ["education"], "IN", "Karnataka", "Bengaluru", 600_000, False, False),
    14: ("startup", "published", "platinum", ["technology", "healthcare"], "GB", "England", "London", 6_000_000, True, True),
}

# (status, commission_tier, commission_rate, country, currency, verified)
ADVISOR_FIXTURES = {
    1: ("active", "gold", 10.0, "IN", "INR", True),
    2: ("inactive", "bronze", 2.5, "US", "USD", False),
    3: ("pending", "silver", 5.0, "IN", "INR", False),
    4: ("active", "platinum", 15.0, "AE", "AED", True),
    5: ("verification_pending", "silver", 7.5, "GB", "USD", False),
}


def listing_id(index: int) -> str:
    return f"lst-{index:04d}"


def fixture_listings() -> list:
    """Listing rows, one created per day starting 2024-01-02, plus one deleted row."""
    rng = random.Random(1)
    rows = []
    for index, values in LISTING_FIXTURES.items():
        (listing_type, status, plan, industries, country, state, city,
         price, featured, verified) = values
        created = BASE_TIME + timedelta(days=index)
        rows.append(build_listing(
            index, rng, created_at=created,
            type=listing_type, status=status, plan=plan, industries=industries,
            country=country, state=state, city=city, price=float(price),
            is_featured=featured, is_verified=verified,
            published_at=created if status == "published" else None,
        ))
    rows[6]["name"] = "Sunrise Cafe Chain"
    rows[6]["description"] = "Three coffee shops with a loyal customer base."

    rows.append(build_listing(
        15, rng, created_at=BASE_TIME + timedelta(days=15),
        type="business", status="published", is_deleted=True,
    ))
    return rows


def fixture_advisors() -> list:
    rng = random.Random(2)
    rows = []
    for index, (status, tier, rate, country, currency, verified) in ADVISOR_FIXTURES.items():
        rows.append(build_advisor(
            index, rng,
            status=status, commission_tier=tier, commission_rate=rate,
            country=country, currency=currency, is_verified=verified,
            created_at=BASE_TIME + timedelta(days=index),
        ))
    return rows


@pytest.fixture
def test_db():
    """In-memory DuckDB with the schema and no data."""
    conn = duckdb.connect(":memory:")
    initialize_database(conn)
    yield conn
    conn.close()


@pytest.fixture
def seeded_db(test_db):
    """In-memory DuckDB with the fixture listings and advisors."""
    insert_listings(test_db, fixture_listings())
    insert_advisors(test_db, fixture_advisors())
    return test_db


@pytest.fixture
def db_service(seeded_db):
    return DatabaseService.from_connection(seeded_db)


@pytest.fixture
def listing_service(db_service):
    """ListingQueryService over the seeded database with a private cache and fixed clock."""
    return ListingQueryService(db_service, cache=TTLCache(maxsize=10, ttl=300), clock=lambda: FIXED_NOW)


@pytest.fixture
def advisor_service(db_service):
    return AdvisorQueryService(db_service, cache=TTLCache(maxsize=10, ttl=300))


@pytest.fixture
def listing_payload():
    """Valid request body for creating a business listing."""
    return {
        "name": "Corner Bakery",
        "description": "Well established neighbourhood bakery with steady footfall.",
        "plan": "basic",
        "industries": ["food_beverage"],
        "location": {"country": "in", "state": "Karnataka", "city": "Bengaluru"},
        "details": {
            "type": "business",
            "business_type": "bakery",
            "entity_type": "private_limited",
            "established_year": 2015,
            "employees": {"count": 12, "full_time": 8},
            "asking_price": {"value": 4500000, "currency": "INR"},
        },
    }


@pytest.fixture
def fixed_now():
    return FIXED_NOW
