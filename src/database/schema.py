"""DuckDB schema definitions for the marketplace database.

Tables:
- listings: every listing sub-type in one table; type-specific fields in ``details``
- listing_status_history: append-only log of status changes
- advisors: marketplace advisors
"""

from typing import Optional
import duckdb

from config.logging_config import get_logger

logger = get_logger("schema")

SCHEMA_VERSION = "1.0"

# =============================================================================
# CONSTRAINT NOTES
# =============================================================================
# - listings.price holds the amount the price filter matches: asking price
#   (business, digital asset), total initial investment (franchise), current
#   raising amount (startup) or minimum ticket (investor).
# - listings are soft deleted (is_deleted); queries always exclude them.
# - listing_status_history.listing_id -> listings.id
# =============================================================================

# =============================================================================
# LISTINGS
# =============================================================================

CREATE_LISTINGS = """
CREATE TABLE IF NOT EXISTS listings (
    id VARCHAR PRIMARY KEY,
    type VARCHAR NOT NULL CHECK (type IN ('business', 'franchise', 'startup', 'investor', 'digital_asset')),
    name VARCHAR NOT NULL,
    slug VARCHAR,
    description VARCHAR,
    short_description VARCHAR,

    -- Workflow
    status VARCHAR NOT NULL DEFAULT 'draft'
        CHECK (status IN ('draft', 'pending', 'published', 'rejected', 'archived')),
    status_reason VARCHAR,
    plan VARCHAR NOT NULL DEFAULT 'free'
        CHECK (plan IN ('free', 'basic', 'advanced', 'premium', 'platinum')),

    -- Classification
    industries VARCHAR[],

    -- Location
    country VARCHAR,
    state VARCHAR,
    city VARCHAR,

    -- Price used for range filtering
    price DOUBLE,
    currency VARCHAR DEFAULT 'INR',

    -- Flags
    is_featured BOOLEAN DEFAULT FALSE,
    featured_until TIMESTAMP,
    is_verified BOOLEAN DEFAULT FALSE,
    is_deleted BOOLEAN DEFAULT FALSE,

    owner_id VARCHAR,
    details VARCHAR,  -- JSON document of type-specific fields

    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    published_at TIMESTAMP
)
"""

CREATE_LISTING_STATUS_HISTORY = """
CREATE TABLE IF NOT EXISTS listing_status_history (
    id INTEGER PRIMARY KEY DEFAULT nextval('listing_status_history_id_seq'),
    listing_id VARCHAR NOT NULL,
    status VARCHAR NOT NULL,
    reason VARCHAR,
    updated_by VARCHAR,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""

# =============================================================================
# ADVISORS
# =============================================================================

CREATE_ADVISORS = """
CREATE TABLE IF NOT EXISTS advisors (
    id VARCHAR PRIMARY KEY,
    name VARCHAR NOT NULL,
    email VARCHAR,
    status VARCHAR NOT NULL DEFAULT 'pending'
        CHECK (status IN ('active', 'inactive', 'pending', 'verification_pending')),
    commission_tier VARCHAR DEFAULT 'bronze'
        CHECK (commission_tier IN ('bronze', 'silver', 'gold', 'platinum')),
    commission_rate DOUBLE CHECK (commission_rate BETWEEN 0 AND 100),
    country VARCHAR,
    currency VARCHAR DEFAULT 'INR',
    is_verified BOOLEAN DEFAULT FALSE,
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""

CREATE_APP_SETTINGS = """
CREATE TABLE IF NOT EXISTS app_settings (
    key VARCHAR PRIMARY KEY,
    value VARCHAR
)
"""

CREATE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_listings_status ON listings(status)",
    "CREATE INDEX IF NOT EXISTS idx_listings_type ON listings(type)",
    "CREATE INDEX IF NOT EXISTS idx_listings_created ON listings(created_at)",
    "CREATE INDEX IF NOT EXISTS idx_history_listing ON listing_status_history(listing_id)",
    "CREATE INDEX IF NOT EXISTS idx_advisors_status ON advisors(status)",
]

LISTING_COLUMNS = [
    "id", "type", "name", "slug", "description", "short_description", "status",
    "status_reason", "plan", "industries", "country", "state", "city", "price",
    "currency", "is_featured", "featured_until", "is_verified", "is_deleted",
    "owner_id", "details", "created_at", "updated_at", "published_at",
]

ADVISOR_COLUMNS = [
    "id", "name", "email", "status", "commission_tier", "commission_rate",
    "country", "currency", "is_verified", "created_at", "updated_at",
]

TABLE_COLUMNS = {
    "listings": LISTING_COLUMNS,
    "advisors": ADVISOR_COLUMNS,
    "listing_status_history": ["id", "listing_id", "status", "reason", "updated_by", "created_at"],
}

TABLES = ["listings", "listing_status_history", "advisors", "app_settings"]


def create_all_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """
    Create all database tables.

    Args:
        conn: DuckDB connection.
    """
    conn.execute("CREATE SEQUENCE IF NOT EXISTS listing_status_history_id_seq")

    tables = [
        ("listings", CREATE_LISTINGS),
        ("listing_status_history", CREATE_LISTING_STATUS_HISTORY),
        ("advisors", CREATE_ADVISORS),
        ("app_settings", CREATE_APP_SETTINGS),
    ]

    for table_name, create_sql in tables:
        try:
            conn.execute(create_sql)
            logger.debug(f"Created table: {table_name}")
        except duckdb.Error as e:
            logger.error(f"Error creating table {table_name}: {e}")
            raise


def create_all_indexes(conn: duckdb.DuckDBPyConnection) -> None:
    for index_sql in CREATE_INDEXES:
        conn.execute(index_sql)
    logger.debug(f"Created {len(CREATE_INDEXES)} indexes")


def initialize_database(conn: duckdb.DuckDBPyConnection) -> None:
    """
    Initialize the database with all tables and indexes.

    Args:
        conn: DuckDB connection.
    """
    logger.info("Initializing database schema...")
    create_all_tables(conn)
    create_all_indexes(conn)
    conn.execute(
        "INSERT OR REPLACE INTO app_settings (key, value) VALUES ('schema_version', ?)",
        [SCHEMA_VERSION],
    )
    logger.info("Database initialization complete")


def get_schema_version(conn: duckdb.DuckDBPyConnection) -> Optional[str]:
    """
    Get the stored schema version.

    Returns:
        Schema version string, or None if the database is not initialized.
    """
    try:
        result = conn.execute(
            "SELECT value FROM app_settings WHERE key = 'schema_version'"
        ).fetchone()
    except duckdb.CatalogException:
        return None
    return result[0] if result else None


def get_table_counts(conn: duckdb.DuckDBPyConnection) -> dict:
    """
    Get row counts for the main tables.

    Returns:
        Dictionary mapping table names to row counts (0 for missing tables).
    """
    counts = {}
    for table in TABLES[:-1]:
        try:
            result = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
            counts[table] = result[0] if result else 0
        except duckdb.CatalogException:
            counts[table] = 0
    return counts


def drop_all_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Drop all tables (use with caution!)."""
    for table in reversed(TABLES):
        conn.execute(f"DROP TABLE IF EXISTS {table}")
        logger.info(f"Dropped table: {table}")
    conn.execute("DROP SEQUENCE IF EXISTS listing_status_history_id_seq")
