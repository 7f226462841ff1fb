"""Tests for database module."""

import pytest
import duckdb

from src.database import (
    SCHEMA_VERSION,
    DatabaseConnection,
    drop_all_tables,
    get_connection,
    get_memory_connection,
    get_schema_version,
    get_table_counts,
    initialize_database,
    seed_demo_data,
)
from src.database.schema import TABLE_COLUMNS
from api.middleware.schema_validation import validate_schema_against_database
from api.services.database import DatabaseService


class TestDatabaseConnection:
    """Tests for database connection functions."""

    def test_get_memory_connection(self):
        """Test in-memory connection."""
        conn = get_memory_connection()
        assert conn.execute("SELECT 1").fetchone()[0] == 1
        conn.close()

    def test_get_connection_creates_file(self, tmp_path):
        """Test file-based connection."""
        db_path = tmp_path / "nested" / "test.duckdb"

        with get_connection(db_path) as conn:
            conn.execute("CREATE TABLE test (id INTEGER)")
            conn.execute("INSERT INTO test VALUES (1)")

        assert db_path.exists()

    def test_memory_database_connection(self):
        with DatabaseConnection(":memory:") as db:
            assert db.is_memory
            assert db.execute("SELECT ?", [41]).fetchone()[0] == 41
        assert db._connection is None

    def test_read_only(self, tmp_path):
        db_path = tmp_path / "ro.duckdb"
        with get_connection(db_path) as conn:
            initialize_database(conn)

        with get_connection(db_path, read_only=True) as conn:
            assert get_schema_version(conn) == SCHEMA_VERSION
            with pytest.raises(duckdb.Error):
                conn.execute("DELETE FROM listings")


class TestSchema:
    """Tests for database schema functions."""

    def test_initialize_creates_tables(self, test_db):
        tables = {
            row[0] for row in test_db.execute(
                "SELECT table_name FROM information_schema.tables WHERE table_schema = 'main'"
            ).fetchall()
        }
        assert {"listings", "listing_status_history", "advisors", "app_settings"} <= tables

    def test_initialize_is_idempotent(self, test_db):
        initialize_database(test_db)
        assert get_schema_version(test_db) == SCHEMA_VERSION

    def test_schema_version_missing(self):
        conn = get_memory_connection()
        assert get_schema_version(conn) is None
        assert get_table_counts(conn) == {"listings": 0, "listing_status_history": 0, "advisors": 0}
        conn.close()

    def test_schema_matches_column_lists(self, test_db):
        result = validate_schema_against_database(test_db)
        assert result.is_valid
        assert result.to_dict()["missing_tables"] == []

    def test_validation_reports_missing_table(self, test_db):
        test_db.execute("DROP TABLE advisors")
        result = validate_schema_against_database(test_db)
        assert not result.is_valid
        assert result.missing_tables == ["advisors"]

    def test_check_constraint(self, test_db):
        with pytest.raises(duckdb.ConstraintException):
            test_db.execute("INSERT INTO listings (id, type, name) VALUES ('x', 'boat', 'Boat')")

    def test_history_ids_from_sequence(self, test_db):
        for status in ("draft", "pending"):
            test_db.execute(
                "INSERT INTO listing_status_history (listing_id, status) VALUES ('x', ?)", [status]
            )
        ids = [r[0] for r in test_db.execute("SELECT id FROM listing_status_history ORDER BY id").fetchall()]
        assert ids == [1, 2]

    def test_drop_all_tables(self, test_db):
        drop_all_tables(test_db)
        assert get_schema_version(test_db) is None

    def test_listing_columns_known(self):
        assert "status_reason" in TABLE_COLUMNS["listings"]


class TestSeed:
    """Tests for demo data."""

    def test_seed_counts(self, test_db):
        inserted = seed_demo_data(test_db, listing_count=25, advisor_count=4)
        assert inserted == {"listings": 25, "advisors": 4}
        assert get_table_counts(test_db)["listings"] == 25

    def test_seed_is_deterministic(self):
        rows = []
        for _ in range(2):
            conn = get_memory_connection()
            initialize_database(conn)
            seed_demo_data(conn, listing_count=10, advisor_count=2, seed=3)
            rows.append(conn.execute("SELECT id, type, status, price FROM listings ORDER BY id").fetchall())
            conn.close()
        assert rows[0] == rows[1]

    def test_featured_rows_have_expiry(self, seeded_db):
        missing = seeded_db.execute(
            "SELECT COUNT(*) FROM listings WHERE is_featured AND featured_until IS NULL"
        ).fetchone()[0]
        assert missing == 0


class TestDatabaseService:
    """Tests for the API database service."""

    def test_initializes_file_database(self, tmp_path):
        service = DatabaseService(tmp_path / "api" / "test.duckdb")
        try:
            assert service.fetch_one("SELECT value FROM app_settings WHERE key = 'schema_version'")[0] == SCHEMA_VERSION
        finally:
            service.close()

    def test_fetch_dicts(self, db_service):
        rows = db_service.fetch_dicts("SELECT id, name FROM advisors WHERE id = ?", ["adv-0001"])
        assert rows == [{"id": "adv-0001", "name": "Advisor 001"}]

    def test_transaction_rolls_back(self, db_service):
        with pytest.raises(RuntimeError):
            with db_service.transaction() as conn:
                conn.execute("UPDATE advisors SET name = 'Changed' WHERE id = 'adv-0001'")
                raise RuntimeError("abort")
        assert db_service.fetch_one("SELECT name FROM advisors WHERE id = 'adv-0001'")[0] == "Advisor 001"

    def test_fetch_df(self, db_service):
        df = db_service.fetch_df("SELECT id FROM advisors ORDER BY id")
        assert list(df["id"]) == [f"adv-{i:04d}" for i in range(1, 6)]
