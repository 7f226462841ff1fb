"""
Schema validation middleware for the Marketplace Admin API.

Provides:
1. Startup validation - compares the database tables against the expected schema
2. X-Schema-Version header - added to all responses

Usage in api/main.py:
    from api.middleware.schema_validation import (
        SchemaVersionMiddleware,
        validate_schema_on_startup
    )

    app.add_middleware(SchemaVersionMiddleware)
"""

from typing import List, Dict, Any
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

import duckdb

from config.logging_config import get_logger
from src.database.schema import SCHEMA_VERSION, TABLE_COLUMNS

logger = get_logger("schema_validation")


class SchemaVersionMiddleware(BaseHTTPMiddleware):
    """Adds the X-Schema-Version header to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Schema-Version"] = SCHEMA_VERSION
        return response


class SchemaValidationResult:
    """Result of schema validation."""

    def __init__(self):
        self.is_valid = True
        self.missing_tables: List[str] = []
        self.missing_columns: Dict[str, List[str]] = {}
        self.warnings: List[str] = []

    def add_missing_table(self, table: str):
        self.is_valid = False
        self.missing_tables.append(table)

    def add_missing_column(self, table: str, column: str):
        self.is_valid = False
        self.missing_columns.setdefault(table, []).append(column)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "schema_version": SCHEMA_VERSION,
            "missing_tables": self.missing_tables,
            "missing_columns": self.missing_columns,
            "warnings": self.warnings,
        }

    def log_results(self):
        """Log validation results."""
        if self.is_valid and not self.warnings:
            logger.info(f"Schema validation passed (version {SCHEMA_VERSION})")
            return

        if self.missing_tables:
            logger.error(f"Missing tables: {', '.join(self.missing_tables)}")

        for table, columns in self.missing_columns.items():
            logger.warning(f"Missing columns in {table}: {', '.join(columns)}")

        for warning in self.warnings:
            logger.warning(warning)


def validate_schema_against_database(conn: duckdb.DuckDBPyConnection) -> SchemaValidationResult:
    """
    Check that every expected table and column exists.

    Args:
        conn: DuckDB database connection

    Returns:
        SchemaValidationResult with validation details
    """
    result = SchemaValidationResult()

    rows = conn.execute("""
        SELECT table_name, column_name
        FROM information_schema.columns
        WHERE table_schema = 'main'
    """).fetchall()
    db_columns: Dict[str, set] = {}
    for table_name, column_name in rows:
        db_columns.setdefault(table_name, set()).add(column_name)

    for table_name, columns in TABLE_COLUMNS.items():
        if table_name not in db_columns:
            result.add_missing_table(table_name)
            continue
        for column in columns:
            if column not in db_columns[table_name]:
                result.add_missing_column(table_name, column)

    return result


def validate_schema_on_startup():
    """
    Validate schema at application startup.

    Logs problems but does not prevent startup.
    """
    from api.services.database import get_db

    try:
        db = get_db()
        logger.info(f"Validating database schema (version {SCHEMA_VERSION})...")
        result = validate_schema_against_database(db.connect())
    except duckdb.Error as e:
        logger.error(f"Could not validate schema on startup: {e}")
        return None

    result.log_results()
    if not result.is_valid:
        logger.warning("Schema validation found issues - some features may not work correctly")
    return result
