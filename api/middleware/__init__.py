"""API Middleware package."""

from api.middleware.schema_validation import (
    SchemaVersionMiddleware,
    validate_schema_on_startup,
    validate_schema_against_database,
)

__all__ = [
    "SchemaVersionMiddleware",
    "validate_schema_on_startup",
    "validate_schema_against_database",
]
