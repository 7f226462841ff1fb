"""Database connection service for FastAPI."""

import threading
import duckdb
from typing import Optional
from pathlib import Path

from api.config import get_settings
from config.logging_config import get_logger
from src.database.schema import initialize_database

logger = get_logger("api.database")


class DatabaseService:
    """Manages one DuckDB connection for the API.

    Request handlers and page fetchers run on worker threads, so every
    statement and its fetch happen under a lock.
    """

    def __init__(self, db_path: Optional[Path] = None, initialize: bool = True):
        """Initialize database service.

        Args:
            db_path: Path to database file, or ":memory:".
            initialize: Create missing tables on first connect.
        """
        settings = get_settings()
        self.db_path = db_path or settings.database_path
        self.initialize = initialize
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = threading.RLock()

    def connect(self) -> duckdb.DuckDBPyConnection:
        """Get or create database connection."""
        with self._lock:
            if self._connection is None:
                if str(self.db_path) != ":memory:":
                    Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                self._connection = duckdb.connect(str(self.db_path))
                if self.initialize:
                    initialize_database(self._connection)
                logger.info(f"API connected to {self.db_path}")
            return self._connection

    @classmethod
    def from_connection(cls, connection: duckdb.DuckDBPyConnection) -> "DatabaseService":
        """Wrap an existing connection (tests, scripts)."""
        service = cls(db_path=Path(":memory:"), initialize=False)
        service._connection = connection
        return service

    def _execute(self, query: str, params: Optional[list] = None):
        conn = self.connect()
        if params:
            return conn.execute(query, params)
        return conn.execute(query)

    def execute(self, query: str, params: Optional[list] = None) -> None:
        """Execute a statement without fetching results."""
        with self._lock:
            self._execute(query, params)

    def fetch_one(self, query: str, params: Optional[list] = None):
        """Execute query and fetch one result."""
        with self._lock:
            return self._execute(query, params).fetchone()

    def fetch_all(self, query: str, params: Optional[list] = None):
        """Execute query and fetch all results."""
        with self._lock:
            return self._execute(query, params).fetchall()

    def fetch_dicts(self, query: str, params: Optional[list] = None) -> list[dict]:
        """Execute query and fetch rows as dictionaries keyed by column name."""
        with self._lock:
            result = self._execute(query, params)
            columns = [d[0] for d in result.description]
            return [dict(zip(columns, row)) for row in result.fetchall()]

    def fetch_df(self, query: str, params: Optional[list] = None):
        """Execute query and return as DataFrame."""
        with self._lock:
            return self._execute(query, params).df()

    def transaction(self):
        """Hold the lock and run statements in a transaction.

        Example:
            with db.transaction() as conn:
                conn.execute("UPDATE listings SET ...")
        """
        return _Transaction(self)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._connection:
                self._connection.close()
                self._connection = None


class _Transaction:
    def __init__(self, service: DatabaseService):
        self._service = service

    def __enter__(self) -> duckdb.DuckDBPyConnection:
        self._service._lock.acquire()
        conn = self._service.connect()
        conn.execute("BEGIN TRANSACTION")
        return conn

    def __exit__(self, exc_type, exc_val, exc_tb):
        conn = self._service.connect()
        try:
            if exc_type is None:
                conn.execute("COMMIT")
            else:
                conn.execute("ROLLBACK")
        finally:
            self._service._lock.release()
        return False


# Global database instance
_db_service: Optional[DatabaseService] = None


def get_db() -> DatabaseService:
    """Get global database service instance."""
    global _db_service
    if _db_service is None:
        _db_service = DatabaseService()
    return _db_service


def set_db(service: Optional[DatabaseService]) -> None:
    """Replace the global database service (tests, scripts)."""
    global _db_service
    _db_service = service


def close_db() -> None:
    """Close the global database connection."""
    global _db_service
    if _db_service is not None:
        _db_service.close()
