"""Pytest fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.services.cache import clear_all_caches
from api.services.database import DatabaseService, set_db


@pytest.fixture
def client(seeded_db):
    """TestClient backed by the seeded in-memory database."""
    set_db(DatabaseService.from_connection(seeded_db))
    clear_all_caches()
    with TestClient(app) as c:
        yield c
    clear_all_caches()
    set_db(None)


@pytest.fixture
def empty_client(test_db):
    """TestClient backed by an initialized but empty database."""
    set_db(DatabaseService.from_connection(test_db))
    clear_all_caches()
    with TestClient(app) as c:
        yield c
    clear_all_caches()
    set_db(None)
