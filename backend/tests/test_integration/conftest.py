"""
Fixtures for integration tests against a real PostgreSQL database

Skipped unless TEST_DATABASE_URL points at a disposable database; every
table is truncated before each test.
"""
import os

import pytest

from app.core.database import Database


@pytest.fixture(scope="session")
def database_url():
    """
    Provides the database URL for integration tests

    Scope: session (created once per test session)
    """
    url = os.getenv("TEST_DATABASE_URL")
    if not url:
        pytest.skip("TEST_DATABASE_URL not configured")
    return url


@pytest.fixture
def real_db(database_url, settings):
    db = Database(settings.model_copy(update={"DATABASE_URL": database_url}))
    db.ensure_schema()
    with db.transaction() as cursor:
        cursor.execute("TRUNCATE categories, products, users, order_items, orders")
    yield db
    db.close()
