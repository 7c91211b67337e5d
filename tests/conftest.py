"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Explicit Settings instances (no .env, no ambient environment secrets)
- A PostgreSQL connection pool for integration suites (skipped when unreachable)
- Database cleanup between tests
"""

import os
from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import Settings
from tests.helpers import DEFAULT_TEST_DATABASE_URL, make_settings


@pytest.fixture
def settings() -> Settings:
    """Settings instance suitable for unit tests."""
    return make_settings()


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Connection pool against DATABASE_URL with migrations applied."""
    database_url = os.environ.get("DATABASE_URL", DEFAULT_TEST_DATABASE_URL)
    pool = ConnectionPool(conninfo=database_url, min_size=1, max_size=10, open=True)
    try:
        pool.wait(timeout=5)
    except PoolTimeout:
        pool.close()
        pytest.skip(f"PostgreSQL not reachable at {database_url}")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty every table before the test."""
    with pool.connection() as conn:
        conn.execute(
            "TRUNCATE email_outbox, invite_codes, mailbox_aliases, mailbox_for_user, "
            "mailboxes, users RESTART IDENTITY CASCADE"
        )
        conn.commit()
    yield
