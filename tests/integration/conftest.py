"""
Integration Test Fixtures.

Fixtures for integration tests - a real SQLAlchemy document store on
in-memory SQLite, and a file-backed database for CLI runs.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from modules.notes.store.sql import SqlDocumentStore


def get_test_database_url() -> str:
    return "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def sql_store() -> AsyncGenerator[SqlDocumentStore, None]:
    """
    Provide a SQL document store with its schema created.

    Each test gets a fresh in-memory database, disposed afterwards.
    """
    store = SqlDocumentStore(get_test_database_url())
    await store.create_schema()
    yield store
    await store.close()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """File-backed SQLite URL, so state survives between CLI invocations."""
    return f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}"
