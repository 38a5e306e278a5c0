"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Configuration is read from the real config/settings/*.yaml files, so the
working directory is pinned to the project root for the whole session.
"""

import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from modules.notes.core.config import get_app_config, get_settings
from modules.notes.events.publishers import NoteEventPublisher
from modules.notes.store.memory import InMemoryDocumentStore

PROJECT_ROOT = Path(__file__).resolve().parent.parent


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def _project_root_cwd() -> Generator[None, None, None]:
    """Run every test from the project root so .project_root is found."""
    previous = os.getcwd()
    os.chdir(PROJECT_ROOT)
    yield
    os.chdir(previous)


@pytest.fixture(autouse=True)
def _clear_config_cache() -> Generator[None, None, None]:
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
async def memory_store() -> AsyncGenerator[InMemoryDocumentStore, None]:
    """
    Provide an empty in-memory document store for a single test.

    Subscriptions are closed after the test.
    """
    store = InMemoryDocumentStore()
    yield store
    await store.close()


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def work_fields() -> dict[str, Any]:
    return {"title": "T1", "content": "C1", "category": "work"}


@pytest.fixture
def mock_publisher() -> AsyncMock:
    """Event publisher double; every publish method is an AsyncMock."""
    return AsyncMock(spec=NoteEventPublisher)

