"""Pytest configuration and shared fixtures for session-keeper tests."""

import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio

from session_keeper.config.settings import Settings
from session_keeper.store import FileSessionStore, InMemorySessionStore, SQLiteSessionStore


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Create test settings with temporary directories."""
    return Settings(
        DEBUG=True,
        LOG_LEVEL="DEBUG",

        # Storage paths (temporary)
        FILE_STORE_PATH=temp_dir / "sessions.json",
        SQLITE_DATABASE_PATH=temp_dir / "sessions.db",

        # Sweeping disabled unless a test opts in
        CLEANUP_INTERVAL_SECONDS=0,
        SWEEP_BATCH_SIZE=2,

        REDIS_URL="redis://localhost:6379/15",
    )


@pytest_asyncio.fixture
async def memory_store(test_settings: Settings) -> AsyncGenerator[InMemorySessionStore, None]:
    """Create and initialize an in-memory store without a sweeper."""
    store = InMemorySessionStore(settings=test_settings)
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def file_store(test_settings: Settings) -> AsyncGenerator[FileSessionStore, None]:
    """Create and initialize a file-backed store in a temporary directory."""
    store = FileSessionStore(settings=test_settings)
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def sqlite_store(test_settings: Settings) -> AsyncGenerator[SQLiteSessionStore, None]:
    """Create and initialize a SQLite store in a temporary directory."""
    store = SQLiteSessionStore(settings=test_settings)
    await store.initialize()
    yield store
    await store.close()


# Environment cleanup
@pytest.fixture(autouse=True)
def cleanup_env():
    """Clean up environment variables before/after tests."""
    original_env = dict(os.environ)

    yield

    os.environ.clear()
    os.environ.update(original_env)
