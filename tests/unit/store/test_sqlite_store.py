"""Tests for the SQLite session store."""

import asyncio
from datetime import timedelta

import pytest

from session_keeper.config.settings import Settings
from session_keeper.core.exceptions import DatabaseError, PayloadDecodeError
from session_keeper.models.session import SweeperState
from session_keeper.store import SQLiteSessionStore
from session_keeper.utils.date_utils import to_epoch_millis, utc_now
from tests.utils import SessionTestHelper, wait_until


async def count_rows(store: SQLiteSessionStore, token: str) -> int:
    cursor = await store._connection.execute(
        "SELECT COUNT(*) FROM sessions WHERE token = ?", (token,)
    )
    return (await cursor.fetchone())[0]


class TestSQLiteSessionStore:
    """Test SQLite session store implementation."""

    async def test_initialize_creates_database_file(self, test_settings: Settings):
        store = SQLiteSessionStore(settings=test_settings)
        assert not test_settings.SQLITE_DATABASE_PATH.exists()

        await store.initialize()

        assert test_settings.SQLITE_DATABASE_PATH.exists()
        await store.close()

    async def test_initialize_creates_table_and_index(self, sqlite_store: SQLiteSessionStore):
        cursor = await sqlite_store._connection.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='sessions'"
        )
        assert await cursor.fetchone() is not None

        cursor = await sqlite_store._connection.execute(
            "SELECT name FROM sqlite_master WHERE type='index' AND name='idx_sessions_expiry'"
        )
        assert await cursor.fetchone() is not None

    async def test_commit_stores_epoch_millis(self, sqlite_store: SQLiteSessionStore):
        expiry = SessionTestHelper.future()

        await sqlite_store.commit("tok", b"data", expiry)

        cursor = await sqlite_store._connection.execute(
            "SELECT data, expiry FROM sessions WHERE token = ?", ("tok",)
        )
        data, stored_expiry = await cursor.fetchone()
        assert data == b"data"
        assert stored_expiry == to_epoch_millis(expiry)

    async def test_find_missing(self, sqlite_store: SQLiteSessionStore):
        assert await sqlite_store.find("missing") == (None, False)

    async def test_commit_overwrites(self, sqlite_store: SQLiteSessionStore):
        await sqlite_store.commit("tok1", b"v1", SessionTestHelper.future())
        assert await sqlite_store.find("tok1") == (b"v1", True)

        await sqlite_store.commit("tok1", b"v2", SessionTestHelper.future())

        assert await sqlite_store.find("tok1") == (b"v2", True)
        assert await count_rows(sqlite_store, "tok1") == 1

    async def test_expired_row_is_invisible_before_sweep(self, sqlite_store: SQLiteSessionStore):
        await sqlite_store.commit("tok", b"v", SessionTestHelper.past())

        assert await sqlite_store.find("tok") == (None, False)
        assert await sqlite_store.all() == {}
        assert await count_rows(sqlite_store, "tok") == 1

    async def test_expiry(self, sqlite_store: SQLiteSessionStore):
        await sqlite_store.commit("tok2", b"data", utc_now() + timedelta(milliseconds=100))
        assert (await sqlite_store.find("tok2"))[1] is True

        await asyncio.sleep(0.15)

        assert (await sqlite_store.find("tok2"))[1] is False

    async def test_delete(self, sqlite_store: SQLiteSessionStore):
        await sqlite_store.commit("tok", b"v", SessionTestHelper.future())

        await sqlite_store.delete("tok")

        assert await sqlite_store.find("tok") == (None, False)
        assert await count_rows(sqlite_store, "tok") == 0

    async def test_delete_missing_is_noop(self, sqlite_store: SQLiteSessionStore):
        await sqlite_store.delete("never_committed")

    async def test_all(self, sqlite_store: SQLiteSessionStore):
        live = await SessionTestHelper.commit_batch(sqlite_store, 3, "live")
        await SessionTestHelper.commit_batch(sqlite_store, 2, "dead", expired=True)

        assert await sqlite_store.all() == live

    async def test_text_data_raises_decode_error(self, sqlite_store: SQLiteSessionStore):
        await sqlite_store._connection.execute(
            "INSERT INTO sessions (token, data, expiry) VALUES (?, ?, ?)",
            ("tok", "not_a_blob", to_epoch_millis(SessionTestHelper.future())),
        )
        await sqlite_store._connection.commit()

        with pytest.raises(PayloadDecodeError):
            await sqlite_store.find("tok")

    async def test_delete_expired(self, sqlite_store: SQLiteSessionStore):
        await SessionTestHelper.commit_batch(sqlite_store, 2, "live")
        await SessionTestHelper.commit_batch(sqlite_store, 3, "dead", expired=True)

        removed = await sqlite_store.delete_expired()

        assert removed == 3
        stats = await sqlite_store.get_stats()
        assert stats.total_entries == 2
        assert stats.expired_entries == 0

    async def test_sweeper_removes_expired_rows(self, test_settings: Settings):
        store = SQLiteSessionStore(cleanup_interval=0.05, settings=test_settings)
        await store.initialize()
        try:
            await store.commit("tok", b"v", utc_now() + timedelta(milliseconds=20))

            async def gone() -> bool:
                return await count_rows(store, "tok") == 0

            assert await wait_until(gone, timeout=1.0)
            assert store.sweeper.total_removed >= 1
        finally:
            await store.close()

    async def test_get_stats(self, sqlite_store: SQLiteSessionStore):
        await SessionTestHelper.commit_batch(sqlite_store, 2, "live")
        await SessionTestHelper.commit_batch(sqlite_store, 1, "dead", expired=True)

        stats = await sqlite_store.get_stats()

        assert stats.backend == "SQLiteSessionStore"
        assert stats.total_entries == 3
        assert stats.expired_entries == 1
        assert stats.sweeper_state == SweeperState.STOPPED

    async def test_error_handling_without_initialization(self, test_settings: Settings):
        store = SQLiteSessionStore(settings=test_settings)

        with pytest.raises(DatabaseError):
            await store.commit("tok", b"v", SessionTestHelper.future())

        with pytest.raises(DatabaseError):
            await store.find("tok")

        with pytest.raises(DatabaseError):
            await store.delete("tok")

        with pytest.raises(DatabaseError):
            await store.all()

    async def test_close_cleans_up_connection(self, sqlite_store: SQLiteSessionStore):
        assert sqlite_store._connection is not None

        await sqlite_store.close()

        assert sqlite_store._connection is None

    async def test_close_twice_is_safe(self, sqlite_store: SQLiteSessionStore):
        await sqlite_store.close()
        await sqlite_store.close()

    async def test_concurrent_operations(self, sqlite_store: SQLiteSessionStore):
        expiry = SessionTestHelper.future()
        await asyncio.gather(*[
            sqlite_store.commit(f"concurrent_{i}", f"v{i}".encode(), expiry) for i in range(10)
        ])

        results = await asyncio.gather(*[
            sqlite_store.find(f"concurrent_{i}") for i in range(10)
        ])

        assert all(found for _, found in results)
