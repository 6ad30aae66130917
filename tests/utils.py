"""Test utilities and helper functions for session-keeper tests."""

import asyncio
from datetime import datetime, timedelta, UTC
from typing import Awaitable, Callable, Dict, List
from unittest.mock import AsyncMock, MagicMock

from session_keeper.models.session import SessionEntry
from session_keeper.store.base import SessionStore


class SessionTestHelper:
    """Helper class for session-related testing."""

    @staticmethod
    def future(seconds: float = 60) -> datetime:
        """An expiry ``seconds`` from now."""
        return datetime.now(UTC) + timedelta(seconds=seconds)

    @staticmethod
    def past(seconds: float = 10) -> datetime:
        """An expiry ``seconds`` ago."""
        return datetime.now(UTC) - timedelta(seconds=seconds)

    @staticmethod
    def create_entry(
        token: str = "session_token",
        payload: bytes = b"encoded_data",
        expired: bool = False,
    ) -> SessionEntry:
        """Create a session entry that is live or already expired."""
        expiry = SessionTestHelper.past() if expired else SessionTestHelper.future()
        return SessionEntry(token=token, payload=payload, expiry=expiry)

    @staticmethod
    async def commit_batch(
        store: SessionStore,
        count: int = 5,
        token_prefix: str = "token",
        expired: bool = False,
    ) -> Dict[str, bytes]:
        """Commit ``count`` sessions and return the token -> payload map."""
        committed = {}
        expiry = SessionTestHelper.past() if expired else SessionTestHelper.future()
        for i in range(count):
            token = f"{token_prefix}_{i}"
            payload = f"payload_{i}".encode()
            await store.commit(token, payload, expiry)
            committed[token] = payload
        return committed


class MockFactory:
    """Factory for creating common mocks."""

    @staticmethod
    def create_redis_mock(keys: List[str] = None) -> AsyncMock:
        """Create a mock Redis client whose SCAN yields ``keys``."""
        redis_mock = AsyncMock()
        redis_mock.ping.return_value = True
        redis_mock.get.return_value = None
        redis_mock.delete.return_value = 1
        redis_mock.mget.return_value = []
        redis_mock.aclose.return_value = None

        scanned = [key.encode() for key in (keys or [])]

        async def mock_scan_iter(match="*"):
            """Mock async iterator for Redis scan_iter."""
            for key in scanned:
                yield key

        redis_mock.scan_iter = mock_scan_iter

        # Pipelines buffer commands synchronously and execute on await
        pipeline = MagicMock()
        pipeline.__aenter__ = AsyncMock(return_value=pipeline)
        pipeline.__aexit__ = AsyncMock(return_value=False)
        pipeline.execute = AsyncMock(return_value=[True, True])
        redis_mock.pipeline = MagicMock(return_value=pipeline)

        return redis_mock


async def wait_until(
    predicate: Callable[[], Awaitable[bool]],
    timeout: float = 2.0,
    interval: float = 0.02,
) -> bool:
    """Poll ``predicate`` until it returns True or ``timeout`` elapses."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if await predicate():
            return True
        await asyncio.sleep(interval)
    return await predicate()
