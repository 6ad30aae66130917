"""Async utility functions."""

import asyncio
from typing import Awaitable, Optional, TypeVar

from ..core.exceptions import StoreTimeoutError

T = TypeVar('T')


async def run_with_timeout(
    coro: Awaitable[T],
    timeout_seconds: Optional[float],
    operation: str,
) -> T:
    """Await a coroutine, raising StoreTimeoutError if it outlives the timeout.

    A timeout of None waits indefinitely.
    """
    if timeout_seconds is None:
        return await coro
    try:
        return await asyncio.wait_for(coro, timeout=timeout_seconds)
    except asyncio.TimeoutError as e:
        raise StoreTimeoutError(operation, timeout_seconds) from e
