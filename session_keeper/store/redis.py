"""Redis-based session store implementation."""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

import redis.asyncio as redis
from redis.asyncio import Redis

from ..config.settings import Settings
from ..core.exceptions import BackendConnectionError, DatabaseError, PayloadDecodeError
from ..models.session import StoreStats
from ..utils.date_utils import to_epoch_millis
from .base import IterableSessionStore


class RedisSessionStore(IterableSessionStore):
    """Redis-based session store implementation.

    Expiry is delegated to Redis itself via ``PEXPIREAT``, so this store runs
    no sweeper. Several processes may share one Redis instance.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        prefix: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.redis_url = redis_url or self.settings.REDIS_URL
        self.prefix = self.settings.REDIS_KEY_PREFIX if prefix is None else prefix
        self._redis: Optional[Redis] = None

    async def initialize(self) -> None:
        """Initialize Redis connection."""
        try:
            self._redis = redis.from_url(self.redis_url)
            await self._redis.ping()

            self.logger.info("Redis session store initialized", url=self.redis_url, prefix=self.prefix)

        except Exception as e:
            raise BackendConnectionError(f"Failed to connect to Redis: {e}", "redis") from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            self.logger.info("Redis session store closed")

    def _require_client(self) -> Redis:
        if not self._redis:
            raise BackendConnectionError("Redis not initialized", "redis")
        return self._redis

    def _key(self, token: str) -> str:
        return f"{self.prefix}{token}"

    async def find(self, token: str) -> Tuple[Optional[bytes], bool]:
        """Find a session by token in Redis."""
        client = self._require_client()

        try:
            value = await client.get(self._key(token))
        except Exception as e:
            raise DatabaseError(f"Failed to find session in Redis: {e}", "find") from e

        if value is None:
            return None, False
        return self._decode(token, value), True

    async def commit(self, token: str, payload: bytes, expiry: datetime) -> None:
        """Store a session in Redis with an absolute millisecond deadline."""
        client = self._require_client()
        key = self._key(token)

        try:
            async with client.pipeline(transaction=True) as pipe:
                pipe.set(key, bytes(payload))
                pipe.pexpireat(key, to_epoch_millis(expiry))
                await pipe.execute()
        except Exception as e:
            raise DatabaseError(f"Failed to commit session to Redis: {e}", "commit") from e

    async def delete(self, token: str) -> None:
        """Delete a session by token from Redis."""
        client = self._require_client()

        try:
            await client.delete(self._key(token))
        except Exception as e:
            raise DatabaseError(f"Failed to delete session from Redis: {e}", "delete") from e

    async def all(self) -> Dict[str, bytes]:
        """Return every live session from Redis."""
        client = self._require_client()

        try:
            keys = await self._scan_keys(client)
            if not keys:
                return {}
            values = await client.mget(keys)
        except Exception as e:
            raise DatabaseError(f"Failed to list sessions from Redis: {e}", "all") from e

        sessions: Dict[str, bytes] = {}
        for key, value in zip(keys, values):
            # Keys expiring between SCAN and MGET come back as None
            if value is None:
                continue
            token = key[len(self.prefix):]
            sessions[token] = self._decode(token, value)
        return sessions

    async def get_stats(self) -> StoreStats:
        """Get storage statistics from Redis."""
        client = self._require_client()

        try:
            keys = await self._scan_keys(client)
        except Exception as e:
            raise DatabaseError(f"Failed to get stats from Redis: {e}", "get_stats") from e

        return StoreStats(
            backend=type(self).__name__,
            total_entries=len(keys),
            # Redis drops keys on expiry itself
            expired_entries=0,
        )

    async def _scan_keys(self, client: Redis) -> List[str]:
        keys = []
        async for key in client.scan_iter(match=f"{self.prefix}*"):
            keys.append(key.decode() if isinstance(key, bytes) else key)
        return keys

    @staticmethod
    def _decode(token: str, value) -> bytes:
        if not isinstance(value, bytes):
            raise PayloadDecodeError(
                f"Redis returned {type(value).__name__} for session, not bytes "
                "(is decode_responses enabled?)",
                token,
            )
        return value
