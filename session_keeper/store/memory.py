"""In-memory session store implementation."""

import asyncio
from datetime import datetime
from typing import Dict, Optional, Tuple

from ..config.settings import Settings
from ..core.exceptions import ConfigurationError, PayloadDecodeError
from ..models.session import SessionEntry, StoreStats
from ..utils.date_utils import truncate_to_millis, utc_now
from .base import IterableSessionStore, SweepingStoreMixin
from .table import EntryTable


class InMemorySessionStore(IterableSessionStore, SweepingStoreMixin):
    """Session store held entirely in process memory.

    All data is lost when the process exits. Expired entries are hidden from
    readers immediately and reclaimed by the background sweeper every
    ``cleanup_interval`` seconds (0 disables the sweeper).
    """

    def __init__(
        self,
        cleanup_interval: Optional[float] = None,
        sweep_batch_size: Optional[int] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.cleanup_interval = (
            self.settings.CLEANUP_INTERVAL_SECONDS if cleanup_interval is None else cleanup_interval
        )
        self.sweep_batch_size = (
            self.settings.SWEEP_BATCH_SIZE if sweep_batch_size is None else sweep_batch_size
        )
        if self.sweep_batch_size < 1:
            raise ConfigurationError(
                f"Sweep batch size must be at least 1, got {self.sweep_batch_size}",
                "SWEEP_BATCH_SIZE",
            )
        self.table = EntryTable()

    async def initialize(self) -> None:
        """Start the background sweeper."""
        self._start_sweeper()
        self.logger.info(
            "Session store initialized",
            backend=type(self).__name__,
            cleanup_interval=self.cleanup_interval,
        )

    async def close(self) -> None:
        """Stop the background sweeper. Stored entries are kept."""
        await self._stop_sweeper()
        self.logger.info("Session store closed", backend=type(self).__name__)

    async def find(self, token: str) -> Tuple[Optional[bytes], bool]:
        entry = self.table.get(token, utc_now())
        if entry is None:
            return None, False
        return self._payload_of(entry), True

    async def commit(self, token: str, payload: bytes, expiry: datetime) -> None:
        self.table.set(self._make_entry(token, payload, expiry))

    async def delete(self, token: str) -> None:
        self.table.discard(token)

    async def all(self) -> Dict[str, bytes]:
        live = self.table.live_items(utc_now())
        return {token: self._payload_of(entry) for token, entry in live.items()}

    async def delete_expired(self) -> int:
        """Remove expired entries in batches, releasing the lock between batches."""
        now = utc_now()
        expired = self.table.expired_tokens(now)
        removed = 0
        for start in range(0, len(expired), self.sweep_batch_size):
            batch = expired[start:start + self.sweep_batch_size]
            removed += self.table.discard_expired(batch, now)
            # Let foreground requests run between batches.
            await asyncio.sleep(0)
        return removed

    async def get_stats(self) -> StoreStats:
        """Get storage statistics."""
        now = utc_now()
        return StoreStats(
            backend=type(self).__name__,
            total_entries=len(self.table),
            expired_entries=len(self.table.expired_tokens(now)),
            sweeper_state=self.sweeper.state,
            last_sweep_at=self.sweeper.last_sweep_at,
            total_swept=self.sweeper.total_removed,
        )

    @staticmethod
    def _make_entry(token: str, payload: bytes, expiry: datetime) -> SessionEntry:
        return SessionEntry(token=token, payload=payload, expiry=truncate_to_millis(expiry))

    @staticmethod
    def _payload_of(entry: SessionEntry) -> bytes:
        if not isinstance(entry.payload, bytes):
            raise PayloadDecodeError(
                f"Stored value for session is {type(entry.payload).__name__}, not bytes",
                entry.token,
            )
        return entry.payload
