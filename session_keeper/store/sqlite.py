"""SQLite-based session store implementation."""

from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import aiosqlite

from ..config.settings import Settings
from ..core.exceptions import DatabaseError, PayloadDecodeError
from ..models.session import StoreStats
from ..utils.date_utils import to_epoch_millis, utc_now
from .base import IterableSessionStore, SweepingStoreMixin


class SQLiteSessionStore(IterableSessionStore, SweepingStoreMixin):
    """SQLite-based session store implementation.

    Expiry is stored as integer epoch milliseconds. Every read filters on
    ``expiry > now``, so rows left behind between sweeps are never returned.
    """

    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        cleanup_interval: Optional[float] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.db_path = Path(db_path) if db_path is not None else self.settings.SQLITE_DATABASE_PATH
        self.cleanup_interval = (
            self.settings.CLEANUP_INTERVAL_SECONDS if cleanup_interval is None else cleanup_interval
        )
        self._connection: Optional[aiosqlite.Connection] = None

    async def initialize(self) -> None:
        """Initialize SQLite database and start the sweeper."""
        try:
            # Ensure directory exists
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self._connection = await aiosqlite.connect(self.db_path)
            await self._create_tables()

        except Exception as e:
            raise DatabaseError(f"Failed to initialize SQLite storage: {e}", "initialize") from e

        self._start_sweeper()
        self.logger.info(
            "SQLite session store initialized",
            db_path=str(self.db_path),
            cleanup_interval=self.cleanup_interval,
        )

    async def close(self) -> None:
        """Stop the sweeper and close the SQLite connection."""
        await self._stop_sweeper()
        if self._connection:
            await self._connection.close()
            self._connection = None
            self.logger.info("SQLite session store closed")

    async def _create_tables(self) -> None:
        """Create necessary database tables."""
        create_table_sql = """
        CREATE TABLE IF NOT EXISTS sessions (
            token TEXT PRIMARY KEY,
            data BLOB NOT NULL,
            expiry INTEGER NOT NULL
        )
        """

        create_index_sql = """
        CREATE INDEX IF NOT EXISTS idx_sessions_expiry ON sessions(expiry);
        """

        if self._connection:
            await self._connection.execute(create_table_sql)
            await self._connection.executescript(create_index_sql)
            await self._connection.commit()

    def _require_connection(self) -> aiosqlite.Connection:
        if not self._connection:
            raise DatabaseError("Storage not initialized")
        return self._connection

    async def find(self, token: str) -> Tuple[Optional[bytes], bool]:
        """Find a live session by token in SQLite."""
        connection = self._require_connection()

        try:
            cursor = await connection.execute(
                "SELECT data FROM sessions WHERE token = ? AND expiry > ?",
                (token, to_epoch_millis(utc_now())),
            )
            row = await cursor.fetchone()
        except Exception as e:
            raise DatabaseError(f"Failed to find session: {e}", "find") from e

        if not row:
            return None, False
        return self._decode(token, row[0]), True

    async def commit(self, token: str, payload: bytes, expiry: datetime) -> None:
        """Insert or replace a session in SQLite."""
        connection = self._require_connection()

        try:
            await connection.execute(
                "INSERT OR REPLACE INTO sessions (token, data, expiry) VALUES (?, ?, ?)",
                (token, bytes(payload), to_epoch_millis(expiry)),
            )
            await connection.commit()
        except Exception as e:
            raise DatabaseError(f"Failed to commit session: {e}", "commit") from e

    async def delete(self, token: str) -> None:
        """Delete a session by token from SQLite."""
        connection = self._require_connection()

        try:
            await connection.execute("DELETE FROM sessions WHERE token = ?", (token,))
            await connection.commit()
        except Exception as e:
            raise DatabaseError(f"Failed to delete session: {e}", "delete") from e

    async def all(self) -> Dict[str, bytes]:
        """Return every live session from SQLite."""
        connection = self._require_connection()

        try:
            cursor = await connection.execute(
                "SELECT token, data FROM sessions WHERE expiry > ?",
                (to_epoch_millis(utc_now()),),
            )
            rows = await cursor.fetchall()
        except Exception as e:
            raise DatabaseError(f"Failed to list sessions: {e}", "all") from e

        return {token: self._decode(token, data) for token, data in rows}

    async def delete_expired(self) -> int:
        """Remove expired sessions from SQLite."""
        connection = self._require_connection()

        try:
            cursor = await connection.execute(
                "DELETE FROM sessions WHERE expiry <= ?",
                (to_epoch_millis(utc_now()),),
            )
            await connection.commit()

            return cursor.rowcount

        except Exception as e:
            raise DatabaseError(f"Failed to delete expired sessions: {e}", "delete_expired") from e

    async def get_stats(self) -> StoreStats:
        """Get storage statistics from SQLite."""
        connection = self._require_connection()

        try:
            cursor = await connection.execute("SELECT COUNT(*) FROM sessions")
            total = (await cursor.fetchone())[0]

            cursor = await connection.execute(
                "SELECT COUNT(*) FROM sessions WHERE expiry <= ?",
                (to_epoch_millis(utc_now()),),
            )
            expired = (await cursor.fetchone())[0]

        except Exception as e:
            raise DatabaseError(f"Failed to get stats: {e}", "get_stats") from e

        return StoreStats(
            backend=type(self).__name__,
            total_entries=total,
            expired_entries=expired,
            sweeper_state=self.sweeper.state,
            last_sweep_at=self.sweeper.last_sweep_at,
            total_swept=self.sweeper.total_removed,
        )

    @staticmethod
    def _decode(token: str, data) -> bytes:
        if not isinstance(data, bytes):
            raise PayloadDecodeError(
                f"Session data column holds {type(data).__name__}, not bytes", token
            )
        return data
