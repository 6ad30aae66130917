"""File-backed session store implementation.

Keeps the in-memory entry table and mirrors it to a JSON snapshot after every
write, so sessions survive a process restart. Every write rewrites the whole
file, which makes this store suitable for development and small deployments
only.
"""

import asyncio
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from pydantic import ValidationError

from ..config.settings import Settings
from ..core.exceptions import PayloadDecodeError, StorageError
from ..models.session import SessionSnapshot, StoreStats
from ..utils.date_utils import utc_now
from .memory import InMemorySessionStore


class FileSessionStore(InMemorySessionStore):
    """In-memory session store persisted to a snapshot file."""

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        cleanup_interval: Optional[float] = None,
        sweep_batch_size: Optional[int] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        super().__init__(cleanup_interval, sweep_batch_size, settings)
        self.path = Path(path) if path is not None else self.settings.FILE_STORE_PATH
        self._write_lock = threading.Lock()
        self._load_lock = asyncio.Lock()
        self._loaded = False

    async def initialize(self) -> None:
        """Load the snapshot file (if any) and start the sweeper."""
        await self._ensure_loaded()
        await super().initialize()

    async def find(self, token: str) -> Tuple[Optional[bytes], bool]:
        await self._ensure_loaded()
        return await super().find(token)

    async def commit(self, token: str, payload: bytes, expiry: datetime) -> None:
        """Store the entry and rewrite the snapshot.

        If the snapshot cannot be written a ``StorageError`` is raised, but the
        entry stays in memory and remains visible to ``find`` until the process
        exits or a later write persists it.
        """
        await self._ensure_loaded()
        await super().commit(token, payload, expiry)
        await self._persist()

    async def delete(self, token: str) -> None:
        await self._ensure_loaded()
        if self.table.discard(token):
            await self._persist()

    async def all(self) -> Dict[str, bytes]:
        await self._ensure_loaded()
        return await super().all()

    async def get_stats(self) -> StoreStats:
        await self._ensure_loaded()
        return await super().get_stats()

    async def delete_expired(self) -> int:
        await self._ensure_loaded()
        removed = await super().delete_expired()
        if removed:
            await self._persist()
        return removed

    async def _ensure_loaded(self) -> None:
        # The snapshot must be in the table before any write rewrites the file.
        if self._loaded:
            return
        async with self._load_lock:
            if self._loaded:
                return
            loaded = await asyncio.to_thread(self._load_file)
            self._loaded = True
        self.logger.info("Session snapshot loaded", path=str(self.path), entries=loaded)

    async def _persist(self) -> None:
        await asyncio.to_thread(self._save_file)

    def _load_file(self) -> int:
        if not self.path.exists():
            return 0

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read session file {self.path}: {e}", "load") from e

        try:
            snapshot = SessionSnapshot.model_validate_json(raw)
        except ValidationError as e:
            raise PayloadDecodeError(f"Corrupt session file {self.path}: {e}") from e

        now = utc_now()
        live = [entry for entry in snapshot.entries if not entry.is_expired(now)]
        self.table.load(live)
        return len(live)

    def _save_file(self) -> None:
        # Snapshot inside the write lock so later writers never persist older state.
        with self._write_lock:
            data = SessionSnapshot(entries=self.table.snapshot()).model_dump_json()
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(
                    prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as fh:
                        fh.write(data)
                    os.replace(tmp_path, self.path)
                except BaseException:
                    Path(tmp_path).unlink(missing_ok=True)
                    raise
            except OSError as e:
                raise StorageError(f"Failed to write session file {self.path}: {e}", "save") from e
