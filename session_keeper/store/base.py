"""Abstract base classes for session store implementations."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional, Tuple

from ..config.logging import LoggerMixin
from ..models.session import StoreStats
from .sweeper import EvictionSweeper


class SessionStore(ABC, LoggerMixin):
    """Contract every session backend implements.

    A token that is missing or expired is reported by ``find`` as
    ``(None, False)``; exceptions are reserved for backend failures.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the storage backend."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the storage backend."""
        pass

    @abstractmethod
    async def find(self, token: str) -> Tuple[Optional[bytes], bool]:
        """Return ``(payload, True)`` for a live session, ``(None, False)`` otherwise."""
        pass

    @abstractmethod
    async def commit(self, token: str, payload: bytes, expiry: datetime) -> None:
        """Insert or overwrite the session for ``token`` with an absolute expiry."""
        pass

    @abstractmethod
    async def delete(self, token: str) -> None:
        """Remove the session for ``token``. Missing tokens are a no-op."""
        pass

    @abstractmethod
    async def get_stats(self) -> StoreStats:
        """Get storage statistics."""
        pass

    async def __aenter__(self) -> "SessionStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class IterableSessionStore(SessionStore):
    """Session store that can enumerate its active sessions."""

    @abstractmethod
    async def all(self) -> Dict[str, bytes]:
        """Map of token to payload for every session that has not expired."""
        pass


def is_iterable(store: SessionStore) -> bool:
    """Check whether ``store`` supports ``all()``."""
    return isinstance(store, IterableSessionStore)


class SweepingStoreMixin(ABC):
    """Lifecycle glue for stores that reclaim expired entries themselves.

    Subclasses implement ``delete_expired`` and call ``_start_sweeper`` /
    ``_stop_sweeper`` from their ``initialize`` / ``close``.
    """

    cleanup_interval: float = 0.0
    _sweeper: Optional[EvictionSweeper] = None

    @abstractmethod
    async def delete_expired(self) -> int:
        """Physically remove expired entries. Returns count of removed entries."""
        pass

    @property
    def sweeper(self) -> EvictionSweeper:
        if self._sweeper is None:
            self._sweeper = EvictionSweeper(
                self.cleanup_interval,
                self.delete_expired,
                name=type(self).__name__,
            )
        return self._sweeper

    def _start_sweeper(self) -> None:
        self.sweeper.start()

    async def _stop_sweeper(self) -> None:
        await self.sweeper.stop()
