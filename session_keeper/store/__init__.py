"""Session store package.

This package provides the session persistence backends:
- base: the store contract and the iterable capability
- memory: in-process store with lazy expiry and a background sweeper
- file: in-process store mirrored to a JSON snapshot file
- sqlite: SQLite-based store for local persistence
- redis: Redis-based store relying on native key expiry
- context: context-aware capability and adapters for plain stores
"""

from .base import IterableSessionStore, SessionStore, SweepingStoreMixin, is_iterable
from .context import (
    ContextSessionStore,
    IterableContextSessionStore,
    IterableStoreAdapter,
    StoreAdapter,
    adapt,
)
from .factory import create_session_store
from .file import FileSessionStore
from .memory import InMemorySessionStore
from .redis import RedisSessionStore
from .sqlite import SQLiteSessionStore
from .sweeper import EvictionSweeper
from .table import EntryTable

__all__ = [
    "SessionStore",
    "IterableSessionStore",
    "SweepingStoreMixin",
    "is_iterable",
    "ContextSessionStore",
    "IterableContextSessionStore",
    "StoreAdapter",
    "IterableStoreAdapter",
    "adapt",
    "create_session_store",
    "FileSessionStore",
    "InMemorySessionStore",
    "RedisSessionStore",
    "SQLiteSessionStore",
    "EvictionSweeper",
    "EntryTable",
]
