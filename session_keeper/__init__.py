"""
session-keeper - Pluggable session persistence with expiring entries.

This package provides:
- A common async contract (find / commit / delete / all) for session stores
- In-memory and file-backed stores with lazy expiry and background sweeping
- SQLite and Redis backends
- Context-aware adapters that enforce per-call deadlines
"""

__version__ = "0.1.0"

from .config.settings import Settings
from .store import (
    FileSessionStore,
    InMemorySessionStore,
    IterableSessionStore,
    RedisSessionStore,
    SessionStore,
    SQLiteSessionStore,
    create_session_store,
)

__all__ = [
    "Settings",
    "SessionStore",
    "IterableSessionStore",
    "InMemorySessionStore",
    "FileSessionStore",
    "SQLiteSessionStore",
    "RedisSessionStore",
    "create_session_store",
]
