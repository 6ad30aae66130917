"""Backend selection for session stores."""

from typing import Optional

from ..config.logging import store_logger
from ..config.settings import Settings
from ..core.exceptions import ConfigurationError
from .base import SessionStore
from .file import FileSessionStore
from .memory import InMemorySessionStore
from .redis import RedisSessionStore
from .sqlite import SQLiteSessionStore


def create_session_store(settings: Optional[Settings] = None) -> SessionStore:
    """Build the backend named by ``settings.STORE_BACKEND``.

    The returned store is not initialized; callers own its lifecycle and must
    ``await store.initialize()`` (or use ``async with``) before serving
    requests, and ``await store.close()`` on shutdown.
    """
    settings = settings or Settings()
    backend = settings.STORE_BACKEND.strip().lower()

    if backend == "memory":
        store: SessionStore = InMemorySessionStore(settings=settings)
    elif backend == "file":
        store = FileSessionStore(settings=settings)
    elif backend == "sqlite":
        store = SQLiteSessionStore(settings=settings)
    elif backend == "redis":
        store = RedisSessionStore(settings=settings)
    else:
        raise ConfigurationError(f"Unknown session store backend: {settings.STORE_BACKEND}", "STORE_BACKEND")

    store_logger.debug("Session store created", backend=type(store).__name__)
    return store
