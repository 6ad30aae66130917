"""Context-aware session store interfaces and adapters.

Some callers carry per-request state (deadlines, request ids) that they want
honoured by the store. Rather than giving every store a second set of methods,
context awareness is a separate capability: ``ContextSessionStore`` and
``IterableContextSessionStore``. ``StoreAdapter`` and ``IterableStoreAdapter``
lift a plain store into that capability.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional, Tuple

from ..core.exceptions import ConfigurationError
from ..models.session import OperationContext
from ..utils.async_utils import run_with_timeout
from .base import IterableSessionStore, SessionStore


class ContextSessionStore(ABC):
    """Session store whose operations take an OperationContext."""

    @abstractmethod
    async def find(self, ctx: OperationContext, token: str) -> Tuple[Optional[bytes], bool]:
        pass

    @abstractmethod
    async def commit(
        self, ctx: OperationContext, token: str, payload: bytes, expiry: datetime
    ) -> None:
        pass

    @abstractmethod
    async def delete(self, ctx: OperationContext, token: str) -> None:
        pass


class IterableContextSessionStore(ContextSessionStore):
    """Context-aware session store that can enumerate active sessions."""

    @abstractmethod
    async def all(self, ctx: OperationContext) -> Dict[str, bytes]:
        pass


class StoreAdapter(ContextSessionStore):
    """Expose a plain SessionStore through the context-aware interface.

    The context's ``timeout_seconds`` bounds each call; exceeding it raises
    StoreTimeoutError.
    """

    def __init__(self, store: SessionStore) -> None:
        self.store = store

    async def find(self, ctx: OperationContext, token: str) -> Tuple[Optional[bytes], bool]:
        return await run_with_timeout(self.store.find(token), ctx.timeout_seconds, "find")

    async def commit(
        self, ctx: OperationContext, token: str, payload: bytes, expiry: datetime
    ) -> None:
        await run_with_timeout(
            self.store.commit(token, payload, expiry), ctx.timeout_seconds, "commit"
        )

    async def delete(self, ctx: OperationContext, token: str) -> None:
        await run_with_timeout(self.store.delete(token), ctx.timeout_seconds, "delete")


class IterableStoreAdapter(StoreAdapter, IterableContextSessionStore):
    """Expose an IterableSessionStore through the context-aware interface."""

    def __init__(self, store: SessionStore) -> None:
        if not isinstance(store, IterableSessionStore):
            raise ConfigurationError(
                f"{type(store).__name__} does not support iteration", "store"
            )
        super().__init__(store)

    async def all(self, ctx: OperationContext) -> Dict[str, bytes]:
        return await run_with_timeout(self.store.all(), ctx.timeout_seconds, "all")


def adapt(store: SessionStore) -> ContextSessionStore:
    """Wrap ``store`` in the richest context-aware adapter it supports."""
    if isinstance(store, IterableSessionStore):
        return IterableStoreAdapter(store)
    return StoreAdapter(store)
