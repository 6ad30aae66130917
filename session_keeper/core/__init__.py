"""Core error types for session-keeper."""

from .exceptions import (
    BackendConnectionError,
    ConfigurationError,
    DatabaseError,
    PayloadDecodeError,
    SessionStoreError,
    StorageError,
    StoreTimeoutError,
)

__all__ = [
    "SessionStoreError",
    "ConfigurationError",
    "PayloadDecodeError",
    "StorageError",
    "DatabaseError",
    "BackendConnectionError",
    "StoreTimeoutError",
]
