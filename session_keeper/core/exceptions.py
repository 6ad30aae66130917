"""Custom exceptions for session-keeper.

A missing or expired session is never an exception: stores report it through
the ``found`` flag returned by ``find``.
"""

from typing import Any, Dict, Optional


class SessionStoreError(Exception):
    """Base exception for all session-keeper errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [self.message]
        if self.error_code:
            parts.append(f"(code: {self.error_code})")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigurationError(SessionStoreError):
    """Raised when there's a configuration issue."""

    def __init__(self, message: str, config_key: Optional[str] = None) -> None:
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)


class PayloadDecodeError(SessionStoreError):
    """Raised when a stored value cannot be read back as a session payload."""

    def __init__(self, message: str, token: Optional[str] = None) -> None:
        details = {"token": token} if token else {}
        super().__init__(message, "PAYLOAD_DECODE_ERROR", details)


class StorageError(SessionStoreError):
    """Raised when the backing storage fails (disk I/O, driver errors)."""

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        details = {"operation": operation} if operation else {}
        super().__init__(message, "STORAGE_ERROR", details)


class DatabaseError(StorageError):
    """Raised when there's a database issue."""

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        super().__init__(message, operation)
        self.error_code = "DATABASE_ERROR"


class BackendConnectionError(StorageError):
    """Raised when a remote backend cannot be reached."""

    def __init__(self, message: str, service: Optional[str] = None) -> None:
        super().__init__(message)
        self.error_code = "CONNECTION_ERROR"
        if service:
            self.details["service"] = service


class StoreTimeoutError(SessionStoreError):
    """Raised when a store operation exceeds its context deadline."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        super().__init__(
            f"Store operation '{operation}' timed out after {timeout_seconds}s",
            "STORE_TIMEOUT",
            {"operation": operation, "timeout_seconds": timeout_seconds},
        )
