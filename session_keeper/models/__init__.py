"""Session-keeper domain models."""

from .base import SessionKeeperBaseModel, StatsModel
from .session import (
    OperationContext,
    SessionEntry,
    SessionSnapshot,
    StoreStats,
    SweeperState,
)

__all__ = [
    "SessionKeeperBaseModel",
    "StatsModel",
    "OperationContext",
    "SessionEntry",
    "SessionSnapshot",
    "StoreStats",
    "SweeperState",
]
