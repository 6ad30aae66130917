"""Session domain models."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator

from ..utils.date_utils import ensure_utc, utc_now
from .base import SessionKeeperBaseModel, StatsModel


class SessionEntry(SessionKeeperBaseModel):
    """One stored session: an opaque payload and its absolute expiry.

    Entries are immutable. Committing a token replaces the whole entry, so a
    reader can never pair one write's payload with another write's expiry.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(description="Opaque session token")
    payload: bytes = Field(description="Caller-serialized session data")
    expiry: datetime = Field(description="Absolute UTC instant the entry stops being visible")

    @field_validator("expiry")
    @classmethod
    def _normalize_expiry(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether the entry is logically absent at ``now``."""
        if now is None:
            now = utc_now()
        return now >= self.expiry


class SessionSnapshot(SessionKeeperBaseModel):
    """On-disk representation of a file-backed entry table."""

    version: int = Field(default=1, ge=1, description="Snapshot format version")
    saved_at: datetime = Field(default_factory=utc_now, description="When the snapshot was written")
    entries: List[SessionEntry] = Field(default_factory=list, description="Stored entries")


class SweeperState(str, Enum):
    """Lifecycle states of the eviction sweeper."""

    STOPPED = "stopped"
    RUNNING = "running"
    STOPPING = "stopping"


class OperationContext(SessionKeeperBaseModel):
    """Per-call context handed to context-aware stores."""

    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Deadline for the operation (None waits indefinitely)"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Request-scoped values, e.g. a request id for logging"
    )


class StoreStats(StatsModel):
    """Statistics about a session store."""

    backend: str = Field(description="Backend implementation name")
    total_entries: int = Field(ge=0, description="Entries physically present, expired or not")
    expired_entries: int = Field(ge=0, description="Entries expired but not yet reclaimed")
    sweeper_state: Optional[SweeperState] = Field(
        default=None,
        description="Sweeper lifecycle state (None for backends with native TTL)"
    )
    last_sweep_at: Optional[datetime] = Field(
        default=None,
        description="When the last sweep completed"
    )
    total_swept: int = Field(default=0, ge=0, description="Entries removed by the sweeper so far")
