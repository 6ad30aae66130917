"""Date and time utility functions.

Expiry instants are compared at millisecond precision everywhere: the SQLite
and Redis backends persist epoch milliseconds, and the in-process backends
truncate on commit so that all backends agree on when an entry expires.
"""

from datetime import datetime, timedelta, UTC
from typing import Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_epoch_millis(value: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch."""
    value = ensure_utc(value)
    delta = value - datetime(1970, 1, 1, tzinfo=UTC)
    return (delta.days * 86_400_000) + (delta.seconds * 1000) + (delta.microseconds // 1000)


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision from an aware datetime."""
    value = ensure_utc(value)
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def expiry_from_ttl(
    ttl_seconds: float,
    base_time: Optional[datetime] = None,
) -> datetime:
    """Turn a relative TTL into the absolute expiry instant a store expects."""
    if base_time is None:
        base_time = utc_now()

    return ensure_utc(base_time) + timedelta(seconds=ttl_seconds)
