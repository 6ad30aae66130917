"""Utility functions and helpers."""

from .async_utils import run_with_timeout
from .date_utils import (
    ensure_utc,
    expiry_from_ttl,
    to_epoch_millis,
    truncate_to_millis,
    utc_now,
)

__all__ = [
    "run_with_timeout",
    "ensure_utc",
    "expiry_from_ttl",
    "to_epoch_millis",
    "truncate_to_millis",
    "utc_now",
]
