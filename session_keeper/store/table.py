"""Thread-safe entry table shared by the in-process session stores."""

import threading
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..models.session import SessionEntry


class EntryTable:
    """Token-keyed map of session entries guarded by a single lock.

    Every method holds the lock only for the duration of its own dictionary
    work, so foreground calls and the sweeper interleave at method
    granularity. Expiry is checked against the ``now`` passed in by the
    caller; readers never receive an expired entry.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, SessionEntry] = {}
        self._lock = threading.RLock()

    def get(self, token: str, now: datetime) -> Optional[SessionEntry]:
        """Return the live entry for ``token``, dropping it if it has expired."""
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._entries[token]
                return None
            return entry

    def set(self, entry: SessionEntry) -> None:
        """Insert or replace the entry for ``entry.token``."""
        with self._lock:
            self._entries[entry.token] = entry

    def discard(self, token: str) -> bool:
        """Remove ``token`` if present. Returns True if an entry was removed."""
        with self._lock:
            return self._entries.pop(token, None) is not None

    def live_items(self, now: datetime) -> Dict[str, SessionEntry]:
        """Consistent snapshot of every entry not yet expired at ``now``."""
        with self._lock:
            return {
                token: entry
                for token, entry in self._entries.items()
                if not entry.is_expired(now)
            }

    def expired_tokens(self, now: datetime) -> List[str]:
        """Tokens whose entries are expired at ``now``."""
        with self._lock:
            return [token for token, entry in self._entries.items() if entry.is_expired(now)]

    def discard_expired(self, tokens: Iterable[str], now: datetime) -> int:
        """Remove the given tokens that are still expired at ``now``.

        Entries re-committed since ``tokens`` was collected carry a new expiry
        and are left alone.
        """
        removed = 0
        with self._lock:
            for token in tokens:
                entry = self._entries.get(token)
                if entry is not None and entry.is_expired(now):
                    del self._entries[token]
                    removed += 1
        return removed

    def snapshot(self) -> List[SessionEntry]:
        """Copy of every physically present entry, expired ones included."""
        with self._lock:
            return list(self._entries.values())

    def load(self, entries: Iterable[SessionEntry]) -> None:
        """Replace the table contents."""
        loaded = {entry.token: entry for entry in entries}
        with self._lock:
            self._entries = loaded

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._entries
