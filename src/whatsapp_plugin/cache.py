"""
Bounded TTL Cache

In-memory cache used by the client for contacts and sent messages.
Entries go stale after `ttl_seconds`; the cache never holds more than
`max_entries` keys.
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the time it was written."""

    value: Any
    timestamp: float


class TTLCache:
    """
    Capacity-bounded cache with time-to-live on read.

    When a write would exceed capacity, expired entries are purged first,
    then the oldest entries are evicted.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or stale."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry):
            return None
        return entry.value

    def get_entry(self, key: str) -> CacheEntry | None:
        """Return the fresh entry with its timestamp, or None."""
        entry = self._entries.get(key)
        if entry is None or self._is_expired(entry):
            return None
        return entry

    def set(self, key: str, value: Any) -> CacheEntry:
        """Store a value, evicting if the cache is full."""
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            self._make_room()

        entry = CacheEntry(value=value, timestamp=self._clock())
        self._entries[key] = entry
        return entry

    def evict(self, key: str) -> bool:
        """Remove a key. Returns True if it was present."""
        return self._entries.pop(key, None) is not None

    def purge_expired(self) -> int:
        """Drop every stale entry and return how many were removed."""
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key)  # type: ignore[arg-type]
        return entry is not None and not self._is_expired(entry)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp > self.ttl_seconds

    def _make_room(self) -> None:
        purged = self.purge_expired()
        while len(self._entries) >= self.max_entries:
            key, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cache entry {key}", extra={"purged": purged})
