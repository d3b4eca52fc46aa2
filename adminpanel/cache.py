"""
Request Cache - short-lived store for data captured per request.

Entries are written once (capture phase), read once or more (render phase)
and only ever removed by expiry. Keys are request identifiers, so concurrent
requests never share an entry.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional
import logging
import threading
import time

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """One cached value and its expiry time (clock seconds)."""

    value: Any
    expires_at: float


class RequestCache:
    """
    Thread-safe in-memory cache with per-entry lifetime.

    Features:
    - Expired entries are never returned
    - Garbage collection purges expired entries and is safe to call concurrently
    - Injectable clock for testing
    """

    def __init__(
        self,
        default_lifetime: int = 600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_lifetime = default_lifetime
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: Any, lifetime: Optional[int] = None) -> None:
        """Store ``value`` under ``key`` for ``lifetime`` seconds (default lifetime if None)."""
        if not key:
            raise ValueError("Cache key must not be empty")
        lifetime = self.default_lifetime if lifetime is None else lifetime
        entry = CacheEntry(value=value, expires_at=self._clock() + lifetime)
        with self._lock:
            self._entries[key] = entry

    def get(self, key: Optional[str]) -> Any:
        """Return the value for ``key`` or None if absent or expired."""
        if not key:
            return None
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or entry.expires_at <= self._clock():
            return None
        return entry.value

    def has(self, key: Optional[str]) -> bool:
        return self.get(key) is not None

    def remove(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def flush(self) -> None:
        with self._lock:
            self._entries.clear()

    def collect_garbage(self) -> int:
        """
        Remove all expired entries.

        Returns:
            int: Number of entries removed by this call
        """
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Request cache garbage collection removed {len(expired)} entr(y/ies)")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
