"""In-memory key/value store with per-entry expiry and a background sweep."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger("tweetfleet.cache")

V = TypeVar("V")

# Pass as ``ttl`` to store an entry that only leaves the store by delete/flush.
NO_EXPIRY: float = -1


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    expires_at: Optional[float] = None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class EphemeralStore(Generic[V]):
    """Thread-safe TTL store.

    ``ttl=None`` or ``0`` on :meth:`set` means "use the store default";
    a negative ttl (:data:`NO_EXPIRY`) disables automatic expiry for that
    entry. Reads never depend on :meth:`sweep` having run.
    """

    def __init__(
        self,
        *,
        default_ttl: float,
        sweep_interval: float,
        clock: Callable[[], float] = time.monotonic,
        name: str = "store",
    ) -> None:
        self._default_ttl = default_ttl
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._name = name
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry[V]] = {}

    @property
    def sweep_interval(self) -> float:
        return self._sweep_interval

    def _expires_at(self, ttl: Optional[float]) -> Optional[float]:
        if not ttl:
            ttl = self._default_ttl
        if ttl < 0:
            return None
        return self._clock() + ttl

    def _live_entry_unlocked(self, key: str) -> Optional[CacheEntry[V]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del self._entries[key]
            return None
        return entry

    def set(self, key: str, value: V, ttl: Optional[float] = None) -> None:
        entry = CacheEntry(value=value, expires_at=self._expires_at(ttl))
        with self._lock:
            self._entries[key] = entry

    def get(self, key: str, default: Optional[V] = None) -> Optional[V]:
        with self._lock:
            entry = self._live_entry_unlocked(key)
        return default if entry is None else entry.value

    def contains(self, key: str) -> bool:
        with self._lock:
            return self._live_entry_unlocked(key) is not None

    def pop(self, key: str, default: Optional[V] = None) -> Optional[V]:
        """Remove and return a live entry in one step."""
        with self._lock:
            entry = self._live_entry_unlocked(key)
            if entry is None:
                return default
            del self._entries[key]
        return entry.value

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def flush(self) -> None:
        with self._lock:
            self._entries.clear()

    def sweep(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.expired(now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    async def run_sweeper(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            removed = self.sweep()
            if removed:
                logger.debug("Swept %d expired entries from %s", removed, self._name)
