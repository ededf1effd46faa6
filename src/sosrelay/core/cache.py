from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

"""
Simple in-process TTL cache.

This cache is intentionally lightweight:
- It lives in process memory only; every worker starts empty and nothing is persisted.
- TTL is enforced on read; expired entries are reported as misses and replaced on the next `set`.
- Size is bounded crudely: once more than `max_entries` are held, the whole map is cleared
  before the next insert (not LRU).

It is used by the reverse-geocode resolver to amortize upstream lookups for
coordinates that repeat within a small area.
"""


@dataclass(frozen=True)
class CacheEntry:
    """Cached value plus the clock reading at which it was stored."""

    value: Any
    created_at: float


@dataclass
class CacheStats:
    """Cumulative cache usage stats (best-effort)."""

    hits: int = 0
    misses: int = 0
    expired: int = 0
    sets: int = 0
    clears: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "hits": int(self.hits),
            "misses": int(self.misses),
            "expired": int(self.expired),
            "sets": int(self.sets),
            "clears": int(self.clears),
        }


class TtlCache:
    """A thread-safe in-memory cache keyed by string with a fixed TTL."""

    def __init__(
        self,
        ttl_seconds: float,
        *,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.time,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._ttl_seconds = float(ttl_seconds)
        self._max_entries = int(max_entries)
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._stats = CacheStats()

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Any | None:
        """Return the cached value if present and younger than the TTL; otherwise None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats.misses += 1
                return None

            age = self._clock() - entry.created_at
            if age >= self._ttl_seconds:
                self._stats.misses += 1
                self._stats.expired += 1
                return None

            self._stats.hits += 1
            return entry.value

    def set(self, key: str, value: Any) -> None:
        """Insert or replace `key`, clearing the whole map first if it grew past the bound."""
        with self._lock:
            if len(self._entries) > self._max_entries:
                self._entries.clear()
                self._stats.clears += 1
            self._entries[key] = CacheEntry(value=value, created_at=self._clock())
            self._stats.sets += 1
