"""In-memory TTL cache for upstream payloads, keyed by uppercased category.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
the same category may be fetched twice (once per worker). Stale entries
are never removed, only overwritten by the next successful fetch; the
key space is the small fixed set of vignette categories.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable

CACHE_TTL_SECONDS = 300


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    stored_at: float


class TTLCache:
    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry for *key* if it is younger than the TTL."""
        entry = self._store.get(key.upper())
        if entry is None:
            return None
        if self._clock() - entry.stored_at < self.ttl_seconds:
            return entry
        return None

    def set(self, key: str, payload: Any) -> None:
        key = key.upper()
        self._store[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())

    def __len__(self) -> int:
        return len(self._store)
