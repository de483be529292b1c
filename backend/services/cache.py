"""In-memory cache of the latest ThingSpeak record per (channel, api key).

Entries never expire out of the store: a stale entry is still served when
ThingSpeak is unreachable, so freshness is only checked on read. Each uvicorn
worker has its own cache instance.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable

# Entries younger than this are served without contacting ThingSpeak.
CACHE_TTL_SECONDS = 15.0


@dataclass(frozen=True)
class LookupKey:
    channel: str
    api_key: str


@dataclass(frozen=True)
class CacheEntry:
    record: dict[str, Any]
    fetched_at: float


class RecordCache:
    def __init__(self, ttl_seconds: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._store: dict[LookupKey, CacheEntry] = {}

    def get(self, key: LookupKey) -> CacheEntry | None:
        """Return the entry for ``key`` regardless of age."""
        return self._store.get(key)

    def get_fresh(self, key: LookupKey) -> CacheEntry | None:
        entry = self._store.get(key)
        if entry is not None and self.is_fresh(entry):
            return entry
        return None

    def set(self, key: LookupKey, record: dict[str, Any]) -> CacheEntry:
        entry = CacheEntry(record=record, fetched_at=self.clock())
        self._store[key] = entry
        return entry

    def is_fresh(self, entry: CacheEntry) -> bool:
        return self.clock() - entry.fetched_at < self.ttl_seconds

    def __len__(self) -> int:
        return len(self._store)
