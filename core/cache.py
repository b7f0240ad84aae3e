"""In-process TTL cache for roadmap API results, keyed by filter expression.

Eviction is by insertion order, not by access recency: once the cache is full
the oldest stored key goes first, however often it has been read.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from core.models import RoadmapItem

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 300.0
CACHE_MAX_ENTRIES = 50
NO_FILTER_KEY = "<no-filter>"


@dataclass(frozen=True)
class CacheEntry:
    key: str
    items: Tuple[RoadmapItem, ...]
    fetched_at: float


class ResultCache:
    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        max_entries: int = CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def lookup(self, key: str) -> Optional[Tuple[RoadmapItem, ...]]:
        """Return the cached items for `key`, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at >= self.ttl_seconds:
            return None
        return entry.items

    def store(self, key: str, items: Sequence[RoadmapItem]) -> None:
        # re-storing a key moves it to the newest position
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(key=key, items=tuple(items), fetched_at=self._clock())
        if len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.info("Cache full, evicted %r", oldest)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries = {}
        logger.info("Cache cleared (%d entries)", count)
        return count

    def stats(self) -> Dict[str, Any]:
        now = self._clock()
        return {
            "size": len(self._entries),
            "maxEntries": self.max_entries,
            "ttlSeconds": self.ttl_seconds,
            "entries": [
                {
                    "key": entry.key,
                    "ageSeconds": round(now - entry.fetched_at, 3),
                    "items": len(entry.items),
                }
                for entry in self._entries.values()
            ],
        }
