"""
In-memory result cache keyed by location.

One class serves both caches in the app:

    pipeline cache     ResultCache(ttl=300, normalize_keys=True)
    speculative cache  ResultCache(ttl=None, normalize_keys=False)

The two instances are independent and may disagree: the speculative
cache keys on the raw location string and never expires, the pipeline
cache keys on the lower-cased, trimmed location and expires. Stale
entries are not purged; they read as misses.
"""

import time
from typing import Callable, Dict, List, NamedTuple, Optional

from schemas import College


class CacheEntry(NamedTuple):
    colleges: List[College]
    timestamp: float


def normalize_location(location: str) -> str:
    return location.lower().strip()


class ResultCache:
    def __init__(
        self,
        ttl: Optional[float] = None,
        normalize_keys: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.normalize_keys = normalize_keys
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def key(self, location: str) -> str:
        return normalize_location(location) if self.normalize_keys else location

    def get(self, location: str) -> Optional[List[College]]:
        """Return cached colleges, or None on a miss or an expired entry."""
        entry = self._entries.get(self.key(location))
        if entry is None:
            return None
        if self.ttl is not None and self._clock() - entry.timestamp >= self.ttl:
            return None
        return entry.colleges

    def set(self, location: str, colleges: List[College]) -> None:
        self._entries[self.key(location)] = CacheEntry(colleges, self._clock())

    def __contains__(self, location: str) -> bool:
        return self.get(location) is not None

    def __len__(self) -> int:
        return len(self._entries)
