"""TTL cache for registry release lookups.

Entries are immutable snapshots, so concurrent writers for the same key are
harmless: the last write wins. No locking is done.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

from ..constants import Constants

T = TypeVar("T")

ReleaseCacheKey = Tuple[Optional[str], Optional[str], str]


@dataclass
class CacheEntry(Generic[T]):
    """A single cache entry with TTL."""

    value: T
    expires_at: float
    created_at: float = field(default_factory=time.monotonic)

    def is_expired(self, now: float) -> bool:
        """Check if this entry has expired."""
        return now >= self.expires_at


class TTLCache:
    """Key/value store whose entries expire after a time-to-live.

    The clock is injectable so tests can advance time deterministically.
    """

    def __init__(
        self,
        default_ttl: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            default_ttl: Default time-to-live in seconds.
            max_entries: Entry count above which the oldest tenth is evicted.
            clock: Monotonic time source.
        """
        self._default_ttl = default_ttl if default_ttl is not None else Constants.RELEASE_CACHE_TTL_SEC
        self._max_entries = max_entries if max_entries is not None else Constants.RELEASE_CACHE_MAX_ENTRIES
        self._clock = clock
        self._cache: Dict[Hashable, CacheEntry[Any]] = {}

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None if absent or expired."""
        entry = self._cache.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._cache.pop(key, None)
            return None
        return entry.value

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value with a fresh TTL.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Optional TTL override in seconds.
        """
        now = self._clock()
        effective_ttl = ttl if ttl is not None else self._default_ttl
        self._cache[key] = CacheEntry(value=value, expires_at=now + effective_ttl, created_at=now)

        if len(self._cache) > self._max_entries:
            self._cleanup()
        if len(self._cache) > self._max_entries:
            self._evict_oldest(max(1, self._max_entries // 10))

    def invalidate(self, key: Hashable) -> None:
        """Drop a single entry."""
        self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear all cached entries."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        now = self._clock()
        expired_count = sum(1 for e in self._cache.values() if e.is_expired(now))
        return {
            "total_entries": len(self._cache),
            "expired_entries": expired_count,
            "active_entries": len(self._cache) - expired_count,
            "max_entries": self._max_entries,
            "default_ttl": self._default_ttl,
        }

    def _cleanup(self) -> None:
        """Remove expired entries."""
        now = self._clock()
        for key in [k for k, v in self._cache.items() if v.is_expired(now)]:
            del self._cache[key]

    def _evict_oldest(self, count: int) -> None:
        """Evict the oldest entries."""
        sorted_keys = sorted(self._cache, key=lambda k: self._cache[k].created_at)
        for key in sorted_keys[:count]:
            del self._cache[key]


def release_cache_key(datasource: Optional[str], package_name: Optional[str], scheme_id: str) -> ReleaseCacheKey:
    """Cache key for a package's release set under a versioning scheme."""
    return (datasource, package_name, scheme_id)


# Process-wide release cache; pass a TTLCache to ReleaseFetcher to isolate one.
release_cache = TTLCache()
