"""In-memory caching with TTL support.

Used for per-project image mappings resolved from blob storage, so that
repeated page loads do not re-list the storage provider.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import structlog

log = structlog.get_logger()

T = TypeVar("T")


@dataclass
class CacheStats:
    """Cache performance statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Wire form, camelCase like the rest of the API."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "hitRate": round(self.hit_rate, 4),
            "totalRequests": self.hits + self.misses,
        }


@dataclass
class CacheEntry(Generic[T]):
    """A cache entry with value and expiration."""

    value: T
    expires_at: float
    created_at: float = field(default_factory=time.time)

    @property
    def is_expired(self) -> bool:
        """Check if this entry has expired."""
        return time.time() >= self.expires_at


class LRUCache(Generic[T]):
    """LRU cache with TTL support.

    Uses OrderedDict for O(1) access and LRU eviction. Not shared across
    processes; each worker keeps its own copy.
    """

    def __init__(self, maxsize: int = 256, default_ttl: float = 300.0) -> None:
        """Initialize cache.

        Args:
            maxsize: Maximum number of entries (default 256).
            default_ttl: Default time-to-live in seconds (default 5 minutes).
        """
        self._cache: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self._stats = CacheStats()

    def get(self, key: str) -> T | None:
        """Get value from cache.

        Returns None if key not found or expired.
        """
        entry = self._cache.get(key)

        if entry is None:
            self._stats.misses += 1
            return None

        if entry.is_expired:
            self._stats.expirations += 1
            self._stats.misses += 1
            del self._cache[key]
            return None

        # Move to end (most recently used)
        self._cache.move_to_end(key)
        self._stats.hits += 1
        return entry.value

    def set(self, key: str, value: T, ttl: float | None = None) -> None:
        """Set value in cache.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time-to-live in seconds (uses default if not specified).
        """
        ttl = ttl if ttl is not None else self._default_ttl
        expires_at = time.time() + ttl

        if key in self._cache:
            self._cache.move_to_end(key)

        self._cache[key] = CacheEntry(value=value, expires_at=expires_at)

        # Evict oldest entries if over capacity
        while len(self._cache) > self._maxsize:
            evicted, _ = self._cache.popitem(last=False)
            self._stats.evictions += 1
            log.debug("cache_evicted", key=evicted)

    def delete(self, key: str) -> bool:
        """Delete a specific key from cache."""
        if key in self._cache:
            del self._cache[key]
            return True
        return False

    def clear(self) -> None:
        """Clear all cache entries."""
        self._cache.clear()

    @property
    def stats(self) -> CacheStats:
        """Get cache statistics."""
        return self._stats

    @property
    def size(self) -> int:
        """Current number of entries in cache."""
        return len(self._cache)
