"""
Suggestion cache for prefetched results.

This module provides a bounded, time-expiring cache that maps normalized
transcript text to the suggestions generated for it, so suggestions can
be shown instantly when the speaker pauses.
"""

import time
import logging
from typing import Callable, Dict, Optional
from suggestion_engine.models import CacheEntry

logger = logging.getLogger(__name__)


class SuggestionCache:
    """
    In-memory cache of suggestion results keyed by normalized text.

    An entry is valid while now - created_at < ttl_seconds. Expired entries
    are treated as absent and purged lazily on access and on every put.
    When the cache grows past max_cache_size, the entry with the oldest
    created_at is evicted until the size is within bounds.

    Attributes:
        cache: Dictionary mapping normalized keys to CacheEntry objects
        ttl_seconds: Time-to-live for cache entries (default: 10.0)
        max_cache_size: Maximum number of entries (default: 20)
        clock: Callable returning the current time in seconds
    """

    def __init__(
        self,
        ttl_seconds: float = 10.0,
        max_cache_size: int = 20,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize suggestion cache.

        Args:
            ttl_seconds: Time-to-live for cache entries in seconds
            max_cache_size: Maximum number of entries kept
            clock: Time source, injectable for tests
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        if max_cache_size < 1:
            raise ValueError(f"max_cache_size must be at least 1, got {max_cache_size}")

        self.cache: Dict[str, CacheEntry] = {}
        self.ttl_seconds = ttl_seconds
        self.max_cache_size = max_cache_size
        self.clock = clock

        self.hits = 0
        self.misses = 0
        self.evictions = 0

        logger.info(
            f"SuggestionCache initialized with TTL={ttl_seconds}s, "
            f"max_size={max_cache_size}"
        )

    def get(self, key: str) -> Optional[CacheEntry]:
        """
        Return the entry for key if present and not expired.

        Args:
            key: Normalized transcript key

        Returns:
            Valid CacheEntry, or None if absent or expired

        Examples:
            >>> cache = SuggestionCache()
            >>> cache.get("hello world foo") is None
            True
        """
        entry = self.cache.get(key)

        if entry is None:
            self.misses += 1
            return None

        if not entry.is_valid(self.clock(), self.ttl_seconds):
            del self.cache[key]
            self.misses += 1
            logger.debug(f"Removed expired entry for key: {key[:50]}")
            return None

        self.hits += 1
        return entry

    def put(self, key: str, entry: CacheEntry) -> None:
        """
        Insert or overwrite the entry for key, then run cleanup.

        Cleanup purges every expired entry and evicts the oldest entries
        by created_at while the cache is over max_cache_size.

        Args:
            key: Normalized transcript key
            entry: Entry to store (entry.key must equal key)

        Raises:
            ValueError: If entry.key does not match key
        """
        if entry.key != key:
            raise ValueError(f"entry key '{entry.key}' does not match cache key '{key}'")

        self.cache[key] = entry

        logger.debug(
            f"Cached {entry.source.value} suggestions for: {key[:50]} "
            f"(cache size: {len(self.cache)})"
        )

        self.cleanup_expired()
        self._evict_oldest_if_needed()

    def cleanup_expired(self) -> int:
        """
        Remove expired entries from cache.

        Returns:
            Number of entries removed
        """
        now = self.clock()
        expired_keys = [
            key for key, entry in self.cache.items()
            if not entry.is_valid(now, self.ttl_seconds)
        ]

        for key in expired_keys:
            del self.cache[key]

        if expired_keys:
            logger.debug(f"Cleaned up {len(expired_keys)} expired entries")

        return len(expired_keys)

    def _evict_oldest_if_needed(self) -> None:
        """Evict entries with the oldest created_at until within max_cache_size."""
        while len(self.cache) > self.max_cache_size:
            oldest_key = min(self.cache, key=lambda k: self.cache[k].created_at)
            del self.cache[oldest_key]
            self.evictions += 1
            logger.debug(f"Evicted oldest entry: {oldest_key[:50]}")

    def size(self) -> int:
        """
        Get current cache size.

        Returns:
            Number of stored entries, including expired ones not yet purged
        """
        return len(self.cache)

    def clear(self) -> None:
        """Clear all entries from cache."""
        self.cache.clear()
        logger.info("Cache cleared")

    def get_statistics(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with hits, misses, evictions and size
        """
        return {
            'hits': self.hits,
            'misses': self.misses,
            'evictions': self.evictions,
            'size': len(self.cache)
        }

    def __contains__(self, key: str) -> bool:
        entry = self.cache.get(key)
        return entry is not None and entry.is_valid(self.clock(), self.ttl_seconds)
