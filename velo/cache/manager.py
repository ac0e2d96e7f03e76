"""
In-process cache with per-category TTL, LRU bound and request coalescing.
"""
import copy
import logging
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Dict, Optional, Callable, Any, Awaitable, Union

from .core import CacheEntry, CacheCategory
from .coalescer import RequestCoalescer
from .ttl_policies import get_ttl_for_category

logger = logging.getLogger("cache.manager")

ALL = "all"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheStore:
    """
    Freshness-bounded memoization for resource fetches.

    - Entries are tagged with a CacheCategory that picks their TTL
    - Expired entries are deleted when read
    - Bulk invalidation filters on the category tag
    - Size bounded with least-recently-used eviction
    - Concurrent misses on one key share a single fetch

    A store belongs to one event loop; it is not shared across threads.
    """

    def __init__(
        self,
        max_entries: Optional[int] = 256,
        coalesce_timeout: float = 30.0,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize the cache store.

        Args:
            max_entries: LRU bound, None for unbounded
            coalesce_timeout: Timeout for waiting on coalesced requests
            clock: Source of "now", injectable for tests
        """
        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._coalescer = RequestCoalescer(timeout=coalesce_timeout)
        self._max_entries = max_entries
        self._clock = clock
        # Bumped on every invalidation so fetches started earlier don't write back
        self._generations: Dict[CacheCategory, int] = {c: 0 for c in CacheCategory}

        self._stats = {
            "hits": 0,
            "misses": 0,
            "expired": 0,
            "evictions": 0,
            "invalidations": 0,
        }

    def get_entry(self, cache_key: str) -> Optional[CacheEntry]:
        """
        Return the fresh entry stored under a key, or None.

        An entry found past its TTL is deleted. Use this rather than get()
        when a cached None must be told apart from a miss.
        """
        entry = self._cache.get(cache_key)
        if entry is None:
            return None

        now = self._clock()
        if not entry.is_fresh(now, get_ttl_for_category(entry.category)):
            del self._cache[cache_key]
            self._stats["expired"] += 1
            logger.info(f"CACHE EXPIRED: {cache_key} [age={entry.age_seconds(now):.1f}s]")
            return None

        self._cache.move_to_end(cache_key)
        return entry

    def get(self, cache_key: str, default: Any = None) -> Any:
        """Return a copy of the fresh value stored under a key, else ``default``."""
        entry = self.get_entry(cache_key)
        if entry is None:
            return default
        return copy.deepcopy(entry.data)

    def set(
        self,
        cache_key: str,
        data: Any,
        category: Union[CacheCategory, str] = CacheCategory.DEFAULT,
    ) -> None:
        """Store data under a key, replacing any previous entry."""
        entry = CacheEntry(
            data=data,
            stored_at=self._clock(),
            category=CacheCategory.parse(category),
        )
        self._cache[cache_key] = entry
        self._cache.move_to_end(cache_key)
        self._evict_overflow()

    def _evict_overflow(self) -> None:
        if self._max_entries is None:
            return
        while len(self._cache) > self._max_entries:
            evicted_key, _ = self._cache.popitem(last=False)
            self._stats["evictions"] += 1
            logger.debug(f"CACHE EVICTED (lru): {evicted_key}")

    async def get_or_fetch(
        self,
        cache_key: str,
        category: CacheCategory,
        fetch_fn: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Get data from cache or fetch it.

        Args:
            cache_key: Unique cache key
            category: Category the result is stored under
            fetch_fn: Coroutine function producing the data on a miss

        Returns:
            The cached or freshly fetched data (None is a legitimate value)

        Every caller gets its own deep copy, so mutating a returned payload
        never alters what later readers see.
        """
        entry = self.get_entry(cache_key)
        if entry is not None:
            logger.debug(f"CACHE HIT: {cache_key}")
            self._stats["hits"] += 1
            return copy.deepcopy(entry.data)

        logger.info(f"CACHE MISS: {cache_key}")
        self._stats["misses"] += 1
        generation = self._generations[category]

        async def fetch_and_store():
            data = await fetch_fn()
            if self._generations[category] == generation:
                self.set(cache_key, data, category)
            else:
                logger.info(f"Discarding result invalidated mid-flight: {cache_key}")
            return data

        # A clear bumps the generation, so reads started after it never join
        # a fetch that began before it
        result = await self._coalescer.get_or_fetch(
            f"{cache_key}#{generation}", fetch_and_store
        )
        return copy.deepcopy(result)

    def invalidate(self, cache_key: str) -> bool:
        """
        Invalidate a specific cache entry.

        Returns:
            True if entry was found and removed
        """
        if cache_key in self._cache:
            del self._cache[cache_key]
            logger.info(f"Invalidated cache: {cache_key}")
            return True
        return False

    def clear(self, scope: Union[CacheCategory, str, None] = ALL) -> int:
        """
        Clear a whole category, or everything.

        Args:
            scope: "all" (or None) for every entry, else a category name

        Returns:
            Number of entries cleared

        Raises:
            ValueError: If scope names no known category
        """
        if scope is None or scope == ALL:
            count = len(self._cache)
            self._cache.clear()
            for category in self._generations:
                self._generations[category] += 1
            self._stats["invalidations"] += count
            logger.info(f"Cleared {count} cache entries")
            return count

        category = CacheCategory.parse(scope)
        to_delete = [k for k, e in self._cache.items() if e.category is category]
        for key in to_delete:
            del self._cache[key]
        self._generations[category] += 1
        self._stats["invalidations"] += len(to_delete)
        logger.info(f"Cleared {len(to_delete)} '{category.value}' cache entries")
        return len(to_delete)

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, cache_key: str) -> bool:
        return self.get_entry(cache_key) is not None

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        total_requests = self._stats["hits"] + self._stats["misses"]
        hit_rate = (self._stats["hits"] / total_requests * 100) if total_requests > 0 else 0

        by_category: Dict[str, int] = {c.value: 0 for c in CacheCategory}
        for entry in self._cache.values():
            by_category[entry.category.value] += 1

        return {
            "entries": len(self._cache),
            "max_entries": self._max_entries,
            "by_category": by_category,
            "hits": self._stats["hits"],
            "misses": self._stats["misses"],
            "expired": self._stats["expired"],
            "evictions": self._stats["evictions"],
            "invalidations": self._stats["invalidations"],
            "hit_rate_percent": round(hit_rate, 1),
            "coalescer": self._coalescer.get_stats(),
        }
