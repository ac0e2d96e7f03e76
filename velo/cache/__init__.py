"""
Caching module with per-category TTL, tag-based invalidation and request coalescing.
"""
from .core import CacheEntry, CacheCategory
from .ttl_policies import (
    TTL_CONFIG,
    get_ttl_for_category,
    make_cache_key,
)
from .coalescer import RequestCoalescer
from .manager import ALL, CacheStore

__all__ = [
    # Core types
    "CacheEntry",
    "CacheCategory",
    # TTL policies
    "TTL_CONFIG",
    "get_ttl_for_category",
    "make_cache_key",
    # Coalescing
    "RequestCoalescer",
    # Store
    "ALL",
    "CacheStore",
]
