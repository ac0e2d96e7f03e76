"""
TTL configuration and cache-key construction.
"""
from typing import Dict, Any
from urllib.parse import quote, urlencode

from .core import CacheCategory


# TTL Configuration by category (in seconds)
TTL_CONFIG: Dict[CacheCategory, int] = {
    CacheCategory.NUTRITION: 300,    # 5 minutes
    CacheCategory.TRAINING: 600,     # 10 minutes
    CacheCategory.STRAVA: 900,       # 15 minutes
    CacheCategory.AI: 1800,          # 30 minutes
    CacheCategory.DEFAULT: 600,      # 10 minutes
}


def get_ttl_for_category(category: CacheCategory) -> int:
    """
    Get the freshness window for a data category.

    Args:
        category: The data category

    Returns:
        TTL in seconds
    """
    return TTL_CONFIG.get(category, TTL_CONFIG[CacheCategory.DEFAULT])


def make_cache_key(
    category: CacheCategory,
    resource: str,
    *parts: Any,
    **params: Any,
) -> str:
    """
    Build a deterministic cache key.

    Layout is ``<category>:<resource>[:<part>...][?<params>]``. Parts are
    percent-encoded so a value containing ``:`` cannot forge another key,
    and params are sorted with ``None`` values dropped.

        >>> make_cache_key(CacheCategory.NUTRITION, "log", "2025-04-01")
        'nutrition:log:2025-04-01'
        >>> make_cache_key(CacheCategory.NUTRITION, "trends", startDate="a", endDate="b")
        'nutrition:trends?endDate=b&startDate=a'
    """
    key = f"{category.value}:{resource}"
    for part in parts:
        key += ":" + quote(str(part), safe="")
    sorted_params = sorted((k, str(v)) for k, v in params.items() if v is not None)
    if sorted_params:
        key += "?" + urlencode(sorted_params)
    return key
