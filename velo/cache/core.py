"""
Core cache data structures.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union
from enum import Enum


class CacheCategory(Enum):
    """Categories of data with different freshness windows."""
    NUTRITION = "nutrition"   # 5 minutes
    TRAINING = "training"     # 10 minutes
    STRAVA = "strava"         # 15 minutes
    AI = "ai"                 # 30 minutes
    DEFAULT = "default"       # 10 minutes

    @classmethod
    def parse(cls, value: Union[str, "CacheCategory"]) -> "CacheCategory":
        """Resolve a category from its name, raising ValueError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown cache category '{value}' (expected one of: {valid})")


@dataclass
class CacheEntry:
    """
    A cached payload tagged with the category it belongs to.

    The category drives both the TTL lookup and bulk invalidation, so an
    entry can never escape a clear of its category whatever its key says.
    """
    data: Any
    stored_at: datetime
    category: CacheCategory = CacheCategory.DEFAULT

    def age_seconds(self, now: datetime) -> float:
        """Seconds elapsed between storage and ``now``."""
        return (now - self.stored_at).total_seconds()

    def is_fresh(self, now: datetime, ttl_seconds: int) -> bool:
        """Fresh while strictly younger than the TTL."""
        return self.age_seconds(now) < ttl_seconds
