"""Models for translation cache data.

Defines data classes for in-memory translation cache entries and cache statistics.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__: list[str] = [
    "CacheEntry",
    "CacheStatistics",
]


@dataclass(slots=True)
class CacheEntry:
    """Translation cache entry data.

    Attributes:
        value (str): Translated text.
        created_at (float): Monotonic timestamp (seconds) at which the entry was stored.
    """

    value: str
    created_at: float


@dataclass
class CacheStatistics:
    """Cache usage statistics.

    Attributes:
        size (int): Number of resident entries (expired-but-unread entries included).
        max_size (int): Capacity of the cache.
        ttl_sec (float): Entry time-to-live in seconds.
        hits (int): Lookups answered from the cache.
        misses (int): Lookups that found no usable entry (expired lookups included).
        expirations (int): Entries purged on read because they outlived the TTL.
        evictions (int): Entries removed to make room for a new one.
    """

    size: int = 0
    max_size: int = 0
    ttl_sec: float = 0.0
    hits: int = 0
    misses: int = 0
    expirations: int = 0
    evictions: int = 0

    @property
    def hit_ratio(self) -> float:
        total: int = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total
