"""Translation cache.

Bounded, time-expiring LRU mapping of (source language, text, target language) to translated text.
All operations are synchronous so that a lookup followed by a store never straddles a suspension point.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import TYPE_CHECKING, ClassVar, Final

from models.cache_models import CacheEntry, CacheStatistics
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

__all__: list[str] = ["TranslationCache"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

AUTO_SOURCE: Final[str] = "auto"
KEY_SEPARATOR: Final[str] = "::"


class TranslationCache:
    """In-memory LRU cache with lazy TTL expiry for translation results.

    Insertion order of the underlying OrderedDict is the recency order: the first item is the least recently
    used one, the last item the most recently used one. Expired entries are only purged when they are read.

    Attributes:
        DEFAULT_MAX_SIZE (ClassVar[int]): Default capacity.
        DEFAULT_TTL_SEC (ClassVar[float]): Default entry time-to-live in seconds.
    """

    DEFAULT_MAX_SIZE: ClassVar[int] = 1000
    DEFAULT_TTL_SEC: ClassVar[float] = 30 * 60.0

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_sec: float = DEFAULT_TTL_SEC,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            max_size (int): Maximum number of resident entries. Must be positive.
            ttl_sec (float): Maximum entry age in seconds. Must be positive.
            clock (Callable[[], float]): Monotonic time source in seconds.

        Raises:
            ValueError: If max_size or ttl_sec is not positive.
        """
        if max_size <= 0:
            msg: str = f"max_size must be positive: {max_size}"
            raise ValueError(msg)
        if ttl_sec <= 0:
            msg = f"ttl_sec must be positive: {ttl_sec}"
            raise ValueError(msg)

        self._max_size: int = max_size
        self._ttl_sec: float = ttl_sec
        self._clock: Callable[[], float] = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._hits: int = 0
        self._misses: int = 0
        self._expirations: int = 0
        self._evictions: int = 0
        logger.debug("TranslationCache created (max_size=%d, ttl=%.1fs)", max_size, ttl_sec)

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl_sec(self) -> float:
        return self._ttl_sec

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Residency only: neither promotes nor checks expiry.
        return key in self._entries

    @staticmethod
    def build_key(text: str, target_lang: str, source_lang: str | None = None) -> str:
        """Build the cache key for a translation request.

        Auto-detected and explicit-source requests produce different keys.

        Args:
            text (str): Source text.
            target_lang (str): Target language code.
            source_lang (str | None): Source language code, or None for auto-detection.

        Returns:
            str: Key of the form ``source::text::target``.
        """
        return KEY_SEPARATOR.join((source_lang or AUTO_SOURCE, text, target_lang))

    def get(self, key: str) -> str | None:
        """Look up a translation.

        A fresh hit is promoted to most recently used. An expired entry is removed and reported as a miss.

        Args:
            key (str): Cache key.

        Returns:
            str | None: Cached translation, or None on miss.
        """
        entry: CacheEntry | None = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        if self._clock() - entry.created_at > self._ttl_sec:
            del self._entries[key]
            self._expirations += 1
            self._misses += 1
            logger.debug("Cache entry expired for key: %s", key[:48])
            return None

        self._entries.move_to_end(key)
        self._hits += 1
        return entry.value

    def set(self, key: str, value: str) -> None:
        """Store a translation as the most recently used entry.

        Any existing entry for the key is dropped first so that its recency and age are reset, then the least
        recently used entry is evicted if the cache is full.

        Args:
            key (str): Cache key.
            value (str): Translated text.
        """
        self._entries.pop(key, None)

        while len(self._entries) >= self._max_size:
            evicted_key, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug("Evicted least recently used key: %s", evicted_key[:48])

        self._entries[key] = CacheEntry(value=value, created_at=self._clock())

    def clear(self) -> None:
        """Remove every entry and reset the statistics counters."""
        count: int = len(self._entries)
        self._entries.clear()
        self._hits = 0
        self._misses = 0
        self._expirations = 0
        self._evictions = 0
        logger.info("Translation cache cleared (%d entries removed)", count)

    def statistics(self) -> CacheStatistics:
        """Snapshot of the cache counters.

        Returns:
            CacheStatistics: Current statistics.
        """
        return CacheStatistics(
            size=len(self._entries),
            max_size=self._max_size,
            ttl_sec=self._ttl_sec,
            hits=self._hits,
            misses=self._misses,
            expirations=self._expirations,
            evictions=self._evictions,
        )
