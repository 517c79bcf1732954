"""Translation cache manager.

In-memory memoization of (normalized text, source tag, target tag) to translation results,
including the ``None`` result that means no translation was needed.
Entries expire after a fixed TTL. Expired entries are purged opportunistically once the
cache grows past its size threshold, and by the periodic maintenance sweep.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from models.cache_models import CacheKey, CacheStatistics, TranslationCacheEntry
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from models.config_models import Config

__all__: list[str] = ["TranslationCacheManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class TranslationCacheManager:
    """Manager for the translation cache.

    Identical text translated to two different targets occupies two entries; nothing is shared
    across language pairs.

    Args:
        config (Config): Application configuration (CACHE.TTL, CACHE.MAX_ENTRIES).
        clock (Callable[[], float]): Monotonic time source.
    """

    def __init__(self, config: Config, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl: float = config.CACHE.TTL
        self.max_entries: int = config.CACHE.MAX_ENTRIES
        self._clock: Callable[[], float] = clock
        self._entries: dict[CacheKey, TranslationCacheEntry] = {}
        self._hits: int = 0
        self._misses: int = 0
        self._evictions: int = 0
        logger.debug("TranslationCacheManager instance created (ttl=%s, max=%s)", self.ttl, self.max_entries)

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def make_key(source_text: str, source_lang: str, target_lang: str) -> CacheKey:
        return (StringUtils.normalize_text(source_text), source_lang, target_lang)

    def get(self, source_text: str, source_lang: str, target_lang: str) -> TranslationCacheEntry | None:
        """Look up a cached translation.

        Args:
            source_text (str): Source text (normalized here for the key).
            source_lang (str): Source tag as declared, possibly 'auto'.
            target_lang (str): Target tag.

        Returns:
            TranslationCacheEntry | None: The live entry, or None on a miss. A hit whose
                ``translation_text`` is None means no translation was needed.
        """
        key: CacheKey = self.make_key(source_text, source_lang, target_lang)
        entry: TranslationCacheEntry | None = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        if entry.is_expired(self._clock(), self.ttl):
            del self._entries[key]
            self._evictions += 1
            self._misses += 1
            logger.debug("Cache entry expired: %s", key[1:])
            return None

        entry.hit_count += 1
        self._hits += 1
        logger.debug("Cache hit %s (hit_count: %d)", key[1:], entry.hit_count)
        return entry

    def put(self, source_text: str, source_lang: str, target_lang: str, translation_text: str | None) -> None:
        """Store a translation result, ``None`` included.

        When the cache exceeds its size threshold every entry is scanned and those past TTL
        are removed. Live entries are never evicted to make room.
        """
        key: CacheKey = self.make_key(source_text, source_lang, target_lang)
        self._entries[key] = TranslationCacheEntry(
            normalized_source=key[0],
            source_lang=source_lang,
            target_lang=target_lang,
            translation_text=translation_text,
            created_at=self._clock(),
        )
        if len(self._entries) > self.max_entries:
            removed: int = self.sweep()
            logger.debug("Cache over threshold, purged %d expired entries", removed)

    def sweep(self) -> int:
        """Remove every expired entry.

        Returns:
            int: Number of removed entries.
        """
        now: float = self._clock()
        expired: list[CacheKey] = [key for key, entry in self._entries.items() if entry.is_expired(now, self.ttl)]
        for key in expired:
            del self._entries[key]
        self._evictions += len(expired)
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def get_statistics(self) -> CacheStatistics:
        return CacheStatistics(
            total_entries=len(self._entries),
            total_hits=self._hits,
            total_misses=self._misses,
            evictions=self._evictions,
        )
