"""Models for translation cache data.

Defines the memoized translation entry and the statistics reported by the cache.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__: list[str] = [
    "CacheKey",
    "CacheStatistics",
    "TranslationCacheEntry",
]

type CacheKey = tuple[str, str, str]


@dataclass
class TranslationCacheEntry:
    """Translation cache entry data.

    Attributes:
        normalized_source (str): Trimmed, NFC-normalized source text.
        source_lang (str): Source tag as declared by the caller (may be 'auto').
        target_lang (str): Target language tag.
        translation_text (str | None): Translated text. None means no translation was needed.
        created_at (float): Monotonic creation time.
        hit_count (int): Number of cache hits.
    """

    normalized_source: str
    source_lang: str
    target_lang: str
    translation_text: str | None
    created_at: float
    hit_count: int = 0

    @property
    def key(self) -> CacheKey:
        return (self.normalized_source, self.source_lang, self.target_lang)

    def is_expired(self, now: float, ttl: float) -> bool:
        return now - self.created_at >= ttl


@dataclass
class CacheStatistics:
    """Cache usage statistics.

    Attributes:
        total_entries (int): Entries currently held (expired ones included until purged).
        total_hits (int): Hits served since start.
        total_misses (int): Misses since start.
        evictions (int): Entries purged as expired since start.
    """

    total_entries: int = 0
    total_hits: int = 0
    total_misses: int = 0
    evictions: int = 0
