"""Data models for the translation relay.

This package contains dataclass definitions for configuration, channel pairs, cache entries,
rate limiter windows, platform-neutral messages, translation requests and relay status.
"""

from __future__ import annotations

from models.cache_models import CacheStatistics, TranslationCacheEntry
from models.config_models import Config
from models.message_models import InboundMessage, ReactionEvent, RelayEnvelope
from models.pair_models import AUTO_LANGUAGE, ChannelPair
from models.rate_models import BurstWindow
from models.status_models import RelayStatus, SweepReport
from models.translation_models import TranslationOutcome, TranslationRequest

__all__: list[str] = [
    "AUTO_LANGUAGE",
    "BurstWindow",
    "CacheStatistics",
    "ChannelPair",
    "Config",
    "InboundMessage",
    "ReactionEvent",
    "RelayEnvelope",
    "RelayStatus",
    "SweepReport",
    "TranslationCacheEntry",
    "TranslationOutcome",
    "TranslationRequest",
]
