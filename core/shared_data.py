"""Shared data management for bot components.

This module defines the SharedData class, the single owner of the process-scoped relay state:
the translation cache, the provider chain, both loop guards, both rate limiters, the pair
store with its persistence queue, the channel pair graph and the relay engine built on them.
Components reach this state only through the bot's SharedData instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.cache.manager import TranslationCacheManager
from core.guard.loop_guard import LoopGuard
from core.guard.rate_limiter import BurstLimiter, CooldownLimiter
from core.pairs.graph import ChannelPairGraph
from core.pairs.persistence_queue import PersistenceQueue
from core.pairs.store import PairStore
from core.relay import RelayEngine
from core.trans.detector import LanguageDetector
from core.trans.manager import TransManager

if TYPE_CHECKING:
    from core.platform import ChatPlatform
    from models.config_models import Config


__all__: list[str] = ["SharedData"]


@dataclass
class SharedData:
    _config: Config = field()
    _cache_manager: TranslationCacheManager = field(init=False)
    _trans_manager: TransManager = field(init=False)
    _loop_guard: LoopGuard = field(init=False)
    _reaction_guard: LoopGuard = field(init=False)
    _cooldown: CooldownLimiter = field(init=False)
    _burst: BurstLimiter = field(init=False)
    _store: PairStore = field(init=False)
    _queue: PersistenceQueue = field(init=False)
    _graph: ChannelPairGraph = field(init=False)
    _relay: RelayEngine = field(init=False)

    async def async_init(self, platform: ChatPlatform) -> None:
        """Build every state object. Nothing is started here; the service components start them."""
        config: Config = self.config
        self._cache_manager = TranslationCacheManager(config)
        self._trans_manager = TransManager(config, self._cache_manager, LanguageDetector())
        self._loop_guard = LoopGuard(config.LOOP_GUARD.TTL, name="message_guard")
        self._reaction_guard = LoopGuard(config.LOOP_GUARD.REACTION_TTL, name="reaction_guard")
        self._cooldown = CooldownLimiter(
            config.RATE_LIMIT.COOLDOWN, max_tracked_keys=config.RATE_LIMIT.MAX_TRACKED_KEYS
        )
        self._burst = BurstLimiter(config.RATE_LIMIT.BURST_MAX, config.RATE_LIMIT.BURST_WINDOW)
        self._store = PairStore(config)
        self._queue = PersistenceQueue(config.STORAGE.WRITE_TIMEOUT)
        self._graph = ChannelPairGraph(self._store, self._queue)
        self._relay = RelayEngine(
            config,
            platform=platform,
            graph=self._graph,
            trans_manager=self._trans_manager,
            cache_manager=self._cache_manager,
            loop_guard=self._loop_guard,
            reaction_guard=self._reaction_guard,
            cooldown=self._cooldown,
            burst=self._burst,
            queue=self._queue,
        )

    @property
    def config(self) -> Config:
        return self._config

    @property
    def cache_manager(self) -> TranslationCacheManager:
        return self._cache_manager

    @property
    def trans_manager(self) -> TransManager:
        return self._trans_manager

    @property
    def store(self) -> PairStore:
        return self._store

    @property
    def queue(self) -> PersistenceQueue:
        return self._queue

    @property
    def graph(self) -> ChannelPairGraph:
        return self._graph

    @property
    def relay(self) -> RelayEngine:
        return self._relay
