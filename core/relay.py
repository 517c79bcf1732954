"""Relay engine.

Routes inbound chat events through the loop guard, the rate limiters and the channel pair
graph, translates once per outbound edge and sends the result through the chat platform.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Final

from core.trans.interface import AllProvidersExhaustedError
from handlers.flag_reaction import FlagLanguageResolver
from handlers.message_formatter import MessageFormatter
from models.pair_models import AUTO_LANGUAGE
from models.status_models import RelayStatus, SweepReport
from models.translation_models import TranslationOutcome, TranslationRequest
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from core.cache.manager import TranslationCacheManager
    from core.guard.loop_guard import LoopGuard
    from core.guard.rate_limiter import BurstLimiter, CooldownLimiter
    from core.pairs.graph import ChannelPairGraph
    from core.pairs.persistence_queue import PersistenceQueue
    from core.platform import ChatPlatform
    from core.trans.manager import TransManager
    from models.config_models import Config
    from models.message_models import InboundMessage, ReactionEvent, RelayEnvelope
    from models.pair_models import ChannelPair


__all__: list[str] = ["POLICY_RELAY_ORIGINAL", "POLICY_SKIP", "RelayEngine"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

POLICY_SKIP: Final[str] = "skip"
POLICY_RELAY_ORIGINAL: Final[str] = "relay_original"


class RelayEngine:
    """Message relay between paired channels.

    Every collaborator is owned by the caller and passed in, so several engines (or tests)
    never share state implicitly.

    Args:
        config (Config): Loaded configuration.
        platform (ChatPlatform): Chat platform used to fetch channels and messages and to send relays.
        graph (ChannelPairGraph): Channel pair graph consulted for outbound edges.
        trans_manager (TransManager): Provider chain.
        cache_manager (TranslationCacheManager): Translation cache, swept and reported on.
        loop_guard (LoopGuard): Guard over handled and produced message ids.
        reaction_guard (LoopGuard): Guard over (message id, target tag) for the reaction path.
        cooldown (CooldownLimiter): Per (user, channel) cooldown for ordinary relay.
        burst (BurstLimiter): Per (user, guild, channel) burst limiter for the reaction path.
        queue (PersistenceQueue | None): Persistence queue, reported on in the status.
        formatter (MessageFormatter | None): Envelope formatter.
        flag_resolver (FlagLanguageResolver | None): Reaction emoji resolver.
    """

    def __init__(
        self,
        config: Config,
        *,
        platform: ChatPlatform,
        graph: ChannelPairGraph,
        trans_manager: TransManager,
        cache_manager: TranslationCacheManager,
        loop_guard: LoopGuard,
        reaction_guard: LoopGuard,
        cooldown: CooldownLimiter,
        burst: BurstLimiter,
        queue: PersistenceQueue | None = None,
        formatter: MessageFormatter | None = None,
        flag_resolver: FlagLanguageResolver | None = None,
    ) -> None:
        self.config: Config = config
        self.platform: ChatPlatform = platform
        self.graph: ChannelPairGraph = graph
        self.trans_manager: TransManager = trans_manager
        self.cache_manager: TranslationCacheManager = cache_manager
        self.loop_guard: LoopGuard = loop_guard
        self.reaction_guard: LoopGuard = reaction_guard
        self.cooldown: CooldownLimiter = cooldown
        self.burst: BurstLimiter = burst
        self.queue: PersistenceQueue | None = queue
        self.formatter: MessageFormatter = formatter or MessageFormatter()
        self.flag_resolver: FlagLanguageResolver = flag_resolver or FlagLanguageResolver()

    @property
    def same_language_policy(self) -> str:
        return self.config.TRANSLATION.SAME_LANGUAGE_POLICY

    def is_ignored_author(self, author_id: int) -> bool:
        return author_id in self.config.BOT.IGNORE_USERS

    async def handle_message(self, message: InboundMessage) -> int:
        """Relay one inbound message to every outbound edge of its channel.

        Edges are processed one after another in graph order. A failure on one edge is logged
        and the remaining edges are still processed.

        Args:
            message (InboundMessage): The inbound message.

        Returns:
            int: Number of relayed messages sent.
        """
        if message.is_bot or self.is_ignored_author(message.author_id):
            return 0
        if message.guild_id is None:
            return 0
        if self.loop_guard.seen(message.message_id):
            logger.debug("Message %s already handled, dropping", message.message_id)
            return 0
        if not self.cooldown.admit((message.author_id, message.channel_id)):
            logger.debug("Cooldown active for user %s in channel %s", message.author_id, message.channel_id)
            return 0

        edges: list[ChannelPair] = self.graph.edges_from(message.channel_id)
        if not edges:
            return 0

        text: str = StringUtils.normalize_text(message.content)
        if not text and not message.attachments:
            return 0

        # must precede any await so a concurrent edit event is dropped
        self.loop_guard.mark(message.message_id)

        sent: int = 0
        for edge in edges:
            try:
                if await self._relay_edge(message, edge, text):
                    sent += 1
            except Exception:  # noqa: BLE001
                logger.exception("Relay of message %s over %s failed", message.message_id, edge.describe())
        return sent

    async def handle_message_update(self, message: InboundMessage) -> int:
        """Treat an edited message as new input unless it was already handled within the guard TTL."""
        if self.loop_guard.seen(message.message_id):
            logger.debug("Edited message %s already handled, ignoring", message.message_id)
            return 0
        return await self.handle_message(message)

    async def _relay_edge(self, message: InboundMessage, edge: ChannelPair, text: str) -> bool:
        source_lang: str = edge.source_lang
        body: str = ""
        if text:
            try:
                outcome: TranslationOutcome = await self.trans_manager.translate_with_retry(
                    TranslationRequest(text=text, source_lang=edge.source_lang, target_lang=edge.target_lang)
                )
            except AllProvidersExhaustedError:
                logger.error("Translation for %s exhausted all providers, edge skipped", edge.describe())
                return False
            if outcome.is_same_language:
                if self.same_language_policy != POLICY_RELAY_ORIGINAL:
                    logger.debug("Message %s already in '%s', edge skipped", message.message_id, edge.target_lang)
                    return False
                body = text
            else:
                body = outcome.text or ""
            source_lang = outcome.source_lang

        channel: Any | None = await self._fetch_channel(edge.target_channel_id)
        if channel is None:
            logger.warning("Target channel %s is unreachable, edge skipped", edge.target_channel_id)
            return False

        envelope: RelayEnvelope = self.formatter.build_envelope(
            message, body, source_lang=source_lang, target_lang=edge.target_lang
        )
        await self._send(channel, envelope)
        return True

    async def handle_reaction(self, event: ReactionEvent) -> bool:
        """Translate a message into the language of a flag reaction and reply with it.

        Args:
            event (ReactionEvent): The reaction-add event.

        Returns:
            bool: True if a translation was sent.
        """
        if event.is_bot or self.is_ignored_author(event.user_id) or event.guild_id is None:
            return False
        target_lang: str | None = self.flag_resolver.language_for(event.emoji)
        if target_lang is None:
            return False

        enabled: bool = event.channel_id not in self.config.RATE_LIMIT.BURST_DISABLED_CHANNELS
        if not self.burst.admit((event.user_id, event.guild_id, event.channel_id), enabled=enabled):
            logger.debug("Burst limit reached for user %s in channel %s", event.user_id, event.channel_id)
            return False
        guard_key: tuple[int, str] = (event.message_id, target_lang)
        if self.reaction_guard.check_and_mark(guard_key):
            logger.debug("Message %s already translated to '%s'", event.message_id, target_lang)
            return False

        sent: bool = False
        try:
            sent = await self._reply_with_translation(event, target_lang)
        finally:
            if not sent:
                self.reaction_guard.discard(guard_key)
        return sent

    async def _reply_with_translation(self, event: ReactionEvent, target_lang: str) -> bool:
        try:
            message: InboundMessage | None = await asyncio.wait_for(
                self.platform.fetch_message(event.channel_id, event.message_id),
                timeout=self.config.BOT.FETCH_TIMEOUT,
            )
        except TimeoutError:
            message = None
        if message is None:
            logger.warning("Message %s in channel %s could not be fetched", event.message_id, event.channel_id)
            return False

        text: str = StringUtils.normalize_text(message.content)
        if not text:
            return False

        try:
            outcome: TranslationOutcome = await self.trans_manager.translate_with_retry(
                TranslationRequest(text=text, source_lang=AUTO_LANGUAGE, target_lang=target_lang)
            )
        except AllProvidersExhaustedError:
            logger.error("Reaction translation of message %s exhausted all providers", event.message_id)
            return False
        if outcome.is_same_language:
            logger.debug("Message %s already in '%s'", event.message_id, target_lang)
            return False

        channel: Any | None = await self._fetch_channel(event.channel_id)
        if channel is None:
            logger.warning("Channel %s is unreachable", event.channel_id)
            return False

        envelope: RelayEnvelope = self.formatter.build_envelope(
            message,
            outcome.text or "",
            source_lang=outcome.source_lang,
            target_lang=target_lang,
            reply_to=message.message_id,
        )
        await self._send(channel, envelope)
        return True

    async def _fetch_channel(self, channel_id: int) -> Any | None:
        try:
            return await asyncio.wait_for(
                self.platform.fetch_channel(channel_id), timeout=self.config.BOT.FETCH_TIMEOUT
            )
        except TimeoutError:
            logger.warning("Fetching channel %s timed out", channel_id)
            return None

    async def _send(self, channel: Any, envelope: RelayEnvelope) -> None:
        sent_id: int = await self.platform.send_relay(channel, envelope)
        self.loop_guard.mark(sent_id)
        logger.debug("Relayed message %s (%s)", sent_id, envelope.footer)

    def status(self, guild_id: int | None = None) -> RelayStatus:
        """Return a read-only snapshot of the relay state."""
        cache_stats = self.cache_manager.get_statistics()
        return RelayStatus(
            pair_count=self.graph.pair_count(),
            guild_pair_count=None if guild_id is None else self.graph.pair_count(guild_id),
            cache_size=len(self.cache_manager),
            cache_hits=cache_stats.total_hits,
            cache_misses=cache_stats.total_misses,
            loop_guard_size=len(self.loop_guard),
            reaction_guard_size=len(self.reaction_guard),
            cooldown_keys=len(self.cooldown),
            burst_keys=len(self.burst),
            providers=self.trans_manager.fetch_engine_names(),
            persistence_failures=self.queue.failures if self.queue is not None else 0,
        )

    def sweep(self) -> SweepReport:
        """Drop expired entries from the cache, both guards and both limiters."""
        report = SweepReport(
            cache=self.cache_manager.sweep(),
            loop_guard=self.loop_guard.sweep(),
            reaction_guard=self.reaction_guard.sweep(),
            cooldown=self.cooldown.sweep(),
            burst=self.burst.sweep(),
        )
        if report.total:
            logger.debug("Maintenance sweep removed %d entries: %s", report.total, report)
        return report
