"""Channel pair graph.

Directed mapping from a source channel to its outbound translation edges. Mutations validate
the pair invariants before touching the in-memory state, rebuild the source index and then
hand the write to the persistence queue.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.pair_models import AUTO_LANGUAGE, ChannelPair
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from core.pairs.persistence_queue import PersistenceQueue
    from core.pairs.store import PairStore

__all__: list[str] = [
    "ChannelPairGraph",
    "DuplicatePairError",
    "PairGraphError",
    "PairNotFoundError",
    "PairValidationError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class PairGraphError(Exception):
    """A channel pair mutation was rejected."""


class PairValidationError(PairGraphError):
    """The pair violates a channel pair invariant."""


class DuplicatePairError(PairGraphError):
    """An edge between the same source and target channel already exists."""


class PairNotFoundError(PairGraphError):
    """No pair with the given id exists in the guild."""


class ChannelPairGraph:
    """In-memory channel pair graph with write-through persistence.

    Args:
        store (PairStore | None): Persistence collaborator. None keeps the graph memory-only.
        queue (PersistenceQueue | None): Queue the store writes are submitted to.
    """

    def __init__(self, store: PairStore | None = None, queue: PersistenceQueue | None = None) -> None:
        self._store: PairStore | None = store
        self._queue: PersistenceQueue | None = queue
        self._pairs: dict[int, list[ChannelPair]] = {}
        self._by_source: dict[int, list[ChannelPair]] = {}
        self._loaded: set[int] = set()

    def edges_from(self, channel_id: int) -> list[ChannelPair]:
        """Return the outbound edges of a channel, in insertion order."""
        return list(self._by_source.get(channel_id, ()))

    def pairs_for_guild(self, guild_id: int) -> list[ChannelPair]:
        return list(self._pairs.get(guild_id, ()))

    def pair_count(self, guild_id: int | None = None) -> int:
        """Count pairs of one guild, or of every loaded guild when ``guild_id`` is None."""
        if guild_id is not None:
            return len(self._pairs.get(guild_id, ()))
        return sum(len(pairs) for pairs in self._pairs.values())

    @property
    def guild_ids(self) -> list[int]:
        return list(self._pairs)

    def _rebuild_index(self) -> None:
        index: dict[int, list[ChannelPair]] = {}
        for pairs in self._pairs.values():
            for pair in pairs:
                index.setdefault(pair.source_channel_id, []).append(pair)
        self._by_source = index

    async def load_guild(self, guild_id: int) -> int:
        """Read the guild's pairs from the store the first time the guild is seen.

        A guild that is already loaded keeps its in-memory pairs untouched. Pairs added before
        the first load take precedence over stored rows with the same id.

        Returns:
            int: Number of pairs held for the guild.

        Raises:
            PersistenceError: If the store cannot be read.
        """
        if self._store is None or guild_id in self._loaded:
            return self.pair_count(guild_id)
        stored: list[ChannelPair] = await self._store.load_pairs(guild_id)
        current: list[ChannelPair] = self._pairs.get(guild_id, [])
        known: set[str] = {pair.id for pair in current}
        merged: list[ChannelPair] = [
            pair for pair in stored if pair.guild_id == guild_id and pair.id not in known
        ] + current
        self._pairs[guild_id] = merged
        self._loaded.add(guild_id)
        self._rebuild_index()
        logger.info("Loaded %d channel pairs for guild %s", len(stored), guild_id)
        return len(merged)

    def unload_guild(self, guild_id: int) -> None:
        """Forget a guild's pairs in memory only."""
        self._loaded.discard(guild_id)
        if self._pairs.pop(guild_id, None) is not None:
            self._rebuild_index()
            logger.info("Unloaded channel pairs for guild %s", guild_id)

    def build_pair(
        self,
        guild_id: int,
        source_channel_id: int,
        target_channel_id: int,
        source_lang: str,
        target_lang: str,
    ) -> ChannelPair:
        """Normalize and validate a pair without adding it.

        Raises:
            PairValidationError: If the pair violates an invariant.
            DuplicatePairError: If the guild already has an edge between the two channels.
        """
        src_lang: str = StringUtils.normalize_language_tag(source_lang)
        tgt_lang: str = StringUtils.normalize_language_tag(target_lang)
        msg: str
        if source_channel_id == target_channel_id:
            msg = "Source and target channel must differ"
            raise PairValidationError(msg)
        if tgt_lang == AUTO_LANGUAGE:
            msg = "Target language cannot be 'auto'"
            raise PairValidationError(msg)
        if not StringUtils.is_language_tag(tgt_lang):
            msg = f"Invalid target language tag '{_display_tag(target_lang)}'"
            raise PairValidationError(msg)
        if src_lang != AUTO_LANGUAGE and not StringUtils.is_language_tag(src_lang):
            msg = f"Invalid source language tag '{_display_tag(source_lang)}'"
            raise PairValidationError(msg)
        if src_lang == tgt_lang:
            msg = f"Source and target language are both '{tgt_lang}'"
            raise PairValidationError(msg)

        pair_id: str = ChannelPair.make_id(source_channel_id, target_channel_id)
        if any(pair.id == pair_id for pair in self._pairs.get(guild_id, ())):
            msg = f"Pair '{pair_id}' already exists"
            raise DuplicatePairError(msg)

        return ChannelPair(
            guild_id=guild_id,
            source_channel_id=source_channel_id,
            target_channel_id=target_channel_id,
            source_lang=src_lang,
            target_lang=tgt_lang,
        )

    def add_pair(
        self,
        guild_id: int,
        source_channel_id: int,
        target_channel_id: int,
        source_lang: str,
        target_lang: str,
    ) -> ChannelPair:
        """Add one directed edge.

        Raises:
            PairValidationError: If the pair violates an invariant.
            DuplicatePairError: If the edge already exists.
        """
        pair: ChannelPair = self.build_pair(guild_id, source_channel_id, target_channel_id, source_lang, target_lang)
        self._pairs.setdefault(guild_id, []).append(pair)
        self._rebuild_index()
        logger.info("Added channel pair %s", pair.describe())
        self._persist_upsert(guild_id, [pair])
        return pair

    def link(
        self,
        guild_id: int,
        channel_a: int,
        lang_a: str,
        channel_b: int,
        lang_b: str,
    ) -> list[ChannelPair]:
        """Add the edges A to B and B to A together. Neither is added if either is invalid.

        Raises:
            PairValidationError: If either direction violates an invariant.
            DuplicatePairError: If either direction already exists.
        """
        forward: ChannelPair = self.build_pair(guild_id, channel_a, channel_b, lang_a, lang_b)
        backward: ChannelPair = self.build_pair(guild_id, channel_b, channel_a, lang_b, lang_a)
        self._pairs.setdefault(guild_id, []).extend((forward, backward))
        self._rebuild_index()
        logger.info("Linked channels %s <-> %s", forward.describe(), backward.describe())
        self._persist_upsert(guild_id, [forward, backward])
        return [forward, backward]

    def remove_pair(self, guild_id: int, pair_id: str) -> ChannelPair:
        """Remove one edge by id.

        Raises:
            PairNotFoundError: If the guild has no such pair. Nothing is changed.
        """
        pairs: list[ChannelPair] = self._pairs.get(guild_id, [])
        for index, pair in enumerate(pairs):
            if pair.id == pair_id:
                del pairs[index]
                self._rebuild_index()
                logger.info("Removed channel pair %s", pair.describe())
                self._persist_delete(guild_id, [pair_id])
                return pair
        msg: str = f"Pair '{pair_id}' not found"
        raise PairNotFoundError(msg)

    def clear_guild(self, guild_id: int) -> int:
        """Remove every edge of a guild.

        Returns:
            int: Number of removed pairs.
        """
        removed: list[ChannelPair] = self._pairs.pop(guild_id, [])
        self._loaded.add(guild_id)
        self._rebuild_index()
        logger.info("Cleared %d channel pairs for guild %s", len(removed), guild_id)
        self._persist_delete(guild_id, None)
        return len(removed)

    def _persist_upsert(self, guild_id: int, pairs: list[ChannelPair]) -> None:
        if self._store is None or self._queue is None:
            return
        description: str = f"upsert {[p.id for p in pairs]} guild={guild_id}"
        self._queue.submit(description, self._store.upsert_pairs, guild_id, pairs)

    def _persist_delete(self, guild_id: int, pair_ids: list[str] | None) -> None:
        if self._store is None or self._queue is None:
            return
        description: str = f"delete {pair_ids or 'all'} guild={guild_id}"
        self._queue.submit(description, self._store.delete_pairs, guild_id, pair_ids)


def _display_tag(tag: str) -> str:
    return StringUtils.truncate(StringUtils.ensure_str(tag), 16)
