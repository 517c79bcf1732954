"""Discord event listeners feeding the relay engine.

Each listener converts the discord.py object into a platform-neutral DTO and hands it to the
relay. Exceptions are logged here and never reach the discord.py dispatcher.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import discord
from discord.ext import commands

from core.components.base import ComponentBase
from core.discord_platform import DiscordPlatform
from core.pairs.store import PersistenceError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["RelayEventsComponent"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class RelayEventsComponent(ComponentBase):
    """Relay message, edit and reaction events, and keep the per-guild pairs loaded."""

    depends: ClassVar[list[str]] = ["PairStorageComponent", "TranslationServiceComponent"]

    async def load_guild_pairs(self, guild_id: int) -> None:
        try:
            await self.shared.graph.load_guild(guild_id)
        except PersistenceError as err:
            logger.error("Failed to load channel pairs for guild %s: %s", guild_id, err)

    @commands.Cog.listener()
    async def on_ready(self) -> None:
        logger.info("Logged in as %s, serving %d guilds", self.bot.user, len(self.bot.guilds))
        for guild in self.bot.guilds:
            await self.load_guild_pairs(guild.id)

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info("Joined guild %s", guild.id)
        await self.load_guild_pairs(guild.id)

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        logger.info("Removed from guild %s", guild.id)
        self.shared.graph.unload_guild(guild.id)

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.guild is None:
            return
        try:
            await self.relay.handle_message(DiscordPlatform.to_inbound(message))
        except Exception:  # noqa: BLE001
            logger.exception("Error while relaying message %s", message.id)

    @commands.Cog.listener()
    async def on_message_edit(self, before: discord.Message, after: discord.Message) -> None:
        # embed unfurls also arrive as edits
        if after.guild is None or before.content == after.content:
            return
        try:
            await self.relay.handle_message_update(DiscordPlatform.to_inbound(after))
        except Exception:  # noqa: BLE001
            logger.exception("Error while relaying edited message %s", after.id)

    @commands.Cog.listener()
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        if payload.guild_id is None:
            return
        if self.bot.user is not None and payload.user_id == self.bot.user.id:
            return
        try:
            await self.relay.handle_reaction(DiscordPlatform.to_reaction(payload))
        except Exception:  # noqa: BLE001
            logger.exception("Error while handling reaction on message %s", payload.message_id)
