"""Command component for the relay bot.

Provides administrator-only slash commands that edit the channel pair graph and report the
relay status, plus a latency check.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, cast

import discord
from discord import app_commands

from core.components.base import ComponentBase
from core.pairs.graph import PairGraphError
from models.pair_models import ChannelPair
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.pairs.graph import ChannelPairGraph
    from models.status_models import RelayStatus


__all__: list[str] = ["PairCommandManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

MAX_LISTED_PAIRS: int = 25


class PairCommandManager(ComponentBase):
    """Slash commands for channel pair management.

    Every reply is ephemeral. Graph validation errors are reported back to the invoking
    administrator and nothing is changed.
    """

    depends: ClassVar[list[str]] = ["RelayEventsComponent"]

    @property
    def graph(self) -> ChannelPairGraph:
        return self.shared.graph

    async def _reply(self, interaction: discord.Interaction, content: str) -> None:
        await interaction.response.send_message(content, ephemeral=True)

    @app_commands.command(name="pair_add", description="Translate messages from one channel into another")
    @app_commands.describe(
        source="Channel whose messages are translated",
        target="Channel receiving the translations",
        source_lang="Source language tag, or 'auto' to detect",
        target_lang="Target language tag, e.g. 'es'",
    )
    @app_commands.guild_only()
    @app_commands.default_permissions(administrator=True)
    @app_commands.checks.has_permissions(administrator=True)
    async def pair_add(
        self,
        interaction: discord.Interaction,
        source: discord.TextChannel,
        target: discord.TextChannel,
        source_lang: str,
        target_lang: str,
    ) -> None:
        logger.debug("Command 'pair_add' invoked by user: %s", interaction.user)
        try:
            pair: ChannelPair = self.graph.add_pair(
                cast("int", interaction.guild_id), source.id, target.id, source_lang, target_lang
            )
        except PairGraphError as err:
            await self._reply(interaction, f"Pair not added: {err}")
            return
        await self._reply(interaction, f"Added pair {pair.describe()}")

    @app_commands.command(name="pair_link", description="Translate between two channels in both directions")
    @app_commands.describe(
        channel_a="First channel",
        lang_a="Language of the first channel",
        channel_b="Second channel",
        lang_b="Language of the second channel",
    )
    @app_commands.guild_only()
    @app_commands.default_permissions(administrator=True)
    @app_commands.checks.has_permissions(administrator=True)
    async def pair_link(
        self,
        interaction: discord.Interaction,
        channel_a: discord.TextChannel,
        lang_a: str,
        channel_b: discord.TextChannel,
        lang_b: str,
    ) -> None:
        logger.debug("Command 'pair_link' invoked by user: %s", interaction.user)
        try:
            pairs: list[ChannelPair] = self.graph.link(
                cast("int", interaction.guild_id), channel_a.id, lang_a, channel_b.id, lang_b
            )
        except PairGraphError as err:
            await self._reply(interaction, f"Channels not linked: {err}")
            return
        await self._reply(interaction, "Linked channels:\n" + "\n".join(pair.describe() for pair in pairs))

    @app_commands.command(name="pair_remove", description="Stop translating from one channel into another")
    @app_commands.guild_only()
    @app_commands.default_permissions(administrator=True)
    @app_commands.checks.has_permissions(administrator=True)
    async def pair_remove(
        self,
        interaction: discord.Interaction,
        source: discord.TextChannel,
        target: discord.TextChannel,
    ) -> None:
        logger.debug("Command 'pair_remove' invoked by user: %s", interaction.user)
        try:
            pair: ChannelPair = self.graph.remove_pair(
                cast("int", interaction.guild_id), ChannelPair.make_id(source.id, target.id)
            )
        except PairGraphError as err:
            await self._reply(interaction, f"Pair not removed: {err}")
            return
        await self._reply(interaction, f"Removed pair {pair.describe()}")

    @app_commands.command(name="pair_clear", description="Remove every channel pair of this server")
    @app_commands.guild_only()
    @app_commands.default_permissions(administrator=True)
    @app_commands.checks.has_permissions(administrator=True)
    async def pair_clear(self, interaction: discord.Interaction) -> None:
        logger.debug("Command 'pair_clear' invoked by user: %s", interaction.user)
        removed: int = self.graph.clear_guild(cast("int", interaction.guild_id))
        await self._reply(interaction, f"Removed {removed} channel pairs.")

    @app_commands.command(name="pair_list", description="List the channel pairs of this server")
    @app_commands.guild_only()
    @app_commands.default_permissions(administrator=True)
    @app_commands.checks.has_permissions(administrator=True)
    async def pair_list(self, interaction: discord.Interaction) -> None:
        pairs: list[ChannelPair] = self.graph.pairs_for_guild(cast("int", interaction.guild_id))
        if not pairs:
            await self._reply(interaction, "No channel pairs are configured.")
            return
        lines: list[str] = [pair.describe() for pair in pairs[:MAX_LISTED_PAIRS]]
        if len(pairs) > MAX_LISTED_PAIRS:
            lines.append(f"... and {len(pairs) - MAX_LISTED_PAIRS} more")
        await self._reply(interaction, "\n".join(lines))

    @app_commands.command(name="relay_status", description="Show relay statistics")
    @app_commands.guild_only()
    @app_commands.default_permissions(administrator=True)
    @app_commands.checks.has_permissions(administrator=True)
    async def relay_status(self, interaction: discord.Interaction) -> None:
        status: RelayStatus = self.relay.status(interaction.guild_id)
        lines: list[str] = [
            f"Pairs: {status.guild_pair_count} in this server, {status.pair_count} total",
            f"Cache: {status.cache_size} entries ({status.cache_hits} hits, {status.cache_misses} misses)",
            f"Loop guard: {status.loop_guard_size} messages, {status.reaction_guard_size} reactions",
            f"Rate limiter: {status.cooldown_keys} cooldown keys, {status.burst_keys} burst keys",
            f"Providers: {', '.join(status.providers) or 'none'}",
            f"Persistence failures: {status.persistence_failures}",
        ]
        await self._reply(interaction, "\n".join(lines))

    @app_commands.command(name="ping", description="Show the gateway latency")
    async def ping(self, interaction: discord.Interaction) -> None:
        await self._reply(interaction, f"Pong! {round(self.bot.latency * 1000)} ms")

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        if isinstance(error, app_commands.MissingPermissions):
            logger.info("User %s lacks permissions %s", interaction.user, error.missing_permissions)
            content: str = "Administrator permission is required."
        else:
            logger.error("Command error: %s", error)
            content = "The command failed."
        if not interaction.response.is_done():
            await interaction.response.send_message(content, ephemeral=True)
