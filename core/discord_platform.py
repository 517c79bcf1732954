"""Discord implementation of the chat platform used by the relay engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import discord

from models.message_models import InboundMessage, ReactionEvent
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from discord.ext import commands

    from models.message_models import RelayEnvelope


__all__: list[str] = ["DiscordPlatform"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class DiscordPlatform:
    """Chat platform backed by a discord.py client.

    Attributes:
        bot (commands.Bot): Connected bot used for channel lookups and sends.
    """

    def __init__(self, bot: commands.Bot) -> None:
        self.bot: commands.Bot = bot

    async def fetch_channel(self, channel_id: int) -> discord.abc.Messageable | None:
        channel: Any = self.bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self.bot.fetch_channel(channel_id)
            except (discord.NotFound, discord.Forbidden) as err:
                logger.debug("Channel %s is not accessible: %s", channel_id, err)
                return None
            except discord.HTTPException as err:
                logger.warning("Failed to fetch channel %s: %s", channel_id, err)
                return None
        if not isinstance(channel, discord.abc.Messageable):
            logger.debug("Channel %s cannot receive messages", channel_id)
            return None
        return channel

    async def send_relay(self, channel: discord.abc.Messageable, envelope: RelayEnvelope) -> int:
        """Send the envelope as an embed and return the id of the sent message.

        Attachment URLs are posted in the message content so Discord renders their previews.
        Mentions in relayed text never ping.
        """
        embed = discord.Embed(description=envelope.description or None, timestamp=envelope.timestamp)
        embed.set_author(name=envelope.author_name, icon_url=envelope.author_icon_url)
        embed.set_footer(text=envelope.footer)

        reference: discord.MessageReference | None = None
        if envelope.reply_to is not None and isinstance(channel, discord.abc.GuildChannel):
            reference = discord.MessageReference(
                message_id=envelope.reply_to, channel_id=channel.id, fail_if_not_exists=False
            )

        sent: discord.Message = await channel.send(
            content="\n".join(envelope.attachments) or None,
            embed=embed,
            reference=reference,
            allowed_mentions=discord.AllowedMentions.none(),
        )
        return sent.id

    async def fetch_message(self, channel_id: int, message_id: int) -> InboundMessage | None:
        channel: discord.abc.Messageable | None = await self.fetch_channel(channel_id)
        if channel is None:
            return None
        try:
            message: discord.Message = await channel.fetch_message(message_id)
        except (discord.NotFound, discord.Forbidden) as err:
            logger.debug("Message %s is not accessible: %s", message_id, err)
            return None
        except discord.HTTPException as err:
            logger.warning("Failed to fetch message %s: %s", message_id, err)
            return None
        return self.to_inbound(message)

    @staticmethod
    def to_inbound(message: discord.Message) -> InboundMessage:
        """Convert a discord.py message into an InboundMessage.

        For messages without text (such as relayed embeds) the first embed description is used,
        so a relayed message can still be translated from the reaction path.
        """
        content: str = message.content
        if not content and message.embeds:
            content = message.embeds[0].description or ""
        return InboundMessage(
            message_id=message.id,
            author_id=message.author.id,
            author_name=message.author.display_name,
            author_avatar_url=message.author.display_avatar.url,
            guild_id=message.guild.id if message.guild is not None else None,
            channel_id=message.channel.id,
            content=content,
            attachments=[attachment.url for attachment in message.attachments],
            is_bot=message.author.bot or message.webhook_id is not None,
            created_at=message.created_at,
        )

    @staticmethod
    def to_reaction(payload: discord.RawReactionActionEvent) -> ReactionEvent:
        emoji: str = str(payload.emoji) if payload.emoji.is_unicode_emoji() else (payload.emoji.name or "")
        return ReactionEvent(
            message_id=payload.message_id,
            user_id=payload.user_id,
            guild_id=payload.guild_id,
            channel_id=payload.channel_id,
            emoji=emoji,
            is_bot=payload.member.bot if payload.member is not None else False,
        )
