"""Unit tests for core.discord_platform module."""

from __future__ import annotations

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from core.discord_platform import DiscordPlatform
from models.message_models import InboundMessage, ReactionEvent, RelayEnvelope

CREATED: datetime = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)


def _text_channel(channel_id: int = 20) -> MagicMock:
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = channel_id
    channel.send = AsyncMock(return_value=SimpleNamespace(id=555))
    return channel


def _not_found() -> discord.NotFound:
    return discord.NotFound(MagicMock(status=404, reason="Not Found"), "Unknown Channel")


def _discord_message(**overrides) -> SimpleNamespace:
    author = SimpleNamespace(
        id=7, display_name="alice", display_avatar=SimpleNamespace(url="https://cdn.example/a.png"), bot=False
    )
    values: dict = {
        "id": 100,
        "content": "hello",
        "embeds": [],
        "author": author,
        "guild": SimpleNamespace(id=1),
        "channel": SimpleNamespace(id=10),
        "attachments": [SimpleNamespace(url="https://cdn.example/cat.png")],
        "webhook_id": None,
        "created_at": CREATED,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.mark.asyncio
async def test_fetch_channel_prefers_cache() -> None:
    bot = MagicMock()
    channel: MagicMock = _text_channel()
    bot.get_channel.return_value = channel
    bot.fetch_channel = AsyncMock()

    assert await DiscordPlatform(bot).fetch_channel(20) is channel
    bot.fetch_channel.assert_not_awaited()


@pytest.mark.asyncio
async def test_fetch_channel_falls_back_to_api_and_handles_missing() -> None:
    bot = MagicMock()
    bot.get_channel.return_value = None
    bot.fetch_channel = AsyncMock(side_effect=_not_found())

    assert await DiscordPlatform(bot).fetch_channel(20) is None


@pytest.mark.asyncio
async def test_fetch_channel_rejects_non_messageable() -> None:
    bot = MagicMock()
    bot.get_channel.return_value = MagicMock(spec=discord.CategoryChannel)

    assert await DiscordPlatform(bot).fetch_channel(20) is None


@pytest.mark.asyncio
async def test_send_relay_builds_embed_and_reply() -> None:
    channel: MagicMock = _text_channel()
    envelope = RelayEnvelope(
        description="hola",
        author_name="alice",
        author_icon_url="https://cdn.example/a.png",
        footer="EN → ES",
        timestamp=CREATED,
        attachments=["https://cdn.example/cat.png"],
        reply_to=100,
    )

    sent_id: int = await DiscordPlatform(MagicMock()).send_relay(channel, envelope)

    assert sent_id == 555
    kwargs: dict = channel.send.await_args.kwargs
    assert kwargs["content"] == "https://cdn.example/cat.png"
    embed: discord.Embed = kwargs["embed"]
    assert embed.description == "hola"
    assert embed.author.name == "alice"
    assert embed.footer.text == "EN → ES"
    assert embed.timestamp == CREATED
    assert kwargs["reference"].message_id == 100
    assert kwargs["allowed_mentions"].everyone is False


@pytest.mark.asyncio
async def test_send_relay_without_reply_or_attachments() -> None:
    channel: MagicMock = _text_channel()
    envelope = RelayEnvelope(description="", author_name="alice", footer="EN → ES", timestamp=CREATED)

    await DiscordPlatform(MagicMock()).send_relay(channel, envelope)

    kwargs: dict = channel.send.await_args.kwargs
    assert kwargs["content"] is None
    assert kwargs["reference"] is None
    assert kwargs["embed"].description is None


@pytest.mark.asyncio
async def test_fetch_message_converts_and_handles_missing() -> None:
    bot = MagicMock()
    channel: MagicMock = _text_channel(10)
    channel.fetch_message = AsyncMock(side_effect=[_discord_message(), _not_found()])
    bot.get_channel.return_value = channel
    platform = DiscordPlatform(bot)

    inbound: InboundMessage | None = await platform.fetch_message(10, 100)

    assert inbound is not None
    assert inbound.content == "hello"
    assert await platform.fetch_message(10, 101) is None


def test_to_inbound_maps_fields() -> None:
    inbound: InboundMessage = DiscordPlatform.to_inbound(_discord_message())  # type: ignore[arg-type]

    assert inbound.message_id == 100
    assert inbound.author_name == "alice"
    assert inbound.author_avatar_url == "https://cdn.example/a.png"
    assert inbound.guild_id == 1
    assert inbound.channel_id == 10
    assert inbound.attachments == ["https://cdn.example/cat.png"]
    assert inbound.is_bot is False
    assert inbound.created_at == CREATED


def test_to_inbound_uses_embed_text_and_flags_webhooks() -> None:
    message: SimpleNamespace = _discord_message(
        content="", embeds=[SimpleNamespace(description="hola")], webhook_id=42, guild=None
    )

    inbound: InboundMessage = DiscordPlatform.to_inbound(message)  # type: ignore[arg-type]

    assert inbound.content == "hola"
    assert inbound.is_bot is True
    assert inbound.guild_id is None


@pytest.mark.parametrize(
    ("emoji", "expected"),
    [
        (discord.PartialEmoji(name="\U0001f1ea\U0001f1f8"), "\U0001f1ea\U0001f1f8"),
        (discord.PartialEmoji(name="pepe", id=123), "pepe"),
    ],
)
def test_to_reaction(emoji: discord.PartialEmoji, expected: str) -> None:
    payload = SimpleNamespace(message_id=100, user_id=8, guild_id=1, channel_id=10, emoji=emoji, member=None)

    event: ReactionEvent = DiscordPlatform.to_reaction(payload)  # type: ignore[arg-type]

    assert event.emoji == expected
    assert event.is_bot is False
    assert (event.message_id, event.user_id, event.guild_id, event.channel_id) == (100, 8, 1, 10)
