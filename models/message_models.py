"""Platform-neutral message data for the relay.

The chat platform adapter converts its native objects into these DTOs so the relay
engine never touches platform types directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

__all__: list[str] = [
    "InboundMessage",
    "ReactionEvent",
    "RelayEnvelope",
]


@dataclass
class InboundMessage:
    """An inbound message-create or message-update event.

    Attributes:
        message_id (int): Platform message id.
        author_id (int): Author user id.
        author_name (str): Display name of the author.
        author_avatar_url (str | None): Author avatar URL, if any.
        guild_id (int | None): Guild id. None for direct messages.
        channel_id (int): Channel the message was posted in.
        content (str): Raw message text.
        attachments (list[str]): Attachment URLs.
        is_bot (bool): Whether the author is a bot or webhook.
        created_at (datetime): Message timestamp.
    """

    message_id: int
    author_id: int
    author_name: str
    guild_id: int | None
    channel_id: int
    content: str = ""
    author_avatar_url: str | None = None
    attachments: list[str] = field(default_factory=list)
    is_bot: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


@dataclass
class ReactionEvent:
    """An inbound reaction-add event.

    Attributes:
        message_id (int): Message that received the reaction.
        user_id (int): Reacting user.
        guild_id (int | None): Guild id. None for direct messages.
        channel_id (int): Channel of the reacted message.
        emoji (str): Unicode emoji text (custom emojis arrive as their name).
        is_bot (bool): Whether the reacting user is a bot.
    """

    message_id: int
    user_id: int
    guild_id: int | None
    channel_id: int
    emoji: str
    is_bot: bool = False


@dataclass
class RelayEnvelope:
    """Outbound message produced by the relay.

    Attributes:
        description (str): Message body (translated or original text).
        author_name (str): Name shown as the author.
        author_icon_url (str | None): Icon shown beside the author name.
        footer (str): Footer text, e.g. 'EN → ES'.
        timestamp (datetime): Timestamp of the original message.
        attachments (list[str]): Attachment URLs carried over untranslated.
        reply_to (int | None): Message id to reply to (reaction path), if any.
    """

    description: str
    author_name: str
    footer: str
    timestamp: datetime
    author_icon_url: str | None = None
    attachments: list[str] = field(default_factory=list)
    reply_to: int | None = None
