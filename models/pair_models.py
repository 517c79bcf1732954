"""Models for channel-pair translation edges."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Final

__all__: list[str] = ["AUTO_LANGUAGE", "ChannelPair"]

AUTO_LANGUAGE: Final[str] = "auto"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class ChannelPair:
    """A directed translation edge from one channel to another.

    Attributes:
        guild_id (int): Guild owning both channels.
        source_channel_id (int): Channel whose messages are translated.
        target_channel_id (int): Channel receiving the translation.
        source_lang (str): Declared source language tag, or 'auto'.
        target_lang (str): Target language tag (never 'auto').
        created_at (datetime): Creation timestamp (UTC).
    """

    guild_id: int
    source_channel_id: int
    target_channel_id: int
    source_lang: str
    target_lang: str
    created_at: datetime = field(default_factory=_utc_now, compare=False)

    @property
    def id(self) -> str:
        """Stable identifier, unique per direction."""
        return self.make_id(self.source_channel_id, self.target_channel_id)

    @property
    def is_auto_source(self) -> bool:
        return self.source_lang == AUTO_LANGUAGE

    @staticmethod
    def make_id(source_channel_id: int, target_channel_id: int) -> str:
        return f"{source_channel_id}>{target_channel_id}"

    def describe(self) -> str:
        return (
            f"{self.id}: <#{self.source_channel_id}> ({self.source_lang}) -> "
            f"<#{self.target_channel_id}> ({self.target_lang})"
        )
