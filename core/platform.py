"""Chat platform collaborator seen by the relay engine.

The relay only talks to the chat platform through this protocol, so the engine can be driven
by the Discord adapter in production and by simple fakes in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from models.message_models import InboundMessage, RelayEnvelope

__all__: list[str] = ["ChatPlatform"]


class ChatPlatform(Protocol):
    async def fetch_channel(self, channel_id: int) -> Any | None:
        """Return a sendable channel handle, or None if it does not exist or is not accessible."""
        ...

    async def send_relay(self, channel: Any, envelope: RelayEnvelope) -> int:
        """Send the envelope to the channel and return the id of the sent message."""
        ...

    async def fetch_message(self, channel_id: int, message_id: int) -> InboundMessage | None:
        """Return the message, or None if it cannot be fetched."""
        ...
