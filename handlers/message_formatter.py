"""Relay envelope formatter.

Builds the outbound message for one translated edge: author name and avatar, the body, a
footer naming the language direction and the original timestamp.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from models.message_models import RelayEnvelope
from models.pair_models import AUTO_LANGUAGE
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from models.message_models import InboundMessage


__all__: list[str] = ["MAX_DESCRIPTION_LENGTH", "MessageFormatter"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

MAX_DESCRIPTION_LENGTH: Final[int] = 4096
MAX_AUTHOR_LENGTH: Final[int] = 256
FOOTER_ARROW: Final[str] = "→"


class MessageFormatter:
    """Turns an inbound message and its translation into a RelayEnvelope."""

    def __init__(self, *, max_description_length: int = MAX_DESCRIPTION_LENGTH) -> None:
        self.max_description_length: int = max_description_length

    @staticmethod
    def build_footer(source_lang: str, target_lang: str) -> str:
        """Return the direction footer, e.g. 'EN → ES'.

        Args:
            source_lang (str): Source tag. 'auto' is shown as 'AUTO'.
            target_lang (str): Target tag.

        Returns:
            str: Upper-case footer text.
        """
        source: str = source_lang or AUTO_LANGUAGE
        return f"{source.upper()} {FOOTER_ARROW} {target_lang.upper()}"

    def build_envelope(
        self,
        message: InboundMessage,
        body: str,
        *,
        source_lang: str,
        target_lang: str,
        reply_to: int | None = None,
    ) -> RelayEnvelope:
        """Build the envelope relayed for ``message``.

        Args:
            message (InboundMessage): The original message.
            body (str): Translated (or original) text. May be empty for attachment-only messages.
            source_lang (str): Resolved source tag, or 'auto' when unknown.
            target_lang (str): Target tag.
            reply_to (int | None): Message id to reply to.

        Returns:
            RelayEnvelope: The outbound message.
        """
        envelope = RelayEnvelope(
            description=StringUtils.truncate(body, self.max_description_length),
            author_name=StringUtils.truncate(message.author_name, MAX_AUTHOR_LENGTH),
            author_icon_url=message.author_avatar_url,
            footer=self.build_footer(source_lang, target_lang),
            timestamp=message.created_at,
            attachments=list(message.attachments),
            reply_to=reply_to,
        )
        logger.debug("Envelope built for message %s (%s)", message.message_id, envelope.footer)
        return envelope
