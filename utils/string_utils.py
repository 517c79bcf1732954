from __future__ import annotations

import re
import unicodedata
from typing import Final

__all__: list[str] = ["StringUtils"]

LANGUAGE_TAG_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-z]{2}$")


class StringUtils:
    """Static helpers for the text handled by the relay."""

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Return the value as a string, or an empty string for None.

        Args:
            value (str | None): The value to convert.

        Returns:
            str: The value as a string.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def normalize_text(text: str) -> str:
        """Trim and NFC-normalize text before it is used as a cache key.

        Args:
            text (str): Raw message text.

        Returns:
            str: Normalized text.
        """
        return unicodedata.normalize("NFC", StringUtils.ensure_str(text).strip())

    @staticmethod
    def normalize_language_tag(tag: str | None) -> str:
        """Lowercase and strip a language tag; region qualifiers are dropped ('pt-BR' -> 'pt').

        Args:
            tag (str | None): Language tag as typed by a user or returned by a provider.

        Returns:
            str: The normalized tag, or an empty string.
        """
        value: str = StringUtils.ensure_str(tag).strip().lower().replace("_", "-")
        return value.split("-")[0]

    @staticmethod
    def is_language_tag(tag: str) -> bool:
        """Check that a tag is a two-letter lowercase code."""
        return bool(LANGUAGE_TAG_PATTERN.match(tag))

    @staticmethod
    def truncate(value: str, max_len: int, *, ellipsis: str = "…") -> str:
        """Truncate text to at most `max_len` characters, marking the cut.

        Args:
            value (str): Text to truncate.
            max_len (int): Maximum resulting length, including the ellipsis.
            ellipsis (str): Marker appended when text is cut.

        Returns:
            str: The possibly truncated text.
        """
        value = StringUtils.ensure_str(value)
        if max_len <= 0:
            return ""
        if len(value) <= max_len:
            return value
        return value[: max(max_len - len(ellipsis), 0)] + ellipsis
