"""
Flag emoji to language tag resolution for the reaction-triggered translation path.

A flag emoji is a pair of regional indicator symbols spelling an ISO 3166 country code.
The country is mapped to the language most users expect when they react with that flag.

Prior to version 2.14.1, the emoji module defined emoji-related data as variables.
From version 2.14.1 onwards, this data is stored in a separate data file and loaded as needed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

import emoji
from packaging.version import Version

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging


__all__: list[str] = ["COUNTRY_LANGUAGES", "FlagLanguageResolver"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

if Version(emoji.__version__) < Version("2.14.1"):
    logger.warning(
        "The version of the emoji module currently in use is %s. Version 2.14.1 or later is required.",
        emoji.__version__,
    )

REGIONAL_INDICATOR_A: Final[int] = 0x1F1E6
REGIONAL_INDICATOR_Z: Final[int] = 0x1F1FF

COUNTRY_LANGUAGES: Final[dict[str, str]] = {
    "us": "en", "gb": "en", "au": "en", "ca": "en", "nz": "en", "ie": "en",
    "es": "es", "mx": "es", "ar": "es", "co": "es", "cl": "es", "pe": "es",
    "fr": "fr", "be": "fr",
    "de": "de", "at": "de", "ch": "de",
    "it": "it",
    "pt": "pt", "br": "pt",
    "nl": "nl",
    "pl": "pl",
    "ru": "ru",
    "ua": "uk",
    "tr": "tr",
    "gr": "el",
    "se": "sv",
    "no": "nb",
    "dk": "da",
    "fi": "fi",
    "cz": "cs",
    "hu": "hu",
    "ro": "ro",
    "bg": "bg",
    "jp": "ja",
    "cn": "zh", "tw": "zh", "hk": "zh",
    "kr": "ko",
    "in": "hi",
    "sa": "ar", "eg": "ar", "ae": "ar",
    "il": "he",
    "ir": "fa",
    "th": "th",
    "vn": "vi",
    "id": "id",
    "my": "ms",
    "ph": "tl",
}  # fmt: skip


class FlagLanguageResolver:
    """Resolve reaction emojis to target language tags.

    Args:
        overrides (dict[str, str] | None): Extra country code to language tag entries.
    """

    def __init__(self, overrides: dict[str, str] | None = None) -> None:
        self.country_languages: dict[str, str] = {**COUNTRY_LANGUAGES, **(overrides or {})}

    @staticmethod
    def country_code(reaction: str) -> str | None:
        """Return the lowercase country code spelled by a flag emoji, or None for anything else."""
        text: str = reaction.strip()
        if len(text) != 2 or not emoji.is_emoji(text):
            return None
        if not all(REGIONAL_INDICATOR_A <= ord(ch) <= REGIONAL_INDICATOR_Z for ch in text):
            return None
        return "".join(chr(ord(ch) - REGIONAL_INDICATOR_A + ord("a")) for ch in text)

    def language_for(self, reaction: str) -> str | None:
        """Return the language tag for a flag reaction.

        Args:
            reaction (str): The reaction emoji text.

        Returns:
            str | None: Two-letter tag, or None if the reaction is not a known flag.
        """
        code: str | None = self.country_code(reaction)
        if code is None:
            return None
        tag: str | None = self.country_languages.get(code)
        if tag is None:
            logger.debug("No language mapped for flag %s (%s)", emoji.demojize(reaction), code)
        return tag
