"""Script-frequency language detector.

A coarse heuristic used only when a message's source is declared ``auto`` and the chosen
provider needs an explicit source tag. It is not a statistical language identifier.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["DEFAULT_LANGUAGE", "DETECTABLE_LANGUAGES", "LanguageDetector"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_LANGUAGE: Final[str] = "en"

SCRIPT_THRESHOLD: Final[float] = 0.3

# Checked in this order. Kana precedes CJK ideographs because Japanese text mixes both.
SCRIPT_RANGES: Final[tuple[tuple[str, tuple[tuple[int, int], ...]], ...]] = (
    ("hi", ((0x0900, 0x097F),)),
    ("ar", ((0x0600, 0x06FF), (0x0750, 0x077F))),
    ("ja", ((0x3040, 0x309F), (0x30A0, 0x30FF))),
    ("zh", ((0x4E00, 0x9FFF), (0x3400, 0x4DBF))),
    ("ko", ((0xAC00, 0xD7AF), (0x1100, 0x11FF), (0x3130, 0x318F))),
    ("ru", ((0x0400, 0x04FF),)),
)

DETECTABLE_LANGUAGES: Final[frozenset[str]] = frozenset({DEFAULT_LANGUAGE, *(tag for tag, _ in SCRIPT_RANGES)})


class LanguageDetector:
    """Classify text into a language tag by counting characters per Unicode script."""

    def __init__(self, *, default: str = DEFAULT_LANGUAGE, threshold: float = SCRIPT_THRESHOLD) -> None:
        self.default: str = default
        self.threshold: float = threshold

    def detect(self, text: str) -> str:
        """Return the language tag for ``text``.

        Non-letter, non-whitespace characters are dropped first. If nothing remains the default
        tag is returned. Otherwise the first script (in fixed priority order) whose letter count
        exceeds the threshold share of the cleaned length wins.

        Args:
            text (str): Raw text to classify.

        Returns:
            str: A member of DETECTABLE_LANGUAGES. Never raises.
        """
        cleaned: str = "".join(ch for ch in text if ch.isalpha() or ch.isspace())
        if not cleaned:
            return self.default

        counts: dict[str, int] = dict.fromkeys((tag for tag, _ in SCRIPT_RANGES), 0)
        for ch in cleaned:
            code: int = ord(ch)
            for tag, ranges in SCRIPT_RANGES:
                if any(low <= code <= high for low, high in ranges):
                    counts[tag] += 1
                    break

        limit: float = len(cleaned) * self.threshold
        for tag, _ in SCRIPT_RANGES:
            if counts[tag] > limit:
                logger.debug("Detected '%s' (%d of %d characters)", tag, counts[tag], len(cleaned))
                return tag
        return self.default
