"""Models for translation-related data."""

from __future__ import annotations

from dataclasses import dataclass

from models.pair_models import AUTO_LANGUAGE

__all__: list[str] = ["TranslationOutcome", "TranslationRequest"]


@dataclass(frozen=True)
class TranslationRequest:
    """Ephemeral translation parameters for one outbound edge.

    Attributes:
        text (str): Text to translate, already trimmed.
        source_lang (str): Declared source tag, possibly 'auto'.
        target_lang (str): Target tag.
    """

    text: str
    source_lang: str
    target_lang: str

    @property
    def is_auto_source(self) -> bool:
        return self.source_lang == AUTO_LANGUAGE


@dataclass
class TranslationOutcome:
    """Result of running a request through the provider chain.

    Attributes:
        text (str | None): Translated text. None means the source was already in the target language.
        source_lang (str): Resolved source tag ('auto' when the provider did not report one).
        engine (str): Name of the provider that produced the text, or '' when no provider ran.
        from_cache (bool): Whether the result was served from the cache.
    """

    text: str | None
    source_lang: str
    engine: str = ""
    from_cache: bool = False

    @property
    def is_same_language(self) -> bool:
        return self.text is None
