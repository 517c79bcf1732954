from __future__ import annotations

import pytest

from handlers.flag_reaction import FlagLanguageResolver


@pytest.mark.parametrize(
    ("reaction", "expected"),
    [
        ("\U0001f1ea\U0001f1f8", "es"),  # ES
        ("\U0001f1ef\U0001f1f5", "jp"),  # JP
        ("\U0001f1fa\U0001f1f8", "us"),  # US
    ],
)
def test_country_code_for_flags(reaction: str, expected: str) -> None:
    assert FlagLanguageResolver.country_code(reaction) == expected


@pytest.mark.parametrize("reaction", ["👍", "ab", "\U0001f1ea", "🏳️‍🌈", "", "custom_emoji"])
def test_country_code_rejects_non_flags(reaction: str) -> None:
    assert FlagLanguageResolver.country_code(reaction) is None


@pytest.mark.parametrize(
    ("reaction", "expected"),
    [
        ("\U0001f1ea\U0001f1f8", "es"),
        ("\U0001f1f2\U0001f1fd", "es"),  # MX
        ("\U0001f1ef\U0001f1f5", "ja"),
        ("\U0001f1ec\U0001f1e7", "en"),  # GB
        ("\U0001f1fa\U0001f1e6", "uk"),  # UA
        ("\U0001f1e7\U0001f1f7", "pt"),  # BR
    ],
)
def test_language_for_known_flags(reaction: str, expected: str) -> None:
    assert FlagLanguageResolver().language_for(reaction) == expected


def test_language_for_unmapped_flag_is_none() -> None:
    # Antarctica has no language
    assert FlagLanguageResolver().language_for("\U0001f1e6\U0001f1f6") is None


def test_overrides_extend_and_replace_defaults() -> None:
    resolver = FlagLanguageResolver({"ch": "fr", "aq": "en"})

    assert resolver.language_for("\U0001f1e8\U0001f1ed") == "fr"
    assert resolver.language_for("\U0001f1e6\U0001f1f6") == "en"
    assert resolver.language_for("👍") is None
