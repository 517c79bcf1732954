"""Translation providers, language detection and the provider chain."""

from core.trans.detector import LanguageDetector
from core.trans.interface import (
    AllProvidersExhaustedError,
    NotSupportedLanguagesError,
    ProviderUnavailableError,
    Result,
    TransInterface,
    TranslateExceptionError,
    TranslationQuotaExceededError,
    TranslationRateLimitError,
)
from core.trans.manager import TransManager

__all__: list[str] = [
    "AllProvidersExhaustedError",
    "LanguageDetector",
    "NotSupportedLanguagesError",
    "ProviderUnavailableError",
    "Result",
    "TransInterface",
    "TransManager",
    "TranslateExceptionError",
    "TranslationQuotaExceededError",
    "TranslationRateLimitError",
]
