from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from core.trans.detector import LanguageDetector
from core.trans.engines import (
    DeeplTranslation,  # noqa: F401
    GoogleCloudTranslation,  # noqa: F401
    LibreTranslation,  # noqa: F401
    MyMemoryTranslation,  # noqa: F401
)
from core.trans.interface import (
    AllProvidersExhaustedError,
    ProviderUnavailableError,
    Result,
    TransInterface,
    TranslateExceptionError,
)
from models.pair_models import AUTO_LANGUAGE
from models.translation_models import TranslationOutcome, TranslationRequest
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from core.cache.manager import TranslationCacheManager
    from models.cache_models import TranslationCacheEntry
    from models.config_models import Config

__all__: list[str] = ["TransManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

class TransManager:
    """Provider chain.

    Holds the configured providers in chain order and translates with fallback: each eligible
    provider is tried at most once per call, and the call fails only when all of them have failed.

    Attributes:
        _trans_engine (list[str]): Names of the providers in chain order.
    """

    def __init__(
        self,
        config: Config,
        cache_manager: TranslationCacheManager | None = None,
        detector: LanguageDetector | None = None,
    ) -> None:
        """Initialize the TransManager with the given configuration.

        Args:
            config (Config): The configuration object containing translation engine settings.
            cache_manager (TranslationCacheManager | None): Cache consulted before any provider call.
            detector (LanguageDetector | None): Local detector used for providers that need an explicit source.
        """
        self.config: Config = config
        self.cache_manager: TranslationCacheManager | None = cache_manager
        self.detector: LanguageDetector = detector or LanguageDetector()
        self._trans_instance: dict[str, TransInterface] = {}
        self._trans_engine: list[str] = []
        logger.debug("Registered translation engines: %s", list(TransInterface.registered))

    async def initialize(self) -> None:
        """Instantiate the configured providers in chain order.

        Providers without credentials are left out silently. Providers that fail setup are
        logged and left out.
        """
        logger.info("TransManager initialization started")

        self._trans_engine.clear()
        for _name in self.config.TRANSLATION.ENGINE:
            _cls: type[TransInterface] | None = TransInterface.registered.get(_name)
            if _cls is None:
                logger.error("Translation class not found: '%s'", _name)
                continue
            _instance: TransInterface = _cls()
            try:
                _instance.initialize(self.config)
            except ProviderUnavailableError as err:
                logger.info("Translation engine '%s' not configured: %s", _name, err)
                continue
            except RuntimeError as err:
                logger.critical("RuntimeError in '%s' translation setup: %s", _name, err)
                continue
            except TranslateExceptionError as err:
                logger.critical("Exception in '%s' translation setup: %s", _name, err)
                continue
            self._trans_instance[_name] = _instance
            self._trans_engine.append(_name)
            logger.info("Translation engine initialized: '%s'", _name)
            logger.debug("Engine attributes: %s", _instance.engine_attributes)

        if not self._trans_engine:
            logger.warning("No translation engines are available; every translation will fail")

    def fetch_engine_names(self) -> list[str]:
        return list(self._trans_engine)

    def register_engine(self, engine: TransInterface) -> None:
        """Append an already initialized provider to the end of the chain."""
        self._trans_instance[engine.engine_name] = engine
        if engine.engine_name not in self._trans_engine:
            self._trans_engine.append(engine.engine_name)

    def eligible_engines(self, tgt_lang: str, src_lang: str | None = None) -> list[TransInterface]:
        """Order the providers for one request.

        Providers whose quality tier lists ``tgt_lang`` come first, the rest follow in chain
        order. Providers that do not declare support for the tags are left out.

        Args:
            tgt_lang (str): Target tag.
            src_lang (str | None): Explicit source tag, or None when the source is auto.

        Returns:
            list[TransInterface]: Providers to try, in order.
        """
        tiers: dict[str, list[str]] = self.config.TRANSLATION.QUALITY_TIERS
        ordered: list[TransInterface] = [
            self._trans_instance[name] for name in self.fetch_engine_names() if name in self._trans_instance
        ]
        preferred: list[TransInterface] = [e for e in ordered if tgt_lang in tiers.get(e.engine_name, [])]
        others: list[TransInterface] = [e for e in ordered if e not in preferred]
        return [e for e in preferred + others if e.supports(tgt_lang, src_lang)]

    async def translate(self, text: str, src_lang: str, tgt_lang: str) -> str | None:
        """Translate ``text`` through the chain.

        Args:
            text (str): Text to translate.
            src_lang (str): Declared source tag, possibly 'auto'.
            tgt_lang (str): Target tag.

        Returns:
            str | None: The translation, or None when the text is already in the target language.

        Raises:
            AllProvidersExhaustedError: If every eligible provider failed or none was available.
        """
        outcome: TranslationOutcome = await self.translate_request(
            TranslationRequest(text=text, source_lang=src_lang, target_lang=tgt_lang)
        )
        return outcome.text

    async def translate_request(self, request: TranslationRequest) -> TranslationOutcome:  # noqa: C901
        """Translate one request, consulting and filling the cache.

        Raises:
            AllProvidersExhaustedError: If every eligible provider failed or none was available.
        """
        text: str = StringUtils.normalize_text(request.text)
        src: str = StringUtils.normalize_language_tag(request.source_lang)
        tgt: str = StringUtils.normalize_language_tag(request.target_lang)

        if src == tgt:
            logger.debug("Source and target are both '%s', skipping translation", tgt)
            return TranslationOutcome(text=None, source_lang=src)

        if self.cache_manager is not None:
            cached: TranslationCacheEntry | None = self.cache_manager.get(text, src, tgt)
            if cached is not None:
                return TranslationOutcome(text=cached.translation_text, source_lang=src, from_cache=True)

        is_auto: bool = src == AUTO_LANGUAGE
        detected: str | None = None
        failures: list[str] = []
        candidates: list[TransInterface] = self.eligible_engines(tgt, None if is_auto else src)

        for engine in candidates:
            if not engine.is_available:
                logger.debug("Skipping unavailable engine '%s'", engine.engine_name)
                continue

            engine_src: str | None = None if is_auto else src
            if is_auto and not engine.supports_auto_detection:
                if detected is None:
                    detected = self.detector.detect(text)
                    logger.debug("Locally detected source language: '%s'", detected)
                if detected == tgt:
                    return self._remember(text, src, tgt, TranslationOutcome(text=None, source_lang=detected))
                if not engine.supports(tgt, detected):
                    continue
                engine_src = detected

            try:
                result: Result = await asyncio.wait_for(
                    engine.translation(text, tgt_lang=tgt, src_lang=engine_src),
                    timeout=self.config.TRANSLATION.TIMEOUT,
                )
            except TimeoutError:
                logger.warning("Translation engine '%s' timed out", engine.engine_name)
                failures.append(engine.engine_name)
                continue
            except TranslateExceptionError as err:
                logger.warning("Translation engine '%s' failed: %s", engine.engine_name, err)
                failures.append(engine.engine_name)
                continue
            except Exception as err:
                logger.exception("Translation engine '%s' raised an unexpected error: %s", engine.engine_name, err)
                failures.append(engine.engine_name)
                continue

            source_lang: str = result.detected_source_lang or engine_src or src
            if source_lang == tgt:
                logger.debug("Engine '%s' reports source already in '%s'", engine.engine_name, tgt)
                outcome = TranslationOutcome(text=None, source_lang=source_lang, engine=engine.engine_name)
            else:
                outcome = TranslationOutcome(
                    text=StringUtils.ensure_str(result.text), source_lang=source_lang, engine=engine.engine_name
                )
            return self._remember(text, src, tgt, outcome)

        msg: str = f"No translation engine could translate '{src}' > '{tgt}' (failed: {failures or 'none'})"
        logger.error(msg)
        raise AllProvidersExhaustedError(msg)

    def _remember(self, text: str, src: str, tgt: str, outcome: TranslationOutcome) -> TranslationOutcome:
        if self.cache_manager is not None:
            self.cache_manager.put(text, src, tgt, outcome.text)
        return outcome

    async def translate_with_retry(
        self, request: TranslationRequest, *, retry_delay: float | None = None
    ) -> TranslationOutcome:
        """Translate, retrying once after a short fixed delay if the chain was exhausted.

        Raises:
            AllProvidersExhaustedError: If the retry is exhausted as well.
        """
        delay: float = self.config.TRANSLATION.RETRY_DELAY if retry_delay is None else retry_delay
        try:
            return await self.translate_request(request)
        except AllProvidersExhaustedError:
            logger.info("Retrying translation to '%s' in %.1f sec", request.target_lang, delay)
        await asyncio.sleep(delay)
        return await self.translate_request(request)

    async def shutdown_engines(self) -> None:
        """Shut down all active translation engines."""
        logger.info("Class '%s' termination process started.", self.__class__.__name__)
        for _inst in self._trans_instance.values():
            await _inst.close()
        self._trans_instance.clear()
        self._trans_engine.clear()
        logger.info("Class '%s' termination process completed.", self.__class__.__name__)
