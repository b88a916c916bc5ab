from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from oopsask.services.catalog import (
    DEFAULT_LANGUAGE,
    SOURCE_STRINGS,
    BatchItem,
    build_batch,
    normalize_language_code,
)
from oopsask.services.key_store import KeyStore, TranslationStoreError
from oopsask.services.languages import LanguageRegistry


logger = logging.getLogger(__name__)


class Translator(Protocol):
    async def translate_batch(
        self,
        items: Sequence[BatchItem],
        target_language: str,
    ) -> dict[str, str]: ...


@dataclass
class CachedTranslations:
    language_code: str
    translations: dict[str, str] = field(default_factory=dict)
    was_cached: bool = False
    language_id: uuid.UUID | None = None


@dataclass(frozen=True)
class CacheInvalidation:
    language_code: str
    language_id: uuid.UUID
    deleted_count: int


class TranslationCacheService:
    """Serve the UI key set in any language, generating and persisting it lazily.

    Per language code the service moves ``Idle -> Filling -> Idle``. While a
    code is in ``_filling`` no second batch for it is started; other callers
    poll until the fill clears and then re-read the store.
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        store: KeyStore,
        translator: Translator,
        *,
        default_language: str = DEFAULT_LANGUAGE,
        source_strings: Mapping[str, str] | None = None,
        fill_poll_interval: float = 0.25,
        fill_wait_timeout: float = 60.0,
    ):
        self._registry = registry
        self._store = store
        self._translator = translator
        self._default_language = normalize_language_code(default_language)
        self._source_strings = dict(source_strings or SOURCE_STRINGS)
        self._fill_poll_interval = fill_poll_interval
        self._fill_wait_timeout = fill_wait_timeout
        self._filling: set[str] = set()

    @property
    def default_language(self) -> str:
        return self._default_language

    def is_filling(self, language_code: str) -> bool:
        return normalize_language_code(language_code) in self._filling

    def filling_languages(self) -> list[str]:
        return sorted(self._filling)

    def is_default_language(self, language_code: str) -> bool:
        normalized = normalize_language_code(language_code)
        return not normalized or normalized == self._default_language

    def source_translations(self) -> dict[str, str]:
        return dict(self._source_strings)

    async def get_translations(
        self,
        language_code: str,
        items: Sequence[BatchItem] | None = None,
    ) -> CachedTranslations:
        """Return the cached map for a language, filling it on a miss."""
        code = normalize_language_code(language_code) or self._default_language
        if code == self._default_language:
            return CachedTranslations(
                language_code=code,
                translations=self.source_translations(),
                was_cached=True,
            )

        language_id = await self._registry.resolve(code)
        if self._registry_failed(code, language_id):
            return self._unavailable(code)

        while True:
            cached = await self._read_cached(language_id, code)
            if cached:
                logger.debug("Serving %d cached translations for %s.", len(cached), code)
                return CachedTranslations(
                    language_code=code,
                    translations=cached,
                    was_cached=True,
                    language_id=language_id,
                )

            if code in self._filling:
                if not await self._wait_for_fill(code):
                    logger.warning(
                        "Timed out waiting for the %s fill; serving source text.", code
                    )
                    return CachedTranslations(
                        language_code=code,
                        translations=self.source_translations(),
                        was_cached=False,
                        language_id=language_id,
                    )
                continue

            return await self._fill(code, language_id, items, recheck=True)

    async def invalidate(self, language_code: str) -> CacheInvalidation:
        """Delete every cached entry for a language.

        Raises ``TranslationStoreError`` when the language cannot be resolved
        or its entries cannot be deleted.
        """
        code = normalize_language_code(language_code) or self._default_language
        language_id = await self._registry.resolve(code)
        if self._registry_failed(code, language_id):
            raise TranslationStoreError(f"Could not resolve language {code}.")
        deleted = await self._store.delete_all(language_id)
        logger.info("Invalidated %d translations for %s.", deleted, code)
        return CacheInvalidation(language_code=code, language_id=language_id, deleted_count=deleted)

    async def force_refresh(
        self,
        language_code: str,
        items: Sequence[BatchItem] | None = None,
    ) -> CachedTranslations:
        """Drop the cached set for a language and regenerate it unconditionally."""
        code = normalize_language_code(language_code) or self._default_language
        if code == self._default_language:
            return await self.get_translations(code)

        language_id = await self._registry.resolve(code)
        if self._registry_failed(code, language_id):
            return self._unavailable(code)

        if code in self._filling and not await self._wait_for_fill(code):
            logger.warning("Timed out waiting for the %s fill before refresh.", code)
            return CachedTranslations(
                language_code=code,
                translations=self.source_translations(),
                was_cached=False,
                language_id=language_id,
            )
        return await self._fill(code, language_id, items, clear_first=True)

    async def _fill(
        self,
        code: str,
        language_id: uuid.UUID,
        items: Sequence[BatchItem] | None,
        *,
        clear_first: bool = False,
        recheck: bool = False,
    ) -> CachedTranslations:
        # Check-and-set happens without an intervening await.
        self._filling.add(code)
        try:
            if recheck:
                # A fill that finished while our earlier read was in flight.
                cached = await self._read_cached(language_id, code)
                if cached:
                    return CachedTranslations(
                        language_code=code,
                        translations=cached,
                        was_cached=True,
                        language_id=language_id,
                    )
            if clear_first:
                try:
                    await self._store.delete_all(language_id)
                except TranslationStoreError as exc:
                    logger.warning(
                        "Could not clear cached translations for %s; overwriting instead.",
                        code,
                        exc_info=exc,
                    )

            batch = list(items) if items is not None else build_batch(source=self._source_strings)
            logger.info("Generating %d translations for %s.", len(batch), code)
            generated = await self._translator.translate_batch(batch, code)
            written = await self._store.upsert_many(language_id, generated)
            logger.info("Cached %d/%d translations for %s.", written, len(generated), code)
        finally:
            self._filling.discard(code)

        return CachedTranslations(
            language_code=code,
            translations=generated,
            was_cached=False,
            language_id=language_id,
        )

    def _registry_failed(self, code: str, language_id: uuid.UUID) -> bool:
        # The registry answers with the default language's id when it cannot
        # resolve a code; that partition must never hold another language.
        return code != self._default_language and language_id == self._registry.fallback_id

    def _unavailable(self, code: str) -> CachedTranslations:
        logger.warning("Language registry unavailable for %s; serving source text.", code)
        return CachedTranslations(
            language_code=code,
            translations=self.source_translations(),
            was_cached=False,
        )

    async def _read_cached(self, language_id: uuid.UUID, code: str) -> dict[str, str]:
        try:
            return await self._store.get(language_id)
        except TranslationStoreError as exc:
            logger.warning(
                "Translation cache read failed for %s; treating as a miss.",
                code,
                exc_info=exc,
            )
            return {}

    async def _wait_for_fill(self, code: str) -> bool:
        """Poll until the in-flight fill for ``code`` clears. False on timeout."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._fill_wait_timeout
        while code in self._filling:
            if loop.time() >= deadline:
                return False
            await asyncio.sleep(self._fill_poll_interval)
        return True
