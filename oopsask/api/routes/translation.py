from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from oopsask.api.deps import get_language_registry, get_translation_cache_service
from oopsask.schemas.translation import (
    ClearCacheRequest,
    ClearCacheResponse,
    LanguageItem,
    LanguageListResponse,
    TranslateRequest,
    TranslateResponse,
    TranslationEntry,
)
from oopsask.services.catalog import BatchItem, context_for_key, source_text, tone_for_key
from oopsask.services.languages import LanguageRegistry
from oopsask.services.translation_cache import CachedTranslations, TranslationCacheService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/translate",
    response_model=TranslateResponse,
    status_code=status.HTTP_200_OK,
    summary="Serve the UI strings for a language, generating them on a cache miss.",
)
async def translate(
    payload: TranslateRequest,
    service: TranslationCacheService = Depends(get_translation_cache_service),
) -> TranslateResponse:
    """Return cached translations, or generate, persist and return a fresh set."""
    items = _batch_items(payload.entries) if payload.entries is not None else None
    logger.info(
        "Translation request for %s with %s keys (force_refresh=%s).",
        payload.language_code,
        len(items) if items is not None else "all",
        payload.force_refresh,
    )
    if payload.force_refresh:
        result = await service.force_refresh(payload.language_code, items)
    else:
        result = await service.get_translations(payload.language_code, items)
    return _to_response(result)


@router.post(
    "/clear-cache",
    response_model=ClearCacheResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete every cached translation for a language.",
)
async def clear_cache(
    payload: ClearCacheRequest,
    service: TranslationCacheService = Depends(get_translation_cache_service),
) -> ClearCacheResponse:
    """Store failures propagate as ``TranslationStoreError`` and are answered with 503."""
    result = await service.invalidate(payload.language_code)
    return ClearCacheResponse(
        message=f"Cache cleared for language: {payload.language_code}",
        language_id=result.language_id,
        deleted_count=result.deleted_count,
    )


@router.get(
    "/languages",
    response_model=LanguageListResponse,
    summary="List languages that have been requested at least once.",
)
async def list_languages(
    registry: LanguageRegistry = Depends(get_language_registry),
) -> LanguageListResponse:
    languages = await registry.list_languages()
    return LanguageListResponse(
        items=[
            LanguageItem(
                id=language.id,
                code=language.code,
                name=language.name,
                native_name=language.native_name,
                flag=language.flag,
                is_active=language.is_active,
            )
            for language in languages
        ]
    )


@router.get(
    "/{language_code}",
    response_model=TranslateResponse,
    summary="Serve the full UI catalog for a language.",
)
async def get_translations(
    language_code: str,
    service: TranslationCacheService = Depends(get_translation_cache_service),
) -> TranslateResponse:
    result = await service.get_translations(language_code)
    return _to_response(result)


def _batch_items(entries: list[TranslationEntry]) -> list[BatchItem]:
    items: list[BatchItem] = []
    for entry in entries:
        text = entry.text or source_text(entry.key) or ""
        if not text:
            continue
        items.append(
            BatchItem(
                key=entry.key,
                text=text,
                context=entry.context or context_for_key(entry.key),
                tone=entry.tone or tone_for_key(entry.key),
            )
        )
    return items


def _to_response(result: CachedTranslations) -> TranslateResponse:
    return TranslateResponse(
        language_code=result.language_code,
        translations=result.translations,
        cached=result.was_cached,
    )
