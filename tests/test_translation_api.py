from __future__ import annotations

from collections.abc import Sequence

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from oopsask.api.deps import (
    current_translation_cache_service,
    get_language_registry,
    get_translation_cache_service,
)
from oopsask.core.app import create_app
from oopsask.services.catalog import SOURCE_STRINGS, BatchItem
from oopsask.services.key_store import KeyStore
from oopsask.services.languages import LanguageRegistry
from oopsask.services.translation_cache import TranslationCacheService


class PrefixTranslator:
    def __init__(self) -> None:
        self.calls: list[tuple[str, list[BatchItem]]] = []

    async def translate_batch(self, items: Sequence[BatchItem], target_language: str) -> dict[str, str]:
        self.calls.append((target_language, list(items)))
        return {item.key: f"{target_language}:{item.text}" for item in items}


def _app_for(session_factory, translator: PrefixTranslator):
    registry = LanguageRegistry(session_factory)
    service = TranslationCacheService(
        registry,
        KeyStore(session_factory),
        translator,
        default_language="en",
        fill_poll_interval=0.01,
    )
    app = create_app()

    async def override_service() -> TranslationCacheService:
        return service

    async def override_registry() -> LanguageRegistry:
        return registry

    app.dependency_overrides[get_translation_cache_service] = override_service
    app.dependency_overrides[get_language_registry] = override_registry
    app.dependency_overrides[current_translation_cache_service] = lambda: service
    return app


@pytest.fixture()
def translator() -> PrefixTranslator:
    return PrefixTranslator()


@pytest_asyncio.fixture()
async def translation_client(session_factory, translator) -> TestClient:
    app = _app_for(session_factory, translator)

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def broken_client(broken_session_factory, translator) -> TestClient:
    app = _app_for(broken_session_factory, translator)

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


def test_translate_generates_then_serves_cached(
    translation_client: TestClient, translator: PrefixTranslator
) -> None:
    first = translation_client.post("/api/translations/translate", json={"language_code": "es"})
    second = translation_client.post("/api/translations/translate", json={"language_code": "es"})

    assert first.status_code == 200
    payload = first.json()
    assert payload["language_code"] == "es"
    assert payload["cached"] is False
    assert payload["translations"]["nav.home"] == "es:Home"
    assert len(payload["translations"]) == len(SOURCE_STRINGS)

    assert second.json()["cached"] is True
    assert second.json()["translations"] == payload["translations"]
    assert len(translator.calls) == 1


def test_translate_default_language_returns_source(
    translation_client: TestClient, translator: PrefixTranslator
) -> None:
    response = translation_client.post("/api/translations/translate", json={"language_code": "en"})

    assert response.status_code == 200
    assert response.json()["translations"] == SOURCE_STRINGS
    assert response.json()["cached"] is True
    assert translator.calls == []


def test_translate_with_entries_derives_context_and_tone(
    translation_client: TestClient, translator: PrefixTranslator
) -> None:
    response = translation_client.post(
        "/api/translations/translate",
        json={
            "language_code": "fr",
            "entries": [
                {"key": "oops.generate_button"},
                {"key": "custom.banner", "text": "Hello", "tone": "humorous"},
            ],
        },
    )

    assert response.status_code == 200
    assert response.json()["translations"] == {
        "oops.generate_button": f"fr:{SOURCE_STRINGS['oops.generate_button']}",
        "custom.banner": "fr:Hello",
    }
    _, items = translator.calls[0]
    assert (items[0].context, items[0].tone) == ("oops", "casual")
    assert (items[1].context, items[1].tone) == ("ui", "humorous")


def test_translate_force_refresh_regenerates(
    translation_client: TestClient, translator: PrefixTranslator
) -> None:
    translation_client.post("/api/translations/translate", json={"language_code": "de"})
    response = translation_client.post(
        "/api/translations/translate",
        json={"language_code": "de", "force_refresh": True},
    )

    assert response.status_code == 200
    assert response.json()["cached"] is False
    assert len(translator.calls) == 2


def test_translate_rejects_empty_language_code(translation_client: TestClient) -> None:
    response = translation_client.post("/api/translations/translate", json={"language_code": ""})

    assert response.status_code == 422


def test_clear_cache_reports_deleted_entries(
    translation_client: TestClient, translator: PrefixTranslator
) -> None:
    translation_client.post("/api/translations/translate", json={"language_code": "it"})

    response = translation_client.post(
        "/api/translations/clear-cache", json={"language_code": "it"}
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Cache cleared for language: it"
    assert payload["deleted_count"] == len(SOURCE_STRINGS)
    languages = translation_client.get("/api/translations/languages").json()["items"]
    assert payload["language_id"] == next(item["id"] for item in languages if item["code"] == "it")

    again = translation_client.post("/api/translations/translate", json={"language_code": "it"})
    assert again.json()["cached"] is False
    assert len(translator.calls) == 2


def test_clear_cache_returns_503_when_store_fails(broken_client: TestClient) -> None:
    response = broken_client.post("/api/translations/clear-cache", json={"language_code": "it"})

    assert response.status_code == 503
    assert response.json()["detail"] == "Translation store unavailable"


def test_translate_serves_source_text_when_store_fails(
    broken_client: TestClient, translator: PrefixTranslator
) -> None:
    response = broken_client.post("/api/translations/translate", json={"language_code": "ja"})

    assert response.status_code == 200
    assert response.json()["cached"] is False
    assert response.json()["translations"] == SOURCE_STRINGS
    assert translator.calls == []


def test_languages_lists_requested_languages(translation_client: TestClient) -> None:
    translation_client.post("/api/translations/translate", json={"language_code": "es"})
    translation_client.get("/api/translations/pt-BR")

    response = translation_client.get("/api/translations/languages")

    assert response.status_code == 200
    codes = {item["code"]: item for item in response.json()["items"]}
    assert set(codes) == {"es", "pt"}
    assert codes["es"]["name"] == "Spanish"
    assert codes["pt"]["native_name"] == "Português"


def test_get_translations_by_path(translation_client: TestClient) -> None:
    response = translation_client.get("/api/translations/ko")

    assert response.status_code == 200
    assert response.json()["language_code"] == "ko"
    assert response.json()["translations"]["nav.home"] == "ko:Home"


def test_healthcheck(translation_client: TestClient) -> None:
    response = translation_client.get("/api/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["filling"] == []
