from __future__ import annotations

from collections.abc import Callable

import httpx

from oopsask.services.translation_cache import CachedTranslations


class TranslationAPIError(RuntimeError):
    """Raised when the translation API returns an unusable response."""


class HttpTranslationBackend:
    """Client for the ``/api/translations`` routes, usable as a context backend."""

    def __init__(
        self,
        base_url: str,
        *,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
        timeout: float = 120.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._client_factory = client_factory or (
            lambda: httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        )

    async def get_translations(self, language_code: str) -> CachedTranslations:
        return await self._translate(language_code, force_refresh=False)

    async def force_refresh(self, language_code: str) -> CachedTranslations:
        return await self._translate(language_code, force_refresh=True)

    async def clear_cache(self, language_code: str) -> int:
        payload = await self._post("/api/translations/clear-cache", {"language_code": language_code})
        deleted = payload.get("deleted_count")
        return int(deleted) if isinstance(deleted, int) else 0

    async def _translate(self, language_code: str, *, force_refresh: bool) -> CachedTranslations:
        payload = await self._post(
            "/api/translations/translate",
            {"language_code": language_code, "force_refresh": force_refresh},
        )
        translations = payload.get("translations")
        if not isinstance(translations, dict):
            raise TranslationAPIError("Translation response did not include a translations map.")
        return CachedTranslations(
            language_code=str(payload.get("language_code") or language_code),
            translations={str(key): str(value) for key, value in translations.items()},
            was_cached=bool(payload.get("cached", False)),
        )

    async def _post(self, path: str, body: dict[str, object]) -> dict[str, object]:
        url = f"{self._base_url}{path}"
        try:
            async with self._client_factory() as client:
                response = await client.post(url, json=body)
        except httpx.HTTPError as exc:
            raise TranslationAPIError(f"Request to {path} failed.") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise TranslationAPIError(self._extract_error(response))

        try:
            payload = response.json()
        except ValueError as exc:
            raise TranslationAPIError(f"Response from {path} was not JSON.") from exc
        if not isinstance(payload, dict):
            raise TranslationAPIError(f"Unexpected response shape from {path}.")
        return payload

    def _extract_error(self, response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("detail"):
            return f"Translation API error {response.status_code}: {payload['detail']}"
        return f"Translation API request failed with status {response.status_code}."
