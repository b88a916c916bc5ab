from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Final, Literal

import httpx

from oopsask.services.catalog import DEFAULT_LANGUAGE, normalize_language_code


logger = logging.getLogger(__name__)

DetectionSource = Literal["browser", "ip", "manual"]


@dataclass(frozen=True)
class LanguageDetection:
    detected_language: str
    confidence: float
    source: DetectionSource


class GeolocationError(RuntimeError):
    """Raised when the geolocation lookup cannot produce a country."""


class LanguageDetector:
    """Guess a visitor's language from browser preferences and IP geolocation."""

    _COUNTRY_TO_LANGUAGE: Final[dict[str, str]] = {
        "us": "en", "gb": "en", "au": "en", "ca": "en", "nz": "en", "ie": "en",
        "es": "es", "mx": "es", "ar": "es", "co": "es", "pe": "es", "ve": "es",
        "fr": "fr", "be": "fr", "ch": "fr", "lu": "fr",
        "de": "de", "at": "de", "li": "de",
        "it": "it", "sm": "it", "va": "it",
        "pt": "pt", "br": "pt", "ao": "pt", "mz": "pt",
        "ru": "ru", "by": "ru", "kz": "ru", "kg": "ru",
        "jp": "ja",
        "kr": "ko",
        "cn": "zh", "tw": "zh", "hk": "zh", "sg": "zh",
        "sa": "ar", "ae": "ar", "eg": "ar", "ma": "ar", "tn": "ar",
        "nl": "nl",
        "se": "sv",
        "no": "no",
        "dk": "da",
        "fi": "fi",
        "pl": "pl",
        "tr": "tr",
        "ro": "ro",
    }  # fmt: skip

    def __init__(
        self,
        *,
        geolocation_url: str | None = "https://ipapi.co/json/",
        default_language: str = DEFAULT_LANGUAGE,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._geolocation_url = geolocation_url
        self._default = normalize_language_code(default_language)
        self._client_factory = client_factory or (
            lambda: httpx.AsyncClient(timeout=httpx.Timeout(5.0))
        )

    def detect_browser_language(self, accept_language: str | None) -> str:
        """Return the primary subtag of the most preferred Accept-Language entry."""
        if not accept_language:
            return self._default

        candidates: list[tuple[float, int, str]] = []
        for position, part in enumerate(accept_language.split(",")):
            tag, _, params = part.strip().partition(";")
            code = normalize_language_code(tag)
            if not code or code == "*":
                continue
            quality = 1.0
            params = params.strip()
            if params.startswith("q="):
                try:
                    quality = float(params[2:])
                except ValueError:
                    quality = 0.0
            if quality <= 0:
                continue
            # Earlier entries win ties.
            candidates.append((quality, -position, code))
        if not candidates:
            return self._default
        return max(candidates)[2]

    async def detect_geo_language(self) -> str:
        """Map the caller's country to a language; raises ``GeolocationError``."""
        if not self._geolocation_url:
            raise GeolocationError("Geolocation lookup is disabled.")

        try:
            async with self._client_factory() as client:
                response = await client.get(
                    self._geolocation_url,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            raise GeolocationError("Geolocation request failed.") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise GeolocationError(
                f"Geolocation request failed with status {response.status_code}."
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise GeolocationError("Geolocation response was not JSON.") from exc

        country = payload.get("country_code") if isinstance(payload, dict) else None
        if not isinstance(country, str) or not country:
            raise GeolocationError("Geolocation response did not include a country code.")

        detected = self._COUNTRY_TO_LANGUAGE.get(country.lower(), self._default)
        logger.debug("IP language detection: country=%s language=%s", country, detected)
        return detected

    async def detect_language(self, accept_language: str | None) -> LanguageDetection:
        """Combine browser and geolocation signals into a scored guess."""
        browser_language = self.detect_browser_language(accept_language)

        try:
            ip_language = await self.detect_geo_language()
        except GeolocationError as exc:
            logger.warning("IP language detection failed: %s", exc)
            return LanguageDetection(browser_language, 0.7, "browser")

        logger.info(
            "Language detection: browser=%s ip=%s", browser_language, ip_language
        )
        if browser_language == ip_language:
            return LanguageDetection(browser_language, 0.9, "browser")
        if ip_language != self._default:
            return LanguageDetection(ip_language, 0.8, "ip")
        return LanguageDetection(browser_language, 0.6, "browser")
