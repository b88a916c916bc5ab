"""Client-side translation state container.

One ``ClientTranslationContext`` lives per client session on a single asyncio
loop. It holds the active language's key map and exposes ``set_language`` as
the only command and ``lookup`` as a synchronous query. UI layers observe it
through ``subscribe``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from oopsask.services.catalog import DEFAULT_LANGUAGE, SOURCE_STRINGS, normalize_language_code
from oopsask.services.language_detection import LanguageDetection
from oopsask.services.translation_cache import CachedTranslations


logger = logging.getLogger(__name__)

PREFERENCE_KEY = "oops-ask-language"


class TranslationBackend(Protocol):
    async def get_translations(self, language_code: str) -> CachedTranslations: ...

    async def force_refresh(self, language_code: str) -> CachedTranslations: ...


class Detector(Protocol):
    async def detect_language(self, accept_language: str | None) -> LanguageDetection: ...


class PreferenceStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryPreferenceStore:
    def __init__(self, initial: Mapping[str, str] | None = None):
        self._values = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFilePreferenceStore:
    """Preferences persisted as a flat JSON object on disk."""

    def __init__(self, path: Path):
        self._path = path

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def _load(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable preference file %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}


@dataclass
class TranslationState:
    language: str = DEFAULT_LANGUAGE
    detecting: bool = False
    loading: bool = False
    translations: dict[str, str] = field(default_factory=dict)
    detected_language: str | None = None
    show_language_picker: bool = False


Listener = Callable[[TranslationState], None]


class ClientTranslationContext:
    def __init__(
        self,
        backend: TranslationBackend,
        *,
        detector: Detector | None = None,
        preferences: PreferenceStore | None = None,
        accept_language: str | None = None,
        default_language: str = DEFAULT_LANGUAGE,
        confidence_threshold: float = 0.7,
        source_strings: Mapping[str, str] | None = None,
    ):
        self._backend = backend
        self._detector = detector
        self._preferences = preferences or MemoryPreferenceStore()
        self._accept_language = accept_language
        self._default_language = normalize_language_code(default_language)
        self._confidence_threshold = confidence_threshold
        self._source_strings = dict(source_strings or SOURCE_STRINGS)
        self._state = TranslationState(language=self._default_language)
        self._listeners: list[Listener] = []
        self._request_serial = 0

    @property
    def state(self) -> TranslationState:
        return self._state

    @property
    def language(self) -> str:
        return self._state.language

    @property
    def is_loading(self) -> bool:
        return self._state.loading

    @property
    def is_detecting(self) -> bool:
        return self._state.detecting

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def activate(self) -> None:
        """Bootstrap from the stored preference, or detect a language on first visit."""
        saved = self._preferences.get(PREFERENCE_KEY)
        if saved:
            await self.set_language(saved)
            return
        await self._detect_and_set_language()

    async def set_language(self, language_code: str, force_regenerate: bool = False) -> None:
        code = normalize_language_code(language_code) or self._default_language
        self._request_serial += 1
        serial = self._request_serial

        self._preferences.set(PREFERENCE_KEY, code)
        self._update(language=code, loading=True)

        try:
            if force_regenerate:
                result = await self._backend.force_refresh(code)
            else:
                result = await self._backend.get_translations(code)
            translations = dict(result.translations)
        except Exception as exc:
            logger.warning("Failed to load translations for %s: %s", code, exc)
            translations = dict(self._source_strings)

        if code != self._state.language:
            logger.debug("Discarding stale translations for %s.", code)
        else:
            self._update(translations=translations)

        if serial == self._request_serial:
            self._update(loading=False)

    async def choose_detected_language(self, accept: bool) -> None:
        """Resolve the one-time language picker."""
        detected = self._state.detected_language
        self._update(show_language_picker=False)
        if accept and detected:
            await self.set_language(detected)
        else:
            await self.set_language(self._default_language)

    def lookup(self, key: str, fallback: str | None = None) -> str:
        """Return the active translation, then ``fallback``, source text, or the key."""
        value = self._state.translations.get(key)
        if value:
            return value
        if fallback:
            return fallback
        return self._source_strings.get(key) or key

    async def _detect_and_set_language(self) -> None:
        if self._detector is None:
            await self.set_language(self._default_language)
            return

        self._update(detecting=True)
        try:
            detection = await self._detector.detect_language(self._accept_language)
        except Exception as exc:
            logger.warning("Language detection failed: %s", exc)
            self._update(detecting=False)
            await self.set_language(self._default_language)
            return

        detected = normalize_language_code(detection.detected_language)
        self._update(detecting=False, detected_language=detected)
        if detection.confidence > self._confidence_threshold and detected != self._default_language:
            self._update(show_language_picker=True)
            return
        await self.set_language(self._default_language)

    def _update(self, **changes: object) -> None:
        for name, value in changes.items():
            setattr(self._state, name, value)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Translation state listener failed.")
