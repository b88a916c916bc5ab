from __future__ import annotations

import uuid
from typing import Literal

from pydantic import BaseModel, Field


class TranslationEntry(BaseModel):
    key: str = Field(..., min_length=1, description="Stable identifier for the text entry.")
    text: str = Field("", description="Source text in the default language.")
    context: Literal["ui", "oops", "ask", "attorney"] | None = Field(
        default=None,
        description="Content context; derived from the key when omitted.",
    )
    tone: Literal["dramatic", "humorous", "formal", "casual"] | None = Field(
        default=None,
        description="Tone to translate with; derived from the key when omitted.",
    )


class TranslateRequest(BaseModel):
    language_code: str = Field(..., min_length=1, description="Language code to serve.")
    entries: list[TranslationEntry] | None = Field(
        default=None,
        description="Ordered batch to translate on a miss. Defaults to the full UI catalog.",
    )
    force_refresh: bool = Field(
        default=False,
        description="Drop any cached set and regenerate it.",
    )


class TranslateResponse(BaseModel):
    language_code: str = Field(..., description="Normalized language code served.")
    translations: dict[str, str] = Field(
        default_factory=dict,
        description="Mapping of keys to translated text.",
    )
    cached: bool = Field(..., description="True when served from the translation cache.")


class ClearCacheRequest(BaseModel):
    language_code: str = Field(..., min_length=1, description="Language code to clear.")


class ClearCacheResponse(BaseModel):
    message: str
    language_id: uuid.UUID
    deleted_count: int = Field(..., ge=0)


class LanguageItem(BaseModel):
    id: uuid.UUID
    code: str
    name: str
    native_name: str
    flag: str | None = None
    is_active: bool = True


class LanguageListResponse(BaseModel):
    items: list[LanguageItem] = Field(default_factory=list)
