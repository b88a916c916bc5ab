from __future__ import annotations

import logging
from typing import Any

from openai import AsyncAzureOpenAI, AsyncOpenAI

from oopsask.core.config import AppSettings


logger = logging.getLogger(__name__)


class ChatOrchestrator:
    """Chat completion calls with Azure OpenAI primary and OpenAI fallback."""

    def __init__(
        self,
        settings: AppSettings,
        *,
        azure_client: Any | None = None,
        openai_client: Any | None = None,
    ):
        self._settings = settings
        self._azure_client = azure_client
        self._openai_client = openai_client

        if self._azure_client is None and self._openai_client is None:
            if (
                settings.azure_openai_api_key
                and settings.azure_openai_endpoint
                and settings.azure_openai_deployment
            ):
                self._azure_client = AsyncAzureOpenAI(
                    api_key=settings.azure_openai_api_key.get_secret_value(),
                    azure_endpoint=settings.azure_openai_endpoint,
                    api_version=settings.azure_openai_api_version or "2024-02-15-preview",
                )
            elif settings.openai_api_key:
                self._openai_client = AsyncOpenAI(
                    api_key=settings.openai_api_key.get_secret_value(),
                    base_url=settings.openai_base_url,
                )

    @property
    def is_configured(self) -> bool:
        return self._azure_client is not None or self._openai_client is not None

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str | None:
        """Return the first non-empty completion, or None when every provider fails."""
        max_tokens = max_tokens or self._settings.translation_max_tokens
        if temperature is None:
            temperature = self._settings.translation_temperature

        if self._azure_client:
            try:
                response = await self._azure_client.chat.completions.create(
                    model=self._settings.azure_openai_deployment,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
                content = self._extract_content(response)
                if content:
                    return content
                logger.warning("Azure OpenAI returned an empty completion; attempting fallback.")
            except Exception as exc:  # pragma: no cover - network failure path
                logger.warning("Azure OpenAI completion failed; attempting fallback.", exc_info=exc)

        if self._openai_client:
            try:
                response = await self._openai_client.chat.completions.create(
                    model=self._settings.translation_model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
                content = self._extract_content(response)
                if content:
                    return content
                logger.warning("OpenAI returned an empty completion.")
            except Exception as exc:
                logger.warning("OpenAI completion failed.", exc_info=exc)

        return None

    def _extract_content(self, response: Any) -> str | None:
        choices = getattr(response, "choices", None)
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            return None
        return content.strip() or None
