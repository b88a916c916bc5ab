from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from oopsask.services.catalog import BatchItem, language_name
from oopsask.utils.rate_limit import RateLimiter


logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str | None: ...


_CONTEXT_PROMPTS: dict[str, str] = {
    "oops": (
        'This is for the "Oops" mode - dramatic apologies. Create theatrical language with '
        "fake historical scandals, etiquette manuals, and over-the-top expressions of regret "
        "that feel authentic to {language} culture."
    ),
    "ask": (
        'This is for the "Ask" mode - persuasive requests. Use culturally appropriate '
        "romantic language, grand gestures, and manifesto-style requests that resonate with "
        "{language} speakers."
    ),
    "attorney": (
        'This is for the "Attorney" mode - fake legal language. Create absurd legal '
        "terminology, fake citations, and courtroom drama using {language} legal terminology "
        "and local place names."
    ),
}

_TONE_PROMPTS: dict[str, str] = {
    "dramatic": (
        "Use the most dramatic, theatrical language possible. "
        "Think Shakespeare meets a soap opera."
    ),
    "humorous": (
        "Make it funny and entertaining while maintaining the core meaning. "
        "Use wordplay and cultural humor."
    ),
    "formal": "Keep it professional but still maintain the app's playful character.",
    "casual": "Make it conversational and friendly while keeping the dramatic flair.",
}


class BatchTranslator:
    """Translate batches of UI strings through an LLM, one call per item.

    Calls run concurrently under a ``RateLimiter``. A failed item degrades to
    its source text; ``translate_batch`` itself never raises.
    """

    def __init__(
        self,
        client: CompletionClient | None,
        *,
        limiter: RateLimiter | None = None,
        max_tokens: int = 200,
        temperature: float = 0.8,
    ):
        self._client = client
        self._limiter = limiter or RateLimiter(5)
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def translate_batch(
        self,
        items: Sequence[BatchItem],
        target_language: str,
    ) -> dict[str, str]:
        if not items:
            return {}
        logger.info("Translating %d strings into %s.", len(items), target_language)
        results = await asyncio.gather(
            *(self._translate_item(item, target_language) for item in items)
        )
        return {item.key: value for item, value in zip(items, results)}

    async def translate_text(
        self,
        text: str,
        target_language: str,
        *,
        context: str = "ui",
        tone: str = "dramatic",
    ) -> str:
        """Translate one string; returns ``text`` unchanged on any failure."""
        if not text:
            return text
        if self._client is None:
            logger.warning("No completion provider configured; returning original text.")
            return text

        messages = [
            {"role": "system", "content": build_system_prompt(target_language, context, tone)},
            {"role": "user", "content": f'Translate and culturally adapt this text: "{text}"'},
        ]
        try:
            translated = await self._client.complete(
                messages,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except Exception as exc:
            logger.warning(
                "Translation into %s failed; returning original text.",
                target_language,
                exc_info=exc,
            )
            return text

        if not translated:
            logger.warning("Empty translation into %s; returning original text.", target_language)
            return text
        return _strip_wrapping_quotes(translated)

    async def _translate_item(self, item: BatchItem, target_language: str) -> str:
        async with self._limiter:
            return await self.translate_text(
                item.text,
                target_language,
                context=item.context,
                tone=item.tone,
            )


def build_system_prompt(target_language: str, context: str, tone: str) -> str:
    """Return the system instruction for one translation call."""
    language = language_name(target_language)

    if context == "ui":
        return (
            "You are a professional translator specializing in UI/UX localization. "
            f"Translate the following English text to {language} for a web application interface.\n\n"
            "REQUIREMENTS FOR UI TRANSLATION:\n"
            f"- Use NORMAL, PROFESSIONAL language that users would expect on local websites in {language}\n"
            "- Keep it clean, clear, and user-friendly\n"
            f"- Make it sound natural and professional in {language}\n"
            "- Preserve any emojis, special characters, placeholders such as {name}, or formatting\n"
            f"- Use standard UI terminology that {language} speakers are familiar with\n"
            "- Avoid dramatic or theatrical language - this is for interface elements, "
            "not generated content\n"
            f"- Ensure cultural appropriateness for {language} speakers\n\n"
            "RESPOND ONLY WITH THE TRANSLATED TEXT, NO EXPLANATIONS."
        )

    base = (
        "You are a master translator specializing in dramatic, humorous, and culturally-appropriate "
        'translations for the "Oops & Ask" app. Your translations must maintain the app\'s '
        f"over-the-top, theatrical tone while being culturally relevant for {language} speakers.\n\n"
        "CRITICAL REQUIREMENTS:\n"
        "- Maintain the dramatic, humorous, over-the-top tone of the original\n"
        f"- Use culturally appropriate references, humor, and local context for {language} speakers\n"
        "- Keep the theatrical flair that makes the app entertaining\n"
        f"- Ensure the translation feels natural and engaging in {language}\n"
        "- Preserve any emojis, special characters, placeholders such as {name}, or formatting\n"
        f"- Make it sound like it was originally written in {language} by a native speaker"
    )
    context_prompt = _CONTEXT_PROMPTS.get(context, _CONTEXT_PROMPTS["oops"])
    tone_prompt = _TONE_PROMPTS.get(tone, _TONE_PROMPTS["dramatic"])
    return (
        f"{base}\n\n{context_prompt.format(language=language)}\n\n{tone_prompt}\n\n"
        "RESPOND ONLY WITH THE TRANSLATED TEXT, NO EXPLANATIONS OR META-COMMENTARY."
    )


def _strip_wrapping_quotes(value: str) -> str:
    stripped = value.strip()
    if len(stripped) >= 2 and stripped[0] == stripped[-1] and stripped[0] in {'"', "'"}:
        return stripped[1:-1].strip() or stripped
    return stripped
