from __future__ import annotations

import asyncio

import pytest

from oopsask.services.catalog import BatchItem
from oopsask.services.translator import BatchTranslator, build_system_prompt
from oopsask.utils.rate_limit import RateLimiter


class FakeCompletionClient:
    """Translate by tagging the user text; optionally fail for specific inputs."""

    def __init__(self, *, fail_on: set[str] | None = None, empty_on: set[str] | None = None):
        self.fail_on = fail_on or set()
        self.empty_on = empty_on or set()
        self.calls: list[list[dict[str, str]]] = []
        self.active = 0
        self.peak = 0

    async def complete(self, messages, *, max_tokens=None, temperature=None):
        self.calls.append(messages)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(0.01)
            text = messages[1]["content"].split('"')[1]
            if text in self.fail_on:
                raise RuntimeError("provider exploded")
            if text in self.empty_on:
                return None
            return f'"{text.upper()}"'
        finally:
            self.active -= 1


ITEMS = [
    BatchItem(key="nav.home", text="Home", context="ui", tone="formal"),
    BatchItem(key="oops.title", text="Dramatic Apologies", context="oops", tone="dramatic"),
    BatchItem(key="common.submit", text="Submit", context="ui", tone="formal"),
]


@pytest.mark.asyncio
async def test_translate_batch_maps_every_key_in_order() -> None:
    client = FakeCompletionClient()
    translator = BatchTranslator(client, limiter=RateLimiter(5))

    result = await translator.translate_batch(ITEMS, "es")

    assert list(result) == ["nav.home", "oops.title", "common.submit"]
    assert result["nav.home"] == "HOME"
    assert result["oops.title"] == "DRAMATIC APOLOGIES"
    assert len(client.calls) == 3


@pytest.mark.asyncio
async def test_translate_batch_degrades_failed_items_to_source_text() -> None:
    client = FakeCompletionClient(fail_on={"Home"}, empty_on={"Submit"})
    translator = BatchTranslator(client, limiter=RateLimiter(5))

    result = await translator.translate_batch(ITEMS, "fr")

    assert result == {
        "nav.home": "Home",
        "oops.title": "DRAMATIC APOLOGIES",
        "common.submit": "Submit",
    }


@pytest.mark.asyncio
async def test_translate_batch_without_client_returns_source_text() -> None:
    translator = BatchTranslator(None)

    result = await translator.translate_batch(ITEMS, "de")

    assert result == {item.key: item.text for item in ITEMS}


@pytest.mark.asyncio
async def test_translate_batch_respects_concurrency_limit() -> None:
    client = FakeCompletionClient()
    translator = BatchTranslator(client, limiter=RateLimiter(2))
    items = [BatchItem(key=f"k{index}", text=f"text {index}") for index in range(8)]

    await translator.translate_batch(items, "it")

    assert client.peak <= 2


@pytest.mark.asyncio
async def test_translate_text_sends_system_prompt_for_item_context() -> None:
    client = FakeCompletionClient()
    translator = BatchTranslator(client, max_tokens=99, temperature=0.3)

    await translator.translate_text("I broke the vase", "es", context="oops", tone="humorous")

    system, user = client.calls[0]
    assert system["role"] == "system"
    assert "Spanish" in system["content"]
    assert '"Oops" mode' in system["content"]
    assert "wordplay" in system["content"]
    assert user["content"] == 'Translate and culturally adapt this text: "I broke the vase"'


@pytest.mark.asyncio
async def test_translate_empty_batch_makes_no_calls() -> None:
    client = FakeCompletionClient()

    assert await BatchTranslator(client).translate_batch([], "es") == {}
    assert client.calls == []


def test_ui_prompt_is_professional() -> None:
    prompt = build_system_prompt("ja", "ui", "dramatic")

    assert "UI/UX localization" in prompt
    assert "Japanese" in prompt
    assert "Shakespeare" not in prompt


def test_generation_prompt_combines_context_and_tone() -> None:
    prompt = build_system_prompt("de", "attorney", "dramatic")

    assert '"Attorney" mode' in prompt
    assert "German legal terminology" in prompt
    assert "Shakespeare meets a soap opera" in prompt
