from __future__ import annotations

from types import SimpleNamespace

import pytest

from oopsask.core.config import AppSettings
from oopsask.integrations.llm import ChatOrchestrator


class FakeCompletions:
    def __init__(self, *, content: str | None = None, error: Exception | None = None):
        self._content = content
        self._error = error
        self.calls: list[dict[str, object]] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        message = SimpleNamespace(content=self._content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions: FakeCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _settings(**overrides) -> AppSettings:
    values = {
        "OPENAI_API_KEY": None,
        "AZURE_OPENAI_API_KEY": None,
        "AZURE_OPENAI_ENDPOINT": None,
        "AZURE_OPENAI_DEPLOYMENT": "oops-deployment",
        "TRANSLATION_MODEL": "gpt-test",
    }
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


MESSAGES = [{"role": "user", "content": "Hola"}]


@pytest.mark.asyncio
async def test_complete_prefers_azure_client() -> None:
    azure = FakeCompletions(content="  Bonjour  ")
    openai = FakeCompletions(content="unused")
    orchestrator = ChatOrchestrator(
        _settings(),
        azure_client=_client(azure),
        openai_client=_client(openai),
    )

    result = await orchestrator.complete(MESSAGES, max_tokens=50, temperature=0.2)

    assert result == "Bonjour"
    assert azure.calls[0]["model"] == "oops-deployment"
    assert azure.calls[0]["max_tokens"] == 50
    assert azure.calls[0]["temperature"] == 0.2
    assert openai.calls == []


@pytest.mark.asyncio
async def test_complete_falls_back_to_openai_on_azure_error() -> None:
    azure = FakeCompletions(error=RuntimeError("azure down"))
    openai = FakeCompletions(content="Hallo")
    orchestrator = ChatOrchestrator(
        _settings(),
        azure_client=_client(azure),
        openai_client=_client(openai),
    )

    assert await orchestrator.complete(MESSAGES) == "Hallo"
    assert openai.calls[0]["model"] == "gpt-test"
    assert openai.calls[0]["max_tokens"] == 200
    assert openai.calls[0]["temperature"] == 0.8


@pytest.mark.asyncio
async def test_complete_falls_back_on_empty_azure_content() -> None:
    azure = FakeCompletions(content="   ")
    openai = FakeCompletions(content="Ciao")
    orchestrator = ChatOrchestrator(
        _settings(),
        azure_client=_client(azure),
        openai_client=_client(openai),
    )

    assert await orchestrator.complete(MESSAGES) == "Ciao"


@pytest.mark.asyncio
async def test_complete_returns_none_when_all_providers_fail() -> None:
    orchestrator = ChatOrchestrator(
        _settings(),
        openai_client=_client(FakeCompletions(error=RuntimeError("quota"))),
    )

    assert await orchestrator.complete(MESSAGES) is None


def test_orchestrator_without_credentials_is_unconfigured() -> None:
    orchestrator = ChatOrchestrator(_settings())

    assert orchestrator.is_configured is False


def test_orchestrator_builds_openai_client_from_settings() -> None:
    orchestrator = ChatOrchestrator(_settings(OPENAI_API_KEY="sk-test"))

    assert orchestrator.is_configured is True
