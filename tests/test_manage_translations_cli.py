from __future__ import annotations

import uuid

import pytest

from oopsask.services.key_store import KeyStore
from oopsask.services.languages import LanguageRecord, LanguageRegistry
from scripts.manage_translations import (
    build_parser,
    load_cached_translations,
    render_language_table,
    render_translation_table,
)


def test_parser_accepts_warm_with_force() -> None:
    args = build_parser().parse_args(["warm", "es", "--force"])

    assert args.command == "warm"
    assert args.language_code == "es"
    assert args.force is True


def test_parser_accepts_show_as_json() -> None:
    args = build_parser().parse_args(["show", "fr", "--json"])

    assert args.command == "show"
    assert args.as_json is True


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_render_translation_table_sorts_and_aligns_keys() -> None:
    table = render_translation_table("es", {"nav.home": "Inicio", "common.submit": "Enviar"})

    assert table.splitlines() == [
        "2 cached translation(s) for es:",
        "  common.submit  Enviar",
        "  nav.home       Inicio",
    ]


def test_render_translation_table_when_empty() -> None:
    assert render_translation_table("de", {}) == "No cached translations for de."


def test_render_language_table() -> None:
    languages = [
        LanguageRecord(
            id=uuid.uuid4(),
            code="es",
            name="Spanish",
            native_name="Español",
            flag="🇪🇸",
            is_active=True,
        )
    ]

    table = render_language_table(languages)

    assert table.startswith("Registered languages:")
    assert "es" in table
    assert "Spanish (Español)" in table
    assert render_language_table([]) == "No languages registered yet."


@pytest.mark.asyncio
async def test_show_does_not_register_unseen_languages(session_factory) -> None:
    translations = await load_cached_translations(session_factory, "de", default_language="en")

    assert translations == {}
    assert await LanguageRegistry(session_factory).list_languages() == []


@pytest.mark.asyncio
async def test_show_reads_cached_rows_for_known_language(session_factory) -> None:
    language_id = await LanguageRegistry(session_factory).resolve("es")
    await KeyStore(session_factory).upsert_many(language_id, {"nav.home": "Inicio"})

    translations = await load_cached_translations(session_factory, "es-MX", default_language="en")

    assert translations == {"nav.home": "Inicio"}
