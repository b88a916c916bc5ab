"""CLI utilities for warming, clearing and inspecting the translation cache."""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Iterable, Mapping

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from oopsask.api.deps import build_translation_cache_service
from oopsask.core.config import get_settings
from oopsask.core.database import dispose_engine, get_session_factory
from oopsask.services.catalog import normalize_language_code
from oopsask.services.key_store import KeyStore
from oopsask.services.languages import LanguageRecord, LanguageRegistry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oopsask-translations",
        description="Manage cached UI translations.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    warm_parser = subparsers.add_parser(
        "warm",
        help="Generate and cache the UI strings for a language.",
    )
    warm_parser.add_argument("language_code", help="Language code to warm (e.g. es, pt-BR).")
    warm_parser.add_argument(
        "--force",
        action="store_true",
        help="Drop any cached strings and regenerate them.",
    )

    clear_parser = subparsers.add_parser(
        "clear",
        help="Delete every cached string for a language.",
    )
    clear_parser.add_argument("language_code", help="Language code to clear.")

    show_parser = subparsers.add_parser(
        "show",
        help="Print the cached strings for a language without generating any.",
    )
    show_parser.add_argument("language_code", help="Language code to show.")
    show_parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Emit the cached map as JSON.",
    )

    subparsers.add_parser("languages", help="List languages known to the registry.")

    return parser


def render_translation_table(language_code: str, translations: Mapping[str, str]) -> str:
    if not translations:
        return f"No cached translations for {language_code}."
    lines = [f"{len(translations)} cached translation(s) for {language_code}:"]
    width = max(len(key) for key in translations)
    for key in sorted(translations):
        lines.append(f"  {key.ljust(width)}  {translations[key]}")
    return "\n".join(lines)


def render_language_table(languages: Iterable[LanguageRecord]) -> str:
    rows = [
        f"  {language.code:<8} {language.flag or '':<4} {language.name} ({language.native_name})"
        for language in languages
    ]
    if not rows:
        return "No languages registered yet."
    return "\n".join(["Registered languages:", *rows])


async def _warm(args: argparse.Namespace) -> None:
    service = build_translation_cache_service(get_session_factory())
    try:
        if args.force:
            result = await service.force_refresh(args.language_code)
        else:
            result = await service.get_translations(args.language_code)
    finally:
        await dispose_engine()
    source = "cache" if result.was_cached else "generated"
    print(f"{len(result.translations)} translation(s) ready for {result.language_code} ({source}).")


async def _clear(args: argparse.Namespace) -> None:
    service = build_translation_cache_service(get_session_factory())
    try:
        result = await service.invalidate(args.language_code)
    finally:
        await dispose_engine()
    print(f"Cache cleared for language: {result.language_code} ({result.deleted_count} deleted).")


async def load_cached_translations(
    session_factory: async_sessionmaker[AsyncSession],
    language_code: str,
    *,
    default_language: str,
) -> dict[str, str]:
    """Read the cached map for a language without registering unseen codes."""
    registry = LanguageRegistry(session_factory, default_language=default_language)
    language_id = await registry.lookup(language_code)
    if language_id is None:
        return {}
    return await KeyStore(session_factory).get(language_id)


async def _show(args: argparse.Namespace) -> None:
    settings = get_settings()
    code = normalize_language_code(args.language_code) or settings.default_language
    try:
        translations = await load_cached_translations(
            get_session_factory(),
            code,
            default_language=settings.default_language,
        )
    finally:
        await dispose_engine()

    if args.as_json:
        print(json.dumps(translations, ensure_ascii=False, indent=2, sort_keys=True))
    else:
        print(render_translation_table(code, translations))


async def _languages(_: argparse.Namespace) -> None:
    settings = get_settings()
    registry = LanguageRegistry(get_session_factory(), default_language=settings.default_language)
    try:
        languages = await registry.list_languages()
    finally:
        await dispose_engine()
    print(render_language_table(languages))


def cli(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "warm":
        asyncio.run(_warm(args))
    elif args.command == "clear":
        asyncio.run(_clear(args))
    elif args.command == "show":
        asyncio.run(_show(args))
    elif args.command == "languages":
        asyncio.run(_languages(args))
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":  # pragma: no cover
    cli()
