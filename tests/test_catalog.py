from __future__ import annotations

import pytest

from oopsask.services.catalog import (
    SOURCE_STRINGS,
    TRANSLATION_KEYS,
    build_batch,
    context_for_key,
    language_flag,
    language_info,
    language_name,
    normalize_language_code,
    source_text,
    tone_for_key,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("es", "es"),
        ("pt-BR", "pt"),
        ("zh_TW", "zh"),
        (" FR ", "fr"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_language_code(raw, expected) -> None:
    assert normalize_language_code(raw) == expected


@pytest.mark.parametrize(
    ("key", "context", "tone"),
    [
        ("nav.home", "ui", "formal"),
        ("common.submit", "ui", "formal"),
        ("oops.title", "oops", "dramatic"),
        ("oops.tips_title", "oops", "dramatic"),
        ("oops.tip_1", "oops", "humorous"),
        ("ask.example_title", "ask", "dramatic"),
        ("oops.generate_button", "oops", "casual"),
        ("oops.switch_mode_button", "oops", "casual"),
        ("ask.description", "ask", "dramatic"),
        ("ask.title", "ask", "dramatic"),
        ("common.mode_attorney", "attorney", "dramatic"),
    ],
)
def test_context_and_tone_are_derived_from_key(key, context, tone) -> None:
    assert context_for_key(key) == context
    assert tone_for_key(key) == tone


def test_catalog_keys_are_unique_and_have_text() -> None:
    assert len(TRANSLATION_KEYS) == len(set(TRANSLATION_KEYS))
    assert all(SOURCE_STRINGS[key] for key in TRANSLATION_KEYS)
    assert source_text("nav.home") == "Home"
    assert source_text("does.not.exist") is None


def test_build_batch_covers_every_key_in_order() -> None:
    batch = build_batch()

    assert [item.key for item in batch] == list(TRANSLATION_KEYS)
    assert batch[0].text == SOURCE_STRINGS[batch[0].key]


def test_build_batch_selects_keys_and_skips_unknown_ones() -> None:
    batch = build_batch(["oops.title", "missing.key", "nav.home"])

    assert [item.key for item in batch] == ["oops.title", "nav.home"]
    assert batch[0].context == "oops"
    assert batch[1].tone == "formal"


def test_build_batch_accepts_custom_source() -> None:
    batch = build_batch(source={"greeting": "Hello"})

    assert len(batch) == 1
    assert batch[0].text == "Hello"
    assert batch[0].context == "ui"


def test_language_info_for_known_and_unknown_codes() -> None:
    assert language_name("es-MX") == "Spanish"
    assert language_flag("ja") == "🇯🇵"

    unknown = language_info("xx-YY")
    assert unknown.code == "xx"
    assert unknown.name == "xx"
    assert unknown.native_name == "xx"
    assert unknown.flag == "🏳️"
