"""Fixed UI copy catalog: the closed key set and its default-language source text."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Final, Literal

TranslationContextName = Literal["ui", "oops", "ask", "attorney"]
TranslationTone = Literal["dramatic", "humorous", "formal", "casual"]

DEFAULT_LANGUAGE: Final[str] = "en"

SOURCE_STRINGS: Final[dict[str, str]] = {
    # Navigation
    "nav.home": "Home",
    "nav.oops": "Oops",
    "nav.ask": "Ask",
    "nav.app_title": "Oops & Ask",
    "nav.tagline": "Dramatic AI for Life's Awkward Moments",
    # Home page
    "home.welcome": "Welcome to Oops & Ask",
    "home.subtitle": "Transform your awkward moments into dramatic masterpieces",
    "home.oops_title": "😬 Oops Mode",
    "home.oops_description": "Turn your mistakes into theatrical apologies worthy of Shakespeare",
    "home.ask_title": "💌 Ask Mode",
    "home.ask_description": "Transform your requests into persuasive manifestos of desire",
    "home.get_started": "Get Started",
    "home.language_select": "Select Language",
    # Common UI
    "common.loading": "Loading...",
    "common.error": "Error",
    "common.generate": "Generate",
    "common.cancel": "Cancel",
    "common.copy": "Copy",
    "common.share": "Share",
    "common.rating": "Rating",
    "common.close": "Close",
    "common.submit": "Submit",
    "common.try_again": "Try Again",
    "common.original_text": "Original Text",
    "common.select_persona": "Select Persona",
    "common.select_relationship": "Select Relationship",
    "common.mode_oops": "Oops Mode",
    "common.mode_ask": "Ask Mode",
    "common.mode_attorney": "Attorney Mode",
    "common.recipient_name": "Recipient Name",
    "common.recipient_relationship": "Relationship",
    "common.who_are_you_apologizing_to": "Who are you apologizing to?",
    "common.who_are_you_asking": "Who are you asking?",
    "common.relationship_placeholder": "e.g. partner, boss, neighbour",
    "common.what_happened": "What happened?",
    "common.what_do_you_want": "What do you want?",
    "common.regenerate": "Regenerate",
    # Oops page
    "oops.title": "Dramatic Apologies",
    "oops.description": "Transform your mistakes into theatrical masterpieces",
    "oops.input_placeholder": "Describe what you did wrong...",
    "oops.generate_button": "Generate Apology",
    "oops.tips_title": "Tips for Better Apologies",
    "oops.tip_1": "Be specific about what you did wrong",
    "oops.tip_2": "Mention how it affected the other person",
    "oops.tip_3": "Include details about your regret",
    "oops.tip_4": "Suggest how you'll make things right",
    "oops.tip_5": "Be genuine and heartfelt",
    "oops.example_title": "Example Apologies",
    "oops.stats_title": "Generation Stats",
    "oops.switch_mode_title": "Switch Mode",
    "oops.switch_mode_description": "Need to make a request instead? Try Ask mode!",
    "oops.switch_mode_button": "Switch to Ask Mode",
    # Ask page
    "ask.title": "Persuasive Requests",
    "ask.description": "Transform your requests into compelling manifestos",
    "ask.input_placeholder": "What would you like to ask for?",
    "ask.generate_button": "Generate Request",
    "ask.attorney_mode": "Attorney Mode",
    "ask.attorney_hint": "Use dramatic legal language with fake citations",
    "ask.tips_title": "Tips for Better Requests",
    "ask.tip_1": "Be clear about what you're asking for",
    "ask.tip_2": "Explain why this request is important to you",
    "ask.tip_3": "Mention how the other person can help",
    "ask.tip_4": "Offer something in return if appropriate",
    "ask.tip_5": "Use respectful and persuasive language",
    "ask.tip_6": "Fake legal citations add dramatic flair",
    "ask.example_title": "Example Requests",
    "ask.stats_title": "Generation Stats",
    "ask.switch_mode_title": "Switch Mode",
    "ask.switch_mode_description": "Need to apologize instead? Try Oops mode!",
    "ask.switch_mode_button": "Switch to Oops Mode",
    # Footer
    "footer.buy_coffee": "Buy Me a Coffee",
    "footer.support_message": "Support us with a coffee to keep the drama alive!",
    # Modals
    "modal.error_title": "Error",
    "modal.success_title": "Success",
    "modal.copy_success": "Copied to clipboard!",
    "modal.share_success": "Shared successfully!",
    "modal.language_detected_title": "Language Detected!",
    "modal.language_detected_message": (
        "We detected you might prefer {language}. Which would you like to use?"
    ),
    "modal.language_detected_use_detected": "Use {language}",
    "modal.language_detected_use_english": "Use English",
    "modal.donation_title": "Wow! {count} Generations!",
    "modal.donation_message": (
        "You've been creating dramatic masterpieces! If you're enjoying Oops & Ask, "
        "consider supporting us with a coffee."
    ),
    "modal.donation_features_title": "Why Support Us?",
    "modal.donation_feature_1": "Keep the AI magic flowing",
    "modal.donation_feature_2": "Fuel our late-night coding sessions",
    "modal.donation_feature_3": "Unlock even more dramatic features!",
    "modal.donation_feature_4": "Support the development team",
    "modal.donation_buy_coffee": "Buy Me a Coffee!",
    "modal.donation_maybe_later": "Maybe Later",
    "modal.donation_footer": "Every cup helps us keep the drama alive!",
    # Output card
    "output.dramatic_apology": "Dramatic Apology",
    "output.persuasive_request": "Persuasive Request",
    "output.legal_request": "Legal Request",
    "output.awaits_apology": "Your dramatic apology awaits",
    "output.awaits_request": "Your persuasive request awaits",
    "output.awaits_legal": "Your legal request awaits",
    "output.describe_mistake": (
        "Describe what you did wrong and let our AI transform it into a theatrical masterpiece."
    ),
    "output.enable_legal": "Enable dramatic legal language with fake citations.",
    "output.craft_convincing": "Craft convincing requests using dramatic flair.",
    "output.rate_apology": "Rate this apology:",
    "output.rate_request": "Rate this request:",
    # Language names
    "language.english": "English",
    "language.spanish": "Español",
    "language.french": "Français",
    "language.german": "Deutsch",
    "language.italian": "Italiano",
    "language.portuguese": "Português",
    "language.russian": "Русский",
    "language.japanese": "日本語",
    "language.korean": "한국어",
    "language.chinese": "中文",
    "language.arabic": "العربية",
    "language.dutch": "Nederlands",
    "language.swedish": "Svenska",
    "language.norwegian": "Norsk",
    "language.danish": "Dansk",
    "language.finnish": "Suomi",
    "language.polish": "Polski",
    "language.turkish": "Türkçe",
}

TRANSLATION_KEYS: Final[tuple[str, ...]] = tuple(SOURCE_STRINGS)


@dataclass(frozen=True)
class LanguageInfo:
    code: str
    name: str
    native_name: str
    flag: str


SUPPORTED_LANGUAGES: Final[dict[str, LanguageInfo]] = {
    info.code: info
    for info in (
        LanguageInfo("en", "English", "English", "🇺🇸"),
        LanguageInfo("es", "Spanish", "Español", "🇪🇸"),
        LanguageInfo("fr", "French", "Français", "🇫🇷"),
        LanguageInfo("de", "German", "Deutsch", "🇩🇪"),
        LanguageInfo("it", "Italian", "Italiano", "🇮🇹"),
        LanguageInfo("pt", "Portuguese", "Português", "🇵🇹"),
        LanguageInfo("ru", "Russian", "Русский", "🇷🇺"),
        LanguageInfo("ja", "Japanese", "日本語", "🇯🇵"),
        LanguageInfo("ko", "Korean", "한국어", "🇰🇷"),
        LanguageInfo("zh", "Chinese", "中文", "🇨🇳"),
        LanguageInfo("ar", "Arabic", "العربية", "🇸🇦"),
        LanguageInfo("nl", "Dutch", "Nederlands", "🇳🇱"),
        LanguageInfo("sv", "Swedish", "Svenska", "🇸🇪"),
        LanguageInfo("no", "Norwegian", "Norsk", "🇳🇴"),
        LanguageInfo("da", "Danish", "Dansk", "🇩🇰"),
        LanguageInfo("fi", "Finnish", "Suomi", "🇫🇮"),
        LanguageInfo("pl", "Polish", "Polski", "🇵🇱"),
        LanguageInfo("tr", "Turkish", "Türkçe", "🇹🇷"),
        LanguageInfo("ro", "Romanian", "Română", "🇷🇴"),
    )
}

_UNKNOWN_FLAG: Final[str] = "🏳️"


@dataclass(frozen=True)
class BatchItem:
    """One entry of a batch translation request."""

    key: str
    text: str
    context: TranslationContextName = "ui"
    tone: TranslationTone = "dramatic"


def normalize_language_code(code: str | None) -> str:
    """Reduce a locale tag such as ``pt_BR`` or ``pt-br`` to its primary subtag."""
    if not code:
        return ""
    return code.strip().replace("_", "-").split("-", 1)[0].lower()


def context_for_key(key: str) -> TranslationContextName:
    if key.startswith("oops."):
        return "oops"
    if key.startswith("ask."):
        return "ask"
    if "attorney" in key:
        return "attorney"
    return "ui"


def tone_for_key(key: str) -> TranslationTone:
    """UI chrome reads formally; generation copy keeps the app's theatrical voice."""
    if context_for_key(key) == "ui":
        return "formal"
    # Headings stay dramatic even when they introduce tips or examples.
    if "title" in key or "description" in key:
        return "dramatic"
    if "tip" in key or "example" in key:
        return "humorous"
    if "button" in key or "action" in key:
        return "casual"
    return "dramatic"


def build_batch(
    keys: Iterable[str] | None = None,
    *,
    source: Mapping[str, str] | None = None,
) -> list[BatchItem]:
    """Return batch items for ``keys`` (default: every key of ``source``) in order."""
    source = SOURCE_STRINGS if source is None else source
    selected = tuple(source) if keys is None else tuple(keys)
    return [
        BatchItem(
            key=key,
            text=source[key],
            context=context_for_key(key),
            tone=tone_for_key(key),
        )
        for key in selected
        if key in source
    ]


def source_text(key: str) -> str | None:
    return SOURCE_STRINGS.get(key)


def language_info(code: str) -> LanguageInfo:
    normalized = normalize_language_code(code)
    info = SUPPORTED_LANGUAGES.get(normalized)
    if info is not None:
        return info
    label = normalized or code
    return LanguageInfo(code=normalized, name=label, native_name=label, flag=_UNKNOWN_FLAG)


def language_name(code: str) -> str:
    return language_info(code).name


def native_name(code: str) -> str:
    return language_info(code).native_name


def language_flag(code: str) -> str:
    return language_info(code).flag
