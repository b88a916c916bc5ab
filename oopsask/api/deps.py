from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from oopsask.core.config import get_settings
from oopsask.core.database import get_session_factory
from oopsask.integrations.llm import ChatOrchestrator
from oopsask.services.key_store import KeyStore
from oopsask.services.languages import LanguageRegistry
from oopsask.services.translation_cache import TranslationCacheService
from oopsask.services.translator import BatchTranslator
from oopsask.utils.rate_limit import RateLimiter

_orchestrator: ChatOrchestrator | None = None
_translation_cache_service: TranslationCacheService | None = None


def get_db_session_factory() -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency that returns the process-wide session factory."""
    return get_session_factory()


def build_translation_cache_service(
    session_factory: async_sessionmaker[AsyncSession],
    orchestrator: ChatOrchestrator | None = None,
) -> TranslationCacheService:
    """Wire a TranslationCacheService from settings and a session factory."""
    settings = get_settings()
    client = orchestrator or ChatOrchestrator(settings)
    translator = BatchTranslator(
        client if client.is_configured else None,
        limiter=RateLimiter(
            settings.translation_max_concurrency,
            min_interval=settings.translation_spacing_seconds,
        ),
        max_tokens=settings.translation_max_tokens,
        temperature=settings.translation_temperature,
    )
    return TranslationCacheService(
        LanguageRegistry(session_factory, default_language=settings.default_language),
        KeyStore(session_factory),
        translator,
        default_language=settings.default_language,
        fill_poll_interval=settings.translation_fill_poll_interval,
        fill_wait_timeout=settings.translation_fill_wait_timeout,
    )


async def get_translation_cache_service() -> TranslationCacheService:
    """Provide the singleton TranslationCacheService.

    The fill guard lives on this instance, so every request must share it.
    """
    global _orchestrator, _translation_cache_service
    if _translation_cache_service is None:
        if _orchestrator is None:
            _orchestrator = ChatOrchestrator(get_settings())
        _translation_cache_service = build_translation_cache_service(
            get_db_session_factory(),
            _orchestrator,
        )
    return _translation_cache_service


async def get_language_registry() -> LanguageRegistry:
    settings = get_settings()
    return LanguageRegistry(get_db_session_factory(), default_language=settings.default_language)


def current_translation_cache_service() -> TranslationCacheService | None:
    """The service singleton if a request has built it already; never builds one."""
    return _translation_cache_service
