from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from oopsask import __version__
from oopsask.api.router import api_router
from oopsask.core.config import AppSettings, get_settings
from oopsask.core.database import dispose_engine, init_database
from oopsask.services.key_store import TranslationStoreError


logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    """Ensure application logs propagate with the requested verbosity."""
    level = getattr(logging, level_name.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        )
    root_logger.setLevel(level)


def _log_translation_setup(settings: AppSettings) -> None:
    if settings.azure_openai_api_key and settings.azure_openai_endpoint:
        provider = "azure-openai"
    elif settings.openai_api_key:
        provider = "openai"
    else:
        provider = None

    if provider is None:
        logger.warning(
            "No translation provider configured; non-default languages will be served in %s.",
            settings.default_language,
        )
    else:
        logger.info(
            "Translation provider %s (max %d concurrent calls, default language %s).",
            provider,
            settings.translation_max_concurrency,
            settings.default_language,
        )
    if not settings.database_url:
        logger.warning("DATABASE_URL is not set; the translation cache is unavailable.")


async def _translation_store_error_handler(
    request: Request, exc: TranslationStoreError
) -> JSONResponse:
    logger.error("Translation store failure on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Translation store unavailable"},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    _configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        _log_translation_setup(settings)
        if settings.database_url:
            await init_database()
        yield
        if settings.database_url:
            await dispose_engine()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TranslationStoreError, _translation_store_error_handler)

    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["health"])
    async def root() -> dict[str, str]:
        return {
            "service": settings.app_name,
            "environment": settings.app_env,
            "default_language": settings.default_language,
        }

    return app
