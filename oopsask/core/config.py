from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application configuration loaded from environment or .env."""

    app_name: str = Field(default="Oops & Ask Translation API")
    app_env: str = Field(default="dev", alias="APP_ENV")
    debug: bool = Field(default=False, alias="APP_DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_host: str = Field(default="127.0.0.1", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )

    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")

    openai_api_key: Optional[SecretStr] = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")
    azure_openai_endpoint: Optional[str] = Field(default=None, alias="AZURE_OPENAI_ENDPOINT")
    azure_openai_api_key: Optional[SecretStr] = Field(default=None, alias="AZURE_OPENAI_API_KEY")
    azure_openai_deployment: Optional[str] = Field(default=None, alias="AZURE_OPENAI_DEPLOYMENT")
    azure_openai_api_version: Optional[str] = Field(default=None, alias="AZURE_OPENAI_API_VERSION")

    translation_model: str = Field(default="gpt-4o-mini", alias="TRANSLATION_MODEL")
    translation_max_tokens: int = Field(default=200, alias="TRANSLATION_MAX_TOKENS")
    translation_temperature: float = Field(default=0.8, alias="TRANSLATION_TEMPERATURE")
    translation_max_concurrency: int = Field(default=5, alias="TRANSLATION_MAX_CONCURRENCY")
    translation_spacing_seconds: float = Field(
        default=0.1, alias="TRANSLATION_SPACING_SECONDS"
    )
    translation_fill_poll_interval: float = Field(
        default=0.25, alias="TRANSLATION_FILL_POLL_INTERVAL"
    )
    translation_fill_wait_timeout: float = Field(
        default=60.0, alias="TRANSLATION_FILL_WAIT_TIMEOUT"
    )

    default_language: str = Field(default="en", alias="DEFAULT_LANGUAGE")
    detection_confidence_threshold: float = Field(
        default=0.7, alias="DETECTION_CONFIDENCE_THRESHOLD"
    )
    geolocation_url: str = Field(default="https://ipapi.co/json/", alias="GEOLOCATION_URL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings."""
    return AppSettings()  # type: ignore[call-arg]
