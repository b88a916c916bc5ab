"""SQLAlchemy models and declarative base."""

from oopsask.models.base import Base  # noqa: F401
from oopsask.models.entities import (  # noqa: F401
    DEFAULT_LANGUAGE_ID,
    Language,
    LocalizedString,
)

__all__ = [
    "Base",
    "DEFAULT_LANGUAGE_ID",
    "Language",
    "LocalizedString",
]
