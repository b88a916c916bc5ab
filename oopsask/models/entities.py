from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from oopsask.models.base import Base

# Well-known id of the default (source) language row, seeded by the initial migration.
DEFAULT_LANGUAGE_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Language(Base):
    """Language the UI copy can be served in, created on first reference."""

    __tablename__ = "languages"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    code: Mapped[str] = mapped_column(String(16), nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    native_name: Mapped[str] = mapped_column(String(64), nullable=False)
    flag: Mapped[str | None] = mapped_column(String(16), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    strings: Mapped[list[LocalizedString]] = relationship(
        back_populates="language", cascade="all, delete-orphan"
    )

    __table_args__ = (UniqueConstraint("code", name="uq_languages_code"),)


class LocalizedString(Base):
    """Cached value of one UI key in one language."""

    __tablename__ = "localized_strings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    language_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("languages.id", ondelete="cascade"),
        nullable=False,
    )
    key: Mapped[str] = mapped_column(String(128), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    context: Mapped[str] = mapped_column(String(32), default="ui_translation")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    language: Mapped[Language] = relationship(back_populates="strings")

    __table_args__ = (
        UniqueConstraint("language_id", "key", name="uq_localized_strings_language_key"),
        Index("ix_localized_strings_language", "language_id"),
    )
