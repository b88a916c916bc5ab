from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from oopsask.core.database import session_scope
from oopsask.models import LocalizedString


logger = logging.getLogger(__name__)


class TranslationStoreError(RuntimeError):
    """Raised when the translation store cannot be read or cleared."""


class KeyStore:
    """Persistent (language, key) -> value mapping backed by ``localized_strings``.

    Every operation runs in its own short-lived session so that a failed write
    never poisons the transaction of the next one.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, language_id: uuid.UUID) -> dict[str, str]:
        """Return every cached entry for a language; empty when none exist."""
        stmt = select(LocalizedString.key, LocalizedString.value).where(
            LocalizedString.language_id == language_id
        )
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(stmt)
                rows = result.all()
        except SQLAlchemyError as exc:
            raise TranslationStoreError(
                f"Failed to read translations for language {language_id}."
            ) from exc
        return {key: value for key, value in rows}

    async def count(self, language_id: uuid.UUID) -> int:
        stmt = select(func.count(LocalizedString.id)).where(
            LocalizedString.language_id == language_id
        )
        try:
            async with session_scope(self._session_factory) as session:
                total = (await session.execute(stmt)).scalar_one()
        except SQLAlchemyError as exc:
            raise TranslationStoreError(
                f"Failed to count translations for language {language_id}."
            ) from exc
        return int(total or 0)

    async def upsert(
        self,
        language_id: uuid.UUID,
        key: str,
        value: str,
        *,
        context: str = "ui_translation",
    ) -> bool:
        """Insert or overwrite one entry. Returns False on failure without retrying."""
        try:
            async with session_scope(self._session_factory) as session:
                stmt = self._upsert_statement(session, language_id, key, value, context)
                await session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.warning(
                "Failed to save translation %s for language %s.",
                key,
                language_id,
                exc_info=exc,
            )
            return False
        return True

    async def upsert_many(
        self,
        language_id: uuid.UUID,
        values: Mapping[str, str],
        *,
        context: str = "ui_translation",
    ) -> int:
        """Upsert each pair independently and return how many were written."""
        written = 0
        for key, value in values.items():
            if await self.upsert(language_id, key, value, context=context):
                written += 1
        if written < len(values):
            logger.warning(
                "Persisted %d of %d translations for language %s.",
                written,
                len(values),
                language_id,
            )
        return written

    async def delete_all(self, language_id: uuid.UUID) -> int:
        """Remove every entry for a language and return the deleted row count."""
        stmt = delete(LocalizedString).where(LocalizedString.language_id == language_id)
        try:
            async with session_scope(self._session_factory) as session:
                result = await session.execute(stmt)
                deleted = result.rowcount or 0
        except SQLAlchemyError as exc:
            raise TranslationStoreError(
                f"Failed to clear translations for language {language_id}."
            ) from exc
        logger.info("Cleared %d cached translations for language %s.", deleted, language_id)
        return deleted

    def _upsert_statement(
        self,
        session: AsyncSession,
        language_id: uuid.UUID,
        key: str,
        value: str,
        context: str,
    ):
        dialect = session.get_bind().dialect.name
        insert = sqlite_insert if dialect == "sqlite" else postgresql_insert
        now = datetime.now(timezone.utc)
        stmt = insert(LocalizedString).values(
            id=uuid.uuid4(),
            language_id=language_id,
            key=key,
            value=value,
            context=context,
            created_at=now,
            updated_at=now,
        )
        return stmt.on_conflict_do_update(
            index_elements=["language_id", "key"],
            set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
        )
