from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from oopsask.core.database import session_scope
from oopsask.models import DEFAULT_LANGUAGE_ID, Language
from oopsask.services.catalog import DEFAULT_LANGUAGE, language_info, normalize_language_code


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LanguageRecord:
    id: uuid.UUID
    code: str
    name: str
    native_name: str
    flag: str | None
    is_active: bool


class LanguageRegistry:
    """Map language codes to stable identifiers, creating rows on first use."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        default_language: str = DEFAULT_LANGUAGE,
        fallback_id: uuid.UUID = DEFAULT_LANGUAGE_ID,
    ):
        self._session_factory = session_factory
        self._default_language = normalize_language_code(default_language)
        self._fallback_id = fallback_id

    @property
    def fallback_id(self) -> uuid.UUID:
        return self._fallback_id

    async def resolve(self, code: str) -> uuid.UUID:
        """Return the id for ``code``, inserting the language if it is unseen.

        Uses insert-if-absent followed by a select, so concurrent first
        references to one code converge on a single row. Any persistence
        failure yields the default language id.
        """
        normalized = normalize_language_code(code) or self._default_language
        try:
            async with session_scope(self._session_factory) as session:
                await session.execute(self._insert_if_absent(session, normalized))
                result = await session.execute(
                    select(Language.id).where(Language.code == normalized)
                )
                language_id = result.scalar_one()
        except SQLAlchemyError as exc:
            logger.warning(
                "Language lookup failed for %s; using fallback id.",
                normalized,
                exc_info=exc,
            )
            return self._fallback_id
        return language_id

    async def lookup(self, code: str) -> uuid.UUID | None:
        """Return the id for ``code`` if it is registered; never inserts."""
        normalized = normalize_language_code(code) or self._default_language
        async with session_scope(self._session_factory) as session:
            result = await session.execute(
                select(Language.id).where(Language.code == normalized)
            )
            return result.scalar_one_or_none()

    async def list_languages(self, *, active_only: bool = True) -> list[LanguageRecord]:
        stmt = select(Language).order_by(Language.code)
        if active_only:
            stmt = stmt.where(Language.is_active.is_(True))
        async with session_scope(self._session_factory) as session:
            result = await session.execute(stmt)
            languages = result.scalars().all()
        return [
            LanguageRecord(
                id=language.id,
                code=language.code,
                name=language.name,
                native_name=language.native_name,
                flag=language.flag,
                is_active=language.is_active,
            )
            for language in languages
        ]

    def _insert_if_absent(self, session: AsyncSession, code: str):
        dialect = session.get_bind().dialect.name
        insert = sqlite_insert if dialect == "sqlite" else postgresql_insert
        info = language_info(code)
        language_id = self._fallback_id if code == self._default_language else uuid.uuid4()
        stmt = insert(Language).values(
            id=language_id,
            code=code,
            name=info.name,
            native_name=info.native_name,
            flag=info.flag,
            is_active=True,
        )
        return stmt.on_conflict_do_nothing(index_elements=["code"])
