"""
Document-store style access over SQLAlchemy models.

A ``Collection`` exposes two capability shapes:

  • find rows matching a conjunctive filter
  • atomically find-and-update / find-and-delete a row matching a
    conjunctive filter (one ``UPDATE``/``DELETE ... RETURNING`` statement)

Filters are keyword arguments mapped to column equality, joined with AND.
Every write commits immediately.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Generic, List, NoReturn, Optional, Type, TypeVar

from sqlalchemy import and_, delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import StoreUnavailable
from database.models import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class DuplicateKeyError(Exception):
    """A write violated a unique constraint."""


class Collection(Generic[ModelT]):
    def __init__(self, session: AsyncSession, model: Type[ModelT]) -> None:
        self._session = session
        self._model = model

    def _where(self, filters: Dict[str, Any]):
        if not filters:
            raise ValueError("an empty filter would match every row")
        return and_(*(getattr(self._model, key) == value for key, value in filters.items()))

    async def _rollback_and_raise(self, exc: SQLAlchemyError) -> NoReturn:
        await self._session.rollback()
        if isinstance(exc, IntegrityError):
            raise DuplicateKeyError(str(exc.orig)) from exc
        logger.error("Store failure on %s: %s", self._model.__tablename__, exc)
        raise StoreUnavailable() from exc

    async def find(self, **filters: Any) -> List[ModelT]:
        stmt = select(self._model).where(self._where(filters)).order_by(self._model.created_at)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            await self._rollback_and_raise(exc)
        return list(result.scalars().all())

    async def find_one(self, **filters: Any) -> Optional[ModelT]:
        stmt = select(self._model).where(self._where(filters)).limit(1)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            await self._rollback_and_raise(exc)
        return result.scalars().first()

    async def insert(self, **values: Any) -> ModelT:
        row = self._model(**values)
        self._session.add(row)
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._rollback_and_raise(exc)
        return row

    async def find_one_and_update(
        self, filters: Dict[str, Any], values: Dict[str, Any],
    ) -> Optional[ModelT]:
        """Apply ``values`` to the row matching ``filters``; return it post-update."""
        stmt = (
            update(self._model)
            .where(self._where(filters))
            .values(**values)
            .returning(self._model)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self._session.execute(stmt)
            row = result.scalars().first()
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._rollback_and_raise(exc)
        return row

    async def find_one_and_delete(self, **filters: Any) -> Optional[ModelT]:
        stmt = delete(self._model).where(self._where(filters)).returning(self._model)
        try:
            result = await self._session.execute(stmt)
            row = result.scalars().first()
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._rollback_and_raise(exc)
        return row
