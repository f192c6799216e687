"""
Generic async repository over SQLAlchemy models.

All persistence failures surface as StorageError after the session has been
rolled back, so callers never see driver-specific exceptions.
"""

from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from loguru import logger
from sqlalchemy import ColumnElement, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Base
from app.utils.exceptions import StorageError

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """CRUD operations for one model class."""

    def __init__(self, db: AsyncSession, model_class: Type[ModelT]):
        self.db = db
        self.model_class = model_class

    async def _fail(self, operation: str, error: SQLAlchemyError) -> StorageError:
        await self.db.rollback()
        logger.error(f"Failed to {operation} {self.model_class.__name__}: {error}")
        return StorageError(str(error.orig if getattr(error, "orig", None) is not None else error))

    async def create(self, instance: ModelT) -> ModelT:
        try:
            self.db.add(instance)
            await self.db.commit()
            await self.db.refresh(instance)
        except SQLAlchemyError as e:
            raise await self._fail("create", e)
        return instance

    async def find_by_id(self, record_id: Any, *criteria: ColumnElement[bool]) -> Optional[ModelT]:
        stmt = select(self.model_class).where(self.model_class.id == record_id, *criteria)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise await self._fail("get", e)
        return result.scalar_one_or_none()

    async def find_all(
        self,
        *criteria: ColumnElement[bool],
        order_by: Sequence[Any] = (),
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        stmt = select(self.model_class).where(*criteria)
        if order_by:
            stmt = stmt.order_by(*order_by)
        else:
            stmt = stmt.order_by(self.model_class.id)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise await self._fail("list", e)
        return list(result.scalars().all())

    async def save(self, instance: ModelT) -> ModelT:
        try:
            self.db.add(instance)
            await self.db.commit()
            await self.db.refresh(instance)
        except SQLAlchemyError as e:
            raise await self._fail("save", e)
        return instance

    async def delete(self, instance: ModelT) -> None:
        try:
            await self.db.delete(instance)
            await self.db.commit()
        except SQLAlchemyError as e:
            raise await self._fail("delete", e)
