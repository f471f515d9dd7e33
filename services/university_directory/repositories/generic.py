# services/university_directory/repositories/generic.py
from datetime import datetime
from typing import Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from shared.db import Base

ModelType = TypeVar("ModelType", bound=Base)


class GenericRepository(Generic[ModelType]):
    """
    CRUD over one mapped table.

    Every read goes through query(), which hides soft-deleted rows.
    Writes commit immediately and refresh the instance, so callers get
    database-generated ids back. add(commit=False) only flushes, leaving
    the commit to a later write in the same unit of work.
    """

    def __init__(self, db: AsyncSession, model: Type[ModelType]):
        self.db = db
        self.model = model

    def query(self) -> Select:
        return select(self.model).where(self.model.is_deleted.is_(False))

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        result = await self.db.execute(self.query().where(self.model.id == id))
        return result.scalars().first()

    async def get_all(self) -> List[ModelType]:
        result = await self.db.execute(self.query())
        return list(result.scalars().all())

    async def find(self, *criteria) -> List[ModelType]:
        result = await self.db.execute(self.query().where(*criteria))
        return list(result.scalars().all())

    async def first_or_default(self, *criteria) -> Optional[ModelType]:
        result = await self.db.execute(self.query().where(*criteria))
        return result.scalars().first()

    async def exists(self, *criteria) -> bool:
        stmt = select(func.count()).select_from(self.model).where(self.model.is_deleted.is_(False), *criteria)
        result = await self.db.execute(stmt)
        return result.scalar_one() > 0

    async def add(self, entity: ModelType, commit: bool = True) -> ModelType:
        self.db.add(entity)
        await self._save(commit)
        await self.db.refresh(entity)
        return entity

    async def add_range(self, entities: Sequence[ModelType], commit: bool = True) -> List[ModelType]:
        self.db.add_all(entities)
        await self._save(commit)
        for entity in entities:
            await self.db.refresh(entity)
        return list(entities)

    async def _save(self, commit: bool) -> None:
        # flush keeps the rows in the caller's open transaction
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()

    async def update(self, entity: ModelType) -> ModelType:
        entity.updated_at = datetime.utcnow()
        await self.db.commit()
        await self.db.refresh(entity)
        return entity

    async def delete(self, id: int) -> None:
        # Hard delete; child rows go with it through ON DELETE CASCADE
        await self.db.execute(
            delete(self.model).where(self.model.id == id)
        )
        await self.db.commit()

    async def soft_delete(self, entity: ModelType) -> ModelType:
        entity.is_deleted = True
        return await self.update(entity)
