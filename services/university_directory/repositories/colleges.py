# services/university_directory/repositories/colleges.py
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from services.university_directory.models import College, Department
from services.university_directory.repositories.generic import GenericRepository


def _live_departments():
    return selectinload(College.departments.and_(Department.is_deleted.is_(False)))


class CollegeRepository(GenericRepository[College]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, College)

    async def get_by_university_id(self, university_id: int) -> List[College]:
        stmt = (
            self.query()
            .where(College.university_id == university_id)
            .options(_live_departments())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id_with_details(self, id: int) -> Optional[College]:
        stmt = (
            self.query()
            .where(College.id == id)
            .options(selectinload(College.university), _live_departments())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_counts_by_university_ids(self, university_ids: List[int]) -> Dict[int, int]:
        if not university_ids:
            return {}

        stmt = (
            select(College.university_id, func.count(College.id))
            .where(College.is_deleted.is_(False), College.university_id.in_(university_ids))
            .group_by(College.university_id)
        )
        result = await self.db.execute(stmt)
        return {university_id: count for university_id, count in result.all()}
