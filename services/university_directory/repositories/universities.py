# services/university_directory/repositories/universities.py
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from services.university_directory.models import (
    College,
    Department,
    Governorate,
    StudyType,
    University,
    UniversityBranch,
    UniversityType,
)
from services.university_directory.repositories.generic import GenericRepository


def name_contains(model, term: str):
    pattern = f"%{term}%"
    return or_(
        model.name_ar.ilike(pattern),
        (model.name_en.isnot(None)) & (model.name_en.ilike(pattern)),
    )


def _live_colleges_with_departments():
    return selectinload(
        University.colleges.and_(College.is_deleted.is_(False))
    ).selectinload(
        College.departments.and_(Department.is_deleted.is_(False))
    )


def _live_branches():
    return selectinload(University.branches.and_(UniversityBranch.is_deleted.is_(False)))


class UniversityRepository(GenericRepository[University]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, University)

    async def get_by_type(self, type: UniversityType) -> List[University]:
        # list view: counts are fetched separately, collections stay unloaded
        return await self.find(University.type == type)

    async def get_by_governorate(self, governorate: Governorate) -> List[University]:
        return await self.find(University.governorate == governorate)

    async def search(
        self,
        search_term: Optional[str] = None,
        type: Optional[UniversityType] = None,
        governorate: Optional[Governorate] = None,
        min_fees: Optional[Decimal] = None,
        max_fees: Optional[Decimal] = None,
        study_type: Optional[StudyType] = None,
        min_coordination: Optional[Decimal] = None,
        max_coordination: Optional[Decimal] = None,
        college_name: Optional[str] = None,
    ) -> List[University]:
        stmt = self.query()

        if search_term and search_term.strip():
            stmt = stmt.where(name_contains(University, search_term))

        if type is not None:
            stmt = stmt.where(University.type == type)

        if governorate is not None:
            stmt = stmt.where(University.governorate == governorate)

        # Range filters never match rows where the value is unknown
        if min_fees is not None:
            stmt = stmt.where(University.fees.isnot(None), University.fees >= min_fees)
        if max_fees is not None:
            stmt = stmt.where(University.fees.isnot(None), University.fees <= max_fees)

        if min_coordination is not None:
            stmt = stmt.where(
                University.last_year_coordination.isnot(None),
                University.last_year_coordination >= min_coordination,
            )
        if max_coordination is not None:
            stmt = stmt.where(
                University.last_year_coordination.isnot(None),
                University.last_year_coordination <= max_coordination,
            )

        # at least one live college holding a live department of this study type
        if study_type is not None:
            stmt = stmt.where(
                University.colleges.any(
                    (College.is_deleted.is_(False)) & College.departments.any(
                        (Department.study_type == study_type) & (Department.is_deleted.is_(False))
                    )
                )
            )

        if college_name and college_name.strip():
            stmt = stmt.where(
                University.colleges.any(
                    (College.is_deleted.is_(False)) & name_contains(College, college_name)
                )
            )

        stmt = stmt.options(
            _live_colleges_with_departments(),
            _live_branches(),
        ).execution_options(populate_existing=True)

        result = await self.db.execute(stmt)
        return list(result.scalars().unique().all())

    async def search_by_name(self, search_term: str) -> List[University]:
        if not search_term or not search_term.strip():
            return []
        return await self.find(name_contains(University, search_term))

    async def get_by_id_with_details(self, id: int) -> Optional[University]:
        stmt = (
            self.query()
            .where(University.id == id)
            .options(_live_colleges_with_departments(), _live_branches())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_branch_counts_by_university_ids(self, university_ids: List[int]) -> Dict[int, int]:
        if not university_ids:
            return {}

        stmt = (
            select(UniversityBranch.university_id, func.count(UniversityBranch.id))
            .where(
                UniversityBranch.is_deleted.is_(False),
                UniversityBranch.university_id.in_(university_ids),
            )
            .group_by(UniversityBranch.university_id)
        )
        result = await self.db.execute(stmt)
        return {university_id: count for university_id, count in result.all()}

    async def get_university_counts_by_type(self) -> Dict[UniversityType, int]:
        stmt = (
            select(University.type, func.count(University.id))
            .where(University.is_deleted.is_(False))
            .group_by(University.type)
        )
        result = await self.db.execute(stmt)
        return {type_: count for type_, count in result.all()}
