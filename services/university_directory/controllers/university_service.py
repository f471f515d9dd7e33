# services/university_directory/controllers/university_service.py
from decimal import Decimal
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from services.university_directory.models import (
    College,
    Department,
    Governorate,
    StudyType,
    University,
    UniversityBranch,
    UniversityType,
)
from services.university_directory.repositories.colleges import CollegeRepository
from services.university_directory.repositories.generic import GenericRepository
from services.university_directory.repositories.universities import UniversityRepository
from services.university_directory.schemas.colleges import (
    CollegeViewModel,
    CreateCollegeDto,
    CreateDepartmentDto,
    DepartmentViewModel,
    UniversityBasicViewModel,
    UpdateCollegeDto,
    UpdateDepartmentDto,
)
from services.university_directory.schemas.universities import (
    BranchViewModel,
    CreateBranchDto,
    CreateUniversityDto,
    UniversityTypeViewModel,
    UniversityViewModel,
    UpdateBranchDto,
    UpdateUniversityDto,
)
from shared.db import get_db
from shared.exceptions import NotFoundError, ValidationError
from shared.logging_config import get_logger

logger = get_logger("universities")


def _num(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


# --- PROJECTIONS ---

def to_department_view(department: Department) -> DepartmentViewModel:
    return DepartmentViewModel(
        id=department.id,
        name_ar=department.name_ar,
        name_en=department.name_en,
        study_type=int(department.study_type) if department.study_type is not None else None,
        study_type_ar=department.study_type.label if department.study_type is not None else None,
        description=department.description,
    )


def to_branch_view(branch: UniversityBranch) -> BranchViewModel:
    return BranchViewModel(
        id=branch.id,
        name_ar=branch.name_ar,
        name_en=branch.name_en,
        location=branch.location,
        governorate=int(branch.governorate),
        governorate_ar=branch.governorate.label,
    )


def to_university_basic_view(university: University) -> UniversityBasicViewModel:
    return UniversityBasicViewModel(
        id=university.id,
        name_ar=university.name_ar,
        type=int(university.type),
        type_ar=university.type.label,
    )


def to_college_view(
    college: College,
    departments: Optional[List[Department]] = None,
    university: Optional[University] = None,
) -> CollegeViewModel:
    view = CollegeViewModel(
        id=college.id,
        name_ar=college.name_ar,
        name_en=college.name_en,
        university_id=college.university_id,
        official_website=college.official_website,
        location=college.location,
        description=college.description,
        fees=_num(college.fees),
        last_year_coordination=_num(college.last_year_coordination),
        fees_category_a=_num(college.fees_category_a),
        fees_category_b=_num(college.fees_category_b),
        fees_category_c=_num(college.fees_category_c),
        fees_per_hour=_num(college.fees_per_hour),
        minimum_hours_per_semester=college.minimum_hours_per_semester,
        additional_fees=_num(college.additional_fees),
    )
    if departments is not None:
        view.departments_count = len(departments)
        view.departments = [to_department_view(d) for d in departments]
    if university is not None:
        view.university = to_university_basic_view(university)
    return view


def to_university_view(
    university: University,
    colleges_count: int = 0,
    branches_count: int = 0,
    colleges: Optional[List[CollegeViewModel]] = None,
    branches: Optional[List[BranchViewModel]] = None,
) -> UniversityViewModel:
    return UniversityViewModel(
        id=university.id,
        name_ar=university.name_ar,
        name_en=university.name_en,
        type=int(university.type),
        type_ar=university.type.label,
        official_website=university.official_website,
        location=university.location,
        governorate=int(university.governorate),
        governorate_ar=university.governorate.label,
        last_year_coordination=_num(university.last_year_coordination),
        fees=_num(university.fees),
        information_sources=university.information_sources,
        description=university.description,
        colleges_count=colleges_count,
        branches_count=branches_count,
        colleges=colleges or [],
        branches=branches or [],
    )


def _college_name_matches(college: College, college_name: str) -> bool:
    needle = college_name.lower()
    if needle in college.name_ar.lower():
        return True
    return college.name_en is not None and needle in college.name_en.lower()


class UniversityService:
    """Universities, their colleges, departments and branches"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.universities = UniversityRepository(db)
        self.colleges = CollegeRepository(db)
        self.departments = GenericRepository(db, Department)
        self.branches = GenericRepository(db, UniversityBranch)

    # --- READ ---

    async def get_university_types(self) -> List[UniversityTypeViewModel]:
        counts = await self.universities.get_university_counts_by_type()
        return [
            UniversityTypeViewModel(
                type=int(type_),
                type_name_ar=type_.label,
                total_universities=counts.get(type_, 0),
            )
            for type_ in UniversityType
        ]

    async def _list_views(self, universities: List[University]) -> List[UniversityViewModel]:
        # batch the counts: one grouped query per child table
        ids = [u.id for u in universities]
        college_counts = await self.colleges.get_counts_by_university_ids(ids)
        branch_counts = await self.universities.get_branch_counts_by_university_ids(ids)
        return [
            to_university_view(
                u,
                colleges_count=college_counts.get(u.id, 0),
                branches_count=branch_counts.get(u.id, 0),
            )
            for u in universities
        ]

    async def get_universities_by_type(self, type: UniversityType) -> List[UniversityViewModel]:
        universities = await self.universities.get_by_type(type)
        return await self._list_views(universities)

    async def get_university_by_id(self, id: int) -> Optional[UniversityViewModel]:
        university = await self.universities.get_by_id_with_details(id)
        if university is None:
            return None

        colleges = [to_college_view(c) for c in university.colleges]
        for view, college in zip(colleges, university.colleges):
            view.departments_count = len(college.departments)

        return to_university_view(
            university,
            colleges_count=len(university.colleges),
            branches_count=len(university.branches),
            colleges=colleges,
            branches=[to_branch_view(b) for b in university.branches],
        )

    async def university_exists(self, id: int) -> bool:
        return await self.universities.exists(University.id == id)

    async def search_universities(
        self,
        search_term: Optional[str] = None,
        type: Optional[UniversityType] = None,
        governorate: Optional[Governorate] = None,
        study_type: Optional[StudyType] = None,
        min_fees: Optional[Decimal] = None,
        max_fees: Optional[Decimal] = None,
        min_coordination: Optional[Decimal] = None,
        max_coordination: Optional[Decimal] = None,
        college_name: Optional[str] = None,
    ) -> List[UniversityViewModel]:
        universities = await self.universities.search(
            search_term=search_term,
            type=type,
            governorate=governorate,
            min_fees=min_fees,
            max_fees=max_fees,
            study_type=study_type,
            min_coordination=min_coordination,
            max_coordination=max_coordination,
            college_name=college_name,
        )

        filter_colleges = bool(college_name and college_name.strip())
        results = []
        for university in universities:
            colleges = list(university.colleges)
            if filter_colleges:
                colleges = [c for c in colleges if _college_name_matches(c, college_name.strip())]

            college_views = [
                CollegeViewModel(
                    id=c.id,
                    name_ar=c.name_ar,
                    university_id=c.university_id,
                    departments=[
                        DepartmentViewModel(
                            id=d.id,
                            name_ar=d.name_ar,
                            study_type=int(d.study_type) if d.study_type is not None else None,
                            study_type_ar=d.study_type.label if d.study_type is not None else None,
                        )
                        for d in c.departments
                    ],
                )
                for c in colleges
            ]
            results.append(
                to_university_view(
                    university,
                    colleges_count=len(colleges),
                    branches_count=len(university.branches),
                    colleges=college_views,
                )
            )
        return results

    async def search_universities_by_name(self, search_term: Optional[str]) -> List[UniversityViewModel]:
        if not search_term or not search_term.strip():
            return []
        universities = await self.universities.search_by_name(search_term.strip())
        return await self._list_views(universities)

    async def get_colleges_by_university_id(self, university_id: int) -> List[CollegeViewModel]:
        colleges = await self.colleges.get_by_university_id(university_id)
        university = await self.universities.get_by_id(university_id)
        return [to_college_view(c, departments=c.departments, university=university) for c in colleges]

    async def get_college_by_id(self, college_id: int) -> Optional[CollegeViewModel]:
        college = await self.colleges.get_by_id_with_details(college_id)
        if college is None:
            return None
        return to_college_view(college, departments=college.departments, university=college.university)

    async def _require_university(self, university_id: int) -> University:
        university = await self.universities.get_by_id(university_id)
        if university is None:
            raise NotFoundError("University", university_id)
        return university

    async def _require_college(self, college_id: int) -> College:
        college = await self.colleges.get_by_id(college_id)
        if college is None:
            raise NotFoundError("College", college_id)
        return college

    # --- CREATE ---

    async def create_university(self, dto: CreateUniversityDto) -> UniversityViewModel:
        university = University(**dto.model_dump(exclude={"branches"}))
        university = await self.universities.add(university, commit=False)

        if dto.branches:
            await self.branches.add_range([
                UniversityBranch(university_id=university.id, **branch.model_dump())
                for branch in dto.branches
            ], commit=False)
        await self.db.commit()

        logger.info(f"University created: {university.id}", extra={"university_id": university.id})
        return await self.get_university_by_id(university.id)

    async def create_college(self, dto: CreateCollegeDto) -> CollegeViewModel:
        await self._require_university(dto.university_id)

        college = College(**dto.model_dump(exclude={"departments"}))
        college = await self.colleges.add(college, commit=False)

        if dto.departments:
            await self.departments.add_range([
                Department(college_id=college.id, **department.model_dump(exclude={"college_id"}))
                for department in dto.departments
            ], commit=False)
        await self.db.commit()

        logger.info(f"College created: {college.id}", extra={"college_id": college.id})
        return await self.get_college_by_id(college.id)

    async def create_department(self, dto: CreateDepartmentDto) -> DepartmentViewModel:
        await self._require_college(dto.college_id)

        department = await self.departments.add(Department(**dto.model_dump()))
        logger.info(f"Department created: {department.id}", extra={"department_id": department.id})
        return to_department_view(department)

    async def create_branch(self, university_id: int, dto: CreateBranchDto) -> BranchViewModel:
        await self._require_university(university_id)

        branch = await self.branches.add(UniversityBranch(university_id=university_id, **dto.model_dump()))
        logger.info(f"Branch created: {branch.id}", extra={"branch_id": branch.id})
        return to_branch_view(branch)

    # --- UPDATE ---

    async def update_university(self, dto: UpdateUniversityDto) -> UniversityViewModel:
        university = await self._require_university(dto.id)

        for field, value in dto.model_dump(exclude={"id"}).items():
            setattr(university, field, value)
        await self.universities.update(university)

        logger.info(f"University updated: {university.id}", extra={"university_id": university.id})
        return await self.get_university_by_id(university.id)

    async def update_college(self, dto: UpdateCollegeDto) -> CollegeViewModel:
        college = await self._require_college(dto.id)
        await self._require_university(dto.university_id)

        for field, value in dto.model_dump(exclude={"id"}).items():
            setattr(college, field, value)
        await self.colleges.update(college)

        logger.info(f"College updated: {college.id}", extra={"college_id": college.id})
        return await self.get_college_by_id(college.id)

    async def update_department(self, dto: UpdateDepartmentDto) -> DepartmentViewModel:
        department = await self.departments.get_by_id(dto.id)
        if department is None:
            raise NotFoundError("Department", dto.id)
        await self._require_college(dto.college_id)

        for field, value in dto.model_dump(exclude={"id"}).items():
            setattr(department, field, value)
        department = await self.departments.update(department)

        logger.info(f"Department updated: {department.id}", extra={"department_id": department.id})
        return to_department_view(department)

    async def update_branch(self, university_id: int, dto: UpdateBranchDto) -> BranchViewModel:
        branch = await self.branches.get_by_id(dto.id)
        if branch is None:
            raise NotFoundError("Branch", dto.id)
        await self._require_university(university_id)

        if branch.university_id != university_id:
            raise ValidationError(
                f"Branch {dto.id} does not belong to University {university_id}", field="id"
            )

        for field, value in dto.model_dump(exclude={"id"}).items():
            setattr(branch, field, value)
        branch = await self.branches.update(branch)

        logger.info(f"Branch updated: {branch.id}", extra={"branch_id": branch.id})
        return to_branch_view(branch)

    # --- DELETE ---

    async def _delete(self, repository: GenericRepository, id: int, label: str) -> bool:
        if await repository.get_by_id(id) is None:
            return False
        await repository.delete(id)
        logger.info(f"{label} deleted: {id}")
        return True

    async def delete_university(self, id: int) -> bool:
        return await self._delete(self.universities, id, "University")

    async def delete_college(self, id: int) -> bool:
        return await self._delete(self.colleges, id, "College")

    async def delete_department(self, id: int) -> bool:
        return await self._delete(self.departments, id, "Department")

    async def delete_branch(self, id: int) -> bool:
        return await self._delete(self.branches, id, "Branch")


def get_university_service(db: AsyncSession = Depends(get_db)) -> UniversityService:
    return UniversityService(db)
