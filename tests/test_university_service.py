"""
Service layer tests: projections, not-found paths and ownership checks
"""
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from services.university_directory.controllers.news_service import NewsService
from services.university_directory.controllers.university_service import UniversityService
from services.university_directory.models import College, Governorate, StudyType, University, UniversityBranch, UniversityType
from services.university_directory.schemas.colleges import (
    CreateCollegeDto,
    CreateDepartmentDto,
    UpdateCollegeDto,
    UpdateDepartmentDto,
)
from services.university_directory.schemas.news import CreateNewsDto, UpdateNewsDto
from services.university_directory.schemas.universities import (
    CreateBranchDto,
    CreateUniversityDto,
    UpdateBranchDto,
    UpdateUniversityDto,
)
from shared.exceptions import NotFoundError, ValidationError


class TestReads:
    async def test_university_types_lists_every_type(self, db_session, sample_university, private_university):
        types = await UniversityService(db_session).get_university_types()

        assert [t.type for t in types] == [1, 2, 3, 4, 5, 6]
        by_type = {t.type: t for t in types}
        assert by_type[1].total_universities == 1
        assert by_type[2].total_universities == 1
        assert by_type[5].total_universities == 0
        assert by_type[1].type_name_ar == UniversityType.Governmental.label

    async def test_university_detail_projection(self, db_session, sample_university):
        view = await UniversityService(db_session).get_university_by_id(sample_university.id)

        assert view.name_en == 'Cairo University'
        assert view.type == 1
        assert view.type_ar == UniversityType.Governmental.label
        assert view.governorate == int(Governorate.Giza)
        assert view.governorate_ar == Governorate.Giza.label
        assert view.fees == 5000.0
        assert view.last_year_coordination == 85.5
        assert view.colleges_count == 2
        assert view.branches_count == 1
        engineering = next(c for c in view.colleges if c.name_en == 'Faculty of Engineering')
        assert engineering.departments_count == 2

    async def test_missing_university_returns_none(self, db_session):
        assert await UniversityService(db_session).get_university_by_id(999) is None

    async def test_list_by_type_has_counts(self, db_session, sample_university, private_university):
        views = await UniversityService(db_session).get_universities_by_type(UniversityType.Private)

        assert len(views) == 1
        assert views[0].colleges_count == 1
        assert views[0].branches_count == 0
        assert views[0].colleges == []

    async def test_search_by_name_blank_term(self, db_session, sample_university):
        assert await UniversityService(db_session).search_universities_by_name('  ') == []

    async def test_search_trims_colleges_to_matching_names(self, db_session, sample_university):
        [view] = await UniversityService(db_session).search_universities(college_name='Arts')

        assert view.colleges_count == 1
        assert [c.name_ar for c in view.colleges] == ['كلية الآداب']
        assert view.colleges[0].departments[0].study_type == int(StudyType.Literary)

    async def test_college_detail_includes_university(self, db_session, sample_university):
        result = await db_session.execute(select(College).where(College.name_en == 'Faculty of Engineering'))
        college = result.scalars().one()

        view = await UniversityService(db_session).get_college_by_id(college.id)

        assert view.university.id == sample_university.id
        assert view.university.type_ar == UniversityType.Governmental.label
        assert view.departments_count == 2
        assert view.fees == 7000.0

    async def test_colleges_by_university(self, db_session, sample_university):
        views = await UniversityService(db_session).get_colleges_by_university_id(sample_university.id)
        assert len(views) == 2
        assert all(v.university.id == sample_university.id for v in views)

    async def test_soft_deleted_university_is_hidden_from_reads(self, db_session, sample_university):
        service = UniversityService(db_session)
        await service.universities.soft_delete(sample_university)

        assert await service.get_university_by_id(sample_university.id) is None
        assert await service.search_universities() == []
        assert await service.search_universities_by_name('Cairo') == []
        assert await service.get_universities_by_type(UniversityType.Governmental) == []
        by_type = {t.type: t for t in await service.get_university_types()}
        assert by_type[1].total_universities == 0


class TestWrites:
    async def test_create_university_with_branches(self, db_session):
        service = UniversityService(db_session)
        view = await service.create_university(CreateUniversityDto(
            name_ar='جامعة الإسكندرية',
            type=UniversityType.Governmental,
            governorate=Governorate.Alexandria,
            fees=Decimal('3000'),
            branches=[CreateBranchDto(name_ar='فرع مطروح', governorate=Governorate.Matruh)],
        ))

        assert view.id is not None
        assert view.branches_count == 1
        assert view.branches[0].governorate_ar == Governorate.Matruh.label

    async def test_create_university_is_one_transaction(self, db_session, monkeypatch):
        service = UniversityService(db_session)

        async def failing_add_range(entities, commit=True):
            raise RuntimeError('branch insert failed')

        monkeypatch.setattr(service.branches, 'add_range', failing_add_range)
        with pytest.raises(RuntimeError):
            await service.create_university(CreateUniversityDto(
                name_ar='جامعة طنطا',
                type=UniversityType.Governmental,
                governorate=Governorate.Gharbia,
                branches=[CreateBranchDto(name_ar='فرع', governorate=Governorate.Gharbia)],
            ))
        await db_session.rollback()

        result = await db_session.execute(select(func.count()).select_from(University))
        assert result.scalar_one() == 0

    async def test_create_college_with_departments(self, db_session, sample_university):
        service = UniversityService(db_session)
        view = await service.create_college(CreateCollegeDto(
            name_ar='كلية العلوم',
            university_id=sample_university.id,
            departments=[{'name_ar': 'كيمياء', 'study_type': 2}],
        ))

        assert view.departments_count == 1
        assert view.departments[0].study_type_ar == StudyType.Science.label
        assert view.university.id == sample_university.id

    async def test_create_college_for_missing_university(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await UniversityService(db_session).create_college(
                CreateCollegeDto(name_ar='كلية', university_id=404)
            )
        assert exc_info.value.status_code == 404
        assert exc_info.value.code == 'UNIVERSITY_NOT_FOUND'

    async def test_create_college_for_deleted_university(self, db_session, sample_university):
        service = UniversityService(db_session)
        await service.universities.soft_delete(sample_university)

        with pytest.raises(NotFoundError):
            await service.create_college(CreateCollegeDto(name_ar='كلية', university_id=sample_university.id))

    async def test_create_department_for_missing_college(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await UniversityService(db_session).create_department(
                CreateDepartmentDto(name_ar='قسم', college_id=404)
            )
        assert exc_info.value.code == 'COLLEGE_NOT_FOUND'

    async def test_update_university(self, db_session, sample_university):
        service = UniversityService(db_session)
        view = await service.update_university(UpdateUniversityDto(
            id=sample_university.id,
            name_ar='جامعة القاهرة',
            name_en='Cairo University (updated)',
            type=UniversityType.Governmental,
            governorate=Governorate.Giza,
            fees=Decimal('6000'),
        ))

        assert view.name_en == 'Cairo University (updated)'
        assert view.fees == 6000.0
        assert view.colleges_count == 2

    async def test_update_missing_university(self, db_session):
        with pytest.raises(NotFoundError):
            await UniversityService(db_session).update_university(UpdateUniversityDto(
                id=404, name_ar='x', type=UniversityType.Private, governorate=Governorate.Cairo,
            ))

    async def test_update_college_to_missing_university(self, db_session, sample_university):
        result = await db_session.execute(select(College).where(College.name_en == 'Faculty of Arts'))
        college = result.scalars().one()

        with pytest.raises(NotFoundError) as exc_info:
            await UniversityService(db_session).update_college(
                UpdateCollegeDto(id=college.id, name_ar='كلية الآداب', university_id=404)
            )
        assert exc_info.value.code == 'UNIVERSITY_NOT_FOUND'

    async def test_update_department(self, db_session, sample_university):
        result = await db_session.execute(select(College).where(College.name_en == 'Faculty of Arts'))
        college = result.scalars().one()
        service = UniversityService(db_session)
        created = await service.create_department(CreateDepartmentDto(name_ar='جغرافيا', college_id=college.id))

        updated = await service.update_department(UpdateDepartmentDto(
            id=created.id, name_ar='جغرافيا', college_id=college.id, study_type=StudyType.Literary,
        ))

        assert updated.study_type == 3

    async def test_update_branch_of_another_university(self, db_session, sample_university, private_university):
        result = await db_session.execute(select(UniversityBranch))
        branch = result.scalars().one()

        with pytest.raises(ValidationError):
            await UniversityService(db_session).update_branch(
                private_university.id,
                UpdateBranchDto(id=branch.id, name_ar='فرع', governorate=Governorate.Cairo),
            )

    async def test_update_branch(self, db_session, sample_university):
        result = await db_session.execute(select(UniversityBranch))
        branch = result.scalars().one()

        view = await UniversityService(db_session).update_branch(
            sample_university.id,
            UpdateBranchDto(id=branch.id, name_ar='فرع جديد', governorate=Governorate.Luxor),
        )

        assert view.name_ar == 'فرع جديد'
        assert view.governorate == int(Governorate.Luxor)

    async def test_delete_returns_false_when_missing(self, db_session):
        service = UniversityService(db_session)
        assert await service.delete_university(404) is False
        assert await service.delete_college(404) is False
        assert await service.delete_department(404) is False
        assert await service.delete_branch(404) is False

    async def test_delete_university(self, db_session, sample_university):
        service = UniversityService(db_session)
        assert await service.delete_university(sample_university.id) is True
        assert await service.get_university_by_id(sample_university.id) is None


class TestNewsService:
    async def test_news_sorted_newest_first(self, db_session):
        service = NewsService(db_session)
        await service.create_news(CreateNewsDto(title='قديم', date=datetime(2023, 1, 1), description='a'))
        await service.create_news(CreateNewsDto(title='جديد', date=datetime(2024, 1, 1), description='b'))

        titles = [n.title for n in await service.get_all_news()]
        assert titles == ['جديد', 'قديم']

    async def test_update_missing_news(self, db_session):
        with pytest.raises(NotFoundError):
            await NewsService(db_session).update_news(
                UpdateNewsDto(id=404, title='t', date=datetime(2024, 1, 1), description='d')
            )
