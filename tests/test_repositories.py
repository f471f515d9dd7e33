"""
Repository tests: soft-delete filtering, search predicates, batch counts, cascade
"""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select

from services.university_directory.models import (
    College,
    Department,
    Governorate,
    News,
    StudyType,
    University,
    UniversityBranch,
    UniversityType,
)
from services.university_directory.repositories.colleges import CollegeRepository
from services.university_directory.repositories.generic import GenericRepository
from services.university_directory.repositories.universities import UniversityRepository


async def _count(db_session, model) -> int:
    result = await db_session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestGenericRepository:
    async def test_add_assigns_id_and_timestamps(self, db_session):
        repo = GenericRepository(db_session, University)
        university = await repo.add(University(
            name_ar='جامعة حلوان',
            type=UniversityType.Governmental,
            governorate=Governorate.Cairo,
        ))

        assert university.id is not None
        assert university.created_at is not None
        assert university.is_deleted is False

    async def test_soft_deleted_rows_are_hidden(self, db_session, sample_university):
        repo = GenericRepository(db_session, University)
        await repo.soft_delete(sample_university)

        assert await repo.get_by_id(sample_university.id) is None
        assert await repo.get_all() == []
        assert await repo.exists(University.id == sample_university.id) is False
        # the row itself is kept
        assert await _count(db_session, University) == 1

    async def test_find_and_first_or_default(self, db_session, sample_university, private_university):
        repo = GenericRepository(db_session, University)

        private = await repo.find(University.type == UniversityType.Private)
        assert [u.id for u in private] == [private_university.id]

        first = await repo.first_or_default(University.governorate == Governorate.Giza)
        assert first.id == sample_university.id

        assert await repo.first_or_default(University.governorate == Governorate.Aswan) is None

    async def test_hard_delete(self, db_session):
        repo = GenericRepository(db_session, News)
        news = await repo.add(News(title='خبر', date=datetime(2024, 7, 1), description='نص'))

        await repo.delete(news.id)

        assert await _count(db_session, News) == 0


class TestUniversityRepository:
    async def test_get_by_type(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        result = await repo.get_by_type(UniversityType.Governmental)
        assert [u.id for u in result] == [sample_university.id]

    async def test_get_by_governorate(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        result = await repo.get_by_governorate(Governorate.Giza)
        assert [u.id for u in result] == [sample_university.id]

    async def test_search_without_filters_returns_all(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        result = await repo.search()
        assert {u.id for u in result} == {sample_university.id, private_university.id}

    async def test_search_by_name_matches_english_case_insensitive(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        result = await repo.search(search_term='cairo')
        assert [u.id for u in result] == [sample_university.id]

    async def test_search_by_arabic_name(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        result = await repo.search_by_name('مصر')
        assert [u.id for u in result] == [private_university.id]

    async def test_search_by_governorate(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        result = await repo.search(governorate=Governorate.Cairo)
        assert [u.id for u in result] == [private_university.id]

    async def test_search_fee_range(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)

        cheap = await repo.search(max_fees=Decimal('10000'))
        assert [u.id for u in cheap] == [sample_university.id]

        expensive = await repo.search(min_fees=Decimal('10000'))
        assert [u.id for u in expensive] == [private_university.id]

    async def test_search_ignores_unknown_fees_in_range(self, db_session, sample_university):
        repo = UniversityRepository(db_session)
        await repo.add(University(
            name_ar='جامعة بلا مصروفات',
            type=UniversityType.National,
            governorate=Governorate.Suez,
        ))

        result = await repo.search(min_fees=Decimal('0'))
        assert [u.id for u in result] == [sample_university.id]

    async def test_search_coordination_range(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        result = await repo.search(min_coordination=Decimal('80'), max_coordination=Decimal('90'))
        assert [u.id for u in result] == [sample_university.id]

    async def test_search_by_study_type(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)

        science = await repo.search(study_type=StudyType.Science)
        assert [u.id for u in science] == [private_university.id]

        literary = await repo.search(study_type=StudyType.Literary)
        assert [u.id for u in literary] == [sample_university.id]

    async def test_search_by_study_type_skips_deleted_departments(self, db_session, private_university):
        result = await db_session.execute(select(Department).where(Department.study_type == StudyType.Science))
        department = result.scalars().one()
        await GenericRepository(db_session, Department).soft_delete(department)

        repo = UniversityRepository(db_session)
        assert await repo.search(study_type=StudyType.Science) == []

    async def test_search_by_college_name(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        result = await repo.search(college_name='Engineering')
        assert [u.id for u in result] == [sample_university.id]

    async def test_search_by_college_name_skips_deleted_colleges(self, db_session, sample_university):
        result = await db_session.execute(select(College).where(College.name_en == 'Faculty of Engineering'))
        await GenericRepository(db_session, College).soft_delete(result.scalars().one())

        repo = UniversityRepository(db_session)
        assert await repo.search(college_name='Engineering') == []

    async def test_search_filters_are_anded(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        result = await repo.search(type=UniversityType.Private, study_type=StudyType.Math)
        assert result == []

    async def test_search_loads_live_children(self, db_session, sample_university):
        result = await db_session.execute(select(College).where(College.name_en == 'Faculty of Arts'))
        await GenericRepository(db_session, College).soft_delete(result.scalars().one())

        repo = UniversityRepository(db_session)
        [university] = await repo.search()
        assert [c.name_en for c in university.colleges] == ['Faculty of Engineering']
        assert len(university.colleges[0].departments) == 2
        assert len(university.branches) == 1

    async def test_get_by_id_with_details(self, db_session, sample_university):
        repo = UniversityRepository(db_session)
        university = await repo.get_by_id_with_details(sample_university.id)

        assert len(university.colleges) == 2
        assert len(university.branches) == 1

    async def test_branch_counts(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        counts = await repo.get_branch_counts_by_university_ids([sample_university.id, private_university.id])
        assert counts == {sample_university.id: 1}

    async def test_counts_by_type(self, db_session, sample_university, private_university):
        repo = UniversityRepository(db_session)
        counts = await repo.get_university_counts_by_type()
        assert counts[UniversityType.Governmental] == 1
        assert counts[UniversityType.Private] == 1
        assert UniversityType.Foreign not in counts


class TestCollegeRepository:
    async def test_counts_by_university_ids(self, db_session, sample_university, private_university):
        repo = CollegeRepository(db_session)
        counts = await repo.get_counts_by_university_ids([sample_university.id, private_university.id])
        assert counts == {sample_university.id: 2, private_university.id: 1}

    async def test_counts_for_no_ids(self, db_session):
        assert await CollegeRepository(db_session).get_counts_by_university_ids([]) == {}

    async def test_get_by_university_id_hides_deleted_departments(self, db_session, sample_university):
        result = await db_session.execute(select(Department).where(Department.name_en == 'Architecture'))
        await GenericRepository(db_session, Department).soft_delete(result.scalars().one())

        colleges = await CollegeRepository(db_session).get_by_university_id(sample_university.id)
        engineering = next(c for c in colleges if c.name_en == 'Faculty of Engineering')
        assert [d.name_en for d in engineering.departments] == ['Civil Engineering']

    async def test_get_by_id_with_details_loads_university(self, db_session, sample_university):
        result = await db_session.execute(select(College).where(College.name_en == 'Faculty of Arts'))
        college = result.scalars().one()

        loaded = await CollegeRepository(db_session).get_by_id_with_details(college.id)
        assert loaded.university.id == sample_university.id
        assert [d.name_en for d in loaded.departments] == ['History']


class TestCascade:
    async def test_deleting_university_removes_children(self, db_session, sample_university):
        await UniversityRepository(db_session).delete(sample_university.id)

        assert await _count(db_session, University) == 0
        assert await _count(db_session, College) == 0
        assert await _count(db_session, Department) == 0
        assert await _count(db_session, UniversityBranch) == 0

    async def test_deleting_college_removes_departments(self, db_session, sample_university):
        result = await db_session.execute(select(College).where(College.name_en == 'Faculty of Engineering'))
        college = result.scalars().one()

        await CollegeRepository(db_session).delete(college.id)

        assert await _count(db_session, College) == 1
        assert await _count(db_session, Department) == 1
