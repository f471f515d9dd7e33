"""
Tansiqy - Test Configuration and Fixtures
"""
import os
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Set testing environment before the app reads its settings
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['RESPONSE_CACHE_ENABLED'] = 'false'
os.environ['ADMIN_EMAIL'] = 'root@example.com'
os.environ['ADMIN_PASSWORD'] = 'root-password'
os.environ['ENVIRONMENT'] = 'testing'

from main import app  # noqa: E402
from services.university_directory.models import (  # noqa: E402
    College,
    Department,
    Governorate,
    StudyType,
    University,
    UniversityBranch,
    UniversityType,
    User,
    UserRole,
)
from shared.auth import create_access_token, create_session_token, get_password_hash  # noqa: E402
from shared.config import settings  # noqa: E402
from shared.db import Base, create_engine_for_url, get_db  # noqa: E402

fake = Faker()

TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_engine_for_url(TEST_DATABASE_URL)
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

ADMIN_PASSWORD = 'adminpassword123'
STUDENT_PASSWORD = 'studentpassword123'


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh schema and session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Test client sharing the test session through the get_db override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, role: UserRole, password: str, **overrides) -> User:
    user = User(
        email=overrides.pop('email', fake.unique.email()),
        password_hash=get_password_hash(password),
        full_name=overrides.pop('full_name', fake.name()),
        role=role,
        is_active=overrides.pop('is_active', True),
        **overrides
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.ADMIN, ADMIN_PASSWORD)


@pytest.fixture
async def student_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.STUDENT, STUDENT_PASSWORD)


def _claims(user: User) -> dict:
    return {
        'sub': str(user.id),
        'email': user.email,
        'role': user.role.value,
    }


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    return {'Authorization': f'Bearer {create_access_token(_claims(admin_user))}'}


@pytest.fixture
def student_auth_headers(student_user: User) -> dict:
    return {'Authorization': f'Bearer {create_access_token(_claims(student_user))}'}


@pytest.fixture
def admin_cookie_headers(admin_user: User) -> dict:
    """Session cookie sent as a raw header so it never lingers on the shared client"""
    return {'Cookie': f'{settings.SESSION_COOKIE_NAME}={create_session_token(_claims(admin_user))}'}


@pytest.fixture
def student_cookie_headers(student_user: User) -> dict:
    return {'Cookie': f'{settings.SESSION_COOKIE_NAME}={create_session_token(_claims(student_user))}'}


@pytest.fixture
async def sample_university(db_session: AsyncSession) -> University:
    """Cairo University with two colleges, departments and a branch"""
    university = University(
        name_ar='جامعة القاهرة',
        name_en='Cairo University',
        type=UniversityType.Governmental,
        governorate=Governorate.Giza,
        official_website='https://cu.edu.eg',
        fees=Decimal('5000.00'),
        last_year_coordination=Decimal('85.50'),
    )
    db_session.add(university)
    await db_session.flush()

    engineering = College(
        name_ar='كلية الهندسة',
        name_en='Faculty of Engineering',
        university_id=university.id,
        fees=Decimal('7000.00'),
        last_year_coordination=Decimal('95.00'),
    )
    arts = College(
        name_ar='كلية الآداب',
        name_en='Faculty of Arts',
        university_id=university.id,
    )
    db_session.add_all([engineering, arts])
    await db_session.flush()

    db_session.add_all([
        Department(name_ar='هندسة مدنية', name_en='Civil Engineering', college_id=engineering.id, study_type=StudyType.Math),
        Department(name_ar='هندسة معمارية', name_en='Architecture', college_id=engineering.id, study_type=StudyType.Math),
        Department(name_ar='تاريخ', name_en='History', college_id=arts.id, study_type=StudyType.Literary),
        UniversityBranch(name_ar='فرع الخرطوم', name_en='Khartoum Branch', university_id=university.id, governorate=Governorate.Cairo),
    ])
    await db_session.commit()
    await db_session.refresh(university)
    return university


@pytest.fixture
async def private_university(db_session: AsyncSession) -> University:
    university = University(
        name_ar='جامعة مصر الدولية',
        name_en='Misr International University',
        type=UniversityType.Private,
        governorate=Governorate.Cairo,
        fees=Decimal('90000.00'),
        last_year_coordination=Decimal('70.00'),
    )
    db_session.add(university)
    await db_session.flush()
    college = College(name_ar='كلية الصيدلة', name_en='Faculty of Pharmacy', university_id=university.id)
    db_session.add(college)
    await db_session.flush()
    db_session.add(Department(name_ar='صيدلة', college_id=college.id, study_type=StudyType.Science))
    await db_session.commit()
    await db_session.refresh(university)
    return university
