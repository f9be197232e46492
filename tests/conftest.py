"""Test configuration and fixtures."""

import os
import tempfile
from collections.abc import AsyncGenerator
from datetime import date, timedelta
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from edustats.core.database import Base, get_db
from edustats.core.security import get_password_hash
from edustats.models.admin import Admin
from edustats.models.evaluation import Evaluation
from edustats.models.grade import Note
from edustats.models.school_class import SchoolClass
from edustats.models.school_year import SchoolYear
from edustats.models.student import Student
from edustats.models.subject import Subject
from edustats.models.subscription import CompteGratuit
from edustats.models.user import User
from main import app

# SQLite file by default; point TEST_DATABASE_URL at PostgreSQL to test against it
TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'edustats_test.db')}",
)

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=NullPool,
)
test_session_maker = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

if test_engine.dialect.name == "sqlite":

    @event.listens_for(test_engine.sync_engine, "connect")
    def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    """Override database dependency for tests."""
    async with test_session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def setup_database() -> AsyncGenerator[None, None]:
    """Create test database tables before each test that needs it."""
    app.dependency_overrides[get_db] = override_get_db

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def db(setup_database: None) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for tests."""
    async with test_session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(setup_database: None) -> AsyncGenerator[AsyncClient, None]:
    """Get async HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def make_teacher(
    db: AsyncSession,
    email: str,
    *,
    trial_days_left: int | None = 14,
) -> User:
    """Create a teacher, with a trial ending trial_days_left days from today."""
    user = User(
        email=email,
        password_hash=get_password_hash("password123"),
        first_name="Awa",
        last_name="Traoré",
        gender="F",
        establishment="Lycée Moderne de Cocody",
        direction_regionale="Abidjan 1",
        secteur_pedagogique="Cocody",
    )
    db.add(user)
    await db.flush()

    if trial_days_left is not None:
        today = date.today()
        db.add(
            CompteGratuit(
                user_id=user.id,
                date_debut=today - timedelta(days=14 - trial_days_left),
                date_fin=today + timedelta(days=trial_days_left),
                is_active=True,
            )
        )

    await db.commit()
    await db.refresh(user)
    return user


async def login(client: AsyncClient, email: str) -> str:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": "password123"},
    )
    return response.json()["access_token"]


@pytest_asyncio.fixture
async def teacher(db: AsyncSession) -> User:
    """Teacher with a running free trial."""
    return await make_teacher(db, "teacher@example.com")


@pytest_asyncio.fixture
async def teacher_token(client: AsyncClient, teacher: User) -> str:
    """Get auth token for the teacher."""
    return await login(client, "teacher@example.com")


@pytest_asyncio.fixture
async def other_teacher(db: AsyncSession) -> User:
    """Second teacher, to check that data stays private."""
    return await make_teacher(db, "other@example.com")


@pytest_asyncio.fixture
async def other_token(client: AsyncClient, other_teacher: User) -> str:
    return await login(client, "other@example.com")


@pytest_asyncio.fixture
async def expired_teacher(db: AsyncSession) -> User:
    """Teacher whose trial ended yesterday."""
    return await make_teacher(db, "expired@example.com", trial_days_left=-1)


@pytest_asyncio.fixture
async def expired_token(client: AsyncClient, expired_teacher: User) -> str:
    return await login(client, "expired@example.com")


@pytest_asyncio.fixture
async def admin(db: AsyncSession) -> Admin:
    """Create a platform administrator."""
    admin = Admin(username="admin", password_hash=get_password_hash("adminpass"))
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin


@pytest_asyncio.fixture
async def admin_token(client: AsyncClient, admin: Admin) -> str:
    """Get auth token for the administrator."""
    response = await client.post(
        "/api/v1/admin/login",
        json={"username": "admin", "password": "adminpass"},
    )
    return response.json()["access_token"]


@pytest_asyncio.fixture
async def school_year(db: AsyncSession, teacher: User) -> SchoolYear:
    """Active 2025-2026 school year of the teacher."""
    school_year = SchoolYear(user_id=teacher.id, start_year=2025, end_year=2026, is_active=True)
    db.add(school_year)
    await db.commit()
    await db.refresh(school_year)
    return school_year


@pytest_asyncio.fixture
async def school_class(db: AsyncSession, teacher: User, school_year: SchoolYear) -> SchoolClass:
    """Class 6ème A of the teacher."""
    school_class = SchoolClass(
        user_id=teacher.id,
        school_year_id=school_year.id,
        name="6ème A",
        level="6ème",
    )
    db.add(school_class)
    await db.commit()
    await db.refresh(school_class)
    return school_class


@pytest_asyncio.fixture
async def subjects(db: AsyncSession, teacher: User, school_class: SchoolClass) -> list[Subject]:
    """Français and Maths of 6ème A, coefficient 1."""
    subjects = [
        Subject(user_id=teacher.id, class_id=school_class.id, name=name)
        for name in ("Français", "Maths")
    ]
    db.add_all(subjects)
    await db.commit()
    return subjects


@pytest_asyncio.fixture
async def students(db: AsyncSession, school_class: SchoolClass) -> list[Student]:
    """Five students of 6ème A, sorted by name."""
    students = [
        Student(
            class_id=school_class.id,
            school_year_id=school_class.school_year_id,
            name=name,
            gender=gender,
        )
        for name, gender in (
            ("Konan Marie", "F"),
            ("Kouassi Jean", "M"),
            ("Traoré Awa", "F"),
            ("Yao Paul", "M"),
            ("Zadi Luc", "M"),
        )
    ]
    db.add_all(students)
    await db.commit()
    return students


@pytest_asyncio.fixture
async def evaluation(
    db: AsyncSession, school_class: SchoolClass, school_year: SchoolYear
) -> Evaluation:
    """First composition of 6ème A."""
    evaluation = Evaluation(
        class_id=school_class.id,
        school_year_id=school_year.id,
        nom="EVALUATION N°1",
        date=date(2025, 11, 20),
    )
    db.add(evaluation)
    await db.commit()
    return evaluation


async def record_notes(
    db: AsyncSession,
    user: User,
    evaluation: Evaluation,
    subjects: list[Subject],
    grid: list[tuple[Student, tuple[str | None, ...]]],
) -> None:
    """Store one note per subject for each student; None marks an absence."""
    for student, values in grid:
        for subject, value in zip(subjects, values):
            db.add(
                Note(
                    user_id=user.id,
                    student_id=student.id,
                    subject_id=subject.id,
                    evaluation_id=evaluation.id,
                    value=Decimal(value or "0"),
                    is_absent=value is None,
                )
            )
    await db.commit()


def grade_grid(students: list[Student]) -> list[tuple[Student, tuple[str | None, ...]]]:
    """Français and Maths notes of the five students; Yao Paul is absent."""
    konan, kouassi, traore, yao, zadi = students
    return [
        (konan, ("14", "16")),
        (kouassi, ("12", "8")),
        (traore, ("10", "10")),
        (yao, (None, None)),
        (zadi, ("6", "9")),
    ]


def auth_header(token: str) -> dict[str, str]:
    """Create authorization header."""
    return {"Authorization": f"Bearer {token}"}
