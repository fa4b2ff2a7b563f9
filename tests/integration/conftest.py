"""Integration test fixtures for database operations.

Every test gets its own SQLite database file. Seeding and service calls use
separate sessions so a service rollback never expires seeded objects.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.capstone.core.db import create_schema, get_session
from src.capstone.models import Role, User
from src.capstone.services import factory
from tests.helpers import create_user


@pytest.fixture(scope="function")
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create a file-backed SQLite engine with the full schema."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'capstone.db'}", poolclass=NullPool)
    await create_schema(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session for seeding test data.

    Helpers commit explicitly; nothing here is rolled back by the services.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def service_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session handed to the services under test."""
    async with get_session(engine) as session:
        yield session


# --- Services ---


@pytest.fixture
def team_service(service_session: AsyncSession):
    return factory.get_team_service(service_session)


@pytest.fixture
def invitation_service(service_session: AsyncSession):
    return factory.get_invitation_service(service_session)


@pytest.fixture
def professor_service(service_session: AsyncSession):
    return factory.get_professor_assignment_service(service_session)


@pytest.fixture
def assignment_service(service_session: AsyncSession):
    return factory.get_assignment_service(service_session)


@pytest.fixture
def review_service(service_session: AsyncSession):
    return factory.get_review_service(service_session)


@pytest.fixture
def notification_service(service_session: AsyncSession):
    return factory.get_notification_service(service_session)


@pytest.fixture
def directory(service_session: AsyncSession):
    return factory.get_directory(service_session)


# --- Users ---


@pytest.fixture
async def student(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.STUDENT.value, full_name="Student One")


@pytest.fixture
async def student2(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.STUDENT.value, full_name="Student Two")


@pytest.fixture
async def student3(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.STUDENT.value, full_name="Student Three")


@pytest.fixture
async def professor(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.PROFESSOR.value, full_name="Prof. Plum")


@pytest.fixture
async def professor2(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.PROFESSOR.value, full_name="Prof. Peacock")


@pytest.fixture
async def admin(db_session: AsyncSession) -> User:
    return await create_user(db_session, Role.ADMIN.value, full_name="Admin")
