"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - get_clock overridden with a FakeClock so offer windows can be crossed

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - db_manager patched: the readiness probe uses db_manager directly
"""

from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import admissions.infrastructure.database as db_module
from admissions.api.dependencies import get_clock
from admissions.db.base import Base
from admissions.infrastructure.database import DatabaseSessionManager, get_db
from admissions.main import app
from admissions.models.admission_rating import AdmissionRating
from admissions.models.student import Student
from tests.services.fakes import BASE_TIME, FakeClock


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def client(test_engine, test_session_factory, clock):
    """FastAPI test client with DB and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def seed_student(test_db):
    """Factory: insert a Student; `minutes` offsets created_at from BASE_TIME."""
    async def _seed(
        username: str,
        track: str = "BEGINNER",
        minutes: int = 0,
        status: str = "PENDING",
        offer_date: datetime | None = None,
    ) -> Student:
        student = Student(
            username=username,
            given_name=username.title(),
            track=track,
            status=status,
            offer_date=offer_date,
            created_at=BASE_TIME + timedelta(minutes=minutes),
        )
        test_db.add(student)
        await test_db.commit()
        return student
    return _seed


@pytest.fixture
def seed_rating(test_db):
    async def _seed(student: Student, reviewer: str, rating: int) -> AdmissionRating:
        row = AdmissionRating(student_id=student.id, rated_by=reviewer, rating=rating)
        test_db.add(row)
        await test_db.commit()
        return row
    return _seed
