import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from typing import AsyncGenerator, Dict
import os
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
import sys

# Add the app directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.main import app
from app.models import Base, AssignmentTemplate  # Import all models
from app.db.database import get_db
from app.core.config import settings

# Use a separate test database
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

# NullPool keeps connections from outliving the event loop of a single test
engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,
    connect_args={"check_same_thread": False}
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

# Override the get_db dependency for testing
async def override_get_db():
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()

@pytest_asyncio.fixture
async def setup_db():
    """Start each database test with empty tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

@pytest_asyncio.fixture
async def db_session(setup_db) -> AsyncGenerator[AsyncSession, None]:
    """Get async database session for tests."""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()

@pytest_asyncio.fixture
async def test_app(setup_db) -> FastAPI:
    """Configure the FastAPI application for testing."""
    settings.TESTING = True
    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()

@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
        follow_redirects=True
    ) as ac:
        yield ac

@pytest.fixture
def user_id() -> str:
    return "7d1b5c2e-0000-4000-8000-interpreter1"

@pytest.fixture
def other_user_id() -> str:
    return "7d1b5c2e-0000-4000-8000-interpreter2"

@pytest.fixture
def assignment_payload(user_id) -> Dict:
    """Minimal valid assignment request."""
    return {
        "user_id": user_id,
        "title": "Weekly clinic",
        "assignment_type": "medical",
        "date": "2025-01-01",
        "time": "10:00",
        "setting": "hospital",
        "location_details": "St. Mary's, 3rd floor"
    }

@pytest_asyncio.fixture
async def make_template(db_session: AsyncSession, user_id: str):
    """Factory for templates stored directly in the database."""
    async def _make(**overrides) -> AssignmentTemplate:
        fields = {
            "user_id": user_id,
            "template_name": "Court hearing",
            "assignment_type": "legal",
            "setting": "courtroom",
            "location_type": "in_person",
            "location_details": "County courthouse",
            "duration_minutes": 90,
            "default_title": None,
            "is_recurring": False,
            "recurrence_pattern": None,
            "is_team_assignment": False,
            "team_size": 1,
            "times_used": 0,
        }
        fields.update(overrides)
        template = AssignmentTemplate(**fields)
        db_session.add(template)
        await db_session.commit()
        await db_session.refresh(template)
        return template
    return _make
