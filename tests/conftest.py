"""
Shared test fixtures and configuration for Employee Portal tests.
"""
import os
from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "true"
os.environ.pop("REDIS_URL", None)

TEST_USER_EMAIL = "admin@company.com"
TEST_USER_PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test, shared across sessions via StaticPool."""
    from employee_portal.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the real app with get_db pointed at the test database."""
    from employee_portal.main import app
    from employee_portal.api.deps import get_db
    from employee_portal.core.rate_limiter import limiter

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    limiter.reset()


@pytest.fixture
def credentials() -> dict:
    return {"email": TEST_USER_EMAIL, "password": TEST_USER_PASSWORD}


@pytest_asyncio.fixture
async def seeded_user(db_session):
    """The login account."""
    from employee_portal.db.seed import seed_user

    return await seed_user(
        db_session,
        name="Admin User",
        email=TEST_USER_EMAIL,
        password=TEST_USER_PASSWORD,
    )


@pytest_asyncio.fixture
async def auth_token(client, seeded_user) -> str:
    response = await client.post(
        "/api/login",
        json={"email": TEST_USER_EMAIL, "password": TEST_USER_PASSWORD},
    )
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth_headers(auth_token) -> dict:
    return {"Authorization": f"Bearer {auth_token}"}


@pytest_asyncio.fixture
async def seeded_employees(db_session):
    """The fifteen sample employees."""
    from employee_portal.db.seed import seed_employees
    from employee_portal.models.employee import Employee
    from sqlalchemy import select

    await seed_employees(db_session)
    result = await db_session.execute(select(Employee).order_by(Employee.id))
    return list(result.scalars().all())


@pytest.fixture
def valid_employee_payload():
    """A payload that passes every rule."""
    return {
        "name": "Alice Johnson",
        "email": "alice@x.com",
        "position": "Software Engineer",
        "salary": 85000,
        "status": "active",
    }


@pytest.fixture
def mock_db_session():
    """Create a mock async database session."""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def mock_request():
    """Create a mock FastAPI request."""
    request = MagicMock()
    request.url.path = "/api/employees"
    request.method = "GET"
    request.headers = {}
    request.client.host = "127.0.0.1"
    return request


@pytest.fixture
def mock_employee_repository():
    """Repository double for service tests that don't need a database."""
    repository = MagicMock()
    repository.list = AsyncMock(return_value=[])
    repository.get = AsyncMock(return_value=None)
    repository.email_taken = AsyncMock(return_value=False)
    repository.create = AsyncMock()
    repository.update = AsyncMock()
    repository.delete = AsyncMock()
    return repository


@pytest.fixture
def make_employee():
    """Factory for unsaved Employee objects with sensible defaults."""
    from employee_portal.models.employee import Employee

    def _make(**overrides):
        values = {
            "id": 3,
            "name": "Carol White",
            "email": "carol.white@company.com",
            "position": "UX Designer",
            "salary": Decimal("75000.00"),
            "status": "active",
        }
        values.update(overrides)
        return Employee(**values)

    return _make
