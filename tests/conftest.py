import os
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from budgetapp.db.session import enable_sqlite_foreign_keys, get_db
from budgetapp.main import app

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")

# One shared in-memory connection so every session sees the same tables.
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(test_engine)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def setup_database():
    """Create tables for tests that need the database, and drop them after.

    Not autouse, so pure unit tests run without touching the database.
    """
    from budgetapp.models import Base

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db_session(setup_database):
    """Provide test database session with fresh connection per test."""
    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


async def _make_user(db_session: AsyncSession, email: str, salary: Decimal):
    from budgetapp.core.security import hash_password
    from budgetapp.models.user import User
    from budgetapp.repositories.user import UserRepository

    user = User(
        email=email,
        password_hash=hash_password("password123"),
        name="Test User",
        salary=salary,
    )
    return await UserRepository(db_session).create(user)


@pytest.fixture
async def test_user(db_session: AsyncSession):
    """User with a ₹50,000 monthly salary."""
    return await _make_user(db_session, "testuser@example.com", Decimal("50000"))


@pytest.fixture
async def other_user(db_session: AsyncSession):
    """Second user for ownership checks."""
    return await _make_user(db_session, "other@example.com", Decimal("30000"))


@pytest.fixture
async def auth_headers(test_user):
    """Provide authentication headers with valid JWT token."""
    from budgetapp.core.security import create_access_token

    token = create_access_token(user_id=test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def other_auth_headers(other_user):
    from budgetapp.core.security import create_access_token

    token = create_access_token(user_id=other_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(db_session: AsyncSession):
    """Provide test client with database override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
