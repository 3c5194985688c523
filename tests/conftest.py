"""
Hostel portal messaging - test configuration and fixtures
"""
import os
from typing import AsyncGenerator, Callable, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set testing environment before the settings module is imported
os.environ["ENVIRONMENT"] = "test"
os.environ["JSON_LOGS"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-for-testing"

from api.main import app  # noqa: E402
from api.shared.db import get_db_session  # noqa: E402
from api.shared.entities.registry import BaseEntity  # noqa: E402
from api.features.users.entities.user import Role, User  # noqa: E402
from core.security import create_access_token  # noqa: E402


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(BaseEntity.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(BaseEntity.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Test client; every request gets its own session, like production."""

    async def override_get_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable:
    async def _make_user(name: str, email: str, role: Role) -> User:
        user = User(name=name, email=email, role=role)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def admin_user(make_user) -> User:
    return await make_user("Asha Warden", "warden@hostel.test", Role.ADMIN)


@pytest.fixture
async def staff_user(make_user) -> User:
    return await make_user("Ravi Desk", "desk@hostel.test", Role.STAFF)


@pytest.fixture
async def student_a(make_user) -> User:
    return await make_user("Alice Student", "alice@hostel.test", Role.STUDENT)


@pytest.fixture
async def student_b(make_user) -> User:
    return await make_user("Bob Student", "bob@hostel.test", Role.STUDENT)


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """Generate authentication headers for a user."""

    def _headers(user: User) -> Dict[str, str]:
        token = create_access_token({"sub": user.id, "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers
