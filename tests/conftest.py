"""
Shared test fixtures for the GymPrep API test suite.

Each test gets its own in-memory aiosqlite engine, so state never leaks
between tests and no connection outlives the event loop that opened it.
"""

import os
import sys
from typing import AsyncGenerator
from uuid import uuid4

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REDIS_URL"] = "redis://127.0.0.1:1/0"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.v1.deps import get_db
from app.core.security import create_access_token, get_password_hash
from app.db.base import Base
from app.db.session import enable_sqlite_foreign_keys
from app.main import app
from app.models.center import Center
from app.models.user import Role, User, UserStatus

PASSWORD = "correct-horse-42"


@pytest.fixture(scope="session")
def password() -> str:
    return PASSWORD


@pytest.fixture(scope="session")
def password_hash() -> str:
    """Hash once per session; bcrypt is deliberately slow."""
    return get_password_hash(PASSWORD)


@pytest.fixture(autouse=True)
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh schema per test, wired into the app through ``get_db``."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine.sync_engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield factory

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct setup and queries in tests."""
    async with session_factory() as session:
        yield session


# ── Factories ───────────────────────────────────────────────────────
@pytest.fixture
def make_center(db_session: AsyncSession):
    async def _make(name: str | None = None, **fields) -> Center:
        center = Center(name=name or f"Center {uuid4().hex[:8]}", **fields)
        db_session.add(center)
        await db_session.commit()
        return center

    return _make


@pytest.fixture
def make_user(db_session: AsyncSession, password_hash: str):
    async def _make(
        role: Role = Role.USER,
        status: UserStatus = UserStatus.ACTIVE,
        name: str = "Test Member",
        email: str | None = None,
        center_id: str | None = None,
        favorite_center_id: str | None = None,
    ) -> User:
        user = User(
            email=email or f"{uuid4().hex[:12]}@example.com",
            name=name,
            hashed_password=password_hash,
            role=role,
            status=status,
            center_id=center_id,
            favorite_center_id=favorite_center_id,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers


# ── Common actors ───────────────────────────────────────────────────
@pytest.fixture
async def center(make_center) -> Center:
    return await make_center("Downtown")


@pytest.fixture
async def other_center(make_center) -> Center:
    return await make_center("Uptown")


@pytest.fixture
async def superadmin(make_user) -> User:
    return await make_user(role=Role.SUPERADMIN, name="Super Admin")


@pytest.fixture
async def center_admin(make_user, center: Center) -> User:
    """ADMIN_CENTER administering ``center``."""
    return await make_user(
        role=Role.ADMIN_CENTER, name="Center Admin", favorite_center_id=center.id
    )


@pytest.fixture
async def member(make_user) -> User:
    return await make_user(name="Alice Member")
