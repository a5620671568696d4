"""Shared fixtures: in-memory databases, seeded catalog rows, and an API client."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from kiescompass.db.connection import get_db
from kiescompass.db.models import Base, User, Vkm
from kiescompass.services.security import create_access_token
from tests.kiescompass.support.factories import DEFAULT_PASSWORD, new_user, vkm_values

VkmFactory = Callable[..., Awaitable[Vkm]]
UserFactory = Callable[..., Awaitable[User]]


@pytest_asyncio.fixture
async def session() -> AsyncIterator[AsyncSession]:
    """Provide an in-memory SQLite session for integration-style tests."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async_session = async_sessionmaker(engine, expire_on_commit=False)
    async with async_session() as db_session:
        yield db_session
        if db_session.in_transaction():
            await db_session.rollback()
    await engine.dispose()


@pytest.fixture
def make_vkm(session: AsyncSession) -> VkmFactory:
    """Insert catalog rows directly, bypassing the repository defaults."""

    async def _make(**overrides: Any) -> Vkm:
        entry = Vkm(**vkm_values(**overrides))
        session.add(entry)
        await session.flush()
        return entry

    return _make


@pytest.fixture
def make_user(session: AsyncSession) -> UserFactory:
    async def _make(
        username: str = "student1",
        *,
        role: str = "student",
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        user = new_user(username, role=role, password=password)
        session.add(user)
        await session.flush()
        return user

    return _make


# -- API -------------------------------------------------------------------


@pytest_asyncio.fixture
async def api_session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Session factory over one shared in-memory connection for API tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def api_client(
    api_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Create an ``AsyncClient`` whose requests hit the in-memory database."""
    from kiescompass.main import app

    async def _override_get_db() -> AsyncIterator[AsyncSession]:
        async with api_session_factory() as db_session:
            try:
                yield db_session
                await db_session.commit()
            except Exception:
                await db_session.rollback()
                raise

    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def seed(
    api_session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[Any]]:
    """Persist ORM objects through a committed session and return them."""

    async def _seed(*objects: Any) -> Any:
        async with api_session_factory() as db_session:
            db_session.add_all(objects)
            await db_session.commit()
        return objects[0] if len(objects) == 1 else objects

    return _seed


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
