from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tareas_api.database import get_db
from tareas_api.dependencies import get_current_user
from tareas_api.main import app
from tareas_api.models import Base
from tareas_api.models.user import User
from tareas_api.services.auth_service import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret123"


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    user = User(email="test@example.com", password_hash=hash_password(TEST_PASSWORD))
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def second_user(db_session: AsyncSession) -> User:
    user = User(email="other@example.com", password_hash=hash_password(TEST_PASSWORD))
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def _override_get_db(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override_get_db


@pytest.fixture
async def anon_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Client that goes through the real bearer token check."""
    app.dependency_overrides[get_db] = _override_get_db(session_factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def client(session_factory, test_user: User) -> AsyncGenerator[AsyncClient, None]:
    """Client already authenticated as ``test_user``."""

    async def override_get_current_user():
        return test_user

    app.dependency_overrides[get_db] = _override_get_db(session_factory)
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def app_db_client(session_factory, test_user: User, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated client using the app's own ``get_db`` transaction.

    Server errors come back as responses instead of being re-raised.
    """

    async def override_get_current_user():
        return test_user

    monkeypatch.setattr(app.state, "session_factory", session_factory, raising=False)
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
