"""Root conftest — environment, async DB and FastAPI test client.

Invariants:
    - Environment is set before vidshare.main is imported (settings are cached)
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB through DatabaseSessionManager,
      so route tests see the same error mapping as production

Design Decisions:
    - SQLite in-memory with StaticPool: all sessions share one connection, so data
      committed by a route is visible to the test session
    - bcrypt work factor lowered to 4 to keep credential tests fast
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("COOKIE_SECURE", "false")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

import vidshare.infrastructure.database as db_module
from vidshare.api.auth_gate import get_password_hasher, get_token_signer
from vidshare.config import get_settings
from vidshare.db.base import Base
from vidshare.infrastructure.database import DatabaseSessionManager, get_db
from vidshare.main import app
from vidshare.models.user import User
from vidshare.models.video import Video


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
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
def fake_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def client(fake_manager):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with fake_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    # The readiness check reads db_manager directly
    original_manager = db_module.db_manager
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def hasher():
    return get_password_hasher(get_settings())


@pytest.fixture
def signer():
    return get_token_signer(get_settings())


@pytest.fixture
def make_user(test_db, hasher):
    """Insert a user directly. Password is always 'secret-pass'."""
    async def _make(username: str, full_name: str | None = None) -> User:
        user = User(
            username=username,
            email=f"{username}@vidshare.io",
            full_name=full_name or username.title(),
            password_hash=hasher.hash("secret-pass"),
        )
        test_db.add(user)
        await test_db.commit()
        return user
    return _make


@pytest.fixture
def make_video(test_db):
    async def _make(owner: User, title: str = "Launch day", **fields) -> Video:
        video = Video(
            owner_id=owner.id,
            title=title,
            video_url=f"https://cdn.vidshare.io/{title.replace(' ', '-')}.mp4",
            **fields,
        )
        test_db.add(video)
        await test_db.commit()
        return video
    return _make


@pytest.fixture
async def alice(make_user):
    return await make_user("alice")


@pytest.fixture
async def bob(make_user):
    return await make_user("bob")


@pytest.fixture
async def alice_video(make_video, alice):
    return await make_video(alice, "Alice vlog")


@pytest.fixture
def auth_headers(signer):
    """Bearer header carrying a fresh access token for the given user."""
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {signer.sign_access(user.id)}"}
    return _headers
