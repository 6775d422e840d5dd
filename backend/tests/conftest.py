"""Shared pytest fixtures configured to use SQLite in-memory for tests."""

import logging
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.mdnotes.config import GuestAccess, Settings, get_settings
from src.mdnotes.core.models import BaseModel, Group, User
from src.mdnotes.core.repositories import GroupRepository
from src.mdnotes.database import get_db_session
from src.mdnotes.main import app
from src.mdnotes.security.jwt import create_access_token

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@pytest.fixture
def test_settings():
    """Settings for tests using SQLite in-memory DB."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        debug=True,
        guest_access=GuestAccess.WRITE,
        max_document_length=1000,
    )


@pytest.fixture
async def test_engine(test_settings):
    """SQLite in-memory engine shared by the session and the app."""
    engine = create_async_engine(
        test_settings.database_url,
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _configure_sqlite(dbapi_connection, connection_record):  # noqa: ANN001
        # let SQLAlchemy emit BEGIN itself so SAVEPOINT works
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):  # noqa: ANN001
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    """Clean database session per test."""
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
async def special_groups(test_session):
    everyone, logged_in = await GroupRepository(test_session).ensure_special_groups()
    return {"everyone": everyone, "loggedIn": logged_in}


@pytest.fixture
async def team_group(test_session):
    group = Group(name="team", display_name="Team", special=False)
    test_session.add(group)
    await test_session.commit()
    return group


async def _make_user(session, username, groups=None):
    user = User(
        username=username,
        display_name=username.capitalize(),
        email=f"{username}@example.com",
        groups=list(groups or []),
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
async def alice(test_session, special_groups):
    return await _make_user(test_session, "alice")


@pytest.fixture
async def bob(test_session, special_groups, team_group):
    """Member of the ``team`` group."""
    return await _make_user(test_session, "bob", groups=[team_group])


@pytest.fixture
async def carol(test_session, special_groups):
    return await _make_user(test_session, "carol")


def bearer(user) -> dict:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_headers(alice):
    return bearer(alice)


@pytest.fixture
def bob_headers(bob):
    return bearer(bob)


@pytest.fixture
def carol_headers(carol):
    return bearer(carol)


@pytest.fixture
def test_app(test_session, test_settings):
    """FastAPI app with overridden dependencies."""

    async def _override_get_db():
        yield test_session

    app.dependency_overrides[get_db_session] = _override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    """Async test client; lifespan is not run."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def markdown():
    return {"Content-Type": "text/markdown"}


@pytest.fixture
def unique_alias():
    return f"note-{uuid4().hex[:8]}"
