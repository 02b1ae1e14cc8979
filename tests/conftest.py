"""
Shared fixtures for the test suite.

Every test gets a fresh in-memory SQLite database, an httpx client bound to
the application, and helpers to create stations, users and signed-in
sessions.
"""

import os
import tempfile

# Settings are read at import time, so the environment must be ready first
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DRAFT_STORE_BACKEND"] = "memory"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="obsdesk-logs-")
os.environ["SECRET_KEY"] = "test-secret-key"

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from obsdesk.core.security import create_access_token, generate_session_token
from obsdesk.crud.station import station as station_crud
from obsdesk.crud.user import user as user_crud
from obsdesk.database import Base, get_db
from obsdesk.main import app
from obsdesk.models.user import UserRole, UserSession
from obsdesk.schemas.station import StationCreate
from obsdesk.schemas.users import UserCreate
from obsdesk.services.draft_store import FormDraftStore, MemoryDraftBackend

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
PASSWORD = "observer-pass-123"


@pytest_asyncio.fixture
async def test_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    """Database session for setting up and inspecting data."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client for the app, with get_db pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.state.draft_store = FormDraftStore(backend=MemoryDraftBackend(), expiry_hours=24)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def station(db):
    return await station_crud.create(
        db,
        obj_in=StationCreate(
            name="Dhaka",
            station_code="41923",
            security_code="DHK-1234",
            latitude=23.778,
            longitude=90.379,
        ),
    )


@pytest_asyncio.fixture
async def other_station(db):
    return await station_crud.create(
        db,
        obj_in=StationCreate(
            name="Sylhet",
            station_code="41891",
            security_code="SYL-5678",
            latitude=24.9,
            longitude=91.883,
        ),
    )


async def make_user(db, email, role, station_id=None, password=PASSWORD):
    return await user_crud.create(
        db,
        obj_in=UserCreate(
            email=email,
            name=email.split("@")[0].replace(".", " ").title(),
            password=password,
            role=role,
            station_id=station_id,
        ),
    )


async def make_headers(db, user_obj) -> dict:
    """Open a session for ``user_obj`` directly and return its auth header."""
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=15)
    stored = UserSession(user_id=user_obj.id, token=generate_session_token(), expires_at=expires_at)
    db.add(stored)
    await db.commit()
    token = create_access_token(str(user_obj.id), stored.token, expires_at)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def super_admin(db):
    return await make_user(db, "root@obsdesk.org", UserRole.SUPER_ADMIN)


@pytest_asyncio.fixture
async def station_admin(db, station):
    return await make_user(db, "station.admin@obsdesk.org", UserRole.STATION_ADMIN, station.id)


@pytest_asyncio.fixture
async def observer(db, station):
    return await make_user(db, "observer@obsdesk.org", UserRole.OBSERVER, station.id)


@pytest_asyncio.fixture
async def other_observer(db, other_station):
    return await make_user(db, "other.observer@obsdesk.org", UserRole.OBSERVER, other_station.id)


@pytest_asyncio.fixture
async def super_admin_headers(db, super_admin):
    return await make_headers(db, super_admin)


@pytest_asyncio.fixture
async def station_admin_headers(db, station_admin):
    return await make_headers(db, station_admin)


@pytest_asyncio.fixture
async def observer_headers(db, observer):
    return await make_headers(db, observer)


@pytest_asyncio.fixture
async def other_observer_headers(db, other_observer):
    return await make_headers(db, other_observer)
