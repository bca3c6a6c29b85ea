"""
Pytest fixtures for test database, client, and authentication.

Each test gets its own SQLite file, so tests are isolated without a running
database server. Requests get a fresh session per call, committed or rolled
back the same way the production dependency does it, which keeps
transaction boundaries realistic for the admission tests.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./eventdesk-test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("MASTER_KEY", "master-key-for-tests")
os.environ.setdefault("SECRET_KEY", "test-access-secret-key-0123456789abcdef")
os.environ.setdefault("REFRESH_SECRET_KEY", "test-refresh-secret-key-0123456789abcdef")

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from eventdesk.main import app
from eventdesk.db.base import Base
from eventdesk.db.session import build_engine, get_db
from eventdesk.core.security import create_access_token, hash_password
from eventdesk.infrastructure.media_storage import LocalMediaStorage
from eventdesk.models.admin import Admin, AdminRole
from eventdesk.models.event import Event
from eventdesk.models.registration import Registration
from eventdesk.services.storage_factory import get_media_storage

ADMIN_PASSWORD = "Passw0rd!"


@pytest_asyncio.fixture(scope="function")
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Create tables in a fresh database file and yield a session factory for it."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and checking state directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def media_storage(tmp_path) -> LocalMediaStorage:
    return LocalMediaStorage(root=str(tmp_path / "media"))


@pytest_asyncio.fixture(scope="function")
async def client(session_factory, media_storage) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the DB and media dependencies pointed at the test fixtures."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_storage] = lambda: media_storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_admin(
    db: AsyncSession,
    username: str,
    role: AdminRole = AdminRole.ADMIN,
    password: str = ADMIN_PASSWORD,
) -> Admin:
    admin = Admin(username=username, hashed_password=hash_password(password), role=role)
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin


async def create_event(db: AsyncSession, owner: Admin, days: int = 1, **overrides) -> Event:
    fields = {
        "name": "Test Conference",
        "date": datetime.now(timezone.utc) + timedelta(days=days),
        "venue": "Main Hall",
        "description": "A test event",
        "capacity": 100,
        "registrations": 0,
        "owner_id": owner.id,
    }
    fields.update(overrides)
    event = Event(**fields)
    db.add(event)
    await db.commit()
    await db.refresh(event)
    return event


def bearer(admin: Admin) -> dict:
    token = create_access_token(admin.id, admin.username, admin.role.value)
    return {"Authorization": f"Bearer {token}"}


def attendee_payload(event_id: int, n: int = 1, **overrides) -> dict:
    payload = {
        "firstName": "Ada",
        "lastName": f"Lovelace{n}",
        "email": f"ada{n}@example.com",
        "phone": f"+1555000{n:04d}",
        "company": "Analytical Engines",
        "eventId": event_id,
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> Admin:
    return await create_admin(db_session, "alice")


@pytest_asyncio.fixture
async def other_admin(db_session: AsyncSession) -> Admin:
    return await create_admin(db_session, "bobby")


@pytest_asyncio.fixture
async def superadmin(db_session: AsyncSession) -> Admin:
    return await create_admin(db_session, "root", role=AdminRole.SUPERADMIN)


@pytest.fixture
def auth_headers(test_admin: Admin) -> dict:
    return bearer(test_admin)


@pytest.fixture
def other_headers(other_admin: Admin) -> dict:
    return bearer(other_admin)


@pytest.fixture
def super_headers(superadmin: Admin) -> dict:
    return bearer(superadmin)


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, test_admin: Admin) -> Event:
    """Event tomorrow with 100 slots, owned by test_admin."""
    return await create_event(db_session, test_admin)


@pytest_asyncio.fixture
async def small_event(db_session: AsyncSession, test_admin: Admin) -> Event:
    """Event tomorrow with 2 slots."""
    return await create_event(db_session, test_admin, name="Workshop", capacity=2)


@pytest_asyncio.fixture
async def full_event(db_session: AsyncSession, test_admin: Admin) -> Event:
    return await create_event(db_session, test_admin, name="Sold Out", capacity=5, registrations=5)


@pytest_asyncio.fixture
async def past_event(db_session: AsyncSession, test_admin: Admin) -> Event:
    return await create_event(db_session, test_admin, days=-2, name="Last Week")


@pytest_asyncio.fixture
async def other_event(db_session: AsyncSession, other_admin: Admin) -> Event:
    return await create_event(db_session, other_admin, name="Someone Else's Meetup")


@pytest_asyncio.fixture
async def registration(db_session: AsyncSession, test_event: Event) -> Registration:
    """One attendee already registered for test_event, counter kept in step."""
    reg = Registration(
        first_name="Grace",
        last_name="Hopper",
        email="grace@example.com",
        phone="+15559990000",
        company="Navy",
        event_id=test_event.id,
    )
    db_session.add(reg)
    test_event.registrations = 1
    await db_session.commit()
    await db_session.refresh(reg)
    return reg
