"""
Pytest configuration and fixtures for testing.
"""
import fnmatch
import os
import pytest
import pytest_asyncio
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.db.session import Base, get_session
from app.db.models.event import Event
from app.db.models.booking import Booking
from app.cache.redis_client import cache


# Test database URL - point at Postgres (postgresql+asyncpg://...) to test the production driver
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///./test_eventhub.db"
)

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,  # Disable connection pooling for tests
    echo=False,
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def make_event_payload(**overrides) -> dict:
    """A complete, valid event payload; override any field per test."""
    payload = {
        "title": "React Summit 2026",
        "description": "The biggest React conference worldwide.",
        "overview": "Two days of talks, workshops and networking.",
        "image": "/images/event1.png",
        "venue": "Amsterdam RAI",
        "location": "Amsterdam, Netherlands",
        "date": "March 18, 2026",
        "time": "9:00 am",
        "mode": "hybrid",
        "audience": "Frontend engineers",
        "agenda": ["Opening", "Keynote", "Workshops"],
        "organizer": "GitNation",
        "tags": ["react", "frontend"],
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database session for each test, on freshly created tables.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    
    async with TestSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
    
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def session_factory(db_session) -> async_sessionmaker:
    """Factory for extra sessions on the same test database (concurrency tests)."""
    return TestSessionLocal


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing API endpoints.
    Overrides the database session dependency.
    """
    async def override_get_session():
        yield db_session
    
    app.dependency_overrides[get_session] = override_get_session
    
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession) -> Event:
    """Create a stored event in canonical form."""
    event = Event(
        title="React Summit 2026",
        slug="react-summit-2026",
        description="The biggest React conference worldwide.",
        overview="Two days of talks, workshops and networking.",
        image="/images/event1.png",
        venue="Amsterdam RAI",
        location="Amsterdam, Netherlands",
        date="2026-03-18",
        time="09:00",
        mode="hybrid",
        audience="Frontend engineers",
        agenda=["Opening", "Keynote"],
        organizer="GitNation",
        tags=["react", "frontend"],
    )
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


@pytest_asyncio.fixture
async def test_booking(db_session: AsyncSession, test_event: Event) -> Booking:
    booking = Booking(event_id=test_event.id, email="attendee@example.com")
    db_session.add(booking)
    await db_session.commit()
    await db_session.refresh(booking)
    return booking


class InMemoryRedis:
    """Stand-in for the redis client used by RedisCache."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, expire, value):
        self.store[key] = value

    async def scan_iter(self, match="*"):
        for key in list(self.store):
            if fnmatch.fnmatch(key, match):
                yield key

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += self.store.pop(key, None) is not None
        return removed

    async def aclose(self):
        pass


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch) -> InMemoryRedis:
    """Route the Redis cache to an in-memory dict for every test."""
    backend = InMemoryRedis()
    monkeypatch.setattr(cache, "_get_client", lambda: backend)
    return backend


@pytest.fixture
def event_payload():
    """Builder for valid event payloads: event_payload(title=..., ...)."""
    return make_event_payload
