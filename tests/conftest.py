"""Root conftest - shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - The clock is deterministic: each call advances one minute from 2024-01-10 UTC

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the guarded UPDATE and the
      unique donation_id constraint behave the same as on PostgreSQL
    - DatabaseSessionManager built via __new__ so tests reuse its error mapping
      without creating a pooled engine
"""

import os

# Ensure tests never reach a real database
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)

from datetime import datetime, timedelta, timezone  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)

import foodloop.models  # noqa: E402,F401
from foodloop.config import Settings  # noqa: E402
from foodloop.core.domain_types import Actor, UserId, UserRole  # noqa: E402
from foodloop.db.base import Base  # noqa: E402
from foodloop.infrastructure.data_store import SqlDataStore  # noqa: E402
from foodloop.infrastructure.database import DatabaseSessionManager  # noqa: E402


class TickingClock:
    """Returns a strictly increasing UTC time on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current += self.step
        return now


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
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
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
def test_db_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
def store(test_db_manager):
    return SqlDataStore(test_db_manager)


@pytest.fixture
def settings():
    return Settings(database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
def clock():
    return TickingClock(datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc))


# ─── Actors ──────────────────────────────────────────────────────

def _actor(role: UserRole) -> Actor:
    return Actor(user_id=UserId(uuid4()), role=role)


@pytest.fixture
def donor():
    return _actor(UserRole.FOOD_DONOR)


@pytest.fixture
def other_donor():
    return _actor(UserRole.FOOD_DONOR)


@pytest.fixture
def recipient():
    return _actor(UserRole.RECIPIENT_ORG)


@pytest.fixture
def other_recipient():
    return _actor(UserRole.RECIPIENT_ORG)


@pytest.fixture
def analyst():
    return _actor(UserRole.DATA_ANALYST)


@pytest.fixture
def admin():
    return _actor(UserRole.ADMIN)


@pytest.fixture
def listing_attrs():
    return {
        "title": "Leftover catering trays",
        "description": "Roasted vegetables and rice",
        "food_type": "prepared",
        "quantity": 10,
        "unit": "kg",
        "pickup_location": "12 Market St, loading dock",
    }
