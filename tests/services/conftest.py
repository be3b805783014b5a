"""Service test fixtures — async DB, controllable block time, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - get_block_time overridden by a clock the test can advance
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (row locking and u64 times above the signed range are not exercised here)
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from rwa_market.api.dependencies import get_block_time
from rwa_market.core.domain_types import Timestamp
from rwa_market.db.base import Base
from rwa_market.infrastructure.address_validation import CanonicalAddressValidator
from rwa_market.infrastructure.database import get_db, DatabaseSessionManager
import rwa_market.infrastructure.database as db_module
import rwa_market.models  # noqa: F401
from rwa_market.main import app
from rwa_market.services.market_service import MarketService


class Clock:
    """Mutable block time for tests."""

    def __init__(self, now: int = 1_000):
        self.now = now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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
def clock():
    return Clock()


@pytest.fixture
def service(test_db):
    """MarketService bound to the test session."""
    return MarketService(test_db, CanonicalAddressValidator())


@pytest.fixture
async def client(test_engine, test_session_factory, clock):
    """FastAPI test client with DB and block-time dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_block_time] = lambda: Timestamp(clock.now)

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def market(client):
    """Instantiated market owned by `owner` with a 2% fee."""
    res = await client.post(
        "/api/v1/market/instantiate", json={"sender": "owner", "fee": "0.02"},
    )
    assert res.status_code == 201
    return client
