"""Database Sessions — SQLAlchemy error mapping and rollback."""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from rwa_market.core.errors import DatabaseError, InvalidBuyerError
from rwa_market.infrastructure.database import (
    DatabaseSessionManager, to_database_error,
)


def test_error_map_prefers_specific_types():
    integrity = IntegrityError("INSERT", {}, Exception("dup"))
    operational = OperationalError("SELECT", {}, Exception("down"))
    assert to_database_error(integrity).operation == "commit"
    assert to_database_error(operational).operation == "execute"
    assert to_database_error(SQLAlchemyError("x")).operation == "unknown"


async def test_session_maps_sqlalchemy_errors():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    with pytest.raises(DatabaseError) as exc:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM missing_table"))
    assert exc.value.http_status == 503
    await manager.dispose()


async def test_session_passes_market_errors_through():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    with pytest.raises(InvalidBuyerError):
        async with manager.session():
            raise InvalidBuyerError()
    await manager.dispose()


async def test_health_check():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    assert await manager.health_check() is True
    await manager.dispose()
