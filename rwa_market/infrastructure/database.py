"""Database Sessions — async engine, per-request sessions and error mapping.

Invariants:
    - A session that exits with an exception is rolled back before it closes,
      so a rejected market operation never leaves a partial diff or outbox row
    - SQLAlchemy exceptions leave this module only as DatabaseError
    - Market errors raised inside a session pass through unchanged
    - Pool sizing applies to server databases only (SQLite has no sized pool)

Design Decisions:
    - db_manager is a module singleton created by init_db() in the app lifespan
    - expire_on_commit=False: rows stay readable after the service commits
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from rwa_market.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_ERROR_MAP: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def to_database_error(exc: SQLAlchemyError) -> DatabaseError:
    for exc_type, message, operation in _ERROR_MAP:
        if isinstance(exc, exc_type):
            return DatabaseError(message, operation)
    return DatabaseError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the engine of the market database and hands out sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = to_database_error(e)
            logger.error(
                f"DB {error.operation} error: {e}",
                extra={"error_code": error.code},
            )
            raise error from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when the database answers a trivial query."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
