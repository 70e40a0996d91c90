"""
Journal API: Database Session Management
========================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       transaction scope every service operation runs in.
How:   `Database` owns one engine (connection pool) and one session factory.
       It is built in the application lifespan, stored on `app.state`, and
       disposed on shutdown. Each request gets its own AsyncSession through
       the `get_db_session` dependency; services wrap their work in
       `transaction(session)`.

Transaction contract (`transaction`):
    1. The first statement autobegins a transaction on the request's session
    2. On normal exit the transaction is committed
    3. On ANY exception it is rolled back before the exception propagates
    4. SQLAlchemy errors are logged and re-raised as DatabaseError, so the
       client never sees driver messages
    Commit or rollback always completes before the route handler returns,
    so no response is sent for work that has not been finalized.

Connection Pooling (PostgreSQL):
    pool_size=20, max_overflow=10, pool_pre_ping, pool_recycle=3600.
    SQLite (tests) uses the dialect's default pool and enables foreign keys
    on every new connection so ON DELETE CASCADE behaves as in Postgres.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from journal_api.config import Settings
from journal_api.exceptions import DatabaseError, JournalError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, used by Alembic autogenerate and by the
    database reset command.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores FOREIGN KEY clauses unless this pragma is set per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(database_url: str, **engine_kwargs: Any) -> AsyncEngine:
    """
    Create an async engine for `database_url`.

    Pool arguments are only passed for server databases; SQLite picks its
    own pool class and gets the foreign-key pragma listener instead.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        engine = create_async_engine(database_url, **engine_kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_async_engine(database_url, **engine_kwargs)


class Database:
    """
    Owns the engine and session factory for one running application.

    expire_on_commit=False: entities stay readable after commit, so services
    can build response models once the transaction is finalized.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        kwargs: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
        if make_url(settings.database_url).get_backend_name() != "sqlite":
            kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(create_engine(settings.database_url, **kwargs))

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def health_check(self) -> bool:
        """SELECT 1 against the pool; False on any failure."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database health check failed: %s", e)
            return False

    async def dispose(self) -> None:
        """Close every pooled connection. Called on application shutdown."""
        await self.engine.dispose()


@asynccontextmanager
async def open_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a session that is always closed, rolling back anything left open.

    Used by the `get_db_session` dependency; the services decide when to
    commit through `transaction`.
    """
    session = database.session_factory()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Atomic unit of work: commit on success, roll back on any failure.

    Domain errors (JournalError) propagate unchanged after the rollback.
    Storage errors are logged with their class name and re-raised as
    DatabaseError.
    """
    try:
        yield session
        await session.commit()
    except JournalError as e:
        await session.rollback()
        logger.debug("Transaction rolled back: %s", type(e).__name__)
        raise
    except IntegrityError as e:
        await session.rollback()
        logger.error("DB integrity error: %s", e)
        raise DatabaseError(context={"operation": "commit", "error": type(e).__name__}) from e
    except OperationalError as e:
        await session.rollback()
        logger.error("DB operational error: %s", e)
        raise DatabaseError(context={"operation": "execute", "error": type(e).__name__}) from e
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("SQLAlchemy error: %s", e)
        raise DatabaseError(context={"operation": "unknown", "error": type(e).__name__}) from e
    except BaseException:
        await session.rollback()
        raise
