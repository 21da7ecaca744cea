# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database connection management using SQLAlchemy async.

One database backs the whole content network: the global catalog, node
registry, node mirrors, distribution jobs, translation requests and
subscriptions.

Uses SQLAlchemy 2.0 async API with the asyncpg driver in production.

Example:
    from src.infrastructure.database.connection import (
        init_database,
        get_session,
    )

    # Initialize at application startup
    await init_database(settings)

    # Use in request handlers
    async with get_session() as session:
        result = await session.execute(select(Node))
        nodes = result.scalars().all()
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.core.exceptions import StorageUnavailableError

if TYPE_CHECKING:
    from src.core.config.settings import Settings

_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the database error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


def build_engine(url: str, pool_size: int = 10, max_overflow: int = 20, echo: bool = False) -> AsyncEngine:
    """Create an async engine suited to the URL's dialect.

    SQLite (used by tests and local runs) gets a single shared connection
    so that in-memory databases survive across sessions.

    Args:
        url: SQLAlchemy async database URL.
        pool_size: Connection pool size for server databases.
        max_overflow: Maximum overflow connections for server databases.
        echo: Whether to log emitted SQL.

    Returns:
        Configured AsyncEngine.
    """
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=1800,
        echo=echo,
    )


async def init_database(settings: "Settings") -> None:
    """Initialize the database connection pool.

    Args:
        settings: Application settings containing database configuration.

    Raises:
        DatabaseError: If connection pool creation fails.
    """
    global _engine, _sessionmaker

    try:
        _engine = build_engine(
            settings.db.url,
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.max_overflow,
            echo=settings.debug and not settings.db.is_sqlite,
        )
        _sessionmaker = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to initialize database connection", e) from e


async def close_database() -> None:
    """Dispose of the connection pool at application shutdown."""
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None


def get_engine() -> AsyncEngine:
    """Get the async engine.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _engine is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the async sessionmaker.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _sessionmaker is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _sessionmaker


def is_sqlite_sessionmaker(sessionmaker: async_sessionmaker[AsyncSession]) -> bool:
    """Whether the sessionmaker is bound to a SQLite engine.

    build_engine() gives SQLite one shared connection, so sessions opened
    from it at the same time would share a single transaction.
    """
    bind = sessionmaker.kw.get("bind")
    if bind is None:
        return False
    return bind.dialect.name == "sqlite"


@asynccontextmanager
async def session_scope(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Open a session that commits on success and rolls back on failure.

    Connection-level failures surface as StorageUnavailableError, any other
    SQLAlchemy failure as DatabaseError. Service exceptions pass through
    unchanged after the rollback.

    Yields:
        AsyncSession for database operations.
    """
    async with sessionmaker() as session:
        try:
            yield session
            await session.commit()
        except (OperationalError, DBAPIError) as e:
            await session.rollback()
            if isinstance(e, OperationalError) or e.connection_invalidated:
                raise StorageUnavailableError("Database is unavailable", e) from e
            raise DatabaseError("Database operation failed", e) from e
        except SQLAlchemyError as e:
            await session.rollback()
            raise DatabaseError("Database operation failed", e) from e
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Get a session from the application sessionmaker.

    Example:
        async with get_session() as session:
            result = await session.execute(select(Node))
    """
    async with session_scope(get_sessionmaker()) as session:
        yield session


async def check_database_connection() -> bool:
    """Check whether the database answers a trivial query."""
    if _engine is None:
        return False

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False


async def create_schema() -> None:
    """Create all tables directly from the ORM metadata.

    Used for SQLite development databases; server databases are migrated
    with Alembic.
    """
    from src.infrastructure.database.models import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
