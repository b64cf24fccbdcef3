"""
Database connection and session management.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from solde.infrastructure.persistence.models import Base


class Database:
    """
    Async SQLite connection manager using SQLAlchemy.

    Provides session factory and connection pooling so the on-demand
    fetch and the periodic loop can use the store concurrently.
    No global state, owned by the DI container.
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        busy_timeout: float = 5.0,
    ):
        """
        Initialize database connection.

        Args:
            database_url: SQLAlchemy URL (sqlite+aiosqlite:///path/to/file.db)
            echo: Enable SQL query logging
            busy_timeout: Seconds SQLite waits on a locked database
        """
        self.database_url = database_url
        self.echo = echo
        self.busy_timeout = busy_timeout
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Connected engine."""
        if self._engine is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._engine

    @property
    def is_connected(self) -> bool:
        """Check if engine has been created."""
        return self._engine is not None

    async def connect(self) -> None:
        """Create engine and session factory (creates DB directory if needed)."""
        if self._engine is not None:
            return

        database = make_url(self.database_url).database
        if database and database != ":memory:":
            Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_async_engine(
            self.database_url,
            echo=self.echo,
            connect_args={"timeout": self.busy_timeout},
        )

        @event.listens_for(self._engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def disconnect(self) -> None:
        """Close database connection and cleanup resources."""
        if self._engine is None:
            return

        await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide async database session context manager.

        Automatically commits on success, rolls back on exception.

        Usage:
            async with database.session() as session:
                result = await session.execute(query)

        Yields:
            AsyncSession: Database session with transaction management
        """
        if self._session_factory is None:
            raise RuntimeError("Database not connected. Call connect() first.")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """
        Check database connectivity.

        Returns:
            True if connection is healthy, False otherwise
        """
        if self._engine is None:
            return False

        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception:
            return False
