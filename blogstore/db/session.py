from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional
import logging

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from blogstore.config import Settings, get_settings
from blogstore.db.migrations import auto_migrate
from blogstore.db.tracing import install_query_tracing
from blogstore.exceptions import ConnectionFailureError

logger = logging.getLogger(__name__)

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

class Database:
    """Store handle: one engine and session factory, built once and passed around"""

    def __init__(self, settings: Optional[Settings] = None, url: Optional[str] = None):
        self.settings = settings or get_settings()
        self.url = url or self.settings.database_url
        self.engine = self._create_engine()

        install_query_tracing(
            self.engine,
            log_statements=self.settings.LOG_SQL,
            slow_threshold=self.settings.SLOW_QUERY_THRESHOLD,
        )
        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def _create_engine(self):
        if self.is_sqlite:
            in_memory = ":memory:" in self.url or self.url in ("sqlite://", "sqlite+aiosqlite://")
            kwargs = {"connect_args": {"check_same_thread": False}}
            if in_memory:
                # Every session must see the same in-memory database
                kwargs["poolclass"] = StaticPool
            return create_async_engine(self.url, echo=self.settings.DEBUG, **kwargs)

        connect_args = {}
        if self.url.startswith("postgresql+asyncpg"):
            connect_args["server_settings"] = {"timezone": self.settings.DATABASE_TIMEZONE}
        return create_async_engine(
            self.url,
            echo=self.settings.DEBUG,
            pool_size=self.settings.DATABASE_POOL_SIZE,
            max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
            pool_pre_ping=True,
            connect_args=connect_args,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session; uncommitted work is rolled back on error"""
        async with self.sessionmaker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                logger.error(f"Database session error: {e}")
                raise

    async def check_connection(self) -> bool:
        """Return True when the store answers a trivial query"""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database connection failed: {e}")
            return False
        logger.info("Database connection successful")
        return True

    async def init_db(self) -> List[str]:
        """Connect and bring the schema up to date; returns the applied changes"""
        from blogstore.models import Base
        try:
            async with self.engine.begin() as conn:
                applied = await conn.run_sync(auto_migrate, Base.metadata)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error initializing database: {e}")
            raise ConnectionFailureError(f"Could not initialize database schema: {e}") from e
        logger.info("Database initialized successfully")
        return applied

    async def drop_all(self) -> None:
        """Drop every table (tests and resets only)"""
        from blogstore.models import Base
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped")

    async def close(self) -> None:
        """Close database connections"""
        await self.engine.dispose()
        logger.info("Database connections closed")
