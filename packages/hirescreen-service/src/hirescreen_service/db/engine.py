"""Async SQLAlchemy engine and session factory."""

from __future__ import annotations

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from hirescreen_service.db.models import Base

log = structlog.get_logger(__name__)


class Database:
    """Owns one engine and its session factory.

    Constructed at startup, closed at shutdown::

        db = Database(settings.database_url)
        await db.connect()
        async with db.session() as session:
            ...
        await db.close()
    """

    def __init__(self, url: str, pool_size: int = 10, echo: bool = False) -> None:
        self._url = url
        self._pool_size = pool_size
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    async def connect(self) -> None:
        kwargs = {"echo": self._echo}
        # SQLite uses a static/singleton pool that rejects pool sizing.
        if not self._url.startswith("sqlite"):
            kwargs["pool_size"] = self._pool_size
        self._engine = create_async_engine(self._url, **kwargs)
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )
        log.info("db_connected", dialect=self._engine.dialect.name)

    async def create_all(self) -> None:
        """Create missing tables. Used by tests and local development."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            log.warning("db_ping_failed", error=str(exc))
            return False
        return True

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            log.info("db_closed")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._engine

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._session_factory()
