"""
Database handle with an explicit open/close lifecycle (SQLAlchemy async)
"""

from pathlib import Path
from typing import Optional
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool
from models import Base
import logging

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the async engine and session factory for one database.

    Created once per process and passed to every component that needs the
    store. ``open()`` builds the engine and creates missing tables,
    ``close()`` disposes of the connection pool.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self._session_maker: Optional[async_sessionmaker] = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def _engine_options(self) -> dict:
        url = make_url(self.url)

        if url.get_backend_name() != "sqlite":
            return {"poolclass": NullPool}

        options = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # All sessions must share the single in-memory connection
            options["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            options["poolclass"] = NullPool
        return options

    async def open(self) -> None:
        """Create the engine and any missing tables"""
        if self.is_open:
            return

        self.engine = create_async_engine(self.url, echo=self.echo, **self._engine_options())
        self._session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        backend = make_url(self.url).get_backend_name()
        logger.info(f"Database opened ({backend})")

    async def close(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self._session_maker = None
        logger.info("Database closed")

    def session(self) -> AsyncSession:
        """New session; use as ``async with database.session() as session``"""
        if self._session_maker is None:
            raise RuntimeError("Database is not open")
        return self._session_maker()
