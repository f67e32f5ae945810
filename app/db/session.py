"""
Database engine lifecycle.

The ConnectionManager owns a single lazily created AsyncEngine. It is built
once by the application, kept on ``app.state.db`` and handed to whatever
needs a session; there is no module-level engine.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Any, Callable, Dict, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.config import settings
from app.core.errors import DatabaseConnectionError
from app.core.logging import logger

Base = declarative_base()


def engine_options(url: str) -> Dict[str, Any]:
    """Pool configuration for ``url``; sqlite uses its own pool defaults."""
    if make_url(url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": settings.DB_POOL_SIZE,           # Number of permanent connections to maintain
        "max_overflow": settings.DB_MAX_OVERFLOW,     # Connections allowed beyond pool_size
        "pool_pre_ping": True,                        # Verify connections before using them
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }


class ConnectionManager:
    """
    Lazily connects to the database and hands out the ready engine.

    At most one connection attempt runs at a time: concurrent callers of
    ``acquire`` await the same attempt. A failed attempt is forgotten so the
    next call starts a fresh one.
    """

    def __init__(
        self,
        url: str,
        *,
        engine_factory: Callable[..., AsyncEngine] = create_async_engine,
        connect_timeout: Optional[float] = None,
        **options: Any,
    ):
        if not url:
            raise ValueError("DATABASE_URL must be set to connect to the database")
        self.url = url
        self._engine_factory = engine_factory
        self._connect_timeout = connect_timeout if connect_timeout is not None else settings.DB_CONNECT_TIMEOUT
        self._options = options or engine_options(url)
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None
        self._pending: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def _connect(self) -> AsyncEngine:
        logger.info("Connecting to database")
        engine = self._engine_factory(self.url, future=True, **self._options)
        try:
            async with engine.connect() as conn:
                await asyncio.wait_for(conn.execute(text("SELECT 1")), timeout=self._connect_timeout)
        except BaseException:
            await engine.dispose()
            raise
        return engine

    async def acquire(self) -> AsyncEngine:
        """
        Return the connected engine, connecting first if needed.

        Raises:
            DatabaseConnectionError: If the connection attempt fails
        """
        if self._engine is not None:
            return self._engine

        async with self._lock:
            if self._engine is not None:
                return self._engine
            if self._pending is None:
                self._pending = asyncio.ensure_future(self._connect())
            pending = self._pending

        try:
            engine = await asyncio.shield(pending)
        except asyncio.CancelledError:
            if not pending.cancelled():
                raise
            # The attempt itself was cancelled (teardown); allow a retry
            await self._forget(pending)
            raise DatabaseConnectionError("Database connection attempt was cancelled")
        except Exception as e:
            await self._forget(pending)
            logger.error(f"Database connection failed: {e}")
            raise DatabaseConnectionError() from e

        async with self._lock:
            if self._pending is pending:
                self._engine = engine
                self._sessionmaker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
                self._pending = None
                logger.info("Database connection established")
            stale = self._engine is not engine
        if stale:
            # teardown ran while this attempt was finishing
            await engine.dispose()
            raise DatabaseConnectionError("Database connection was closed while connecting")
        return engine

    async def _forget(self, pending: asyncio.Task) -> None:
        async with self._lock:
            if self._pending is pending:
                self._pending = None

    async def init(self) -> None:
        """Connect and create tables and indexes that do not exist yet."""
        import app.db.models  # noqa: F401  registers the tables on Base.metadata

        engine = await self.acquire()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def teardown(self) -> None:
        """Dispose of the engine; the manager can be acquired again afterwards."""
        async with self._lock:
            engine, self._engine = self._engine, None
            pending, self._pending = self._pending, None
            self._sessionmaker = None
        if pending is not None and not pending.done():
            pending.cancel()
        if engine is not None:
            await engine.dispose()
            logger.info("Database connection closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        engine = await self.acquire()
        maker = self._sessionmaker if self._engine is engine else None
        if maker is None:
            maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with maker() as session:
            yield session


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.db.session() as session:
        yield session
