"""SQLAlchemy adapter – FlagStorePool."""
from __future__ import annotations

from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from flagstore.adapters.sqlalchemy.models import Base
from flagstore.config.settings import DatabaseSettings
from flagstore.observability.logging import get_logger

logger = get_logger(__name__)


class FlagStorePool:
    """Owns the async engine (and its connection pool) for the flag store.

    Built once at process start, passed to repositories by reference and
    disposed once on shutdown.
    """

    def __init__(self, settings: DatabaseSettings, **engine_kwargs: Any) -> None:
        url = settings.sqlalchemy_url()
        kwargs: dict[str, Any] = {"echo": settings.echo, "pool_pre_ping": True}
        if url.get_backend_name() != "sqlite":
            kwargs.update(
                pool_size=settings.pool_max,
                max_overflow=0,
                pool_timeout=settings.pool_timeout,
                connect_args=_connect_args(url, settings),
            )
        kwargs.update(engine_kwargs)
        self._url = url
        self._engine: AsyncEngine = create_async_engine(url, **kwargs)
        self._session_factory = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )
        logger.info(
            "store.pool_created",
            backend=url.get_backend_name(),
            host=url.host,
            database=url.database,
            pool_max=settings.pool_max,
        )

    @classmethod
    def from_url(cls, url: str, **engine_kwargs: Any) -> "FlagStorePool":
        return cls(DatabaseSettings(url=url), **engine_kwargs)

    def __call__(self) -> AsyncSession:
        return self._session_factory()

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def url(self) -> URL:
        return self._url

    async def create_schema(self) -> None:
        """Create missing tables (local runs and tests; production uses migrations)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        await self._engine.dispose()
        logger.info("store.pool_closed")


def _connect_args(url: URL, settings: DatabaseSettings) -> dict[str, Any]:
    if url.get_driver_name() != "asyncpg":
        return {}
    args: dict[str, Any] = {"timeout": settings.connect_timeout}
    if settings.ssl:
        args["ssl"] = "require"
    return args


__all__ = ["FlagStorePool"]
