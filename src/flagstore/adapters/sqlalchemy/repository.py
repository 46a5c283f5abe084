"""SQLAlchemy adapter – SqlAlchemyFeatureFlagRepository."""
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any, AsyncIterator

from sqlalchemy import Select, delete, insert, not_, or_, select, update
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncSession

from flagstore.adapters.sqlalchemy.errors import translate_store_error
from flagstore.adapters.sqlalchemy.models import FeatureFlagRecord
from flagstore.adapters.sqlalchemy.session import FlagStorePool
from flagstore.application.feature_flags.feature_flag import FeatureFlag, FeatureFlagPatch, NewFeatureFlag
from flagstore.application.feature_flags.repository import FeatureFlagRepository
from flagstore.kernel.errors import ConflictError, UnavailableError
from flagstore.kernel.time import Clock, SystemClock
from flagstore.observability.logging import get_logger

logger = get_logger(__name__)

_table = FeatureFlagRecord.__table__
_columns = (
    _table.c.id,
    _table.c.flag_key,
    _table.c.description,
    _table.c.enabled,
    _table.c.flag_data,
    _table.c.version,
    _table.c.created_at,
    _table.c.updated_at,
)


class SqlAlchemyFeatureFlagRepository(FeatureFlagRepository):
    """Flag repository over an async SQLAlchemy engine.

    Each operation checks a session out of the pool, runs one statement in
    its own transaction and returns the session on every exit path.
    """

    def __init__(self, pool: FlagStorePool, clock: Clock | None = None) -> None:
        self._pool = pool
        self._clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list(self, search: str | None = None) -> list[FeatureFlag]:
        stmt = _select_flags()
        if search:
            pattern = f"%{_escape_like(search)}%"
            stmt = stmt.where(
                or_(
                    _table.c.flag_key.ilike(pattern, escape="\\"),
                    _table.c.description.ilike(pattern, escape="\\"),
                )
            )
        async with self._session("list") as session:
            result = await session.execute(stmt.order_by(_table.c.flag_key))
            return [_to_flag(row) for row in result.mappings()]

    async def list_enabled(self) -> list[FeatureFlag]:
        stmt = _select_flags().where(_table.c.enabled.is_(True)).order_by(_table.c.flag_key)
        async with self._session("list_enabled") as session:
            result = await session.execute(stmt)
            return [_to_flag(row) for row in result.mappings()]

    async def get_by_key(self, flag_key: str) -> FeatureFlag | None:
        async with self._session("get_by_key") as session:
            result = await session.execute(_select_flags().where(_table.c.flag_key == flag_key))
            row = result.mappings().first()
        return _to_flag(row) if row is not None else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, new: NewFeatureFlag) -> FeatureFlag:
        now = self._clock.now()
        stmt = (
            insert(_table)
            .values(
                flag_key=new.flag_key,
                description=new.description,
                enabled=new.enabled,
                flag_data=new.flag_data,
                version=1,
                created_at=now,
                updated_at=now,
            )
            .returning(*_columns)
        )
        try:
            async with self._session("create") as session:
                result = await session.execute(stmt)
                row = result.mappings().one()
        except sa_exc.IntegrityError as exc:
            raise ConflictError(
                f"Feature flag '{new.flag_key}' already exists",
                detail={"flag_key": new.flag_key},
                cause=exc,
            ) from exc
        flag = _to_flag(row)
        logger.info("feature_flag.created", flag_key=flag.flag_key, enabled=flag.enabled)
        return flag

    async def update(self, flag_key: str, patch: FeatureFlagPatch) -> FeatureFlag | None:
        changes = patch.changes()
        if not changes:
            # UPDATE with an empty SET clause is invalid; read instead.
            return await self.get_by_key(flag_key)

        expected = patch.expected_version.unwrap_or(None)
        stmt = update(_table).where(_table.c.flag_key == flag_key)
        if expected is not None:
            stmt = stmt.where(_table.c.version == expected)
        stmt = stmt.values(
            **changes,
            version=_table.c.version + 1,
            updated_at=self._clock.now(),
        ).returning(*_columns)

        async with self._session("update") as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            if row is None and expected is not None:
                current = await session.scalar(
                    select(_table.c.version).where(_table.c.flag_key == flag_key)
                )
                if current is not None:
                    raise ConflictError(
                        f"Feature flag '{flag_key}' was modified concurrently",
                        detail={"flag_key": flag_key, "expected_version": expected, "version": current},
                    )
        if row is None:
            return None
        flag = _to_flag(row)
        logger.info("feature_flag.updated", flag_key=flag_key, fields=sorted(changes), version=flag.version)
        return flag

    async def toggle(self, flag_key: str) -> FeatureFlag | None:
        stmt = (
            update(_table)
            .where(_table.c.flag_key == flag_key)
            .values(
                enabled=not_(_table.c.enabled),
                version=_table.c.version + 1,
                updated_at=self._clock.now(),
            )
            .returning(*_columns)
        )
        async with self._session("toggle") as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        if row is None:
            return None
        flag = _to_flag(row)
        logger.info("feature_flag.toggled", flag_key=flag_key, enabled=flag.enabled)
        return flag

    async def delete(self, flag_key: str) -> bool:
        stmt = delete(_table).where(_table.c.flag_key == flag_key).returning(_table.c.id)
        async with self._session("delete") as session:
            result = await session.execute(stmt)
            deleted = result.first() is not None
        if deleted:
            logger.info("feature_flag.deleted", flag_key=flag_key)
        return deleted

    async def ping(self) -> bool:
        try:
            return await self._pool.ping()
        except (sa_exc.SQLAlchemyError, OSError) as exc:
            logger.warning("store.ping_failed", error=str(exc))
            return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        start = time.perf_counter()
        try:
            async with self._pool() as session, session.begin():
                yield session
        except sa_exc.IntegrityError:
            raise
        except (sa_exc.SQLAlchemyError, OSError) as exc:
            translated = translate_store_error(exc)
            if isinstance(translated, UnavailableError):
                logger.error("store.unavailable", operation=operation, error=str(exc))
                raise translated from exc
            logger.warning("store.statement_failed", operation=operation, error=str(exc))
            raise
        finally:
            logger.debug(
                "store.statement",
                operation=operation,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )


def _select_flags() -> Select[Any]:
    return select(*_columns)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_flag(row: Any) -> FeatureFlag:
    return FeatureFlag(
        id=row["id"],
        flag_key=row["flag_key"],
        description=row["description"] if row["description"] is not None else "",
        enabled=bool(row["enabled"]),
        flag_data=row["flag_data"] if row["flag_data"] is not None else {},
        version=row["version"],
        created_at=_aware(row["created_at"]),
        updated_at=_aware(row["updated_at"]),
    )


__all__ = ["SqlAlchemyFeatureFlagRepository"]
