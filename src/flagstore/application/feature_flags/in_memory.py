"""Application feature flags – InMemoryFeatureFlagRepository."""

from __future__ import annotations

import asyncio
import copy
import dataclasses

from flagstore.application.feature_flags.feature_flag import FeatureFlag, FeatureFlagPatch, NewFeatureFlag
from flagstore.application.feature_flags.repository import FeatureFlagRepository
from flagstore.kernel.errors import ConflictError
from flagstore.kernel.time import Clock, SystemClock


class InMemoryFeatureFlagRepository(FeatureFlagRepository):
    """Dict-backed repository with the same semantics as the SQL one.

    A single ``asyncio.Lock`` stands in for the store's row locking.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._rows: dict[str, FeatureFlag] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def list(self, search: str | None = None) -> list[FeatureFlag]:
        rows = sorted(self._rows.values(), key=lambda f: f.flag_key)
        if search:
            needle = search.lower()
            rows = [f for f in rows if needle in f.flag_key.lower() or needle in f.description.lower()]
        return rows

    async def list_enabled(self) -> list[FeatureFlag]:
        return [f for f in await self.list() if f.enabled]

    async def get_by_key(self, flag_key: str) -> FeatureFlag | None:
        return self._rows.get(flag_key)

    async def create(self, new: NewFeatureFlag) -> FeatureFlag:
        async with self._lock:
            if new.flag_key in self._rows:
                raise ConflictError(
                    f"Feature flag '{new.flag_key}' already exists",
                    detail={"flag_key": new.flag_key},
                )
            now = self._clock.now()
            flag = FeatureFlag(
                id=self._next_id,
                flag_key=new.flag_key,
                description=new.description,
                enabled=new.enabled,
                flag_data=copy.deepcopy(new.flag_data),
                version=1,
                created_at=now,
                updated_at=now,
            )
            self._next_id += 1
            self._rows[flag.flag_key] = flag
            return flag

    async def update(self, flag_key: str, patch: FeatureFlagPatch) -> FeatureFlag | None:
        async with self._lock:
            current = self._rows.get(flag_key)
            if current is None or patch.is_empty():
                return current
            expected = patch.expected_version.unwrap_or(None)
            if expected is not None and expected != current.version:
                raise ConflictError(
                    f"Feature flag '{flag_key}' was modified concurrently",
                    detail={"flag_key": flag_key, "expected_version": expected, "version": current.version},
                )
            changes = copy.deepcopy(patch.changes())
            updated = dataclasses.replace(
                current,
                **changes,
                version=current.version + 1,
                updated_at=self._clock.now(),
            )
            self._rows[flag_key] = updated
            return updated

    async def toggle(self, flag_key: str) -> FeatureFlag | None:
        async with self._lock:
            current = self._rows.get(flag_key)
            if current is None:
                return None
            updated = dataclasses.replace(
                current,
                enabled=not current.enabled,
                version=current.version + 1,
                updated_at=self._clock.now(),
            )
            self._rows[flag_key] = updated
            return updated

    async def delete(self, flag_key: str) -> bool:
        async with self._lock:
            return self._rows.pop(flag_key, None) is not None


__all__ = ["InMemoryFeatureFlagRepository"]
