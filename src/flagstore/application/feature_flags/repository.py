"""Application feature flags – FeatureFlagRepository port."""
from __future__ import annotations

import abc

from flagstore.application.feature_flags.feature_flag import FeatureFlag, FeatureFlagPatch, NewFeatureFlag


class FeatureFlagRepository(abc.ABC):
    """Port: the only read/write path to the flag store.

    Every operation is a single atomic statement. Absence is reported as
    ``None`` / ``False``, never raised.
    """

    @abc.abstractmethod
    async def list(self, search: str | None = None) -> list[FeatureFlag]:
        """All flags ordered by ``flag_key``; *search* is a case-insensitive
        substring match on ``flag_key`` or ``description``."""

    @abc.abstractmethod
    async def list_enabled(self) -> list[FeatureFlag]: ...

    @abc.abstractmethod
    async def get_by_key(self, flag_key: str) -> FeatureFlag | None: ...

    @abc.abstractmethod
    async def create(self, new: NewFeatureFlag) -> FeatureFlag:
        """Insert a flag; raises ``ConflictError`` if ``flag_key`` exists."""

    @abc.abstractmethod
    async def update(self, flag_key: str, patch: FeatureFlagPatch) -> FeatureFlag | None:
        """Apply the supplied fields only; an empty patch writes nothing."""

    @abc.abstractmethod
    async def toggle(self, flag_key: str) -> FeatureFlag | None:
        """Flip ``enabled`` in one statement."""

    @abc.abstractmethod
    async def delete(self, flag_key: str) -> bool: ...

    async def ping(self) -> bool:
        """Readiness probe; ``True`` when the store answers."""
        return True


__all__ = ["FeatureFlagRepository"]
