"""Application feature flags – FeatureFlag record and write intents."""
from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any

from flagstore.kernel.types import NOTHING, Option

MAX_FLAG_KEY_LENGTH = 255

# Collide with fixed routes under /feature-flags.
RESERVED_FLAG_KEYS: frozenset[str] = frozenset({"enabled"})


@dataclasses.dataclass(frozen=True)
class FeatureFlag:
    """A persisted feature flag, addressed externally by ``flag_key``."""
    id: int
    flag_key: str
    description: str
    enabled: bool
    flag_data: Any
    version: int
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation used in API envelopes."""
        return {
            "id": self.id,
            "flag_key": self.flag_key,
            "description": self.description,
            "enabled": self.enabled,
            "flag_data": self.flag_data,
            "version": self.version,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclasses.dataclass(frozen=True)
class NewFeatureFlag:
    """Create intent; omitted fields take their storage defaults."""
    flag_key: str
    description: str = ""
    enabled: bool = False
    flag_data: Any = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class FeatureFlagPatch:
    """Partial update intent.

    Each field is ``Some(value)`` when the caller supplied it and ``NOTHING``
    otherwise. ``expected_version`` guards the write with an optimistic
    version check.
    """
    description: Option[str] = NOTHING
    enabled: Option[bool] = NOTHING
    flag_data: Option[Any] = NOTHING
    expected_version: Option[int] = NOTHING

    def changes(self) -> dict[str, Any]:
        """Column → value for every supplied field."""
        values: dict[str, Any] = {}
        for name in ("description", "enabled", "flag_data"):
            option = getattr(self, name)
            if option.is_some():
                values[name] = option.unwrap()
        return values

    def is_empty(self) -> bool:
        return not self.changes()


__all__ = ["FeatureFlag", "FeatureFlagPatch", "MAX_FLAG_KEY_LENGTH", "NewFeatureFlag", "RESERVED_FLAG_KEYS"]
