"""Kernel time – where ``created_at`` / ``updated_at`` come from."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Current time, timezone-aware."""
        ...


def utc_now() -> datetime:
    return datetime.now(UTC)


class SystemClock:
    def now(self) -> datetime:
        return utc_now()


class FrozenClock:
    """Clock that only moves when told to.

    Repositories stamp every write with ``clock.now()``; tests call
    :meth:`advance` between writes to make ``updated_at`` ordering explicit.
    """

    def __init__(self, start: datetime) -> None:
        if start.tzinfo is None:
            raise ValueError("FrozenClock needs a timezone-aware start time")
        self._current = start

    def now(self) -> datetime:
        return self._current

    def advance(self, **delta: float) -> datetime:
        """Move forward by ``timedelta(**delta)`` and return the new time."""
        self._current += timedelta(**delta)
        return self._current


__all__ = ["Clock", "FrozenClock", "SystemClock", "utc_now"]
