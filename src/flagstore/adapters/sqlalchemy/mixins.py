"""SQLAlchemy ORM mixins – TimestampMixin."""
from __future__ import annotations

import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import Mapped, mapped_column


class TimestampMixin:
    """Adds ``created_at`` and ``updated_at`` timestamp columns.

    Both default to the database server's current time. Writers set
    ``updated_at`` explicitly from their :class:`~flagstore.kernel.time.Clock`
    on every mutation, so a statement that changes nothing leaves it alone.
    """

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


__all__ = ["TimestampMixin"]
