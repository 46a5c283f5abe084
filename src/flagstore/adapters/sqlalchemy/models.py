"""SQLAlchemy ORM models – the ``feature_flags`` table."""
from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, Index, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from flagstore.adapters.sqlalchemy.mixins import TimestampMixin
from flagstore.application.feature_flags.feature_flag import MAX_FLAG_KEY_LENGTH

JSON_TYPE = JSONB().with_variant(JSON(), "sqlite")


class Base(DeclarativeBase):
    pass


class FeatureFlagRecord(TimestampMixin, Base):
    """One row per flag key; ``flag_data`` is stored verbatim as JSON."""

    __tablename__ = "feature_flags"
    __table_args__ = (
        UniqueConstraint("flag_key", name="uq_feature_flags_flag_key"),
        Index("ix_feature_flags_enabled", "enabled"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    flag_key: Mapped[str] = mapped_column(String(MAX_FLAG_KEY_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    flag_data: Mapped[Any] = mapped_column(JSON_TYPE, nullable=False, default=dict)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default=text("1"))


__all__ = ["Base", "FeatureFlagRecord", "JSON_TYPE"]
