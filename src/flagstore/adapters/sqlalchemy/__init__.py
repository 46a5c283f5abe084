"""SQLAlchemy adapter – pool, table model, repository, error translation."""
from flagstore.adapters.sqlalchemy.errors import translate_store_error
from flagstore.adapters.sqlalchemy.mixins import TimestampMixin
from flagstore.adapters.sqlalchemy.models import Base, FeatureFlagRecord
from flagstore.adapters.sqlalchemy.repository import SqlAlchemyFeatureFlagRepository
from flagstore.adapters.sqlalchemy.session import FlagStorePool

__all__ = [
    "Base",
    "FeatureFlagRecord",
    "FlagStorePool",
    "SqlAlchemyFeatureFlagRepository",
    "TimestampMixin",
    "translate_store_error",
]
