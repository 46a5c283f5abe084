"""
flagstore – feature flag store with a REST API.

Import path convention::

    from flagstore.app import create_app
    from flagstore.application.feature_flags import FeatureFlagService
    from flagstore.adapters.sqlalchemy import FlagStorePool, SqlAlchemyFeatureFlagRepository
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
