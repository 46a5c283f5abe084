"""Application factory – wires settings, the store pool, the service and the HTTP surface."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flagstore import __version__
from flagstore.adapters.fastapi import (
    CorrelationIdMiddleware,
    FastAPIExceptionMapper,
    FeatureFlagRouter,
    HealthRouter,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from flagstore.adapters.sqlalchemy import FlagStorePool, SqlAlchemyFeatureFlagRepository
from flagstore.application.feature_flags import (
    FeatureFlagRepository,
    FeatureFlagService,
    seed_sample_flags,
)
from flagstore.config import AppSettings, DatabaseSettings, EnvSettingsLoader
from flagstore.kernel.time import Clock
from flagstore.observability.logging import get_logger

logger = get_logger(__name__)


def create_app(
    app_settings: AppSettings | None = None,
    db_settings: DatabaseSettings | None = None,
    *,
    repository: FeatureFlagRepository | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    The store pool is created once when the app starts and disposed once when
    it stops. Passing *repository* skips the pool entirely (used by tests and
    by callers that own their own store).
    """
    app_settings = app_settings or EnvSettingsLoader().load(AppSettings)
    if repository is None and db_settings is None:
        db_settings = EnvSettingsLoader().load(DatabaseSettings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        pool: FlagStorePool | None = None
        repo = repository
        if repo is None:
            pool = FlagStorePool(db_settings)
            if app_settings.create_schema:
                await pool.create_schema()
            repo = SqlAlchemyFeatureFlagRepository(pool, clock=clock)
        app.state.flag_repository = repo
        app.state.flag_service = FeatureFlagService(repo)
        if app_settings.seed_sample_flags:
            await seed_sample_flags(repo)
        logger.info("app.started", env=app_settings.env, version=__version__)
        try:
            yield
        finally:
            if pool is not None:
                await pool.dispose()
            logger.info("app.stopped")

    app = FastAPI(title="flagstore", version=__version__, debug=False, lifespan=lifespan)

    async def database() -> bool:
        return await app.state.flag_repository.ping()

    # Adds UnhandledErrorMiddleware, so it must come before the add_middleware calls below.
    FastAPIExceptionMapper(debug=app_settings.debug).register(app)
    app.include_router(FeatureFlagRouter())
    app.include_router(HealthRouter(readiness_checks=[database]))

    # add_middleware wraps, so the last one added runs first.
    app.add_middleware(SecurityHeadersMiddleware)
    if app_settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=app_settings.cors_origins,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    return app


__all__ = ["create_app"]
