"""Application feature flags – sample flags for fresh databases."""
from __future__ import annotations

from flagstore.application.feature_flags.feature_flag import NewFeatureFlag
from flagstore.application.feature_flags.repository import FeatureFlagRepository
from flagstore.kernel.errors import ConflictError
from flagstore.observability.logging import get_logger

logger = get_logger(__name__)

SAMPLE_FLAGS: tuple[NewFeatureFlag, ...] = (
    NewFeatureFlag("a-boolean-flag", "Test a boolean flag", False, {}),
    NewFeatureFlag("a-number-flag", "Test a number flag", False, {"value": 42}),
    NewFeatureFlag("a-string-flag", "Test a string flag", False, {"value": "A string value"}),
    NewFeatureFlag(
        "a-json-flag",
        "Test a JSON flag",
        False,
        {"value": {"foo": "value1", "bar": 2, "isBaz": True, "quxes": [1, 2, 3]}},
    ),
)


async def seed_sample_flags(
    repository: FeatureFlagRepository,
    flags: tuple[NewFeatureFlag, ...] = SAMPLE_FLAGS,
) -> int:
    """Insert *flags*, leaving existing keys untouched. Returns the number created."""
    created = 0
    for new in flags:
        try:
            await repository.create(new)
        except ConflictError:
            logger.debug("feature_flag.seed_skipped", flag_key=new.flag_key)
            continue
        created += 1
    logger.info("feature_flag.seeded", created=created, total=len(flags))
    return created


__all__ = ["SAMPLE_FLAGS", "seed_sample_flags"]
