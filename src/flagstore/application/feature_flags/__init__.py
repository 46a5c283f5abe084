"""Application feature flags – records, repository port, service."""
from flagstore.application.feature_flags.feature_flag import (
    MAX_FLAG_KEY_LENGTH,
    RESERVED_FLAG_KEYS,
    FeatureFlag,
    FeatureFlagPatch,
    NewFeatureFlag,
)
from flagstore.application.feature_flags.in_memory import InMemoryFeatureFlagRepository
from flagstore.application.feature_flags.repository import FeatureFlagRepository
from flagstore.application.feature_flags.seed import SAMPLE_FLAGS, seed_sample_flags
from flagstore.application.feature_flags.service import FeatureFlagService, parse_new_flag, parse_patch

__all__ = [
    "FeatureFlag",
    "FeatureFlagPatch",
    "FeatureFlagRepository",
    "FeatureFlagService",
    "InMemoryFeatureFlagRepository",
    "MAX_FLAG_KEY_LENGTH",
    "NewFeatureFlag",
    "RESERVED_FLAG_KEYS",
    "SAMPLE_FLAGS",
    "parse_new_flag",
    "parse_patch",
    "seed_sample_flags",
]
