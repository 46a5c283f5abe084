"""Application layer – feature flag use cases."""
