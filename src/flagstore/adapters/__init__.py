"""Adapters – SQLAlchemy store and FastAPI HTTP surface."""
