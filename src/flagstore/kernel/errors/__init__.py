"""Kernel errors – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   ├── ValidationError  invalid payload → 400
    │   ├── NotFoundError    → 404
    │   └── ConflictError    → 409
    ├── ApplicationError     (application.py)
    └── InfrastructureError  (infrastructure.py)
        └── UnavailableError → 503
"""

from flagstore.kernel.errors.application import ApplicationError
from flagstore.kernel.errors.base import BaseError
from flagstore.kernel.errors.domain import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from flagstore.kernel.errors.infrastructure import InfrastructureError, UnavailableError

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConflictError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "UnavailableError",
    "ValidationError",
]
