"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   └── ValidationError
    ├── ApplicationError         (application.py)
    │   └── ConfigurationError
    └── InfrastructureError      (infrastructure.py)
        ├── FetchError
        │   └── AmbiguousEmptyStateError
        ├── TimeoutError
        ├── SerializationError
        └── ExternalServiceError
"""

from listquery.kernel.errors.application import ApplicationError, ConfigurationError
from listquery.kernel.errors.base import BaseError
from listquery.kernel.errors.domain import DomainError, ValidationError
from listquery.kernel.errors.infrastructure import (
    AmbiguousEmptyStateError,
    ExternalServiceError,
    FetchError,
    InfrastructureError,
    SerializationError,
    TimeoutError,
)

__all__ = [
    "AmbiguousEmptyStateError",
    "ApplicationError",
    "BaseError",
    "ConfigurationError",
    "DomainError",
    "ExternalServiceError",
    "FetchError",
    "InfrastructureError",
    "SerializationError",
    "TimeoutError",
    "ValidationError",
]
