"""Primitives: exceptions, access levels."""

from __future__ import annotations

from .access import AccessLevel
from .exceptions import (
    CastError,
    ConfigurationError,
    DocRestError,
    InfrastructureError,
    NotFoundError,
    PersistenceError,
    RequestFormatError,
    UnsupportedAccessError,
    ValidationError,
)

__all__ = [
    "AccessLevel",
    "CastError",
    "ConfigurationError",
    "DocRestError",
    "InfrastructureError",
    "NotFoundError",
    "PersistenceError",
    "RequestFormatError",
    "UnsupportedAccessError",
    "ValidationError",
]
