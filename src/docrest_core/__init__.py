"""docrest core — errors, access levels, request state and the stage pipeline."""

from __future__ import annotations

from .error_handler import ErrorHandler, default_on_error
from .middleware import LoggingMiddleware, build_pipeline, run_pipeline
from .ports import IStage
from .primitives import (
    AccessLevel,
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
from .request import RequestState, ResourceRequest

__all__ = [
    "AccessLevel",
    "CastError",
    "ConfigurationError",
    "DocRestError",
    "ErrorHandler",
    "IStage",
    "InfrastructureError",
    "LoggingMiddleware",
    "NotFoundError",
    "PersistenceError",
    "RequestFormatError",
    "RequestState",
    "ResourceRequest",
    "UnsupportedAccessError",
    "ValidationError",
    "build_pipeline",
    "default_on_error",
    "run_pipeline",
]
