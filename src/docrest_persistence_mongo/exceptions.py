"""MongoDB persistence exceptions."""

from __future__ import annotations

from docrest_core.primitives.exceptions import PersistenceError


class MongoPersistenceError(PersistenceError):
    """Base for MongoDB persistence errors."""


class MongoConnectionError(MongoPersistenceError):
    """Raised when connection to MongoDB fails."""


class MongoQueryError(MongoPersistenceError):
    """Raised when a query plan cannot be compiled or run."""
