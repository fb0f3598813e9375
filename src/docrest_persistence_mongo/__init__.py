"""MongoDB store collaborator — Motor-backed query plans, joins and writes."""

from __future__ import annotations

from .connection import MongoConnectionManager
from .exceptions import MongoConnectionError, MongoPersistenceError, MongoQueryError
from .plan import FIND_ONE_OP, FIND_OP, MongoQueryPlan
from .populate import ReferencePopulator
from .query_builder import MongoQueryBuilder
from .serialization import cast_object_id, to_jsonable
from .store import MongoResourceStore

__all__ = [
    "FIND_OP",
    "FIND_ONE_OP",
    "MongoConnectionError",
    "MongoConnectionManager",
    "MongoPersistenceError",
    "MongoQueryBuilder",
    "MongoQueryError",
    "MongoQueryPlan",
    "MongoResourceStore",
    "ReferencePopulator",
    "cast_object_id",
    "to_jsonable",
]
