"""MongoResourceStore — plans and writes for one resource collection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pymongo import ReadPreference, ReturnDocument

from .plan import FIND_OP, MongoQueryPlan
from .populate import ReferencePopulator
from .query_builder import MongoQueryBuilder
from .serialization import cast_object_id, flatten_update

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .connection import MongoConnectionManager

logger = logging.getLogger("docrest.persistence.mongo")


class MongoResourceStore:
    """Store collaborator for a single resource.

    ``references`` maps dotted reference paths to the collection names of
    the referenced resources; it drives populate execution.
    """

    def __init__(
        self,
        connection: MongoConnectionManager,
        collection: str,
        *,
        id_property: str = "_id",
        read_preference: str | None = "primary",
        references: Mapping[str, str] | None = None,
        query_builder: MongoQueryBuilder | None = None,
    ) -> None:
        self._connection = connection
        self._collection_name = collection
        self._id_property = id_property
        self._query_builder = query_builder or MongoQueryBuilder()
        self._read_preference = self._query_builder.read_preference(read_preference)
        self._populator = ReferencePopulator(
            self._get_collection, references or {}, query_builder=self._query_builder
        )

    @property
    def collection_name(self) -> str:
        return self._collection_name

    def _get_collection(self, name: str) -> Any:
        return self._connection.get_database().get_collection(name)

    def collection(self, *, for_read: bool = False) -> Any:
        coll = self._get_collection(self._collection_name)
        if for_read and self._read_preference != ReadPreference.PRIMARY:
            coll = coll.with_options(read_preference=self._read_preference)
        return coll

    def plan(self, op: str = FIND_OP) -> MongoQueryPlan:
        """Return an empty query plan for *op* (``find``, ``find_one``, ``count``)."""
        return MongoQueryPlan(
            self.collection(for_read=True),
            op=op,
            populator=self._populator,
            query_builder=self._query_builder,
        )

    def id_filter(self, value: Any) -> dict[str, Any]:
        """Filter matching the document identified by *value*.

        Raises:
            CastError: the id property is ``_id`` and *value* is not an ObjectId.
        """
        if self._id_property == "_id":
            return {"_id": cast_object_id(value, self._id_property)}
        return {self._id_property: value}

    async def insert(self, body: dict[str, Any]) -> dict[str, Any]:
        doc = self._populator.depopulate(body)
        doc.pop("_id", None)
        result = await self.collection().insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.debug("Inserted %s into %s", result.inserted_id, self._collection_name)
        return doc

    async def update(
        self, query: dict[str, Any], body: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Merge *body* into the matching document and return the new version.

        Joined documents at reference paths are written back as their ids.
        """
        changes = self._populator.depopulate(body)
        changes.pop("_id", None)
        if not changes:
            return await self.collection().find_one(query)
        return await self.collection().find_one_and_update(
            query,
            {"$set": flatten_update(changes)},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_one(self, query: dict[str, Any]) -> int:
        result = await self.collection().delete_one(query)
        return int(result.deleted_count)

    async def delete_many(self, query: dict[str, Any]) -> int:
        result = await self.collection().delete_many(query)
        return int(result.deleted_count)
