"""MongoQueryPlan — a Motor-backed query plan for the plan builder."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from docrest_filtering.plan import COUNT_OP

from .query_builder import MongoQueryBuilder

if TYPE_CHECKING:
    from .populate import ReferencePopulator

logger = logging.getLogger("docrest.persistence.mongo")

FIND_OP = "find"
FIND_ONE_OP = "find_one"


class MongoQueryPlan:
    """Records builder calls, then runs them against a collection.

    ``op`` is ``find``, ``find_one`` or ``count``; a recorded ``distinct``
    field takes precedence over all of them at execution time.
    """

    def __init__(
        self,
        collection: Any,
        *,
        op: str = FIND_OP,
        populator: ReferencePopulator | None = None,
        query_builder: MongoQueryBuilder | None = None,
    ) -> None:
        self.op = op
        self._collection = collection
        self._populator = populator
        self._query_builder = query_builder or MongoQueryBuilder()
        self.filter: dict[str, Any] = {}
        self.sort_spec: list[tuple[str, int]] = []
        self.skip_count: int | None = None
        self.limit_count: int | None = None
        self.projection: dict[str, int] | None = None
        self.populate_paths: list[Any] = []
        self.distinct_field: str | None = None

    def where(self, query: dict[str, Any]) -> MongoQueryPlan:
        if not query:
            return self
        if self.filter:
            self.filter = {"$and": [self.filter, dict(query)]}
        else:
            self.filter = dict(query)
        return self

    def sort(self, sort: Any) -> MongoQueryPlan:
        self.sort_spec = self._query_builder.build_sort(sort)
        return self

    def skip(self, skip: int) -> MongoQueryPlan:
        self.skip_count = skip
        return self

    def limit(self, limit: int) -> MongoQueryPlan:
        self.limit_count = limit
        return self

    def select(self, select: dict[str, int]) -> MongoQueryPlan:
        self.projection = self._query_builder.build_projection(select)
        return self

    def populate(self, populate: list[Any]) -> MongoQueryPlan:
        self.populate_paths = list(populate)
        return self

    def distinct(self, field: str) -> MongoQueryPlan:
        self.distinct_field = field
        return self

    async def exec(self) -> Any:
        """Run the plan and return documents, one document, a count or values."""
        coll = self._collection
        if self.distinct_field is not None:
            return await coll.distinct(self.distinct_field, self.filter)
        if self.op == COUNT_OP:
            return await coll.count_documents(self.filter)

        kwargs: dict[str, Any] = {}
        if self.sort_spec:
            kwargs["sort"] = self.sort_spec
        if self.op == FIND_ONE_OP:
            doc = await coll.find_one(self.filter, self.projection, **kwargs)
            docs = [doc] if doc is not None else []
        else:
            if self.skip_count:
                kwargs["skip"] = self.skip_count
            if self.limit_count:
                kwargs["limit"] = self.limit_count
            docs = [doc async for doc in coll.find(self.filter, self.projection, **kwargs)]

        if docs and self.populate_paths and self._populator is not None:
            await self._populator.populate(docs, self.populate_paths)
        logger.debug(
            "%s on %s matched %d document(s)",
            self.op,
            getattr(coll, "name", "?"),
            len(docs),
        )
        if self.op == FIND_ONE_OP:
            return docs[0] if docs else None
        return docs
