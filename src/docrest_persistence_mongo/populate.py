"""ReferencePopulator — replace reference ids with the documents they name."""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Iterator, Mapping, MutableMapping
from typing import TYPE_CHECKING, Any

from bson import ObjectId

from .query_builder import MongoQueryBuilder

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("docrest.persistence.mongo")

_HEX_ID = re.compile(r"^[0-9a-fA-F]{24}$")


def _iter_slots(
    node: Any, segments: list[str]
) -> Iterator[tuple[MutableMapping[str, Any], str]]:
    """Yield ``(container, key)`` for every place *segments* lead to."""
    if isinstance(node, list):
        for element in node:
            yield from _iter_slots(element, segments)
        return
    if not isinstance(node, MutableMapping):
        return
    head, rest = segments[0], segments[1:]
    if head not in node:
        return
    if rest:
        yield from _iter_slots(node[head], rest)
    else:
        yield node, head


def _descriptor_field(descriptor: Any, name: str) -> Any:
    if isinstance(descriptor, Mapping):
        return descriptor.get(name)
    return getattr(descriptor, name, None)


def _reference_id(value: Any) -> Any:
    """Collapse a joined document to its ``_id``; cast hex strings to ObjectId."""
    if isinstance(value, Mapping) and "_id" in value:
        value = value["_id"]
    if isinstance(value, str) and _HEX_ID.match(value):
        return ObjectId(value)
    return value


def _page(docs: list[Any], skip: int, limit: int) -> list[Any]:
    docs = docs[skip:]
    return docs[:limit] if limit else docs


class ReferencePopulator:
    """Join referenced documents into query results.

    ``references`` maps a dotted path of the outer resource to the name of
    the collection holding the referenced documents. Populate requests for
    other paths are ignored.

    A descriptor's ``options`` may carry ``sort``, ``skip`` and ``limit``.
    They shape each joined array on its own; a single reference is never
    skipped or limited away.
    """

    def __init__(
        self,
        get_collection: Callable[[str], Any],
        references: Mapping[str, str],
        *,
        query_builder: MongoQueryBuilder | None = None,
    ) -> None:
        self._get_collection = get_collection
        self._references = dict(references)
        self._query_builder = query_builder or MongoQueryBuilder()

    async def populate(self, docs: list[dict[str, Any]], populate: list[Any]) -> None:
        for descriptor in populate:
            path = _descriptor_field(descriptor, "path")
            if not path:
                continue
            collection_name = self._references.get(path)
            if collection_name is None:
                logger.debug("Ignoring populate of unreferenced path %s", path)
                continue
            await self._populate_path(docs, path, collection_name, descriptor)

    def depopulate(self, body: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of *body* with joined documents replaced by their ids.

        Reference values that are 24-character hex strings become ObjectIds.
        """
        body = copy.deepcopy(body)
        for path in self._references:
            for container, key in _iter_slots(body, path.split(".")):
                value = container[key]
                if isinstance(value, list):
                    container[key] = [_reference_id(v) for v in value]
                else:
                    container[key] = _reference_id(value)
        return body

    async def _populate_path(
        self,
        docs: list[dict[str, Any]],
        path: str,
        collection_name: str,
        descriptor: Any,
    ) -> None:
        slots = list(_iter_slots(docs, path.split(".")))
        ids: list[Any] = []
        for container, key in slots:
            value = container[key]
            if isinstance(value, list):
                ids.extend(v for v in value if v is not None)
            elif value is not None:
                ids.append(value)
        if not ids:
            return

        projection = self._query_builder.build_projection(
            _descriptor_field(descriptor, "select")
        )
        drop_id = False
        if projection is not None and projection.get("_id") == 0:
            drop_id = True
            del projection["_id"]
            projection = projection or None

        query: dict[str, Any] = {"_id": {"$in": ids}}
        match = _descriptor_field(descriptor, "match")
        if match:
            query = {"$and": [query, dict(match)]}

        options = _descriptor_field(descriptor, "options") or {}
        sort = self._query_builder.build_sort(options.get("sort"))
        skip = int(options.get("skip") or 0)
        limit = int(options.get("limit") or 0)

        kwargs: dict[str, Any] = {}
        if sort:
            kwargs["sort"] = sort
        # Insertion order follows the requested sort.
        found: dict[Any, dict[str, Any]] = {}
        cursor = self._get_collection(collection_name).find(query, projection, **kwargs)
        async for doc in cursor:
            found[doc["_id"]] = doc

        def _resolve(ref: Any) -> dict[str, Any] | None:
            doc = found.get(ref)
            if doc is None:
                return None
            doc = dict(doc)
            if drop_id:
                doc.pop("_id", None)
            return doc

        for container, key in slots:
            value = container[key]
            if isinstance(value, list):
                refs = [ref for ref in found if ref in value] if sort else value
                resolved = [d for d in map(_resolve, refs) if d is not None]
                container[key] = _page(resolved, skip, limit)
            elif value is not None:
                container[key] = _resolve(value)
