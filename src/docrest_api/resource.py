"""Resource — the request pipeline for one registered resource.

Every operation runs the same way: resolve access, parse parameters,
build a query plan, execute it through the store, filter the output.
Any stage may fail; the failure is reported once through the
resource's ``ErrorHandler`` and the remaining stages are skipped.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

from docrest_access import AccessMiddleware, AccessResolver
from docrest_core import (
    ErrorHandler,
    LoggingMiddleware,
    NotFoundError,
    ValidationError,
    build_pipeline,
    run_pipeline,
)
from docrest_filtering import (
    COUNT_OP,
    PrepareQueryMiddleware,
    QueryOptions,
    QueryParameterParser,
    QueryPlanBuilder,
)
from docrest_persistence_mongo import FIND_ONE_OP, FIND_OP
from docrest_visibility import FieldVisibilityIndex, ResourceFilter

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from docrest_core import IStage, ResourceRequest
    from docrest_persistence_mongo import MongoQueryPlan, MongoResourceStore
    from docrest_visibility import ResourceRegistry

    from .options import ResourceOptions

logger = logging.getLogger("docrest.api")


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _shallow(doc: dict[str, Any]) -> dict[str, Any]:
    """Replace nested objects and arrays with ``True``."""
    return {
        key: True if key != "_id" and isinstance(value, (dict, list)) else value
        for key, value in doc.items()
    }


class Resource:
    """Read, count, create, modify and delete operations of one resource."""

    def __init__(
        self,
        options: ResourceOptions,
        registry: ResourceRegistry,
        *,
        store: MongoResourceStore | None = None,
    ) -> None:
        self.options = options
        self.registry = registry
        self.store = store
        self.index = FieldVisibilityIndex.build(
            options.name, options.private, options.protected
        )
        registry.register(self.index)
        self.filter = ResourceFilter(
            self.index, references=options.references, registry=registry
        )
        self.access = AccessResolver(options.access)
        self.parser = QueryParameterParser(allow_regex=options.allow_regex)
        self.builder = QueryPlanBuilder(limit=options.limit)
        self.error_handler = ErrorHandler(
            options.on_error, id_property=options.id_property
        )

    @property
    def name(self) -> str:
        return self.options.name

    def _stages(self, operation: str, *, parse_query: bool) -> list[IStage]:
        stages: list[IStage] = [
            LoggingMiddleware(self.name, operation),
            AccessMiddleware(self.access),
        ]
        if parse_query:
            stages.append(PrepareQueryMiddleware(self.parser))
        return stages

    async def _run(
        self,
        request: ResourceRequest,
        operation: str,
        handler: Callable[[ResourceRequest], Awaitable[Any]],
        *,
        parse_query: bool = True,
    ) -> ResourceRequest:
        pipeline = build_pipeline(
            self._stages(operation, parse_query=parse_query), handler
        )
        return await run_pipeline(pipeline, request, self.error_handler)

    def _store(self) -> MongoResourceStore:
        if self.store is None:
            raise RuntimeError(f"Resource {self.name!r} has no store bound")
        return self.store

    async def _context_filter(self, request: ResourceRequest) -> dict[str, Any] | None:
        if self.options.context_filter is None:
            return None
        return await _maybe_await(self.options.context_filter(request))

    async def _plan(self, request: ResourceRequest, op: str) -> MongoQueryPlan:
        plan = self._store().plan(op)
        base = await self._context_filter(request)
        if base:
            plan.where(base)
        return plan

    async def _find_document(self, request: ResourceRequest) -> dict[str, Any]:
        plan = await self._plan(request, FIND_ONE_OP)
        plan.where(self._store().id_filter(request.id))
        doc = await plan.exec()
        if doc is None:
            raise NotFoundError()
        request.state.document = doc
        return doc

    async def _post_read(self, request: ResourceRequest) -> None:
        for hook in self.options.post_read:
            await _maybe_await(hook(request))

    # ── Reads ───────────────────────────────────────────────────────

    async def get_items(self, request: ResourceRequest) -> ResourceRequest:
        return await self._run(request, "get_items", self._get_items)

    async def _get_items(self, request: ResourceRequest) -> None:
        await self._read(request, await self._plan(request, FIND_OP))

    async def get_item(self, request: ResourceRequest) -> ResourceRequest:
        return await self._run(request, "get_item", self._get_item)

    async def _get_item(
        self, request: ResourceRequest, *, shallow: bool = False
    ) -> None:
        plan = await self._plan(request, FIND_ONE_OP)
        plan.where(self._store().id_filter(request.id))
        await self._read(request, plan, require_document=True, shallow=shallow)

    async def get_shallow(self, request: ResourceRequest) -> ResourceRequest:
        """Fetch one document with its nested values collapsed to ``True``.

        ``populate`` is ignored; references stay ids and are collapsed too
        when they are arrays.
        """
        return await self._run(request, "get_shallow", self._get_shallow)

    async def _get_shallow(self, request: ResourceRequest) -> None:
        if request.state.query is not None:
            request.state.query.populate = None
        await self._get_item(request, shallow=True)

    async def get_count(self, request: ResourceRequest) -> ResourceRequest:
        return await self._run(request, "get_count", self._get_count)

    async def _get_count(self, request: ResourceRequest) -> None:
        plan = self.builder.build(
            await self._plan(request, COUNT_OP), request.state.query
        )
        request.state.result = {"count": await plan.exec()}
        request.state.status_code = 200
        await self._post_read(request)

    async def _read(
        self,
        request: ResourceRequest,
        plan: MongoQueryPlan,
        *,
        require_document: bool = False,
        shallow: bool = False,
    ) -> None:
        state = request.state
        options: QueryOptions = state.query or QueryOptions()
        if options.distinct is not None and self.filter.is_excluded(
            options.distinct, state.access
        ):
            logger.debug(
                "%s: distinct on restricted field %s", self.name, options.distinct
            )
            state.result = []
            state.status_code = 200
            await self._post_read(request)
            return

        result = await self.builder.build(plan, options).exec()
        if options.distinct is None:
            if require_document and result is None:
                raise NotFoundError()
            self.filter.filter_object(result, state.access, options.populate)
            if shallow:
                result = _shallow(result)
        state.result = result
        state.status_code = 200
        await self._post_read(request)

    # ── Writes ──────────────────────────────────────────────────────

    def _writable_body(self, request: ResourceRequest) -> dict[str, Any]:
        if not isinstance(request.body, dict):
            raise ValidationError({"body": ["request body must be a JSON object"]})
        return self.filter.filter_body(request.body, request.state.access)

    async def create(self, request: ResourceRequest) -> ResourceRequest:
        return await self._run(request, "create", self._create, parse_query=False)

    async def _create(self, request: ResourceRequest) -> None:
        doc = await self._store().insert(self._writable_body(request))
        request.state.result = self.filter.filter_object(doc, request.state.access)
        request.state.status_code = 201

    async def modify(self, request: ResourceRequest) -> ResourceRequest:
        return await self._run(request, "modify", self._modify, parse_query=False)

    async def _modify(self, request: ResourceRequest) -> None:
        body = self._writable_body(request)
        current = await self._find_document(request)
        doc = await self._store().update({"_id": current["_id"]}, body)
        if doc is None:
            raise NotFoundError()
        request.state.result = self.filter.filter_object(doc, request.state.access)
        request.state.status_code = 200

    async def delete_item(self, request: ResourceRequest) -> ResourceRequest:
        return await self._run(
            request, "delete_item", self._delete_item, parse_query=False
        )

    async def _delete_item(self, request: ResourceRequest) -> None:
        current = await self._find_document(request)
        await self._store().delete_one({"_id": current["_id"]})
        request.state.result = None
        request.state.status_code = 204

    async def delete_items(self, request: ResourceRequest) -> ResourceRequest:
        return await self._run(request, "delete_items", self._delete_items)

    async def _delete_items(self, request: ResourceRequest) -> None:
        plan = await self._plan(request, FIND_OP)
        options: QueryOptions = request.state.query or QueryOptions()
        if options.query:
            plan.where(options.query)
        deleted = await self._store().delete_many(plan.filter)
        logger.info("%s: deleted %d document(s)", self.name, deleted)
        request.state.result = None
        request.state.status_code = 204
