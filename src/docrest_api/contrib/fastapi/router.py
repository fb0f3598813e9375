"""FastAPI routes for registered resources.

Mounts the REST surface of a :class:`~docrest_api.Resource` on an app::

    GET    {prefix}/{name}                  list
    GET    {prefix}/{name}/count            count
    POST   {prefix}/{name}                  create
    DELETE {prefix}/{name}                  delete matching documents
    GET    {prefix}/{name}/{id}             fetch one
    GET    {prefix}/{name}/{id}/shallow     fetch one, nested values collapsed
    PUT    {prefix}/{name}/{id}             modify
    PATCH  {prefix}/{name}/{id}             modify
    POST   {prefix}/{name}/{id}             modify
    DELETE {prefix}/{name}/{id}             delete one
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from docrest_core import ResourceRequest
from docrest_persistence_mongo import to_jsonable

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from fastapi import FastAPI

    from ...resource import Resource

    Operation = Callable[[ResourceRequest], Awaitable[ResourceRequest]]


async def _read_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        # Left as text; write operations reject non-object bodies.
        return raw.decode("utf-8", errors="replace")


async def to_resource_request(request: Request) -> ResourceRequest:
    """Build a framework-neutral request from a Starlette request."""
    body = None
    if request.method in ("POST", "PUT", "PATCH"):
        body = await _read_body(request)
    return ResourceRequest(
        method=request.method,
        path=request.url.path,
        path_params=dict(request.path_params),
        query_params=dict(request.query_params),
        headers=dict(request.headers),
        body=body,
        native=request,
    )


def to_response(request: ResourceRequest) -> Response:
    state = request.state
    status_code = state.status_code or 200
    if status_code == 204:
        return Response(status_code=204)
    return JSONResponse(to_jsonable(state.result), status_code=status_code)


def _endpoint(operation: Operation) -> Callable[[Request], Awaitable[Response]]:
    async def endpoint(request: Request) -> Response:
        resource_request = await to_resource_request(request)
        return to_response(await operation(resource_request))

    return endpoint


def build_router(resource: Resource, prefix: str = "/api/v1") -> APIRouter:
    """Return an ``APIRouter`` exposing *resource*."""
    base = f"{prefix.rstrip('/')}/{resource.name}"
    router = APIRouter()
    router.add_api_route(base, _endpoint(resource.get_items), methods=["GET"])
    router.add_api_route(f"{base}/count", _endpoint(resource.get_count), methods=["GET"])
    router.add_api_route(base, _endpoint(resource.create), methods=["POST"])
    router.add_api_route(base, _endpoint(resource.delete_items), methods=["DELETE"])
    router.add_api_route(f"{base}/{{id}}", _endpoint(resource.get_item), methods=["GET"])
    router.add_api_route(
        f"{base}/{{id}}/shallow", _endpoint(resource.get_shallow), methods=["GET"]
    )
    router.add_api_route(
        f"{base}/{{id}}", _endpoint(resource.modify), methods=["PUT", "PATCH", "POST"]
    )
    router.add_api_route(
        f"{base}/{{id}}", _endpoint(resource.delete_item), methods=["DELETE"]
    )
    return router


def serve(
    app: FastAPI,
    resource: Resource | Iterable[Resource],
    prefix: str = "/api/v1",
) -> None:
    """Mount one resource, or every resource of a ``DocRest``, on *app*.

    Example:
        ```python
        api = DocRest(MongoConnectionManager(url, database="shop"))
        api.register(name="customers", private=("password",))
        api.freeze()

        app = FastAPI()
        serve(app, api)
        ```
    """
    resources = [resource] if hasattr(resource, "get_items") else list(resource)
    for item in resources:
        app.include_router(build_router(item, prefix))
