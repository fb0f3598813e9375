"""FastAPI integration for docrest (requires docrest[fastapi])."""

from .router import build_router, serve, to_resource_request, to_response

__all__: list[str] = [
    "build_router",
    "serve",
    "to_resource_request",
    "to_response",
]
