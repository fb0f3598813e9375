"""PrepareQueryMiddleware — parse request parameters into request state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from docrest_core.ports import IStage

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from docrest_core.request import ResourceRequest

    from .parser import QueryParameterParser


class PrepareQueryMiddleware(IStage):
    """Stores the parsed ``QueryOptions`` on ``request.state.query``.

    A parse failure raises, so the remaining stages never run.
    """

    def __init__(self, parser: QueryParameterParser) -> None:
        self.parser = parser

    async def __call__(
        self,
        request: ResourceRequest,
        next_stage: Callable[[ResourceRequest], Awaitable[Any]],
    ) -> Any:
        request.state.query = self.parser.parse(request.query_params)
        return await next_stage(request)
