"""AccessResolver — turn a request into one of the three access levels."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from docrest_core.ports import IStage
from docrest_core.primitives.access import AccessLevel

from .context import reset_current_access, set_current_access
from .specs import AsyncAccessSpec, SyncAccessSpec

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from docrest_core.request import ResourceRequest

    from .specs import AccessSpec

logger = logging.getLogger("docrest.access")


class AccessResolver:
    """Resolve and validate the caller's access level.

    Without an access spec every request is ``public``. Values outside
    ``{public, protected, private}`` raise ``UnsupportedAccessError``, a
    configuration error that is never reported through the failure
    channel.
    """

    def __init__(self, spec: AccessSpec | None = None) -> None:
        if spec is not None and not isinstance(spec, (SyncAccessSpec, AsyncAccessSpec)):
            raise TypeError(
                "access must be a SyncAccessSpec or AsyncAccessSpec, "
                f"got {type(spec).__name__}"
            )
        self._spec = spec

    async def resolve(self, request: ResourceRequest) -> AccessLevel:
        spec = self._spec
        if spec is None:
            return AccessLevel.PUBLIC
        if isinstance(spec, AsyncAccessSpec):
            value = await spec.fn(request)
        else:
            value = spec.fn(request)
        return AccessLevel.parse(value)


class AccessMiddleware(IStage):
    """Pipeline stage storing the resolved level on ``request.state``."""

    def __init__(self, resolver: AccessResolver) -> None:
        self.resolver = resolver

    async def __call__(
        self,
        request: ResourceRequest,
        next_stage: Callable[[ResourceRequest], Awaitable[Any]],
    ) -> Any:
        level = await self.resolver.resolve(request)
        request.state.access = level
        logger.debug("Request %s resolved to %s access", request.request_id, level.value)
        token = set_current_access(level)
        try:
            return await next_stage(request)
        finally:
            reset_current_access(token)
