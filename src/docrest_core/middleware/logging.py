"""LoggingMiddleware — logs request pipeline execution details."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from ..ports import IStage
from ..primitives.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ..request import ResourceRequest

logger = logging.getLogger("docrest.middleware")


class LoggingMiddleware(IStage):
    """Logs pipeline execution — operation, resource, duration, request_id."""

    def __init__(self, resource_name: str, operation: str) -> None:
        self.resource_name = resource_name
        self.operation = operation

    async def __call__(
        self,
        request: ResourceRequest,
        next_stage: Callable[[ResourceRequest], Awaitable[Any]],
    ) -> Any:
        """Log the stage chain execution."""
        label = f"{self.operation} {self.resource_name}"
        logger.info(
            "Handling %s (request_id=%s)",
            label,
            request.request_id,
        )
        start = time.perf_counter()
        try:
            result = await next_stage(request)
            elapsed = (time.perf_counter() - start) * 1000
            logger.info("%s completed in %.2fms", label, elapsed)
            return result
        except ConfigurationError:
            # Raised to the caller unlogged.
            raise
        except Exception:
            elapsed = (time.perf_counter() - start) * 1000
            logger.exception("%s failed after %.2fms", label, elapsed)
            raise
