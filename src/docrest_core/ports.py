"""IStage — protocol for request pipeline stages."""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .request import ResourceRequest


@runtime_checkable
class IStage(Protocol):
    """A single step of the request pipeline.

    A stage either calls ``next_stage`` to continue or raises to abort the
    request. The chain is applied in **LIFO** order (first registered =
    outermost).
    """

    async def __call__(
        self,
        request: ResourceRequest,
        next_stage: Callable[[ResourceRequest], Awaitable[Any]],
    ) -> Any:
        """Execute stage logic and call next_stage to proceed.

        Parameters
        ----------
        request:
            The request being processed; stages communicate through
            ``request.state``.
        next_stage:
            Async callable representing the rest of the pipeline.

        Returns
        -------
        The result from the rest of the chain.
        """
        ...
