"""build_pipeline — construct the stage chain; run_pipeline — guard it."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..primitives.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ..error_handler import ErrorHandler
    from ..ports import IStage
    from ..request import ResourceRequest


def build_pipeline(
    stages: list[IStage],
    handler_fn: Callable[[ResourceRequest], Awaitable[Any]],
) -> Callable[[ResourceRequest], Awaitable[Any]]:
    """Build a LIFO stage chain ending at *handler_fn*.

    The first stage in the list is the **outermost** wrapper.
    Each stage must implement: ``async def __call__(request, next_stage)``.
    """
    pipeline: Callable[[ResourceRequest], Awaitable[Any]] = handler_fn

    for stage in reversed(stages):
        current_next = pipeline  # capture for closure

        async def _wrapper(
            request: ResourceRequest,
            _stage: IStage = stage,
            _next: Callable[[ResourceRequest], Awaitable[Any]] = current_next,
        ) -> Any:
            return await _stage(request, _next)

        pipeline = _wrapper

    return pipeline


async def run_pipeline(
    pipeline: Callable[[ResourceRequest], Awaitable[Any]],
    request: ResourceRequest,
    error_handler: ErrorHandler,
) -> ResourceRequest:
    """Run *pipeline*, routing any request failure through *error_handler*.

    Configuration errors are programmer errors and propagate unchanged.
    """
    try:
        await pipeline(request)
    except ConfigurationError:
        raise
    except Exception as err:  # noqa: BLE001
        await error_handler(err, request)
    return request
