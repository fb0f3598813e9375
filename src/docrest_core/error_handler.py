"""ErrorHandler — the single failure channel of a request pipeline."""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

from .primitives.exceptions import CastError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .request import ResourceRequest

    OnError = Callable[[BaseException, ResourceRequest], Awaitable[Any] | Any]

logger = logging.getLogger("docrest.errors")

NOT_FOUND_MESSAGE = "Not Found"


def default_on_error(error: BaseException, request: ResourceRequest) -> None:
    """Describe *error* as the response payload."""
    request.state.result = {
        "name": type(error).__name__,
        "message": str(error),
    }


class ErrorHandler:
    """Classify a failure and hand it to the configured ``on_error`` callable.

    Status classification:

    * ``Not Found`` errors map to 404;
    * a ``CastError`` on the id property while a path id is present maps
      to 404;
    * everything else maps to 400, unless the request already carries a
      status of 400 or more (a status never goes back down).

    Each request is reported at most once.
    """

    def __init__(
        self,
        on_error: OnError | None = None,
        *,
        id_property: str = "_id",
    ) -> None:
        self._on_error = on_error or default_on_error
        self._id_property = id_property

    def classify(self, error: BaseException, request: ResourceRequest) -> int:
        if isinstance(error, NotFoundError) or str(error) == NOT_FOUND_MESSAGE:
            return 404
        if (
            request.id
            and isinstance(error, CastError)
            and error.path == self._id_property
        ):
            return 404
        current = request.state.status_code
        return current if current and current >= 400 else 400

    async def __call__(self, error: BaseException, request: ResourceRequest) -> Any:
        state = request.state
        if state.error_reported:
            logger.warning(
                "Ignoring second failure report for request %s: %r",
                request.request_id,
                error,
            )
            return None
        state.error_reported = True
        state.status_code = self.classify(error, request)
        logger.debug(
            "Request %s failed with status %s: %s",
            request.request_id,
            state.status_code,
            error,
        )
        result = self._on_error(error, request)
        if inspect.isawaitable(result):
            result = await result
        return result
