"""Access specifications — how a resource decides a caller's access level.

A specification is chosen explicitly when the resource is registered:
``SyncAccessSpec`` wraps a plain function of the request,
``AsyncAccessSpec`` wraps a coroutine function of the request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from docrest_core.request import ResourceRequest


@dataclass(frozen=True)
class SyncAccessSpec:
    """Resolve the access level by calling ``fn(request)``."""

    fn: Callable[[ResourceRequest], Any]


@dataclass(frozen=True)
class AsyncAccessSpec:
    """Resolve the access level by awaiting ``fn(request)``.

    Exceptions raised by ``fn`` are request failures and go through the
    failure channel.
    """

    fn: Callable[[ResourceRequest], Awaitable[Any]]


AccessSpec = Union[SyncAccessSpec, AsyncAccessSpec]


def fixed_access(level: str) -> SyncAccessSpec:
    """Spec that grants the same level to every request."""
    return SyncAccessSpec(lambda _request: level)
