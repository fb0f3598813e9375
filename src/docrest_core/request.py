"""Request-scoped state shared by every pipeline stage.

The HTTP layer is an external collaborator; it builds a ``ResourceRequest``
from whatever framework request it received and reads the outcome back
from ``ResourceRequest.state`` once the pipeline has finished.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .primitives.access import AccessLevel


@dataclass
class RequestState:
    """Mutable per-request state, owned by exactly one pipeline run.

    Attributes:
        access: Access level resolved for the caller.
        query: Structured query options produced by the parameter parser.
        status_code: HTTP-like status; only ever raised once it reaches 400.
        document: Document loaded for item-level operations.
        result: Payload to serialize (documents, values, count or error body).
        error_reported: Set once the failure channel has handled an error.
    """

    access: AccessLevel | None = None
    query: Any = None
    status_code: int | None = None
    document: dict[str, Any] | None = None
    result: Any = None
    error_reported: bool = False


@dataclass
class ResourceRequest:
    """Framework-neutral view of an incoming request."""

    method: str = "GET"
    path: str | None = None
    path_params: Mapping[str, str] = field(default_factory=dict)
    query_params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    native: Any = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    state: RequestState = field(default_factory=RequestState)

    @property
    def id(self) -> str | None:
        """Identifier captured from the path, if any."""
        return self.path_params.get("id")
