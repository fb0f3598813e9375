"""ResourceOptions — immutable per-resource configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docrest_access.specs import AsyncAccessSpec, SyncAccessSpec


class ResourceOptions(BaseModel):
    """Configuration supplied when a resource is registered.

    Attributes:
        name: Resource type identifier; also the URL segment.
        collection: Collection name; defaults to ``name``.
        private: Dotted paths visible only to ``private`` callers.
        protected: Dotted paths visible to ``protected`` and ``private`` callers.
        access: ``SyncAccessSpec`` or ``AsyncAccessSpec``; ``None`` means public.
        limit: Server-side cap on the number of returned documents.
        context_filter: ``fn(request)`` returning a base filter document,
            or an awaitable of one; AND-ed into every query.
        read_preference: Read preference used for queries.
        id_property: Field the ``{id}`` path segment is matched against.
        allow_regex: Whether ``$regex`` is accepted in client queries.
        references: Dotted path -> name of the resource it refers to.
        on_error: Failure handler ``fn(error, request)``.
        post_read: Hooks ``fn(request)`` run after output filtering.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    collection: str | None = None
    private: tuple[str, ...] = ()
    protected: tuple[str, ...] = ()
    access: Any = None
    limit: int | None = Field(default=None, ge=0)
    context_filter: Callable[..., Any] | None = None
    read_preference: str = "primary"
    id_property: str = "_id"
    allow_regex: bool = True
    references: dict[str, str] = Field(default_factory=dict)
    on_error: Callable[..., Any] | None = None
    post_read: tuple[Callable[..., Any], ...] = ()

    @field_validator("access")
    @classmethod
    def _check_access(cls, value: Any) -> Any:
        if value is None or isinstance(value, (SyncAccessSpec, AsyncAccessSpec)):
            return value
        raise ValueError("access must be a SyncAccessSpec or AsyncAccessSpec")

    @property
    def collection_name(self) -> str:
        return self.collection or self.name
