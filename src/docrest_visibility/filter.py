"""ResourceFilter — redact restricted fields, including across joins."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .paths import delete_path, is_within, iter_path

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from docrest_core.primitives.access import AccessLevel

    from .index import FieldVisibilityIndex
    from .registry import ResourceRegistry

logger = logging.getLogger("docrest.visibility")


def _populate_path(descriptor: Any) -> str | None:
    if isinstance(descriptor, Mapping):
        return descriptor.get("path")
    return getattr(descriptor, "path", None)


class ResourceFilter:
    """Apply one resource's visibility rules to documents it returns.

    ``references`` maps a dotted path of this resource to the name of the
    resource it refers to; populated sub-documents found at those paths
    are filtered with the referenced resource's rules. Paths without a
    reference entry (deep populates, unknown fields) are left untouched.
    """

    def __init__(
        self,
        index: FieldVisibilityIndex,
        *,
        references: Mapping[str, str] | None = None,
        registry: ResourceRegistry | None = None,
    ) -> None:
        self.index = index
        self.references = dict(references or {})
        self.registry = registry

    def get_excluded(self, access: AccessLevel | str) -> tuple[str, ...]:
        return self.index.excluded_for(access)

    @staticmethod
    def filter_item(target: Any, excluded: Sequence[str]) -> Any:
        """Delete every *excluded* path from a document or list of documents."""
        if target is None:
            return target
        for path in excluded:
            delete_path(target, path)
        return target

    def filter_populated_item(
        self,
        target: Any,
        populate: Iterable[Any] | None,
        excluded_map: Mapping[str, Sequence[str]],
    ) -> Any:
        """Filter sub-documents joined in by *populate*.

        *excluded_map* maps referenced resource names to the paths hidden
        from the caller.
        """
        if target is None:
            return target
        for descriptor in populate or ():
            path = _populate_path(descriptor)
            if not path:
                continue
            resource = self.references.get(path)
            if resource is None:
                logger.debug(
                    "%s: no reference registered for populate path %s",
                    self.index.resource,
                    path,
                )
                continue
            excluded = excluded_map.get(resource)
            if not excluded:
                continue
            for value in iter_path(target, path):
                self.filter_item(value, excluded)
        return target

    def filter_object(
        self,
        target: Any,
        access: AccessLevel | str,
        populate: Iterable[Any] | None = None,
    ) -> Any:
        """Apply this resource's rules, then the rules of populated references."""
        self.filter_item(target, self.get_excluded(access))
        if populate and self.registry is not None:
            self.filter_populated_item(
                target, populate, self.registry.excluded_map(access)
            )
        return target

    def filter_body(self, body: Any, access: AccessLevel | str) -> Any:
        """Strip fields the caller may not write from an incoming body."""
        return self.filter_item(body, self.get_excluded(access))

    def is_excluded(self, field: str, access: AccessLevel | str) -> bool:
        """True when *field* is hidden, or contains a hidden path."""
        return any(
            is_within(field, path) or is_within(path, field)
            for path in self.get_excluded(access)
        )
