"""ResourceRegistry — process-wide, read-only visibility indexes by resource."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from docrest_core.primitives.access import AccessLevel
from docrest_core.primitives.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from .index import FieldVisibilityIndex

logger = logging.getLogger("docrest.visibility")


class ResourceRegistry:
    """Holds every resource's ``FieldVisibilityIndex``.

    Populated by the composition root while resources are registered,
    then frozen. Once frozen it never changes, so requests can read it
    concurrently without locking.
    """

    def __init__(self) -> None:
        self._indexes: dict[str, FieldVisibilityIndex] = {}
        self._excluded: dict[AccessLevel, Mapping[str, tuple[str, ...]]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, index: FieldVisibilityIndex) -> None:
        if self._frozen:
            raise ConfigurationError(
                f"Cannot register {index.resource!r}: registry is frozen"
            )
        if index.resource in self._indexes:
            logger.warning(
                "Resource %s registered twice; the last registration wins",
                index.resource,
            )
        self._indexes[index.resource] = index

    def freeze(self) -> None:
        """Precompute excluded-path maps and reject further registration."""
        if self._frozen:
            return
        for level in AccessLevel:
            self._excluded[level] = MappingProxyType(
                {name: index.excluded_for(level) for name, index in self._indexes.items()}
            )
        self._frozen = True

    def get(self, resource: str) -> FieldVisibilityIndex | None:
        return self._indexes.get(resource)

    def excluded_map(self, access: AccessLevel | str) -> Mapping[str, tuple[str, ...]]:
        """Map every registered resource to the paths *access* may not see."""
        level = AccessLevel.parse(access)
        if self._frozen:
            return self._excluded[level]
        return MappingProxyType(
            {name: index.excluded_for(level) for name, index in self._indexes.items()}
        )

    def __contains__(self, resource: object) -> bool:
        return resource in self._indexes

    def __iter__(self) -> Iterator[str]:
        return iter(self._indexes)

    def __len__(self) -> int:
        return len(self._indexes)
