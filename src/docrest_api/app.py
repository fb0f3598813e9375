"""DocRest — composition root for a set of resources."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from docrest_core import ConfigurationError
from docrest_persistence_mongo import MongoResourceStore
from docrest_visibility import ResourceRegistry

from .options import ResourceOptions
from .resource import Resource

if TYPE_CHECKING:
    from collections.abc import Iterator

    from docrest_persistence_mongo import MongoConnectionManager

logger = logging.getLogger("docrest.api")


class DocRest:
    """Register resources, then freeze them into a servable set.

    Registration order does not matter: references between resources are
    resolved when :meth:`freeze` runs, after every resource is known.
    """

    def __init__(
        self,
        connection: MongoConnectionManager,
        registry: ResourceRegistry | None = None,
    ) -> None:
        self.connection = connection
        self.registry = registry or ResourceRegistry()
        self._resources: dict[str, Resource] = {}

    def register(self, options: ResourceOptions | None = None, **kwargs: Any) -> Resource:
        """Register a resource from *options* or from keyword arguments."""
        if options is None:
            options = ResourceOptions(**kwargs)
        elif kwargs:
            options = options.model_copy(update=kwargs)
        resource = Resource(options, self.registry)
        self._resources[options.name] = resource
        logger.info("Registered resource %s", options.name)
        return resource

    def freeze(self) -> None:
        """Freeze visibility rules and bind a store to every resource.

        Raises:
            ConfigurationError: a reference names an unregistered resource.
        """
        self.registry.freeze()
        for resource in self._resources.values():
            if resource.store is not None:
                continue
            references = {}
            for path, target in resource.options.references.items():
                referenced = self._resources.get(target)
                if referenced is None:
                    raise ConfigurationError(
                        f"{resource.name}: reference {path!r} names "
                        f"unregistered resource {target!r}"
                    )
                references[path] = referenced.options.collection_name
            resource.store = MongoResourceStore(
                self.connection,
                resource.options.collection_name,
                id_property=resource.options.id_property,
                read_preference=resource.options.read_preference,
                references=references,
            )

    def get(self, name: str) -> Resource | None:
        return self._resources.get(name)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._resources.values())
