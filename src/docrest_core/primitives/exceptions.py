"""Configuration, request-format and infrastructure exceptions for docrest."""

from __future__ import annotations

from typing import Any


class DocRestError(Exception):
    """Root exception for the entire docrest toolkit."""


class ConfigurationError(DocRestError):
    """Raised for programmer errors in resource configuration.

    These are never routed through a request's failure channel; they
    propagate to whoever invoked the pipeline.
    """


class UnsupportedAccessError(ConfigurationError):
    """Raised when an access resolver yields something other than an access level."""

    def __init__(self, value: object = None) -> None:
        self.value = value
        super().__init__(
            'Unsupported access, must be "private", "protected" or "public"'
        )


class ValidationError(DocRestError):
    """Raised when request input fails validation.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


class RequestFormatError(ValidationError):
    """A request parameter could not be interpreted.

    ``code`` is a stable identifier (``invalid_json_query``, ...) and is
    also the string form of the exception.
    """

    code: str = "invalid_request"

    def __init__(self, detail: str | None = None, *, field: str | None = None) -> None:
        self.detail = detail
        self.field = field
        super().__init__({field or "__root__": [detail or self.code]})

    def __str__(self) -> str:
        return self.code


class NotFoundError(DocRestError):
    """Raised when no document matches the requested identifier."""

    def __init__(self, message: str = "Not Found") -> None:
        super().__init__(message)


class CastError(DocRestError):
    """Raised when a value cannot be cast to the type a field requires.

    ``path`` names the field (``_id`` for identifier lookups).
    """

    def __init__(self, kind: str, value: Any, path: str) -> None:
        self.kind = kind
        self.value = value
        self.path = path
        super().__init__(
            f'Cast to {kind} failed for value "{value}" at path "{path}"'
        )


class InfrastructureError(DocRestError):
    """Base class for all infrastructure-related errors."""


class PersistenceError(InfrastructureError):
    """Base class for all persistence-related errors."""
