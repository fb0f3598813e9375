"""QueryOptions — structured query parameters of a single request."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass
class PopulateDescriptor:
    """A reference path to join, with optional sub-selection and match."""

    path: str
    select: str | None = None
    match: dict[str, Any] | None = None
    options: dict[str, Any] | None = None

    @classmethod
    def from_value(cls, value: Any) -> PopulateDescriptor:
        if isinstance(value, PopulateDescriptor):
            return value
        if isinstance(value, str):
            return cls(path=value.strip())
        if isinstance(value, Mapping):
            select = value.get("select")
            if isinstance(select, (list, tuple)):
                select = " ".join(str(s) for s in select)
            return cls(
                path=str(value.get("path") or ""),
                select=select,
                match=value.get("match"),
                options=value.get("options"),
            )
        raise TypeError(f"Cannot build a populate descriptor from {value!r}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": self.path}
        for key in ("select", "match", "options"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass
class QueryOptions:
    """Parsed request query options.

    Created fresh per request by ``QueryParameterParser``, consumed once by
    ``QueryPlanBuilder``. Every field is optional; ``None`` means absent.

    Attributes:
        query: Filter document in the store's query language.
        sort: Mapping of field to direction, or a raw sort string.
        skip: Raw skip value; coerced by the plan builder.
        limit: Raw limit value; coerced by the plan builder.
        select: Mapping of dotted path to 1 (include) or 0 (exclude).
        populate: References to join, in request order.
        distinct: Field whose distinct values are requested.
    """

    query: dict[str, Any] | None = None
    sort: Any = None
    skip: Any = None
    limit: Any = None
    select: dict[str, int] | None = None
    populate: list[PopulateDescriptor] | None = None
    distinct: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise present options to plain data."""
        result: dict[str, Any] = {}
        for key in ("query", "sort", "skip", "limit", "select", "distinct"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.populate is not None:
            result["populate"] = [p.to_dict() for p in self.populate]
        return result
