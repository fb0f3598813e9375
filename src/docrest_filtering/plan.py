"""IQueryPlan — protocol for the store's stateful query builder."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

COUNT_OP = "count"
DISTINCT_OP = "distinct"


@runtime_checkable
class IQueryPlan(Protocol):
    """Query builder owned by the store collaborator.

    ``op`` names the operation the plan will run (``find``, ``find_one``,
    ``count``, ``distinct``). Each builder method records its argument
    and returns the plan.
    """

    op: str

    def where(self, query: dict[str, Any]) -> Any: ...

    def sort(self, sort: Any) -> Any: ...

    def skip(self, skip: int) -> Any: ...

    def limit(self, limit: int) -> Any: ...

    def select(self, select: dict[str, int]) -> Any: ...

    def populate(self, populate: list[Any]) -> Any: ...

    def distinct(self, field: str) -> Any: ...
