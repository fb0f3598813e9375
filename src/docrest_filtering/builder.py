"""QueryPlanBuilder — apply QueryOptions onto a store query plan."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, TypeVar

from .exceptions import InvalidLimitValueError, InvalidSkipValueError
from .plan import COUNT_OP, DISTINCT_OP

if TYPE_CHECKING:
    from docrest_core.primitives.exceptions import RequestFormatError

    from .options import QueryOptions
    from .plan import IQueryPlan

logger = logging.getLogger("docrest.filtering")

TPlan = TypeVar("TPlan", bound="IQueryPlan")

_INTEGER = re.compile(r"^\d+$")


def coerce_count(
    value: Any, field: str, error_cls: type[RequestFormatError]
) -> int:
    if isinstance(value, bool):
        raise error_cls(f"{field} must be an integer", field=field)
    if isinstance(value, int):
        if value < 0:
            raise error_cls(f"{field} must not be negative", field=field)
        return value
    text = str(value).strip()
    if not _INTEGER.match(text):
        raise error_cls(f"{field} must be a non-negative integer, got {value!r}", field=field)
    return int(text)


class QueryPlanBuilder:
    """Apply request options onto a query plan, in a fixed order.

    1. ``query`` -> ``where``.
    2. ``distinct`` -> ``distinct``; nothing else is applied. A count plan
       ignores ``distinct`` and always counts.
    3. ``sort`` and ``skip``, unless the plan is a count.
    4. ``limit``, unless the plan is a count or distinct. A static limit
       caps the requested one and applies alone when none is requested
       or the request asks for ``0``.
    5. ``select`` then ``populate``.

    ``skip`` and ``limit`` are validated before anything is applied.
    """

    def __init__(self, *, limit: int | None = None) -> None:
        self.static_limit = limit

    def build(self, plan: TPlan, options: QueryOptions | None = None) -> TPlan:
        """Return *plan* with *options* applied.

        Raises:
            InvalidSkipValueError: ``skip`` is not a non-negative integer.
            InvalidLimitValueError: ``limit`` is not a non-negative integer.
        """
        if options is None:
            return plan
        op = getattr(plan, "op", None)
        distinct = options.distinct if op != COUNT_OP else None
        paginated = distinct is None and op not in (COUNT_OP, DISTINCT_OP)

        skip = limit = None
        if paginated:
            if options.skip is not None:
                skip = coerce_count(options.skip, "skip", InvalidSkipValueError)
            limit = self._resolve_limit(options.limit)

        if options.query is not None:
            plan.where(options.query)

        if distinct is not None:
            plan.distinct(distinct)
            return plan

        if op != COUNT_OP and options.sort is not None:
            plan.sort(options.sort)
        if skip is not None:
            plan.skip(skip)
        if limit is not None:
            plan.limit(limit)
        if options.select is not None:
            plan.select(options.select)
        if options.populate is not None:
            plan.populate(options.populate)
        return plan

    def _resolve_limit(self, requested: Any) -> int | None:
        if requested is not None:
            limit = coerce_count(requested, "limit", InvalidLimitValueError)
            if limit == 0:
                # 0 asks for no explicit limit
                return self.static_limit
            if self.static_limit is not None:
                return min(limit, self.static_limit)
            return limit
        return self.static_limit
