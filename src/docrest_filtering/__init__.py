"""Request query parsing and query plan building."""

from __future__ import annotations

from .builder import QueryPlanBuilder
from .exceptions import (
    InvalidJsonQueryError,
    InvalidLimitValueError,
    InvalidSkipValueError,
)
from .middleware import PrepareQueryMiddleware
from .options import PopulateDescriptor, QueryOptions
from .parser import QueryParameterParser
from .plan import COUNT_OP, DISTINCT_OP, IQueryPlan
from .syntax import JsonQuerySyntax

__all__ = [
    "COUNT_OP",
    "DISTINCT_OP",
    "IQueryPlan",
    "InvalidJsonQueryError",
    "InvalidLimitValueError",
    "InvalidSkipValueError",
    "JsonQuerySyntax",
    "PopulateDescriptor",
    "PrepareQueryMiddleware",
    "QueryOptions",
    "QueryParameterParser",
    "QueryPlanBuilder",
]
