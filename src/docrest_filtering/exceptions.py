"""Filtering package exceptions."""

from __future__ import annotations

from docrest_core.primitives.exceptions import RequestFormatError


class InvalidJsonQueryError(RequestFormatError):
    """Raised when the ``query`` parameter is not a JSON object."""

    code = "invalid_json_query"


class InvalidSkipValueError(RequestFormatError):
    """Raised when ``skip`` is not a non-negative integer."""

    code = "invalid_skip_value"


class InvalidLimitValueError(RequestFormatError):
    """Raised when ``limit`` is not a non-negative integer."""

    code = "invalid_limit_value"
