"""QueryParameterParser — raw request parameters -> QueryOptions."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from .builder import coerce_count
from .exceptions import (
    InvalidJsonQueryError,
    InvalidLimitValueError,
    InvalidSkipValueError,
)
from .options import PopulateDescriptor, QueryOptions
from .syntax import JsonQuerySyntax, loads_if_json

logger = logging.getLogger("docrest.filtering")

KNOWN_KEYS = ("query", "sort", "skip", "limit", "select", "populate", "distinct")


class QueryParameterParser:
    """Parse loosely-typed request parameters into a ``QueryOptions``.

    Keys are matched case-insensitively and unknown keys are ignored.
    ``skip``, ``limit`` and ``distinct`` are passed through untouched;
    the plan builder validates them.

    Populate entries are checked here: their ``match`` goes through the
    same JSON rewrites as ``query`` and their ``options`` keep only a
    validated ``sort``, ``skip`` and ``limit``.
    """

    def __init__(self, *, allow_regex: bool = True) -> None:
        self.allow_regex = allow_regex
        self._query_syntax = JsonQuerySyntax(allow_regex=allow_regex)

    def parse(self, params: Mapping[str, Any] | None) -> QueryOptions:
        """Return the options found in *params*.

        Raises:
            InvalidJsonQueryError: ``query`` or a populate ``match`` is not a
                JSON object.
            InvalidSkipValueError: a populate ``skip`` is invalid.
            InvalidLimitValueError: a populate ``limit`` is invalid.
        """
        raw = self._normalise_keys(params or {})
        options = QueryOptions()
        if "query" in raw:
            options.query = self._query_syntax.parse(raw["query"])
        if "sort" in raw:
            options.sort = self._parse_sort(raw["sort"])
        if "skip" in raw:
            options.skip = raw["skip"]
        if "limit" in raw:
            options.limit = raw["limit"]
        if "distinct" in raw:
            options.distinct = raw["distinct"]
        if "select" in raw:
            options.select = self._parse_select(raw["select"])
        if "populate" in raw:
            options.populate = self._parse_populate(raw["populate"])
            if options.select:
                options.select = self._scope_select(options.populate, options.select)
        return options

    def _normalise_keys(self, params: Mapping[str, Any]) -> dict[str, Any]:
        raw: dict[str, Any] = {}
        for key, value in params.items():
            lowered = str(key).lower()
            if lowered in KNOWN_KEYS and value is not None:
                raw[lowered] = value
        return raw

    def _parse_sort(self, raw: Any) -> Any:
        if isinstance(raw, str):
            decoded = loads_if_json(raw, dict)
            return decoded if decoded is not None else raw
        if isinstance(raw, Mapping):
            return dict(raw)
        return raw

    def _parse_select(self, raw: Any) -> dict[str, int]:
        if isinstance(raw, str):
            decoded = loads_if_json(raw, dict, list)
            if decoded is not None:
                return self._parse_select(decoded)
            return self._parse_select_fields(raw.split(","))
        if isinstance(raw, Mapping):
            return {str(k): 1 if _truthy(v) else 0 for k, v in raw.items()}
        if isinstance(raw, (list, tuple)):
            fields: list[str] = []
            for item in raw:
                fields.extend(str(item).split(","))
            return self._parse_select_fields(fields)
        return {}

    @staticmethod
    def _parse_select_fields(fields: list[str]) -> dict[str, int]:
        select: dict[str, int] = {}
        for field in fields:
            name = field.strip()
            if not name:
                continue
            if name.startswith("-"):
                select[name[1:]] = 0
            else:
                select[name] = 1
        return select

    def _parse_populate(self, raw: Any) -> list[PopulateDescriptor]:
        if isinstance(raw, str):
            decoded = loads_if_json(raw, dict, list)
            if decoded is not None:
                return self._parse_populate(decoded)
            items: list[Any] = [p for p in raw.split(",") if p.strip()]
        elif isinstance(raw, Mapping):
            items = [raw]
        elif isinstance(raw, (list, tuple)):
            items = []
            for item in raw:
                if isinstance(item, str):
                    items.extend(p for p in item.split(",") if p.strip())
                else:
                    items.append(item)
        else:
            items = []
        descriptors = [PopulateDescriptor.from_value(item) for item in items]
        for descriptor in descriptors:
            if descriptor.match is not None:
                descriptor.match = self._query_syntax.parse(descriptor.match)
            if descriptor.options is not None:
                descriptor.options = self._parse_populate_options(descriptor.options)
        return descriptors

    def _parse_populate_options(self, raw: Any) -> dict[str, Any]:
        if isinstance(raw, str):
            raw = loads_if_json(raw, dict)
        if not isinstance(raw, Mapping):
            raise InvalidJsonQueryError(
                "populate options must be a JSON object", field="populate"
            )
        options: dict[str, Any] = {}
        if raw.get("sort") is not None:
            options["sort"] = self._parse_sort(raw["sort"])
        if raw.get("skip") is not None:
            options["skip"] = coerce_count(raw["skip"], "skip", InvalidSkipValueError)
        if raw.get("limit") is not None:
            options["limit"] = coerce_count(
                raw["limit"], "limit", InvalidLimitValueError
            )
        return options

    @staticmethod
    def _scope_select(
        populate: list[PopulateDescriptor],
        select: dict[str, int],
    ) -> dict[str, int] | None:
        """Move ``<path>.<field>`` selections onto the matching populate entry.

        When the remaining selection is inclusive, each populated path is
        included so the joined document is still fetched. Returns the
        top-level selection, or None when nothing is left of it.
        """
        remaining = dict(select)
        for descriptor in populate:
            if not descriptor.path:
                continue
            prefix = descriptor.path + "."
            scoped: list[str] = []
            for key in list(remaining):
                if key.startswith(prefix):
                    sub = key[len(prefix):]
                    scoped.append(sub if remaining.pop(key) else "-" + sub)
            if scoped:
                joined = " ".join(scoped)
                descriptor.select = (
                    f"{descriptor.select} {joined}" if descriptor.select else joined
                )
        if any(remaining.values()):
            for descriptor in populate:
                if descriptor.path and descriptor.path not in remaining:
                    remaining[descriptor.path] = 1
        logger.debug("Scoped select %s onto populate %s", select, populate)
        return remaining or None


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return bool(value)
    return bool(value)
