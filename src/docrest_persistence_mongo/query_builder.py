"""Mongo find arguments from request-level sort/select values."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pymongo import ReadPreference

from .exceptions import MongoQueryError

_READ_PREFERENCES = {
    "p": ReadPreference.PRIMARY,
    "primary": ReadPreference.PRIMARY,
    "pp": ReadPreference.PRIMARY_PREFERRED,
    "primarypreferred": ReadPreference.PRIMARY_PREFERRED,
    "s": ReadPreference.SECONDARY,
    "secondary": ReadPreference.SECONDARY,
    "sp": ReadPreference.SECONDARY_PREFERRED,
    "secondarypreferred": ReadPreference.SECONDARY_PREFERRED,
    "n": ReadPreference.NEAREST,
    "nearest": ReadPreference.NEAREST,
}

_SEPARATORS = re.compile(r"[\s,]+")


def _direction(value: Any) -> int:
    text = str(value).strip().lower()
    if text in ("-1", "desc", "descending"):
        return -1
    if text in ("1", "asc", "ascending"):
        return 1
    raise MongoQueryError(f"Invalid sort direction {value!r}")


class MongoQueryBuilder:
    """Compile request-level sort and projection values for ``find``."""

    def build_sort(self, sort: Any) -> list[tuple[str, int]]:
        """Build MongoDB sort tuples.

        Accepts ``{field: 1|-1|"asc"|"desc"}``, ``[(field, direction)]`` or a
        string of comma- or space-separated fields such as ``"-age,name"``.
        """
        if not sort:
            return []
        if isinstance(sort, Mapping):
            return [(str(field), _direction(d)) for field, d in sort.items()]
        if isinstance(sort, str):
            result: list[tuple[str, int]] = []
            for item in _SEPARATORS.split(sort.strip()):
                if not item:
                    continue
                if item.startswith("-"):
                    result.append((item[1:], -1))
                else:
                    result.append((item.lstrip("+"), 1))
            return result
        if isinstance(sort, (list, tuple)):
            return [(str(field), _direction(d)) for field, d in sort]
        raise MongoQueryError(f"Unsupported sort value {sort!r}")

    def build_projection(self, select: Any) -> dict[str, int] | None:
        """Build a projection from a mapping or a ``"a -b"`` string. None = all."""
        if not select:
            return None
        if isinstance(select, Mapping):
            return {str(k): 1 if v else 0 for k, v in select.items()}
        if isinstance(select, str):
            projection: dict[str, int] = {}
            for item in _SEPARATORS.split(select.strip()):
                if not item:
                    continue
                if item.startswith("-"):
                    projection[item[1:]] = 0
                else:
                    projection[item] = 1
            return projection or None
        raise MongoQueryError(f"Unsupported select value {select!r}")

    @staticmethod
    def read_preference(name: str | None) -> Any:
        if not name:
            return ReadPreference.PRIMARY
        try:
            return _READ_PREFERENCES[name.replace("_", "").lower()]
        except KeyError:
            raise MongoQueryError(f"Unknown read preference {name!r}") from None
