"""JSON parameter syntax — decoding of JSON-encoded request parameters."""

from __future__ import annotations

import json
from typing import Any

from .exceptions import InvalidJsonQueryError

# Keys whose array values are literal arrays rather than "IN" lists.
_LITERAL_ARRAY_KEYS = frozenset({"coordinates"})


def _keep_literal(key: str) -> bool:
    return key.startswith("$") or key in _LITERAL_ARRAY_KEYS


class JsonQuerySyntax:
    """Decode a ``query`` parameter with the filter convenience rewrites.

    Every JSON object is revisited, at any depth (including inside
    ``$or``/``$and`` arrays):

    * an array value becomes ``{"$in": array}``, except under operator keys
      (``$in``, ``$or``, ...) and GeoJSON ``coordinates``;
    * when *allow_regex* is false, ``$regex`` keys are dropped.
    """

    def __init__(self, *, allow_regex: bool = True) -> None:
        self.allow_regex = allow_regex

    def _object_pairs_hook(self, pairs: list[tuple[str, Any]]) -> dict[str, Any]:
        obj: dict[str, Any] = {}
        for key, value in pairs:
            if key == "$regex" and not self.allow_regex:
                continue
            if isinstance(value, list) and not _keep_literal(key):
                value = {"$in": value}
            obj[key] = value
        return obj

    def parse(self, raw: Any) -> dict[str, Any]:
        if isinstance(raw, (str, bytes, bytearray)):
            try:
                data = json.loads(raw, object_pairs_hook=self._object_pairs_hook)
            except ValueError as e:
                raise InvalidJsonQueryError(str(e), field="query") from e
        elif isinstance(raw, dict):
            # Already decoded by the framework; run it through the same rewrites.
            data = json.loads(
                json.dumps(raw, default=str),
                object_pairs_hook=self._object_pairs_hook,
            )
        else:
            raise InvalidJsonQueryError(f"Unsupported query value {raw!r}", field="query")
        if not isinstance(data, dict):
            raise InvalidJsonQueryError("query must be a JSON object", field="query")
        return data


def loads_if_json(raw: str, *types: type) -> Any:
    """Decode *raw* when it holds JSON of one of *types*; else return None."""
    text = raw.strip()
    if not text or text[0] not in "{[":
        return None
    try:
        data = json.loads(text)
    except ValueError:
        return None
    return data if isinstance(data, types) else None
