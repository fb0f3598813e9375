"""BSON document -> JSON-ready data, and identifier casting."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from bson import Decimal128, ObjectId

from docrest_core.primitives.exceptions import CastError


def to_jsonable(value: Any) -> Any:
    """Convert BSON types to values a JSON encoder accepts."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, Decimal128):
        return str(value.to_decimal())
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def cast_object_id(value: Any, path: str = "_id") -> ObjectId:
    """Return *value* as an ObjectId or raise CastError for *path*."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise CastError("ObjectId", value, path)


def flatten_update(body: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Turn nested dicts into dotted ``$set`` keys so partial updates merge."""
    flat: dict[str, Any] = {}
    for key, value in body.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict) and value:
            flat.update(flatten_update(value, dotted + "."))
        else:
            flat[dotted] = value
    return flat
