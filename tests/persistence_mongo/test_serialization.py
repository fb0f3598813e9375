from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest
from bson import Decimal128, ObjectId

from docrest_core import CastError
from docrest_persistence_mongo import cast_object_id, to_jsonable
from docrest_persistence_mongo.serialization import flatten_update

OID = "5f1d7f0e8f1b2c3d4e5f6a7b"


def test_to_jsonable_converts_bson_types() -> None:
    doc = {
        "_id": ObjectId(OID),
        "price": Decimal128("9.99"),
        "tax": Decimal("1.5"),
        "at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        "key": UUID("12345678-1234-5678-1234-567812345678"),
        "refs": [ObjectId(OID), {"nested": ObjectId(OID)}],
        "plain": 3,
    }

    assert to_jsonable(doc) == {
        "_id": OID,
        "price": "9.99",
        "tax": "1.5",
        "at": "2024-01-02T03:04:05+00:00",
        "key": "12345678-1234-5678-1234-567812345678",
        "refs": [OID, {"nested": OID}],
        "plain": 3,
    }


def test_cast_object_id() -> None:
    assert cast_object_id(OID) == ObjectId(OID)
    oid = ObjectId()
    assert cast_object_id(oid) is oid


@pytest.mark.parametrize("value", ["not-an-id", 42, None])
def test_cast_object_id_failure(value) -> None:
    with pytest.raises(CastError) as exc_info:
        cast_object_id(value, "_id")
    assert exc_info.value.path == "_id"
    assert exc_info.value.kind == "ObjectId"


def test_flatten_update() -> None:
    assert flatten_update({"name": "a", "address": {"city": "x", "geo": {"lat": 1}}, "tags": {}}) == {
        "name": "a",
        "address.city": "x",
        "address.geo.lat": 1,
        "tags": {},
    }
