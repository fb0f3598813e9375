"""Shared fixtures: a mongomock-backed connection and request factories."""

from __future__ import annotations

from typing import Any

import pytest

from docrest_core import ResourceRequest
from docrest_persistence_mongo import MongoConnectionManager


@pytest.fixture
async def mongo_connection() -> MongoConnectionManager:
    """A connection whose client is an in-memory mongomock database."""
    mongomock_motor = pytest.importorskip("mongomock_motor")
    connection = MongoConnectionManager("mongodb://mock:27017", database="test_db")
    connection._client = mongomock_motor.AsyncMongoMockClient()
    return connection


@pytest.fixture
def make_request():
    """Build a ResourceRequest with only the fields a test cares about."""

    def _make(
        query_params: dict[str, Any] | None = None,
        *,
        method: str = "GET",
        path_params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        body: Any = None,
    ) -> ResourceRequest:
        return ResourceRequest(
            method=method,
            query_params=query_params or {},
            path_params=path_params or {},
            headers=headers or {},
            body=body,
        )

    return _make
