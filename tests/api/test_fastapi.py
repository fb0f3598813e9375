"""Tests for the FastAPI routes (optional; requires docrest[fastapi])."""

from __future__ import annotations

import pytest

fastapi = pytest.importorskip("fastapi")
httpx = pytest.importorskip("httpx")

from bson import ObjectId
from fastapi import FastAPI

from docrest_api.contrib.fastapi import serve


@pytest.fixture
async def client(api):
    app = FastAPI()
    serve(app, api)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
class TestRoutes:
    async def test_list_serializes_object_ids(self, client, shop) -> None:
        response = await client.get(
            "/api/v1/Invoice", params={"populate": "customer"}, headers={"x-access": "protected"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body[0]["_id"] == str(shop["invoice"]["_id"])
        assert body[0]["customer"]["_id"] == str(shop["bob"]["_id"])
        assert "amount" not in body[0]
        assert "age" not in body[0]["customer"]

    async def test_count(self, client, shop) -> None:
        response = await client.get("/api/v1/Customer/count")
        assert response.status_code == 200
        assert response.json() == {"count": 2}

    async def test_get_item(self, client, shop) -> None:
        response = await client.get(f"/api/v1/Customer/{shop['john']['_id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "John"

    async def test_get_shallow(self, client, shop) -> None:
        response = await client.get(
            f"/api/v1/Customer/{shop['bob']['_id']}/shallow",
            headers={"x-access": "private"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Bob"
        assert body["purchases"] is True

    @pytest.mark.parametrize("item_id", ["not-an-id", str(ObjectId())])
    async def test_get_shallow_missing(self, client, shop, item_id) -> None:
        response = await client.get(f"/api/v1/Customer/{item_id}/shallow")
        assert response.status_code == 404

    async def test_get_item_invalid_id(self, client, shop) -> None:
        response = await client.get("/api/v1/Customer/not-an-id")
        assert response.status_code == 404

    async def test_invalid_query(self, client, shop) -> None:
        response = await client.get("/api/v1/Customer", params={"query": "{bad"})
        assert response.status_code == 400
        assert response.json() == {
            "name": "InvalidJsonQueryError",
            "message": "invalid_json_query",
        }

    async def test_create(self, client, shop) -> None:
        response = await client.post(
            "/api/v1/Customer", json={"name": "Ann", "age": 3, "comment": "x"}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Ann"
        assert ObjectId.is_valid(body["_id"])
        assert "age" not in body

    async def test_create_with_malformed_json(self, client, shop) -> None:
        response = await client.post(
            "/api/v1/Customer",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400

    async def test_patch(self, client, shop) -> None:
        response = await client.patch(
            f"/api/v1/Customer/{shop['bob']['_id']}",
            json={"name": "Robert"},
            headers={"x-access": "private"},
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Robert"
        assert response.json()["age"] == 12

    async def test_delete_item(self, client, shop) -> None:
        response = await client.delete(f"/api/v1/Customer/{shop['john']['_id']}")
        assert response.status_code == 204
        assert response.content == b""

        response = await client.get(f"/api/v1/Customer/{shop['john']['_id']}")
        assert response.status_code == 404

    async def test_delete_items(self, client, shop) -> None:
        response = await client.delete("/api/v1/Customer")
        assert response.status_code == 204

        response = await client.get("/api/v1/Customer/count")
        assert response.json() == {"count": 0}
