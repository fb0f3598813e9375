"""Resources modelled on a small shop: customers, invoices and products."""

from __future__ import annotations

import pytest
from bson import ObjectId

from docrest_access import SyncAccessSpec
from docrest_api import DocRest, ResourceOptions


def header_access(request) -> str:
    return request.headers.get("x-access", "public")


@pytest.fixture
def post_read_calls() -> list:
    return []


@pytest.fixture
async def api(mongo_connection, post_read_calls) -> DocRest:
    access = SyncAccessSpec(header_access)
    api = DocRest(mongo_connection)
    api.register(
        ResourceOptions(
            name="Customer",
            collection="customers",
            private=(
                "age",
                "favorites.animal",
                "purchases.number",
                "privateDoes.notExist",
            ),
            protected=("comment", "favorites.color", "protectedDoes.notExist"),
            access=access,
            references={"purchases.item": "Product"},
            context_filter=lambda request: {"deleted": {"$ne": True}},
            post_read=(lambda request: post_read_calls.append(request.state.status_code),),
        )
    )
    api.register(
        name="Invoice",
        collection="invoices",
        private=("amount",),
        protected=("receipt",),
        access=access,
        references={"customer": "Customer", "products": "Product"},
    )
    api.register(
        name="Product",
        collection="products",
        private=("department.code",),
        protected=("price",),
        access=access,
        limit=2,
    )
    api.freeze()
    return api


@pytest.fixture
async def shop(mongo_connection, api):
    db = mongo_connection.get_database()
    gun = {
        "_id": ObjectId(),
        "name": "Squirt Gun",
        "price": 5,
        "department": {"name": "Toys", "code": 51},
    }
    balloons = {
        "_id": ObjectId(),
        "name": "Water Balloons",
        "price": 2,
        "department": {"name": "Toys", "code": 51},
    }
    kite = {"_id": ObjectId(), "name": "Kite", "price": 9, "department": {"name": "Outdoor", "code": 7}}
    await db["products"].insert_many([gun, balloons, kite])
    bob = {
        "_id": ObjectId(),
        "name": "Bob",
        "age": 12,
        "comment": "Boo",
        "favorites": {"animal": "Boar", "color": "Black"},
        "purchases": [{"item": gun["_id"], "number": 2}],
    }
    john = {
        "_id": ObjectId(),
        "name": "John",
        "age": 24,
        "comment": "Jumbo",
        "favorites": {"animal": "Jaguar", "color": "Jade"},
        "purchases": [{"item": balloons["_id"], "number": 1}],
    }
    gone = {"_id": ObjectId(), "name": "Gone", "age": 99, "deleted": True}
    await db["customers"].insert_many([bob, john, gone])
    invoice = {
        "_id": ObjectId(),
        "customer": bob["_id"],
        "amount": 42,
        "receipt": "A",
        "products": [gun["_id"], balloons["_id"]],
    }
    await db["invoices"].insert_one(invoice)
    return {
        "bob": bob,
        "john": john,
        "gone": gone,
        "gun": gun,
        "balloons": balloons,
        "kite": kite,
        "invoice": invoice,
    }
