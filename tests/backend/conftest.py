"""
Backend-specific test fixtures.

Seeded databases and collections built through the DatabaseManager so
tests start from a realistic schema.
"""

import pytest_asyncio


@pytest_asyncio.fixture
async def shop_items(manager):
    """
    Database "shop" with collection "items" and fields
    name (STRING), qty (INTEGER), price (DOUBLE), active (BOOLEAN).

    Returns the (database, collection) pair.
    """
    assert await manager.create_database("shop")
    assert await manager.create_collection("shop", "items")
    assert await manager.create_field("shop", "items", "name", "STRING")
    assert await manager.create_field("shop", "items", "qty", "INTEGER")
    assert await manager.create_field("shop", "items", "price", "DOUBLE")
    assert await manager.create_field("shop", "items", "active", "BOOLEAN")
    return "shop", "items"


@pytest_asyncio.fixture
async def stocked_items(manager, shop_items):
    """shop/items holding three records, inserted in listing order."""
    db, coll = shop_items
    assert await manager.insert_data(
        db, coll, {"name": "apple", "qty": 5, "price": 1.5, "active": True}
    )
    assert await manager.insert_data(
        db, coll, {"name": "pear", "qty": 7, "price": 2.0, "active": False}
    )
    assert await manager.insert_data(
        db, coll, {"name": "plum", "qty": 5, "price": 0.75, "active": True}
    )
    return db, coll
