"""
Tests for the RecordEngine.

These tests cover:
- typed inserts and string coercion
- queries with positional handles and filters
- update/delete addressing by position or filter
- reconciliation of records with declared fields
"""

import json

import pytest


async def _raw_values(metadata_store, db, coll):
    """Decoded payloads of every record, in listing order."""
    async with metadata_store.session() as meta:
        collection = await meta.require_collection(db, coll)
        return [r.values for r in await meta.records_of(collection.id)]


# =============================================================================
# Insert Tests
# =============================================================================

class TestInsert:
    """Tests for insert_data."""

    @pytest.mark.asyncio
    async def test_insert_coerces_strings(self, manager, shop_items, metadata_store):
        """String input is stored in the declared type."""
        result = await manager.insert_data(
            *shop_items, {"name": "apple", "qty": "12", "price": "9.99", "active": "TRUE"}
        )

        assert result is True
        stored = await _raw_values(metadata_store, *shop_items)
        assert stored == [{"name": "apple", "qty": 12, "price": 9.99, "active": True}]

    @pytest.mark.asyncio
    async def test_insert_drops_id_key(self, manager, shop_items, metadata_store):
        """Caller-supplied ids are never stored."""
        await manager.insert_data(*shop_items, {"id": 99, "qty": 1})

        stored = await _raw_values(metadata_store, *shop_items)
        assert stored == [{"qty": 1}]

    @pytest.mark.asyncio
    async def test_undeclared_key_writes_nothing(self, manager, shop_items, metadata_store):
        """A single unknown key rejects the whole insert."""
        result = await manager.insert_data(*shop_items, {"qty": 1, "colour": "red"})

        assert result is False
        assert await _raw_values(metadata_store, *shop_items) == []

    @pytest.mark.asyncio
    async def test_bad_value_writes_nothing(self, manager, shop_items, metadata_store):
        """A value that does not fit its type rejects the whole insert."""
        result = await manager.insert_data(*shop_items, {"name": "apple", "qty": "lots"})

        assert result is False
        assert await _raw_values(metadata_store, *shop_items) == []

    @pytest.mark.asyncio
    async def test_partial_insert_allowed(self, manager, shop_items):
        """Declared fields may be omitted; they read back as None."""
        await manager.insert_data(*shop_items, {"name": "fig"})

        rows = await manager.query_data(*shop_items)
        assert rows == [
            {"__position": 0, "active": None, "name": "fig", "price": None, "qty": None}
        ]

    @pytest.mark.asyncio
    async def test_explicit_null_accepted(self, manager, shop_items):
        """None is a valid value for any field."""
        assert await manager.insert_data(*shop_items, {"qty": None}) is True

    @pytest.mark.asyncio
    async def test_insert_into_missing_collection_fails(self, manager):
        """The collection must exist."""
        await manager.create_database("shop")

        assert await manager.insert_data("shop", "nope", {"qty": 1}) is False


# =============================================================================
# Query Tests
# =============================================================================

class TestQuery:
    """Tests for query_data."""

    @pytest.mark.asyncio
    async def test_rows_carry_positions(self, manager, stocked_items):
        """Rows are in insertion order with consecutive positions."""
        rows = await manager.query_data(*stocked_items)

        assert [r["__position"] for r in rows] == [0, 1, 2]
        assert [r["name"] for r in rows] == ["apple", "pear", "plum"]

    @pytest.mark.asyncio
    async def test_filter_keeps_full_listing_positions(self, manager, stocked_items):
        """Filtered rows keep their position in the unfiltered listing."""
        rows = await manager.query_data(*stocked_items, {"qty": 5})

        assert [r["__position"] for r in rows] == [0, 2]

    @pytest.mark.asyncio
    async def test_filter_by_string_form(self, manager, stocked_items):
        """Filter values match on string form."""
        rows = await manager.query_data(*stocked_items, {"active": "false", "qty": "7"})

        assert [r["name"] for r in rows] == ["pear"]

    @pytest.mark.asyncio
    async def test_filter_without_match(self, manager, stocked_items):
        """No match gives an empty list."""
        assert await manager.query_data(*stocked_items, {"name": "kiwi"}) == []

    @pytest.mark.asyncio
    async def test_empty_collection(self, manager, shop_items):
        """A collection without records lists nothing."""
        assert await manager.query_data(*shop_items) == []

    @pytest.mark.asyncio
    async def test_missing_collection_is_empty(self, manager):
        """Unknown collections give an empty list."""
        assert await manager.query_data("nope", "items") == []

    @pytest.mark.asyncio
    async def test_stored_bookkeeping_field_does_not_shadow_position(
        self, manager, stocked_items, metadata_store
    ):
        """A "__position" field row left in the metadata never replaces the handle."""
        from dbmanager.models import FieldMetadata

        async with metadata_store.session() as meta:
            collection = await meta.require_collection(*stocked_items)
            field = FieldMetadata(collection_id=collection.id, name="__position")
            await meta.fields.insert_one(field.to_document())

        rows = await manager.query_data(*stocked_items)

        assert [r["__position"] for r in rows] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_malformed_record_is_skipped(self, manager, stocked_items, metadata_store):
        """Unreadable payloads are skipped but still occupy a position."""
        from bson import ObjectId

        async with metadata_store.session() as meta:
            collection = await meta.require_collection(*stocked_items)
            first = (await meta.records_of(collection.id))[0]
            await meta.records.update_one(
                {"_id": ObjectId(first.id)},
                {"$set": {"field_values": "{broken"}},
            )

        rows = await manager.query_data(*stocked_items)

        assert [r["__position"] for r in rows] == [1, 2]


# =============================================================================
# Update Tests
# =============================================================================

class TestUpdate:
    """Tests for update_data."""

    @pytest.mark.asyncio
    async def test_update_by_position(self, manager, stocked_items):
        """Values are merged into the record at the position."""
        result = await manager.update_data(*stocked_items, position=1, values={"qty": 8})

        assert result is True
        rows = await manager.query_data(*stocked_items)
        assert rows[1]["qty"] == 8
        assert rows[1]["name"] == "pear"
        assert [rows[0]["qty"], rows[2]["qty"]] == [5, 5]

    @pytest.mark.asyncio
    async def test_update_by_filter_changes_all_matches(self, manager, stocked_items):
        """Every matching record is updated."""
        result = await manager.update_data(
            *stocked_items, filter={"qty": 5}, values={"active": False}
        )

        assert result is True
        rows = await manager.query_data(*stocked_items)
        assert [r["active"] for r in rows] == [False, False, False]

    @pytest.mark.asyncio
    async def test_update_ignores_id_and_position_keys(
        self, manager, stocked_items, metadata_store
    ):
        """Reserved and bookkeeping keys in values are not stored."""
        await manager.update_data(
            *stocked_items, position=0, values={"id": 1, "__position": 4, "qty": 6}
        )

        stored = await _raw_values(metadata_store, *stocked_items)
        assert stored[0] == {"name": "apple", "qty": 6, "price": 1.5, "active": True}

    @pytest.mark.asyncio
    async def test_update_does_not_check_types(self, manager, stocked_items):
        """Updates store values as given."""
        assert await manager.update_data(
            *stocked_items, position=0, values={"qty": "many"}
        ) is True

        rows = await manager.query_data(*stocked_items)
        assert rows[0]["qty"] == "many"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("position", [3, -1, 100])
    async def test_position_out_of_range(self, manager, stocked_items, position):
        """Positions outside the listing fail and change nothing."""
        before = await manager.query_data(*stocked_items)

        result = await manager.update_data(
            *stocked_items, position=position, values={"qty": 0}
        )

        assert result is False
        assert await manager.query_data(*stocked_items) == before

    @pytest.mark.asyncio
    async def test_position_and_filter_together_rejected(self, manager, stocked_items):
        """Exactly one addressing mode is allowed."""
        result = await manager.update_data(
            *stocked_items, position=0, filter={"qty": 5}, values={"qty": 1}
        )

        assert result is False

    @pytest.mark.asyncio
    async def test_no_addressing_rejected(self, manager, stocked_items):
        """Neither a position nor a filter fails."""
        assert await manager.update_data(*stocked_items, values={"qty": 1}) is False
        assert await manager.update_data(*stocked_items, filter={}, values={"qty": 1}) is False

    @pytest.mark.asyncio
    async def test_filter_without_match_fails(self, manager, stocked_items):
        """At least one record must match."""
        result = await manager.update_data(
            *stocked_items, filter={"name": "kiwi"}, values={"qty": 1}
        )

        assert result is False

    @pytest.mark.asyncio
    async def test_empty_collection_fails(self, manager, shop_items):
        """Nothing to update in an empty collection."""
        assert await manager.update_data(*shop_items, position=0, values={"qty": 1}) is False


# =============================================================================
# Delete Tests
# =============================================================================

class TestDelete:
    """Tests for delete_data."""

    @pytest.mark.asyncio
    async def test_delete_by_position(self, manager, stocked_items):
        """The record at the position is removed and later positions shift."""
        assert await manager.delete_data(*stocked_items, position=0) is True

        rows = await manager.query_data(*stocked_items)
        assert [(r["__position"], r["name"]) for r in rows] == [(0, "pear"), (1, "plum")]

    @pytest.mark.asyncio
    async def test_delete_by_filter(self, manager, stocked_items):
        """Every matching record is removed."""
        assert await manager.delete_data(*stocked_items, filter={"active": True}) is True

        rows = await manager.query_data(*stocked_items)
        assert [r["name"] for r in rows] == ["pear"]

    @pytest.mark.asyncio
    async def test_delete_out_of_range(self, manager, stocked_items):
        """Out of range positions fail and delete nothing."""
        assert await manager.delete_data(*stocked_items, position=3) is False
        assert len(await manager.query_data(*stocked_items)) == 3

    @pytest.mark.asyncio
    async def test_delete_both_modes_rejected(self, manager, stocked_items):
        """Exactly one addressing mode is allowed."""
        assert await manager.delete_data(
            *stocked_items, position=0, filter={"qty": 5}
        ) is False
        assert await manager.delete_data(*stocked_items) is False
        assert len(await manager.query_data(*stocked_items)) == 3

    @pytest.mark.asyncio
    async def test_delete_filter_without_match(self, manager, stocked_items):
        """At least one record must match."""
        assert await manager.delete_data(*stocked_items, filter={"name": "kiwi"}) is False


# =============================================================================
# Sync Tests
# =============================================================================

class TestSyncCollectionFields:
    """Tests for sync_collection_fields."""

    @pytest.mark.asyncio
    async def test_sync_fills_missing_and_drops_undeclared(
        self, manager, shop_items, metadata_store
    ):
        """Records end up with exactly the declared keys."""
        from dbmanager.models import DataRecord

        async with metadata_store.session() as meta:
            collection = await meta.require_collection(*shop_items)
            record = DataRecord(
                collection_id=collection.id,
                field_values='{"qty": 2, "legacy": "x", "id": 4}',
            )
            await meta.records.insert_one(record.to_document())

        assert await manager.sync_collection_fields(*shop_items) is True

        stored = await _raw_values(metadata_store, *shop_items)
        assert stored == [
            {"qty": 2, "id": 4, "active": None, "name": None, "price": None}
        ]

    @pytest.mark.asyncio
    async def test_sync_is_idempotent(self, manager, shop_items, metadata_store):
        """A second sync changes nothing."""
        await manager.insert_data(*shop_items, {"qty": 1})
        await manager.sync_collection_fields(*shop_items)
        first = await _raw_values(metadata_store, *shop_items)

        assert await manager.sync_collection_fields(*shop_items) is True

        assert await _raw_values(metadata_store, *shop_items) == first

    @pytest.mark.asyncio
    async def test_sync_reports_unreadable_records(
        self, manager, shop_items, metadata_store, metadata_db
    ):
        """Records that cannot be synced make the operation fail; the rest are synced."""
        from dbmanager.models import DataRecord

        await manager.insert_data(*shop_items, {"qty": 1})
        async with metadata_store.session() as meta:
            collection = await meta.require_collection(*shop_items)
            broken = DataRecord(collection_id=collection.id, field_values="[1]")
            await meta.records.insert_one(broken.to_document())

        assert await manager.sync_collection_fields(*shop_items) is False

        cursor = metadata_db["data_records"].find().sort("_id", 1)
        docs = await cursor.to_list(length=None)
        assert json.loads(docs[0]["field_values"]) == {
            "qty": 1, "active": None, "name": None, "price": None
        }
        assert docs[1]["field_values"] == "[1]"
