"""
Dynamic record engine: typed inserts, positional/filter addressing and
reconciliation of records against the declared fields.
"""
import logging
from typing import Any, Optional

from dbmanager.core.codec import (
    POSITION_KEY,
    encode_values,
    is_internal_key,
    is_reserved_key,
    matches_filter,
    without_reserved_keys,
)
from dbmanager.core.errors import (
    CodecError,
    InvalidArgumentError,
    NotFoundError,
    PartialFailureError,
)
from dbmanager.core.field_types import FieldType, coerce_value
from dbmanager.database.metadata_store import MetadataStore
from dbmanager.models import DataRecord
from dbmanager.services.boundary import boundary

logger = logging.getLogger(__name__)


def _check_addressing(position: Optional[int], filter: Optional[dict[str, Any]]) -> None:
    """Exactly one of position and a non-empty filter must be given."""
    if position is not None and filter:
        raise InvalidArgumentError("Give either a position or a filter, not both")
    if position is None and not filter:
        raise InvalidArgumentError("A position or a filter is required")


def _update_payload(values: dict[str, Any]) -> dict[str, Any]:
    """Caller values minus the reserved id key and internal bookkeeping keys."""
    return {
        k: v for k, v in without_reserved_keys(values).items()
        if not is_internal_key(k)
    }


class RecordEngine:
    """Service for records stored as encoded field maps."""

    def __init__(self, store: MetadataStore):
        self.store = store

    @boundary("insert data")
    async def insert_data(
        self, database_name: str, collection_name: str, values: dict[str, Any]
    ) -> bool:
        """
        Insert one record.

        Every key must be a declared field and every value must satisfy its
        field's type; otherwise nothing is written. String input is coerced
        to the declared type before storing.
        """
        values = without_reserved_keys(values)

        async with self.store.session() as meta:
            collection = await meta.require_collection(database_name, collection_name)
            declared = {
                f.name: FieldType(f.type) for f in await meta.fields_of(collection.id)
            }

            undeclared = [key for key in values if key not in declared]
            if undeclared:
                raise InvalidArgumentError(f"Undeclared fields: {undeclared}")

            coerced = {
                key: coerce_value(declared[key], value) for key, value in values.items()
            }
            record = DataRecord(
                collection_id=collection.id,
                field_values=encode_values(coerced),
            )
            await meta.records.insert_one(record.to_document())

        logger.info(f"Record inserted in {collection_name}: {record.field_values}")
        return True

    @boundary("query data", default=list)
    async def query_data(
        self,
        database_name: str,
        collection_name: str,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        """
        Records of a collection as rows of the currently declared fields.

        Each row carries its ordinal in the full listing under "__position";
        that ordinal is the positional handle for update_data/delete_data and
        is only valid until the collection changes. Fields missing from a
        record come back as None.

        Args:
            database_name: Owning database
            collection_name: Collection to list
            filter: Optional field -> value map; rows are kept when every key
                is present and string forms are equal

        Returns:
            Matching rows in listing order
        """
        async with self.store.session() as meta:
            collection = await meta.require_collection(database_name, collection_name)
            names = [
                f.name for f in await meta.fields_of(collection.id)
                if not is_reserved_key(f.name) and not is_internal_key(f.name)
            ]
            records = await meta.records_of(collection.id)

        rows = []
        for position, record in enumerate(records):
            try:
                values = record.values
            except CodecError as e:
                logger.error(f"Error reading record {record.id}: {e}")
                continue

            row: dict[str, Any] = {POSITION_KEY: position}
            for name in names:
                row[name] = values.get(name)

            if filter is None or matches_filter(row, filter):
                rows.append(row)
        return rows

    @boundary("update data")
    async def update_data(
        self,
        database_name: str,
        collection_name: str,
        position: Optional[int] = None,
        filter: Optional[dict[str, Any]] = None,
        values: Optional[dict[str, Any]] = None,
    ) -> bool:
        """
        Merge values into the record at a position, or into every record
        matching a filter.

        Values are merged as given; they are not checked against field types.
        """
        _check_addressing(position, filter)
        payload = _update_payload(values or {})

        async with self.store.session() as meta:
            collection = await meta.require_collection(database_name, collection_name)
            records = await meta.records_of(collection.id)
            if not records:
                raise NotFoundError(f"No records to update in {collection_name}")

            if position is not None:
                record = self._at_position(records, position)
                current = record.values
                current.update(payload)
                await meta.write_record_values(record, current)
                logger.info(f"Record updated at position {position}")
                return True

            updated = 0
            for record in records:
                try:
                    current = record.values
                    if matches_filter(current, filter):
                        current.update(payload)
                        await meta.write_record_values(record, current)
                        updated += 1
                except Exception as e:
                    logger.error(f"Error updating record {record.id}: {e}")

        logger.info(f"Records updated by filter: {updated}")
        if updated == 0:
            raise NotFoundError(f"No records match {filter}")
        return True

    @boundary("delete data")
    async def delete_data(
        self,
        database_name: str,
        collection_name: str,
        position: Optional[int] = None,
        filter: Optional[dict[str, Any]] = None,
    ) -> bool:
        """Delete the record at a position, or every record matching a filter."""
        _check_addressing(position, filter)

        async with self.store.session() as meta:
            collection = await meta.require_collection(database_name, collection_name)
            records = await meta.records_of(collection.id)
            if not records:
                raise NotFoundError(f"No records to delete in {collection_name}")

            if position is not None:
                record = self._at_position(records, position)
                await meta.delete_record(record)
                logger.info(f"Record deleted at position {position}")
                return True

            deleted = 0
            for record in records:
                try:
                    if matches_filter(record.values, filter):
                        await meta.delete_record(record)
                        deleted += 1
                except Exception as e:
                    logger.error(f"Error deleting record {record.id}: {e}")

        logger.info(f"Records deleted by filter: {deleted}")
        if deleted == 0:
            raise NotFoundError(f"No records match {filter}")
        return True

    @boundary("sync collection fields")
    async def sync_collection_fields(
        self, database_name: str, collection_name: str
    ) -> bool:
        """
        Reconcile every record with the declared fields.

        Declared fields missing from a record are added as null; keys that are
        not declared are removed. Only records that change are written.
        """
        async with self.store.session() as meta:
            collection = await meta.require_collection(database_name, collection_name)
            declared = [f.name for f in await meta.fields_of(collection.id)]
            known = set(declared)

            failed = 0
            modified_count = 0
            for record in await meta.records_of(collection.id):
                try:
                    values = record.values
                    modified = False
                    for name in declared:
                        if name not in values:
                            values[name] = None
                            modified = True
                    for key in [k for k in values if k not in known and not is_reserved_key(k)]:
                        del values[key]
                        modified = True
                    if modified:
                        await meta.write_record_values(record, values)
                        modified_count += 1
                except Exception as e:
                    logger.error(f"Error syncing record {record.id}: {e}")
                    failed += 1

        logger.info(f"Records synced in {collection_name}: {modified_count}")
        if failed:
            raise PartialFailureError(f"{failed} records of {collection_name} could not be synced")
        return True

    @staticmethod
    def _at_position(records: list[DataRecord], position: int) -> DataRecord:
        if isinstance(position, bool) or not 0 <= position < len(records):
            raise NotFoundError(
                f"Position {position} out of range for {len(records)} records"
            )
        return records[position]
