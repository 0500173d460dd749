"""
Services module - Business logic layer.
"""
from dbmanager.services.schema_registry import SchemaRegistry
from dbmanager.services.record_engine import RecordEngine
from dbmanager.services.database_manager import DatabaseManager

__all__ = [
    "SchemaRegistry",
    "RecordEngine",
    "DatabaseManager",
]
