"""
Database definitions and collection constants.
"""
from dbmanager.database.databases import metadata_db

__all__ = ["metadata_db"]
