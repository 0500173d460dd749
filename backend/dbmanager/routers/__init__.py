"""
API Routers module.
"""
from dbmanager.routers import health, databases, collections, fields, records

__all__ = ["health", "databases", "collections", "fields", "records"]
