"""
Data-layer dependencies.

The DatabaseManager and the application ConnectionSession live on app.state;
the lifespan creates them, and they are created lazily for apps run without one.
"""
from fastapi import Request

from dbmanager.database.connections import ConnectionSession
from dbmanager.services.database_manager import DatabaseManager


def get_manager(request: Request) -> DatabaseManager:
    """Dependency to get the application DatabaseManager."""
    manager = getattr(request.app.state, "manager", None)
    if manager is None:
        manager = DatabaseManager()
        request.app.state.manager = manager
    return manager


def get_session(request: Request) -> ConnectionSession:
    """Dependency to get the application ConnectionSession."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        session = ConnectionSession()
        request.app.state.session = session
    return session
