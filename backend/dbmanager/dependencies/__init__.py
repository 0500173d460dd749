"""
Dependencies for dependency injection in routes.
"""
from dbmanager.dependencies.manager import get_manager, get_session

__all__ = [
    "get_manager",
    "get_session",
]
