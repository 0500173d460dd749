"""
Boundary wrapper for public data-layer operations.

Callers of the data layer only learn whether an operation succeeded. The
reason for a failure goes to the log.
"""
import functools
import logging
from typing import Any, Callable

from dbmanager.core.errors import DataLayerError

logger = logging.getLogger(__name__)


def boundary(action: str, default: Any = False) -> Callable:
    """
    Decorator factory turning raised errors into a default result.

    Usage:
        @boundary("create database")
        async def create_database(self, name: str) -> bool:
            ...

    Args:
        action: Short verb phrase used in log messages
        default: Value returned on failure; a callable is invoked for a fresh value

    Returns:
        Decorator for async methods
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except DataLayerError as e:
                logger.warning(f"Could not {action}: {e}")
            except Exception:
                logger.exception(f"Error trying to {action}")
            return default() if callable(default) else default

        return wrapper

    return decorator
