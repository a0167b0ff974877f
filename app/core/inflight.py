"""
Thread-safe registry of in-flight create operations, used to reject double submits.

Guarded route handlers are plain `def` so FastAPI runs them in its threadpool
and overlapping requests meet here. The registry is per process.
"""
import threading
import logging
from contextlib import contextmanager
from typing import Tuple

from fastapi import HTTPException

logger = logging.getLogger(__name__)
_lock = threading.Lock()
_in_flight: set[Tuple[str, str, str]] = set()

IN_PROGRESS_MESSAGE = "Request already in progress"


def acquire(operation: str, user_id: str, scope: str = "") -> bool:
    """Mark (operation, user_id, scope) as in flight. Returns False if it already was."""
    key = (operation, user_id, scope)
    with _lock:
        if key in _in_flight:
            return False
        _in_flight.add(key)
    logger.debug(f"Acquired in-flight slot {key}")
    return True


def release(operation: str, user_id: str, scope: str = "") -> None:
    with _lock:
        _in_flight.discard((operation, user_id, scope))


def is_in_flight(operation: str, user_id: str, scope: str = "") -> bool:
    with _lock:
        return (operation, user_id, scope) in _in_flight


def clear() -> None:
    with _lock:
        _in_flight.clear()


@contextmanager
def guard(operation: str, user_id: str, scope: str = ""):
    """Run the body at most once concurrently per key; a second caller gets HTTP 409."""
    if not acquire(operation, user_id, scope):
        logger.warning(f"Rejected duplicate {operation} by user {user_id} ({scope})")
        raise HTTPException(status_code=409, detail=IN_PROGRESS_MESSAGE)
    try:
        yield
    finally:
        release(operation, user_id, scope)
