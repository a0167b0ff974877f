"""
Error mapping shared by the services.

(a) validation errors are raised by the request schemas before any query runs,
(b) backend errors surface the backend's own message,
(c) anything else is logged and replaced by a generic message.
"""

from fastapi import HTTPException
from postgrest.exceptions import APIError
from app.core.results import error_message
import logging

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


def required_text(value, message: str) -> str:
    """Return value stripped; raise ValueError(message) when it is empty or whitespace-only."""
    if value is None or not str(value).strip():
        raise ValueError(message)
    return str(value).strip()


def optional_text(value):
    """Normalise an optional free-text field: blank becomes None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def backend_error(exc: Exception) -> HTTPException:
    return HTTPException(status_code=400, detail=error_message(exc))


def unexpected_error(exc: Exception, context: str) -> HTTPException:
    logger.exception(f"Unexpected error while {context}: {exc}")
    return HTTPException(status_code=500, detail=UNEXPECTED_ERROR_MESSAGE)


def to_http_error(exc: Exception, context: str) -> HTTPException:
    """Map any exception raised during an operation onto the HTTP error the caller sees."""
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, APIError):
        logger.error(f"Backend error while {context}: {error_message(exc)}")
        return backend_error(exc)
    return unexpected_error(exc, context)
