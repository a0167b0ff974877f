"""
Lookup results for single-row queries.

PostgREST reports "no row" for `.single()` as an error (code PGRST116).
Callers get one of Found / NotFound / TransientFailure instead of having to
inspect error codes themselves.
"""

from dataclasses import dataclass
from typing import Union

from postgrest.exceptions import APIError

NO_ROWS_ERROR_CODE = "PGRST116"


@dataclass(frozen=True)
class Found:
    id: str


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class TransientFailure:
    detail: str


LookupResult = Union[Found, NotFound, TransientFailure]


def is_no_rows_error(exc: Exception) -> bool:
    """True if exc is the PostgREST error raised by .single() when zero rows match."""
    return isinstance(exc, APIError) and exc.code == NO_ROWS_ERROR_CODE


def error_message(exc: Exception) -> str:
    """Human-readable message of a backend error (APIError carries it in .message)."""
    if isinstance(exc, APIError) and exc.message:
        return exc.message
    return str(exc)
