"""Domain types: canonical error kinds and status values."""

from localstore.domain.errors import (
    ErrorKind,
    LocalStoreError,
    StatusAssertionError,
    StatusError,
    ValueUnavailableError,
)
from localstore.domain.status import Status, StatusOr, status_from_exception

__all__ = [
    "ErrorKind",
    "LocalStoreError",
    "StatusAssertionError",
    "StatusError",
    "ValueUnavailableError",
    "Status",
    "StatusOr",
    "status_from_exception",
]
