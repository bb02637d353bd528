"""Domain errors and the canonical error kind taxonomy."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from localstore.domain.status import Status


class ErrorKind(Enum):
    """Canonical error kinds shared by every layer.

    Values follow the canonical status code numbering so they can be logged
    or persisted as small integers.
    """

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    @property
    def display_name(self) -> str:
        """Human readable name used when rendering a status."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    ErrorKind.OK: "OK",
    ErrorKind.CANCELLED: "Cancelled",
    ErrorKind.UNKNOWN: "Unknown",
    ErrorKind.INVALID_ARGUMENT: "Invalid argument",
    ErrorKind.DEADLINE_EXCEEDED: "Deadline exceeded",
    ErrorKind.NOT_FOUND: "Not found",
    ErrorKind.ALREADY_EXISTS: "Already exists",
    ErrorKind.PERMISSION_DENIED: "Permission denied",
    ErrorKind.RESOURCE_EXHAUSTED: "Resource exhausted",
    ErrorKind.FAILED_PRECONDITION: "Failed precondition",
    ErrorKind.ABORTED: "Aborted",
    ErrorKind.OUT_OF_RANGE: "Out of range",
    ErrorKind.UNIMPLEMENTED: "Unimplemented",
    ErrorKind.INTERNAL: "Internal",
    ErrorKind.UNAVAILABLE: "Unavailable",
    ErrorKind.DATA_LOSS: "Data loss",
    ErrorKind.UNAUTHENTICATED: "Unauthenticated",
}


class LocalStoreError(Exception):
    """Base error."""
    pass


class StatusAssertionError(LocalStoreError):
    """A status was built in a way that signals a caller bug.

    Raised when a failure is constructed with ``ErrorKind.OK``.
    """
    pass


class ValueUnavailableError(LocalStoreError):
    """The value of a failed StatusOr was requested."""

    def __init__(self, status: "Status"):
        self.status = status
        super().__init__(f"no value available: {status}")


class StatusError(LocalStoreError):
    """A failed status raised as an exception."""

    def __init__(self, status: "Status"):
        self.status = status
        super().__init__(str(status))

    @property
    def kind(self) -> ErrorKind:
        return self.status.code
