"""Status values: success, or a canonical error kind plus a message.

``Status`` is returned by every fallible operation; ``StatusOr`` carries a
value on success and behaves like ``Status`` on failure.
"""

from __future__ import annotations

import ctypes
import os
from typing import Any, Generic, Optional, TypeVar

from localstore.domain.error_codes import (
    kind_for_errno,
    kind_for_os_error,
    kind_for_windows_error,
)
from localstore.domain.errors import (
    ErrorKind,
    StatusAssertionError,
    StatusError,
    ValueUnavailableError,
)

T = TypeVar("T")


class Status:
    """Outcome of an operation that produces no value.

    A default-constructed status is success and carries nothing. A failure
    holds an ``ErrorKind`` other than ``OK`` and a message. Failures are never
    modified in place: ``annotate`` builds a new status. Only a successful
    status can be overwritten, through ``update``.
    """

    __slots__ = ("_code", "_message")

    def __init__(self, code: ErrorKind = ErrorKind.OK, message: str = ""):
        if code is ErrorKind.OK and message:
            raise StatusAssertionError(f"OK status must not carry a message: {message!r}")
        self._code = code
        self._message = str(message) if code is not ErrorKind.OK else ""

    @classmethod
    def ok_status(cls) -> "Status":
        return cls()

    @classmethod
    def failure(cls, code: ErrorKind, message: str) -> "Status":
        """Build a failed status; ``code`` must not be ``OK``."""
        if code is ErrorKind.OK:
            raise StatusAssertionError("failed status cannot use ErrorKind.OK")
        return cls(code, message)

    @classmethod
    def from_errno(cls, errno_code: int, message: str) -> "Status":
        """Build a status from an ``errno`` value.

        The message becomes ``"<message> (errno <n>: <description>)"``.
        """
        kind = kind_for_errno(errno_code)
        if kind is ErrorKind.OK:
            return cls()
        return cls(kind, f"{message} (errno {errno_code}: {os.strerror(errno_code)})")

    @classmethod
    def from_windows_error(cls, error: int, message: str, text: Optional[str] = None) -> "Status":
        """Build a status from a Windows ``GetLastError`` code."""
        kind = kind_for_windows_error(error)
        if kind is ErrorKind.OK:
            return cls()
        if text is None:
            format_error = getattr(ctypes, "FormatError", None)
            text = format_error(error).strip() if format_error is not None else ""
        if not text:
            return cls(kind, f"{message} (error {error}; unknown error text)")
        return cls(kind, f"{message} (error {error}: {text})")

    @classmethod
    def from_os_error(cls, exc: OSError, message: str) -> "Status":
        """Build a status from a raised ``OSError``."""
        winerror = getattr(exc, "winerror", None)
        if winerror is not None:
            return cls.from_windows_error(winerror, message, text=exc.strerror)
        if exc.errno is None:
            return cls(kind_for_os_error(exc), f"{message} ({exc})")
        return cls.from_errno(exc.errno, message)

    @property
    def ok(self) -> bool:
        return self._code is ErrorKind.OK

    @property
    def code(self) -> ErrorKind:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    def annotate(self, extra: str) -> "Status":
        """Return a failure with ``extra`` appended to the message.

        Success and empty annotations are returned unchanged. Messages are
        joined with ``"; "``; an empty original message is replaced by
        ``extra``.
        """
        if self.ok or not extra:
            return self
        if not self._message:
            return Status(self._code, extra)
        return Status(self._code, f"{self._message}; {extra}")

    def update(self, other: "Status") -> None:
        """Adopt ``other`` if this status is still OK.

        Keeps the first error seen across a sequence of steps.
        """
        if self.ok:
            self._code = other._code
            self._message = other._message

    def ignore_error(self) -> None:
        """Mark the status as deliberately unchecked."""

    def raise_if_error(self) -> None:
        if not self.ok:
            raise StatusError(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Status):
            return NotImplemented
        return self._code is other._code and self._message == other._message

    # Mutable through update, so not hashable.
    __hash__ = None  # type: ignore[assignment]

    def __bool__(self) -> bool:
        raise TypeError("Status has no truth value; use .ok")

    def __str__(self) -> str:
        if self.ok:
            return "OK"
        return f"{self._code.display_name}: {self._message}"

    def __repr__(self) -> str:
        if self.ok:
            return "Status(OK)"
        return f"Status({self._code.name}, {self._message!r})"


class StatusOr(Generic[T]):
    """A value on success, or a failed ``Status``."""

    __slots__ = ("_status", "_value")

    def __init__(self, value: T):
        self._status = Status()
        self._value: Optional[T] = value

    @classmethod
    def from_status(cls, status: Status) -> "StatusOr[Any]":
        if status.ok:
            raise StatusAssertionError("StatusOr requires a value or a failed status")
        result = cls.__new__(cls)
        result._status = status
        result._value = None
        return result

    @property
    def ok(self) -> bool:
        return self._status.ok

    @property
    def status(self) -> Status:
        """A copy of the status; updating it leaves this result unchanged."""
        return Status(self._status.code, self._status.message)

    @property
    def value(self) -> T:
        if not self._status.ok:
            raise ValueUnavailableError(self._status)
        return self._value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        if not self._status.ok:
            return default
        return self._value  # type: ignore[return-value]

    def value_or_raise(self) -> T:
        """Return the value or raise ``StatusError`` with the failure."""
        self._status.raise_if_error()
        return self._value  # type: ignore[return-value]

    def annotate(self, extra: str) -> "StatusOr[T]":
        if self.ok or not extra:
            return self
        return StatusOr.from_status(self._status.annotate(extra))

    def ignore_error(self) -> None:
        """Mark the result as deliberately unchecked."""

    def __bool__(self) -> bool:
        raise TypeError("StatusOr has no truth value; use .ok")

    def __repr__(self) -> str:
        if self.ok:
            return f"StatusOr({self._value!r})"
        return f"StatusOr({self._status!r})"


def status_from_exception(exc: BaseException, message: str) -> Status:
    """Normalize an exception raised by a collaborator into a failed status.

    This mapping is conservative: anything not recognized is ``UNKNOWN``.
    """
    detail = str(exc) or type(exc).__name__
    # TimeoutError is an OSError subclass that usually carries no errno.
    if isinstance(exc, TimeoutError):
        return Status(ErrorKind.DEADLINE_EXCEEDED, f"{message} ({detail})")
    if isinstance(exc, OSError):
        status = Status.from_os_error(exc, message)
        if status.ok:
            return Status(ErrorKind.UNKNOWN, f"{message} ({detail})")
        return status
    if isinstance(exc, NotImplementedError):
        return Status(ErrorKind.UNIMPLEMENTED, f"{message} ({detail})")
    if isinstance(exc, (ValueError, TypeError)):
        return Status(ErrorKind.INVALID_ARGUMENT, f"{message} ({detail})")
    return Status(ErrorKind.UNKNOWN, f"{message} ({detail})")
