"""Mapping of native OS error codes onto canonical error kinds.

Codes are grouped by what the caller can do about them rather than by what
the OS says happened: running out of disk space and running out of file
handles are both ``RESOURCE_EXHAUSTED``; a non-empty directory and a busy
executable are both ``FAILED_PRECONDITION``.

Each table is an ordered sequence of ``(kind, codes)`` groups. When a code is
claimed by more than one group (platform aliases such as ``EAGAIN`` and
``EWOULDBLOCK`` share a value) the first group wins. Table order is
authoritative.
"""

from __future__ import annotations

import errno
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from localstore.domain.errors import ErrorKind


# errno names; names missing on the running platform are skipped.
ERRNO_TABLE: Sequence[Tuple[ErrorKind, Tuple[str, ...]]] = (
    # Usually a failed precondition, but for file handling these can only
    # mean a bug in the caller.
    (ErrorKind.INTERNAL, (
        "EBADF",        # Invalid file descriptor
        "EBADFD",       # File descriptor in bad state
    )),
    (ErrorKind.INVALID_ARGUMENT, (
        "EINVAL",       # Invalid argument
        "ENAMETOOLONG",  # Filename too long
        "E2BIG",        # Argument list too long
        "EDESTADDRREQ",  # Destination address required
        "EDOM",         # Argument out of domain of function
        "EFAULT",       # Bad address
        "EILSEQ",       # Illegal byte sequence
        "ENOPROTOOPT",  # Protocol not available
        "ENOSTR",       # Not a STREAM
        "ENOTSOCK",     # Not a socket
        "ENOTTY",       # Inappropriate I/O control operation
        "EPROTOTYPE",   # Protocol wrong type for socket
        "ESPIPE",       # Invalid seek
    )),
    (ErrorKind.DEADLINE_EXCEEDED, (
        "ETIMEDOUT",    # Connection timed out
        "ETIME",        # Timer expired
    )),
    (ErrorKind.NOT_FOUND, (
        "ENODEV",       # No such device
        "ENOENT",       # No such file or directory
        "ENOMEDIUM",    # No medium found
        "ENXIO",        # No such device or address
        "ESRCH",        # No such process
    )),
    (ErrorKind.ALREADY_EXISTS, (
        "EEXIST",       # File exists
        "EADDRNOTAVAIL",  # Address not available
        "EALREADY",     # Connection already in progress
        "ENOTUNIQ",     # Name not unique on network
    )),
    (ErrorKind.PERMISSION_DENIED, (
        "EPERM",        # Operation not permitted
        "EACCES",       # Permission denied
        "ENOKEY",       # Required key not available
        "EROFS",        # Read only file system
    )),
    (ErrorKind.FAILED_PRECONDITION, (
        "ENOTEMPTY",    # Directory not empty
        "EISDIR",       # Is a directory
        "ENOTDIR",      # Not a directory
        "EADDRINUSE",   # Address already in use
        "EBUSY",        # Device or resource busy
        "ECHILD",       # No child processes
        "EISCONN",      # Socket is connected
        "EISNAM",       # Is a named type file
        "ENOTBLK",      # Block device required
        "ENOTCONN",     # The socket is not connected
        "EPIPE",        # Broken pipe
        "ESHUTDOWN",    # Cannot send after transport endpoint shutdown
        "ETXTBSY",      # Text file busy
        "EUNATCH",      # Protocol driver not attached
    )),
    (ErrorKind.RESOURCE_EXHAUSTED, (
        "ENOSPC",       # No space left on device
        "EDQUOT",       # Disk quota exceeded
        "EMFILE",       # Too many open files
        "EMLINK",       # Too many links
        "ENFILE",       # Too many open files in system
        "ENOBUFS",      # No buffer space available
        "ENODATA",      # No message available on the STREAM read queue
        "ENOMEM",       # Not enough space
        "ENOSR",        # No STREAM resources
        "EUSERS",       # Too many users
    )),
    (ErrorKind.OUT_OF_RANGE, (
        "ECHRNG",       # Channel number out of range
        "EFBIG",        # File too large
        "EOVERFLOW",    # Value too large to be stored in data type
        "ERANGE",       # Result too large
    )),
    (ErrorKind.UNIMPLEMENTED, (
        "ENOPKG",       # Package not installed
        "ENOSYS",       # Function not implemented
        "ENOTSUP",      # Operation not supported
        "EAFNOSUPPORT",  # Address family not supported
        "EPFNOSUPPORT",  # Protocol family not supported
        "EPROTONOSUPPORT",  # Protocol not supported
        "ESOCKTNOSUPPORT",  # Socket type not supported
        "EXDEV",        # Improper link
    )),
    (ErrorKind.UNAVAILABLE, (
        "EAGAIN",       # Resource temporarily unavailable
        "ECOMM",        # Communication error on send
        "ECONNREFUSED",  # Connection refused
        "ECONNABORTED",  # Connection aborted
        "ECONNRESET",   # Connection reset
        "EINTR",        # Interrupted function call
        "EHOSTDOWN",    # Host is down
        "EHOSTUNREACH",  # Host is unreachable
        "ENETDOWN",     # Network is down
        "ENETRESET",    # Connection aborted by network
        "ENETUNREACH",  # Network unreachable
        "ENOLCK",       # No locks available
        "ENOLINK",      # Link has been severed
        "ENONET",       # Machine is not on the network
    )),
    (ErrorKind.ABORTED, (
        "EDEADLK",      # Resource deadlock avoided
        "ESTALE",       # Stale file handle
    )),
    (ErrorKind.CANCELLED, (
        "ECANCELED",    # Operation cancelled
    )),
)


# Windows system error codes as returned by GetLastError().
ERROR_SUCCESS = 0
ERROR_INVALID_FUNCTION = 1
ERROR_FILE_NOT_FOUND = 2
ERROR_PATH_NOT_FOUND = 3
ERROR_TOO_MANY_OPEN_FILES = 4
ERROR_ACCESS_DENIED = 5
ERROR_INVALID_HANDLE = 6
ERROR_NOT_ENOUGH_MEMORY = 8
ERROR_INVALID_ACCESS = 12
ERROR_OUTOFMEMORY = 14
ERROR_INVALID_DRIVE = 15
ERROR_NO_MORE_FILES = 18
ERROR_WRITE_PROTECT = 19
ERROR_NOT_READY = 21
ERROR_SHARING_VIOLATION = 32
ERROR_LOCK_VIOLATION = 33
ERROR_HANDLE_DISK_FULL = 39
ERROR_BAD_NETPATH = 53
ERROR_DEV_NOT_EXIST = 55
ERROR_FILE_EXISTS = 80
ERROR_DISK_FULL = 112
ERROR_CALL_NOT_IMPLEMENTED = 120
ERROR_INVALID_NAME = 123
ERROR_DIR_NOT_EMPTY = 145
ERROR_ALREADY_EXISTS = 183
ERROR_DIRECTORY = 267

WINDOWS_ERROR_TABLE: Sequence[Tuple[ErrorKind, Tuple[int, ...]]] = (
    (ErrorKind.INTERNAL, (
        ERROR_INVALID_ACCESS,
    )),
    (ErrorKind.INVALID_ARGUMENT, (
        ERROR_INVALID_FUNCTION,
        ERROR_INVALID_HANDLE,
        ERROR_INVALID_NAME,
    )),
    (ErrorKind.NOT_FOUND, (
        ERROR_FILE_NOT_FOUND,
        ERROR_PATH_NOT_FOUND,
        ERROR_INVALID_DRIVE,
        ERROR_BAD_NETPATH,
        ERROR_DEV_NOT_EXIST,
    )),
    (ErrorKind.ALREADY_EXISTS, (
        ERROR_FILE_EXISTS,
        ERROR_ALREADY_EXISTS,
    )),
    (ErrorKind.PERMISSION_DENIED, (
        ERROR_ACCESS_DENIED,
        ERROR_SHARING_VIOLATION,
        ERROR_WRITE_PROTECT,
        ERROR_LOCK_VIOLATION,
    )),
    (ErrorKind.FAILED_PRECONDITION, (
        ERROR_DIR_NOT_EMPTY,
        ERROR_DIRECTORY,
    )),
    (ErrorKind.RESOURCE_EXHAUSTED, (
        ERROR_TOO_MANY_OPEN_FILES,
        ERROR_NOT_ENOUGH_MEMORY,
        ERROR_OUTOFMEMORY,
        ERROR_NO_MORE_FILES,
        ERROR_DISK_FULL,
        ERROR_HANDLE_DISK_FULL,
    )),
    (ErrorKind.UNIMPLEMENTED, (
        ERROR_CALL_NOT_IMPLEMENTED,
    )),
    (ErrorKind.UNAVAILABLE, (
        ERROR_NOT_READY,
    )),
)


def _build_index(groups: Iterable[Tuple[ErrorKind, Iterable[Optional[int]]]]) -> Dict[int, ErrorKind]:
    index: Dict[int, ErrorKind] = {}
    for kind, codes in groups:
        for code in codes:
            if code is None:
                continue
            # First claim wins.
            index.setdefault(code, kind)
    return index


def _resolve_errno_names(
    table: Sequence[Tuple[ErrorKind, Tuple[str, ...]]],
) -> Iterable[Tuple[ErrorKind, Iterable[Optional[int]]]]:
    for kind, names in table:
        yield kind, [getattr(errno, name, None) for name in names]


_ERRNO_INDEX: Mapping[int, ErrorKind] = _build_index(_resolve_errno_names(ERRNO_TABLE))
_WINDOWS_ERROR_INDEX: Mapping[int, ErrorKind] = _build_index(WINDOWS_ERROR_TABLE)


def kind_for_errno(code: int) -> ErrorKind:
    """Return the canonical error kind for an ``errno`` value.

    Zero maps to ``OK``; any code the table does not name maps to
    ``UNKNOWN``.
    """
    if code == 0:
        return ErrorKind.OK
    return _ERRNO_INDEX.get(code, ErrorKind.UNKNOWN)


def kind_for_windows_error(code: int) -> ErrorKind:
    """Return the canonical error kind for a Windows ``GetLastError`` code."""
    if code == ERROR_SUCCESS:
        return ErrorKind.OK
    return _WINDOWS_ERROR_INDEX.get(code, ErrorKind.UNKNOWN)


def kind_for_os_error(exc: OSError) -> ErrorKind:
    """Classify an ``OSError``, preferring the Windows code when present."""
    winerror = getattr(exc, "winerror", None)
    if winerror is not None:
        return kind_for_windows_error(winerror)
    if exc.errno is None:
        return ErrorKind.UNKNOWN
    return kind_for_errno(exc.errno)


def errno_codes_for(kind: ErrorKind) -> Tuple[int, ...]:
    """Return the errno values that classify as ``kind`` on this platform."""
    return tuple(sorted(code for code, mapped in _ERRNO_INDEX.items() if mapped is kind))
