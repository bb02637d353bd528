"""Filesystem kernel: pathname algorithms and directory/file primitives."""

from localstore.kernel.fs.filesystem import (
    NATIVE_FILESYSTEM,
    Filesystem,
    PosixFilesystem,
    WindowsFilesystem,
)
from localstore.kernel.fs.path import (
    NATIVE_FLAVOR,
    POSIX_FLAVOR,
    WINDOWS_FLAVOR,
    Path,
    PathFlavor,
    PathView,
    PosixFlavor,
    WindowsFlavor,
    native_to_utf8,
    utf8_to_native,
)

__all__ = [
    # Paths
    "Path",
    "PathView",
    "PathFlavor",
    "PosixFlavor",
    "WindowsFlavor",
    "NATIVE_FLAVOR",
    "POSIX_FLAVOR",
    "WINDOWS_FLAVOR",
    "native_to_utf8",
    "utf8_to_native",
    # Filesystem
    "Filesystem",
    "PosixFilesystem",
    "WindowsFilesystem",
    "NATIVE_FILESYSTEM",
]
