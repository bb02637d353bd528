"""Directory and file primitives that report failures as ``Status`` values.

``Filesystem`` defines one contract with a POSIX and a Windows
implementation. ``NATIVE_FILESYSTEM`` is chosen once at import time.

Nothing here is atomic. Concurrent changes to the same tree while
``recursively_create`` or ``recursively_delete`` runs can change the outcome;
callers must serialize access to a subtree themselves.
"""

from __future__ import annotations

import errno
import os
import stat
from abc import ABC, abstractmethod
from typing import Mapping, Optional

import structlog

from localstore.domain.error_codes import (
    ERROR_FILE_NOT_FOUND,
    ERROR_PATH_NOT_FOUND,
)
from localstore.domain.errors import ErrorKind
from localstore.domain.status import Status, StatusOr
from localstore.kernel.fs.path import (
    POSIX_FLAVOR,
    WINDOWS_FLAVOR,
    Path,
    PathFlavor,
)

logger = structlog.get_logger()


class Filesystem(ABC):
    """Platform filesystem operations built on ``Path`` and ``Status``."""

    flavor: PathFlavor = POSIX_FLAVOR

    # Directory operations

    def create_dir(self, path: Path) -> Status:
        """Create one directory. Already existing counts as success."""
        try:
            os.mkdir(path, 0o777)
        except FileExistsError:
            return Status()
        except OSError as exc:
            return self.status_from_os_error(exc, f"Could not create directory {path}")
        logger.debug("directory_created", path=str(path))
        return Status()

    def delete_dir(self, path: Path) -> Status:
        """Remove an empty directory. A missing directory counts as success."""
        try:
            os.rmdir(path)
        except OSError as exc:
            if self.is_missing_error(exc):
                return Status()
            return self.status_from_os_error(exc, f"Could not delete directory {path}")
        return Status()

    def dir_exists(self, path: Path) -> bool:
        """Return True if ``path`` exists and is a directory."""
        result = self.is_directory(path)
        return result.ok and result.value

    def recursively_create(self, path: Path) -> Status:
        """Create ``path`` and any missing parents.

        Returns OK if the directory was created or already existed. Failures
        other than a missing parent are returned unchanged.
        """
        result = self.create_dir(path)
        if result.ok or result.code is not ErrorKind.NOT_FOUND:
            return result

        parent = path.dirname()
        if parent == path or parent.empty():
            return result

        result = self.recursively_create(parent)
        if not result.ok:
            return result

        return self.create_dir(path)

    def recursively_delete(self, path: Path) -> Status:
        """Delete ``path`` and, for a directory, everything beneath it.

        Returns OK if everything was deleted or ``path`` did not exist. The
        first failure stops the walk; entries already removed stay removed.
        """
        # Symlinks are removed, never followed.
        is_dir = self.is_directory(path, follow_symlinks=False)
        if not is_dir.ok:
            if is_dir.status.code is ErrorKind.NOT_FOUND:
                return Status()
            return is_dir.status

        if is_dir.value:
            result = self._recursively_delete_dir(path)
        else:
            result = self.delete_file(path)
        if result.ok:
            logger.debug("path_deleted", path=str(path))
        return result

    def _recursively_delete_dir(self, parent: Path) -> Status:
        result = Status()
        try:
            with os.scandir(parent) as entries:
                for entry in entries:
                    child = parent.append(entry.name)
                    result = self.recursively_delete(child)
                    if not result.ok:
                        break
        except OSError as exc:
            result.update(self.status_from_os_error(exc, f"Could not read directory {parent}"))

        if not result.ok:
            return result

        try:
            os.rmdir(parent)
        except OSError as exc:
            return self.status_from_os_error(exc, f"Could not delete directory {parent}")
        return Status()

    @abstractmethod
    def temp_dir(self, environ: Optional[Mapping[str, str]] = None) -> Path:
        """Return the best directory in which to create temporary files."""

    # File operations

    def delete_file(self, path: Path) -> Status:
        try:
            os.unlink(path)
        except OSError as exc:
            return self.status_from_os_error(exc, f"Could not delete file {path}")
        return Status()

    def file_exists(self, path: Path) -> bool:
        try:
            os.stat(path)
        except OSError:
            return False
        return True

    def is_directory(self, path: Path, follow_symlinks: bool = True) -> StatusOr[bool]:
        """Report whether ``path`` is a directory.

        Unlike ``dir_exists`` a failed stat is returned to the caller, so a
        missing path (``NOT_FOUND``) can be told apart from, say,
        ``PERMISSION_DENIED``.
        """
        try:
            info = os.stat(path, follow_symlinks=follow_symlinks)
        except OSError as exc:
            return StatusOr.from_status(self.status_from_os_error(exc, f"Could not stat file {path}"))
        return StatusOr(stat.S_ISDIR(info.st_mode))

    # Error translation

    def status_from_os_error(self, exc: OSError, message: str) -> Status:
        status = Status.from_os_error(exc, message)
        if status.ok:
            return Status(ErrorKind.UNKNOWN, f"{message} ({exc})")
        return status

    def is_missing_error(self, exc: OSError) -> bool:
        return exc.errno in (errno.ENOENT, errno.ENOTDIR)


class PosixFilesystem(Filesystem):
    """Filesystem operations reporting ``errno`` based failures."""

    flavor = POSIX_FLAVOR
    default_temp_dir = "/tmp"

    def temp_dir(self, environ: Optional[Mapping[str, str]] = None) -> Path:
        env = os.environ if environ is None else environ
        tmpdir = env.get("TMPDIR")
        if tmpdir:
            return Path.from_native(tmpdir, self.flavor)
        return Path.from_utf8(self.default_temp_dir, self.flavor)


class WindowsFilesystem(Filesystem):
    """Filesystem operations reporting ``GetLastError`` based failures."""

    flavor = WINDOWS_FLAVOR
    default_temp_dir = "C:\\Windows"

    def temp_dir(self, environ: Optional[Mapping[str, str]] = None) -> Path:
        # Same search order as GetTempPath.
        env = os.environ if environ is None else environ
        for name in ("TMP", "TEMP", "USERPROFILE"):
            value = env.get(name)
            if value:
                return Path.from_native(value, self.flavor)
        return Path.from_utf8(env.get("SystemRoot") or self.default_temp_dir, self.flavor)

    def delete_file(self, path: Path) -> Status:
        try:
            os.unlink(path)
        except OSError as exc:
            if self.is_missing_error(exc):
                return Status()
            return self.status_from_os_error(exc, f"Could not delete file {path}")
        return Status()

    def is_missing_error(self, exc: OSError) -> bool:
        winerror = getattr(exc, "winerror", None)
        if winerror is not None:
            return winerror in (ERROR_FILE_NOT_FOUND, ERROR_PATH_NOT_FOUND)
        return super().is_missing_error(exc)


NATIVE_FILESYSTEM: Filesystem = WindowsFilesystem() if os.name == "nt" else PosixFilesystem()
