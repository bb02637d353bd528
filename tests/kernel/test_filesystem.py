"""Tests for directory and file primitives."""

import errno
import os
import sys

import pytest

from localstore.domain.error_codes import ERROR_FILE_NOT_FOUND
from localstore.domain.errors import ErrorKind
from localstore.kernel.fs.filesystem import (
    NATIVE_FILESYSTEM,
    PosixFilesystem,
    WindowsFilesystem,
)
from localstore.kernel.fs.path import POSIX_FLAVOR, WINDOWS_FLAVOR, Path


@pytest.fixture
def fs():
    return NATIVE_FILESYSTEM


@pytest.fixture
def root(tmp_path):
    return Path.from_native(tmp_path)


def touch(path: Path, content: str = "x") -> None:
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(content)


class TestCreate:
    def test_create_dir(self, fs, root):
        target = root / "one"
        assert fs.create_dir(target).ok
        assert fs.dir_exists(target)

    def test_create_existing_dir_is_ok(self, fs, root):
        target = root / "one"
        assert fs.create_dir(target).ok
        assert fs.create_dir(target).ok

    def test_create_with_missing_parent_is_not_found(self, fs, root):
        status = fs.create_dir(root.append("missing", "child"))
        assert status.code is ErrorKind.NOT_FOUND
        assert "Could not create directory" in status.message

    def test_recursively_create(self, fs, root):
        target = root.append("a", "b", "c")
        assert fs.recursively_create(target).ok
        assert fs.dir_exists(root / "a")
        assert fs.dir_exists(root.append("a", "b"))
        assert fs.dir_exists(target)

    def test_recursively_create_is_idempotent(self, fs, root):
        target = root.append("a", "b", "c")
        assert fs.recursively_create(target).ok
        assert fs.recursively_create(target).ok

    def test_recursively_create_with_trailing_separator(self, fs, root):
        target = Path(root.native_value + os.sep + "x" + os.sep + "y" + os.sep)
        assert fs.recursively_create(target).ok
        assert fs.dir_exists(root.append("x", "y"))

    def test_recursively_create_propagates_non_missing_failures(self, fs, root):
        blocker = root / "file"
        touch(blocker)
        status = fs.recursively_create(blocker.append("a", "b"))
        assert not status.ok
        assert status.code is not ErrorKind.NOT_FOUND

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_recursively_create_permission_denied(self, fs, root):
        locked = root / "locked"
        assert fs.create_dir(locked).ok
        os.chmod(locked, 0o500)
        try:
            status = fs.recursively_create(locked.append("a", "b"))
            assert status.code is ErrorKind.PERMISSION_DENIED
        finally:
            os.chmod(locked, 0o700)


class TestDelete:
    def test_recursively_delete_missing_path_is_ok(self, fs, root):
        assert fs.recursively_delete(root / "nothing").ok

    def test_recursively_delete_tree(self, fs, root):
        target = root / "tree"
        assert fs.recursively_create(target.append("sub", "deeper")).ok
        touch(target / "top.txt")
        touch(target.append("sub", "mid.txt"))
        touch(target.append("sub", "deeper", "leaf.txt"))

        assert fs.recursively_delete(target).ok
        assert not fs.dir_exists(target)
        assert not fs.file_exists(target)
        assert fs.dir_exists(root)

    def test_recursively_delete_file(self, fs, root):
        target = root / "file.txt"
        touch(target)
        assert fs.recursively_delete(target).ok
        assert not fs.file_exists(target)

    @pytest.mark.skipif(not hasattr(os, "symlink") or sys.platform == "win32", reason="needs symlinks")
    def test_recursively_delete_does_not_follow_symlinks(self, fs, root):
        keep = root / "keep"
        assert fs.create_dir(keep).ok
        touch(keep / "precious.txt")
        tree = root / "tree"
        assert fs.create_dir(tree).ok
        os.symlink(keep, tree / "link")

        assert fs.recursively_delete(tree).ok
        assert fs.file_exists(keep / "precious.txt")

    def test_delete_dir(self, fs, root):
        target = root / "empty"
        assert fs.create_dir(target).ok
        assert fs.delete_dir(target).ok
        assert not fs.dir_exists(target)
        assert fs.delete_dir(target).ok

    def test_delete_non_empty_dir_fails(self, fs, root):
        target = root / "full"
        assert fs.create_dir(target).ok
        touch(target / "x")
        status = fs.delete_dir(target)
        assert status.code is ErrorKind.FAILED_PRECONDITION

    def test_delete_file_missing(self, root):
        status = PosixFilesystem().delete_file(root / "missing")
        assert status.code is ErrorKind.NOT_FOUND
        assert "Could not delete file" in status.message

    def test_first_error_wins(self, fs, root, monkeypatch):
        target = root / "tree"
        assert fs.create_dir(target).ok
        touch(target / "a")
        touch(target / "b")

        real_unlink = os.unlink
        calls = []

        def failing_unlink(path, *args, **kwargs):
            calls.append(os.fspath(path))
            if len(calls) == 1:
                raise PermissionError(errno.EACCES, "Permission denied", os.fspath(path))
            return real_unlink(path, *args, **kwargs)

        monkeypatch.setattr(os, "unlink", failing_unlink)
        status = fs.recursively_delete(target)

        assert status.code is ErrorKind.PERMISSION_DENIED
        assert len(calls) == 1
        assert fs.dir_exists(target)


class TestProbes:
    def test_file_exists(self, fs, root):
        target = root / "f"
        assert not fs.file_exists(target)
        touch(target)
        assert fs.file_exists(target)

    def test_dir_exists_is_false_for_files(self, fs, root):
        target = root / "f"
        touch(target)
        assert fs.file_exists(target)
        assert not fs.dir_exists(target)

    def test_is_directory(self, fs, root):
        touch(root / "f")
        assert fs.is_directory(root).value is True
        assert fs.is_directory(root / "f").value is False

    def test_is_directory_reports_missing(self, fs, root):
        result = fs.is_directory(root / "missing")
        assert not result.ok
        assert result.status.code is ErrorKind.NOT_FOUND
        assert "Could not stat file" in result.status.message


class TestTempDir:
    def test_posix_reads_tmpdir(self):
        assert PosixFilesystem().temp_dir({"TMPDIR": "/scratch"}) == Path("/scratch", POSIX_FLAVOR)

    def test_posix_default(self):
        assert PosixFilesystem().temp_dir({}) == Path("/tmp", POSIX_FLAVOR)

    def test_windows_search_order(self):
        fs = WindowsFilesystem()
        env = {"TEMP": "C:\\Temp", "USERPROFILE": "C:\\Users\\me"}
        assert fs.temp_dir(env) == Path("C:\\Temp", WINDOWS_FLAVOR)
        assert fs.temp_dir({"TMP": "D:\\tmp", **env}) == Path("D:\\tmp", WINDOWS_FLAVOR)
        assert fs.temp_dir({"USERPROFILE": "C:\\Users\\me"}) == Path("C:\\Users\\me", WINDOWS_FLAVOR)
        assert fs.temp_dir({}) == Path("C:\\Windows", WINDOWS_FLAVOR)

    def test_native_reads_environment(self, monkeypatch, tmp_path):
        if isinstance(NATIVE_FILESYSTEM, WindowsFilesystem):
            monkeypatch.setenv("TMP", str(tmp_path))
        else:
            monkeypatch.setenv("TMPDIR", str(tmp_path))
        assert NATIVE_FILESYSTEM.temp_dir() == Path.from_native(tmp_path)


class TestWindowsErrors:
    def test_missing_file_delete_is_ok(self, monkeypatch, root):
        def missing(path, *args, **kwargs):
            exc = FileNotFoundError(errno.ENOENT, "The system cannot find the file specified")
            exc.winerror = ERROR_FILE_NOT_FOUND
            raise exc

        monkeypatch.setattr(os, "unlink", missing)
        assert WindowsFilesystem().delete_file(root / "gone").ok

    def test_status_uses_windows_code(self, root):
        exc = PermissionError(errno.EACCES, "Access is denied")
        exc.winerror = 5
        status = WindowsFilesystem().status_from_os_error(exc, f"Could not create directory {root}")
        assert status.code is ErrorKind.PERMISSION_DENIED
        assert status.message.endswith("(error 5: Access is denied)")
