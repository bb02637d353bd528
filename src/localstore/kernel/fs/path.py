"""Native pathname views and values.

Decomposition intentionally does not canonicalize:

* Trailing separators are treated as separating an empty final segment, so
  ``basename("/a/b/")`` is ``""`` and ``dirname("/a/b/")`` is ``"/a/b"``.
  POSIX ``basename``/``dirname`` would strip the trailing separator first;
  callers building store paths rely on the behavior here instead.
* A run of separators before the last segment counts as one separator, so
  ``dirname("/a/b//c")`` is ``"/a/b"``.
* ``.`` and ``..`` are ordinary segments, so ``dirname("/a//b//c")`` is
  ``"/a//b"``.

Separator rules come from a flavor. ``PosixFlavor`` only knows ``/``;
``WindowsFlavor`` accepts ``/`` and ``\\``, prefers ``\\`` and strips drive
letters before checking for a leading separator. ``NATIVE_FLAVOR`` is picked
once, when this module is imported.
"""

from __future__ import annotations

import os
from typing import Union

NPOS = -1


class PathFlavor:
    """Separator rules for one platform family."""

    name = "posix"
    separators = "/"
    preferred_separator = "/"

    def is_separator(self, char: str) -> bool:
        return char in self.separators

    def drive_length(self, text: str, start: int, stop: int) -> int:
        """Return the length of a drive prefix at ``text[start:stop]``."""
        return 0

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PathFlavor) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PosixFlavor(PathFlavor):
    pass


class WindowsFlavor(PathFlavor):
    name = "windows"
    separators = "/\\"
    preferred_separator = "\\"

    def drive_length(self, text: str, start: int, stop: int) -> int:
        if stop - start >= 2 and text[start + 1] == ":" and text[start].isascii() and text[start].isalpha():
            return 2
        return 0


POSIX_FLAVOR = PosixFlavor()
WINDOWS_FLAVOR = WindowsFlavor()
NATIVE_FLAVOR: PathFlavor = WINDOWS_FLAVOR if os.name == "nt" else POSIX_FLAVOR


def utf8_to_native(value: Union[str, bytes]) -> str:
    """Convert a UTF-8 pathname to the native string representation."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def native_to_utf8(value: str) -> str:
    """Convert a native pathname to UTF-8 text.

    Undecodable bytes smuggled in through ``os.fsdecode`` are replaced.
    """
    return value.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


class PathView:
    """A read-only window over part of a native pathname string.

    Operations return new views into the same string; nothing is copied until
    a ``Path`` is built from the view.
    """

    __slots__ = ("_text", "_start", "_stop", "_flavor")

    def __init__(self, text: str, start: int = 0, stop: int | None = None, flavor: PathFlavor = NATIVE_FLAVOR):
        self._text = text
        self._start = start
        self._stop = len(text) if stop is None else stop
        self._flavor = flavor

    @property
    def flavor(self) -> PathFlavor:
        return self._flavor

    def empty(self) -> bool:
        return self._stop == self._start

    def __len__(self) -> int:
        return self._stop - self._start

    def __str__(self) -> str:
        return self._text[self._start:self._stop]

    def __repr__(self) -> str:
        return f"PathView({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PathView):
            return self._flavor == other._flavor and str(self) == str(other)
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))

    def _view(self, start: int, stop: int) -> "PathView":
        return PathView(self._text, start, stop, self._flavor)

    def _last_separator(self, pos: int | None = None) -> int:
        """Offset (relative to the view) of the last separator before ``pos``."""
        end = self._stop if pos is None else min(self._start + pos, self._stop)
        for i in range(end - 1, self._start - 1, -1):
            if self._flavor.is_separator(self._text[i]):
                return i - self._start
        return NPOS

    def _last_non_separator(self, pos: int | None = None) -> int:
        end = self._stop if pos is None else min(self._start + pos, self._stop)
        for i in range(end - 1, self._start - 1, -1):
            if not self._flavor.is_separator(self._text[i]):
                return i - self._start
        return NPOS

    def basename(self) -> "PathView":
        """Return the unqualified trailing part, e.g. ``c`` for ``/a/b/c``."""
        slash = self._last_separator()
        if slash == NPOS:
            return self
        return self._view(self._start + slash + 1, self._stop)

    def dirname(self) -> "PathView":
        """Return the parent directory name, e.g. ``/a/b`` for ``/a/b/c``."""
        last_slash = self._last_separator()
        if last_slash == NPOS:
            # POSIX would say "." here.
            return self._view(self._start, self._start)

        non_slash = self._last_non_separator(last_slash)
        if non_slash == NPOS:
            # Only separators precede the last segment.
            return self._view(self._start, self._start + 1)

        return self._view(self._start, self._start + non_slash + 1)

    def strip_drive_letter(self) -> "PathView":
        drive = self._flavor.drive_length(self._text, self._start, self._stop)
        if drive:
            return self._view(self._start + drive, self._stop)
        return self

    def is_absolute(self) -> bool:
        path = self.strip_drive_letter()
        return not path.empty() and self._flavor.is_separator(self._text[path._start])


PathLike = Union["Path", PathView, str]


class Path:
    """An owned native pathname.

    Equality compares the native representation, so ``/a//b`` and ``/a/b``
    are different paths.
    """

    __slots__ = ("_pathname", "_flavor")

    def __init__(self, pathname: PathLike = "", flavor: PathFlavor | None = None):
        if isinstance(pathname, Path):
            self._pathname = pathname._pathname
            self._flavor = flavor or pathname._flavor
        elif isinstance(pathname, PathView):
            self._pathname = str(pathname)
            self._flavor = flavor or pathname.flavor
        else:
            self._pathname = str(pathname)
            self._flavor = flavor or NATIVE_FLAVOR

    @classmethod
    def from_utf8(cls, pathname: Union[str, bytes], flavor: PathFlavor | None = None) -> "Path":
        return cls(utf8_to_native(pathname), flavor)

    @classmethod
    def from_native(cls, pathname: Union[str, bytes, os.PathLike], flavor: PathFlavor | None = None) -> "Path":
        """Build a path from a value in the OS filesystem encoding."""
        return cls(os.fsdecode(pathname), flavor)

    @property
    def native_value(self) -> str:
        return self._pathname

    @property
    def flavor(self) -> PathFlavor:
        return self._flavor

    def view(self) -> PathView:
        return PathView(self._pathname, flavor=self._flavor)

    def to_utf8(self) -> str:
        return native_to_utf8(self._pathname)

    def empty(self) -> bool:
        return not self._pathname

    def basename(self) -> "Path":
        return Path(self.view().basename())

    def dirname(self) -> "Path":
        return Path(self.view().dirname())

    def is_absolute(self) -> bool:
        return self.view().is_absolute()

    def append(self, *paths: PathLike) -> "Path":
        """Return this path joined with ``paths``."""
        return Path.join(self, *paths)

    @staticmethod
    def join(base: PathLike, *paths: PathLike) -> "Path":
        """Join path segments with the preferred separator.

        An absolute segment replaces everything before it. A relative segment
        is appended after trimming trailing separators from the accumulated
        path and inserting exactly one separator. Empty segments add nothing.
        """
        base_path = base if isinstance(base, Path) else Path(base)
        flavor = base_path._flavor
        pathname = base_path._pathname
        for part in paths:
            if isinstance(part, Path):
                segment = part.view()
            elif isinstance(part, PathView):
                segment = part
            else:
                segment = PathView(part, flavor=flavor)
            if segment.is_absolute():
                pathname = str(segment)
                continue
            if segment.empty():
                continue

            non_slash = PathView(pathname, flavor=flavor)._last_non_separator()
            if non_slash != NPOS:
                pathname = pathname[:non_slash + 1] + flavor.preferred_separator
            pathname += str(segment)
        return Path(pathname, flavor)

    def __fspath__(self) -> str:
        return self._pathname

    def __str__(self) -> str:
        return self.to_utf8()

    def __repr__(self) -> str:
        return f"Path({self._pathname!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self._flavor == other._flavor and self._pathname == other._pathname

    def __hash__(self) -> int:
        return hash((self._flavor, self._pathname))

    def __truediv__(self, other: PathLike) -> "Path":
        return self.append(other)
