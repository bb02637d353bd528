"""Capabilities a store opener is assembled from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, TypeVar, runtime_checkable

from localstore.domain.status import Status, StatusOr
from localstore.kernel.fs.path import Path

H = TypeVar("H", covariant=True)


@dataclass(frozen=True)
class EngineOptions:
    """Options handed to the storage engine; both must be chosen by the caller."""

    create_if_missing: bool
    error_if_exists: bool


@runtime_checkable
class DirectoryEnsurer(Protocol):
    """Guarantees a directory tree exists before a store is opened."""

    def ensure_directory(self, directory: Path) -> Status:
        """Create ``directory`` and its parents if needed."""
        ...


@runtime_checkable
class EngineOpener(Protocol[H]):
    """Opens the embedded storage engine in an existing directory."""

    def open(self, directory: Path, options: EngineOptions) -> StatusOr[H]:
        """Open the store, returning its handle or the failure."""
        ...
