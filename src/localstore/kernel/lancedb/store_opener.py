"""Store opening - ensure the directory tree, then open LanceDB in it.

``StoreOpener`` composes a ``DirectoryEnsurer`` with an ``EngineOpener``.
``ClearingStoreOpener`` wraps a ``StoreOpener`` and wipes the target directory
first, so tests always start from an empty store.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

import lancedb
import structlog

from localstore.domain.errors import ErrorKind
from localstore.domain.status import Status, StatusOr, status_from_exception
from localstore.kernel.fs.filesystem import NATIVE_FILESYSTEM, Filesystem
from localstore.kernel.fs.path import Path, PathLike
from localstore.kernel.lancedb.protocols import (
    DirectoryEnsurer,
    EngineOpener,
    EngineOptions,
)
from localstore.kernel.lancedb.schemas import (
    STORE_FORMAT_VERSION,
    STORE_INFO_SCHEMA,
    STORE_INFO_TABLE,
)

logger = structlog.get_logger()

H = TypeVar("H")

TESTING_DIRECTORY_NAME = "localstore-testing"


class LanceDBStore:
    """Handle to an opened store: a LanceDB connection plus its directory."""

    def __init__(self, directory: Path, connection: lancedb.DBConnection):
        self.directory = directory
        self.connection = connection

    def list_tables(self) -> List[str]:
        """List all table names."""
        response = self.connection.list_tables()
        if hasattr(response, "tables"):
            return list(response.tables)
        return list(response)

    def table_exists(self, name: str) -> bool:
        return name in self.list_tables()

    def open_table(self, name: str):
        try:
            return self.connection.open_table(name)
        except Exception as e:
            logger.error("table_open_failed", table=name, directory=str(self.directory), error=str(e))
            raise

    def create_table(self, name: str, schema, data: Optional[List[Dict[str, Any]]] = None, exist_ok: bool = False):
        """Create a table with the given PyArrow schema."""
        table = self.connection.create_table(name, data=data, schema=schema, exist_ok=exist_ok)
        logger.debug("table_created", table=name, directory=str(self.directory))
        return table

    def store_info(self) -> Dict[str, Any]:
        """Return the row written when the store was created."""
        rows = self.open_table(STORE_INFO_TABLE).to_arrow().to_pylist()
        return rows[0] if rows else {}

    def initialize(self) -> None:
        """Write the store info table that marks this directory as a store."""
        self.create_table(
            STORE_INFO_TABLE,
            STORE_INFO_SCHEMA,
            data=[{
                "format_version": STORE_FORMAT_VERSION,
                "directory": self.directory.to_utf8(),
                "created_at": datetime.now(timezone.utc).isoformat(),
            }],
        )


class LanceDBEngine:
    """``EngineOpener`` backed by ``lancedb.connect``.

    A directory holds a store once its ``store_info`` table exists.
    """

    def open(self, directory: Path, options: EngineOptions) -> StatusOr[LanceDBStore]:
        try:
            connection = lancedb.connect(os.fspath(directory))
            store = LanceDBStore(directory, connection)
            exists = store.table_exists(STORE_INFO_TABLE)
        except Exception as e:
            return StatusOr.from_status(status_from_exception(e, f"Could not open store at {directory}"))

        if exists and options.error_if_exists:
            return StatusOr.from_status(
                Status(ErrorKind.ALREADY_EXISTS, f"{directory}: exists (error_if_exists is true)")
            )

        if not exists:
            if not options.create_if_missing:
                return StatusOr.from_status(
                    Status(ErrorKind.NOT_FOUND, f"{directory}: does not exist (create_if_missing is false)")
                )
            try:
                store.initialize()
            except Exception as e:
                return StatusOr.from_status(status_from_exception(e, f"Could not create store at {directory}"))
            logger.info("store_created", directory=str(directory))

        return StatusOr(store)


class FilesystemDirectoryEnsurer:
    """``DirectoryEnsurer`` that creates missing directories recursively."""

    def __init__(self, filesystem: Filesystem = NATIVE_FILESYSTEM):
        self.filesystem = filesystem

    def ensure_directory(self, directory: Path) -> Status:
        status = self.filesystem.recursively_create(directory)
        if not status.ok:
            logger.error("directory_create_failed", directory=str(directory), error=str(status))
        return status


class StoreOpener(Generic[H]):
    """Opens a store in ``directory``, creating the directory tree first."""

    def __init__(
        self,
        directory: PathLike,
        ensurer: DirectoryEnsurer,
        engine: EngineOpener[H],
    ):
        self.directory = directory if isinstance(directory, Path) else Path(directory)
        self.ensurer = ensurer
        self.engine = engine

    def open(self, options: EngineOptions) -> StatusOr[H]:
        status = self.ensurer.ensure_directory(self.directory)
        if not status.ok:
            return StatusOr.from_status(
                status.annotate(f"Could not create store directory {self.directory}")
            )

        result = self.engine.open(self.directory, options)
        if not result.ok:
            logger.error("store_open_failed", directory=str(self.directory), error=str(result.status))
            return result

        logger.info(
            "store_opened",
            directory=str(self.directory),
            create_if_missing=options.create_if_missing,
            error_if_exists=options.error_if_exists,
        )
        return result


class ClearingStoreOpener(Generic[H]):
    """Deletes any existing contents of the target before opening it."""

    def __init__(self, opener: StoreOpener[H], filesystem: Filesystem = NATIVE_FILESYSTEM):
        self.opener = opener
        self.filesystem = filesystem

    @property
    def directory(self) -> Path:
        return self.opener.directory

    def clear_data(self) -> Status:
        directory = self.directory
        if not self.filesystem.dir_exists(directory):
            return Status()

        status = self.filesystem.recursively_delete(directory)
        if not status.ok:
            return status.annotate(f"failed to clean up store path {directory}")
        logger.info("store_cleared", directory=str(directory))
        return Status()

    def open(self, options: EngineOptions) -> StatusOr[H]:
        status = self.clear_data()
        if not status.ok:
            return StatusOr.from_status(status)
        return self.opener.open(options)


def create_store_opener(
    directory: PathLike,
    *,
    filesystem: Optional[Filesystem] = None,
    engine: Optional[EngineOpener[Any]] = None,
) -> StoreOpener[Any]:
    """Build a ``StoreOpener`` with the production filesystem and LanceDB."""
    fs = filesystem or NATIVE_FILESYSTEM
    return StoreOpener(
        directory,
        FilesystemDirectoryEnsurer(fs),
        engine or LanceDBEngine(),
    )


def testing_store_directory(temp_dir: PathLike, name: str = TESTING_DIRECTORY_NAME) -> Path:
    return Path.join(temp_dir, name)


def create_testing_store_opener(
    temp_dir: PathLike,
    *,
    name: str = TESTING_DIRECTORY_NAME,
    filesystem: Optional[Filesystem] = None,
    engine: Optional[EngineOpener[Any]] = None,
) -> ClearingStoreOpener[Any]:
    fs = filesystem or NATIVE_FILESYSTEM
    opener = create_store_opener(testing_store_directory(temp_dir, name), filesystem=fs, engine=engine)
    return ClearingStoreOpener(opener, fs)


def open_for_testing(temp_dir: PathLike, *, name: str = TESTING_DIRECTORY_NAME) -> LanceDBStore:
    """Open a freshly cleared store under ``temp_dir``.

    Raises:
        StatusError: if clearing or opening fails.
    """
    opener = create_testing_store_opener(temp_dir, name=name)
    result = opener.open(EngineOptions(create_if_missing=True, error_if_exists=True))
    return result.value_or_raise()
