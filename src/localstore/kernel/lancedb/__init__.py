"""LanceDB kernel module - opening on-disk stores.

This module provides:
- Capability protocols for ensuring directories and opening the engine
- A LanceDB engine and store handle
- Production and clearing (test) store openers
"""

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
from localstore.kernel.lancedb.store_opener import (
    TESTING_DIRECTORY_NAME,
    ClearingStoreOpener,
    FilesystemDirectoryEnsurer,
    LanceDBEngine,
    LanceDBStore,
    StoreOpener,
    create_store_opener,
    create_testing_store_opener,
    open_for_testing,
    testing_store_directory,
)

__all__ = [
    # Capabilities
    "DirectoryEnsurer",
    "EngineOpener",
    "EngineOptions",
    # Engine
    "LanceDBEngine",
    "LanceDBStore",
    # Openers
    "StoreOpener",
    "ClearingStoreOpener",
    "FilesystemDirectoryEnsurer",
    "create_store_opener",
    "create_testing_store_opener",
    "open_for_testing",
    "testing_store_directory",
    "TESTING_DIRECTORY_NAME",
    # Schemas
    "STORE_INFO_SCHEMA",
    "STORE_INFO_TABLE",
    "STORE_FORMAT_VERSION",
]
