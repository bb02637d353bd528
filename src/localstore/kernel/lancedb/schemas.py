"""LanceDB table schemas using PyArrow."""

import pyarrow as pa

STORE_INFO_TABLE = "store_info"
STORE_FORMAT_VERSION = 1

# One row, written when the store is first created. Its presence is what
# makes a directory an existing store.
STORE_INFO_SCHEMA = pa.schema([
    pa.field("format_version", pa.int32(), nullable=False),
    pa.field("directory", pa.string(), nullable=False),
    pa.field("created_at", pa.string(), nullable=False),
])
