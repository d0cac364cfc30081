"""Configuration root layout and JSON document I/O."""

from snapql.storage.json_io import read_json, write_json
from snapql.storage.layout import StorageLayout, validate_connection_name

__all__ = [
    "StorageLayout",
    "validate_connection_name",
    "read_json",
    "write_json",
]
