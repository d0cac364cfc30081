"""Database connectivity, introspection and query dispatch."""

from snapql.db.connection import (
    DatabaseError,
    Dialect,
    InvalidConnectionError,
    QueryExecutionError,
    UnsupportedConnectionError,
    detect_dialect,
    get_engine,
    test_connection,
)
from snapql.db.dispatch import QueryDispatcher
from snapql.db.introspection import SchemaIntrospector

__all__ = [
    "DatabaseError",
    "Dialect",
    "InvalidConnectionError",
    "QueryExecutionError",
    "UnsupportedConnectionError",
    "detect_dialect",
    "get_engine",
    "test_connection",
    "QueryDispatcher",
    "SchemaIntrospector",
]
