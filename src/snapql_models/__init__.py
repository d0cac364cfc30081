"""Shared Pydantic models for snapql."""

from snapql_models.entries import FavoriteEntry, GraphSpec, HistoryEntry, QueryEntry
from snapql_models.query import Envelope, QueryResponse, QueryResult
from snapql_models.schema import ColumnInfo, TableSchema
from snapql_models.settings import (
    AIProvider,
    ConnectionSettings,
    GlobalSettings,
    normalize_prompt_extension,
)

__version__ = "0.1.0"

__all__ = [
    # Entries
    "QueryEntry",
    "HistoryEntry",
    "FavoriteEntry",
    "GraphSpec",
    # Settings
    "AIProvider",
    "GlobalSettings",
    "ConnectionSettings",
    "normalize_prompt_extension",
    # Schema
    "ColumnInfo",
    "TableSchema",
    # Query
    "QueryResult",
    "QueryResponse",
    "Envelope",
]
