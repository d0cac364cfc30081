"""Database schema introspection via information_schema.

One catalog query per dialect returns a row per (column, constraint) pair.
The rows are folded into TableSchema models for the schema browser, or
rendered as CREATE TABLE-like text for the generation prompt.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from snapql_models import ColumnInfo, TableSchema
from sqlalchemy import text

from snapql.db.connection import (
    DatabaseError,
    Dialect,
    QueryExecutionError,
    detect_dialect,
    get_engine,
)

if TYPE_CHECKING:
    from snapql.connections import ConnectionStore

logger = logging.getLogger(__name__)


POSTGRES_CATALOG_QUERY = """
SELECT
  t.table_name,
  c.column_name,
  c.data_type,
  c.character_maximum_length,
  c.is_nullable,
  c.column_default,
  tc.constraint_type,
  ccu.table_name AS foreign_table_name,
  ccu.column_name AS foreign_column_name
FROM information_schema.tables t
JOIN information_schema.columns c
  ON c.table_schema = t.table_schema
  AND c.table_name = t.table_name
LEFT JOIN information_schema.key_column_usage kcu
  ON kcu.table_schema = c.table_schema
  AND kcu.table_name = c.table_name
  AND kcu.column_name = c.column_name
LEFT JOIN information_schema.table_constraints tc
  ON tc.constraint_schema = kcu.constraint_schema
  AND tc.constraint_name = kcu.constraint_name
LEFT JOIN information_schema.constraint_column_usage ccu
  ON ccu.constraint_schema = tc.constraint_schema
  AND ccu.constraint_name = tc.constraint_name
  AND tc.constraint_type = 'FOREIGN KEY'
WHERE t.table_schema = 'public'
  AND t.table_type = 'BASE TABLE'
ORDER BY t.table_name, c.ordinal_position
"""

MYSQL_CATALOG_QUERY = """
SELECT
  t.TABLE_NAME AS table_name,
  c.COLUMN_NAME AS column_name,
  c.DATA_TYPE AS data_type,
  c.CHARACTER_MAXIMUM_LENGTH AS character_maximum_length,
  c.IS_NULLABLE AS is_nullable,
  c.COLUMN_DEFAULT AS column_default,
  tc.CONSTRAINT_TYPE AS constraint_type,
  kcu.REFERENCED_TABLE_NAME AS foreign_table_name,
  kcu.REFERENCED_COLUMN_NAME AS foreign_column_name
FROM information_schema.TABLES t
JOIN information_schema.COLUMNS c
  ON c.TABLE_SCHEMA = t.TABLE_SCHEMA
  AND c.TABLE_NAME = t.TABLE_NAME
LEFT JOIN information_schema.KEY_COLUMN_USAGE kcu
  ON kcu.TABLE_SCHEMA = c.TABLE_SCHEMA
  AND kcu.TABLE_NAME = c.TABLE_NAME
  AND kcu.COLUMN_NAME = c.COLUMN_NAME
LEFT JOIN information_schema.TABLE_CONSTRAINTS tc
  ON tc.CONSTRAINT_SCHEMA = kcu.CONSTRAINT_SCHEMA
  AND tc.TABLE_NAME = kcu.TABLE_NAME
  AND tc.CONSTRAINT_NAME = kcu.CONSTRAINT_NAME
WHERE t.TABLE_SCHEMA = DATABASE()
  AND t.TABLE_TYPE = 'BASE TABLE'
ORDER BY t.TABLE_NAME, c.ORDINAL_POSITION
"""

_CATALOG_QUERIES = {
    Dialect.POSTGRES: POSTGRES_CATALOG_QUERY,
    Dialect.MYSQL: MYSQL_CATALOG_QUERY,
}


def catalog_query(dialect: Dialect) -> str:
    """Get the information_schema query for a dialect."""
    return _CATALOG_QUERIES[dialect]


def fetch_catalog_rows(connection_string: str) -> list[dict[str, Any]]:
    """Run the dialect's catalog query and return raw rows.

    Raises:
        UnsupportedConnectionError: If the dialect cannot be detected
        QueryExecutionError: If connecting or querying fails
    """
    dialect = detect_dialect(connection_string)
    engine = get_engine(connection_string)
    try:
        with engine.connect() as conn:
            result = conn.execute(text(catalog_query(dialect)))
            return [_lower_keys(dict(row)) for row in result.mappings()]
    except DatabaseError:
        raise
    except Exception as e:
        raise QueryExecutionError(str(e)) from e
    finally:
        engine.dispose()


def fold_catalog_rows(rows: list[dict[str, Any]]) -> list[TableSchema]:
    """Group catalog rows into tables, one ColumnInfo per column.

    A column appears once per constraint it takes part in. The first row for
    a (table, column) pair supplies the base fields; primary-key and unique
    flags are OR-ed across all of its rows, so they never go back to False.
    Tables and columns keep the order in which they first appear.
    """
    tables: dict[str, dict[str, ColumnInfo]] = {}

    for row in rows:
        table_name = row["table_name"]
        column_name = row["column_name"]
        constraint = (row.get("constraint_type") or "").upper()

        columns = tables.setdefault(table_name, {})
        column = columns.get(column_name)
        if column is None:
            column = ColumnInfo(
                column_name=column_name,
                data_type=str(row.get("data_type") or ""),
                is_nullable=_is_nullable(row.get("is_nullable")),
                default_value=_optional_str(row.get("column_default")),
                max_length=_optional_int(row.get("character_maximum_length")),
            )
            columns[column_name] = column

        if constraint == "PRIMARY KEY":
            column.is_primary_key = True
        elif constraint == "UNIQUE":
            column.is_unique = True

    return [
        TableSchema(table_name=table_name, columns=list(columns.values()))
        for table_name, columns in tables.items()
    ]


def render_column_definition(row: dict[str, Any]) -> str:
    """Render one catalog row as a pseudo-DDL column line."""
    definition = f"{row['column_name']} {row.get('data_type')}"
    if row.get("character_maximum_length"):
        definition += f"({row['character_maximum_length']})"
    if not _is_nullable(row.get("is_nullable")):
        definition += " NOT NULL"

    constraint = (row.get("constraint_type") or "").upper()
    if constraint == "PRIMARY KEY":
        definition += " PRIMARY KEY"
    elif constraint == "FOREIGN KEY" and row.get("foreign_table_name"):
        definition += f" REFERENCES {row['foreign_table_name']}({row['foreign_column_name']})"

    if row.get("column_default"):
        definition += f" DEFAULT {row['column_default']}"
    return definition


def render_create_table_text(rows: list[dict[str, Any]]) -> str:
    """Render catalog rows as CREATE TABLE-like text for the LLM.

    Identical column lines within a table are written once.
    """
    tables: dict[str, list[str]] = {}
    for row in rows:
        definitions = tables.setdefault(row["table_name"], [])
        definition = render_column_definition(row)
        if definition not in definitions:
            definitions.append(definition)

    return "\n\n".join(
        f"{table_name} (\n  " + ",\n  ".join(definitions) + "\n)"
        for table_name, definitions in tables.items()
    )


class SchemaIntrospector:
    """Schema lookups by connection name or connection string."""

    def __init__(self, connections: ConnectionStore):
        self.connections = connections

    def describe(self, connection_name: str) -> list[TableSchema]:
        """Describe the base tables of a named connection.

        Raises:
            ConnectionNotFoundError: If the connection does not exist
            UnsupportedConnectionError: If the dialect cannot be detected
            QueryExecutionError: If the catalog query fails
        """
        connection_string = self.connections.resolve_connection_string(connection_name)
        return self.describe_connection_string(connection_string)

    def describe_connection_string(self, connection_string: str) -> list[TableSchema]:
        tables = fold_catalog_rows(fetch_catalog_rows(connection_string))
        logger.debug(f"Introspected {len(tables)} tables")
        return tables

    def describe_as_create_table_text(self, connection_string: str) -> str:
        return render_create_table_text(fetch_catalog_rows(connection_string))


def _lower_keys(row: dict[str, Any]) -> dict[str, Any]:
    return {str(key).lower(): value for key, value in row.items()}


def _is_nullable(value: Any) -> bool:
    if isinstance(value, str):
        return value.upper() != "NO"
    return value is None or bool(value)


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
