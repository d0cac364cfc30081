"""Query execution against named connections.

Each call is a full connect -> execute -> commit -> disconnect cycle; no connection is
kept between calls and nothing is retried. The SQL text is executed as given.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from snapql_models import QueryResult
from sqlalchemy import text

from snapql.db.connection import (
    InvalidConnectionError,
    QueryExecutionError,
    UnsupportedConnectionError,
    check_connection,
    detect_dialect,
    get_engine,
)
from snapql.db.connection import test_connection as db_test_connection

if TYPE_CHECKING:
    from snapql.connections import ConnectionStore

logger = logging.getLogger(__name__)


class QueryDispatcher:
    """Resolves connection names and runs statements on them."""

    def __init__(self, connections: ConnectionStore):
        self.connections = connections

    def run(self, connection_name: str, sql: str) -> QueryResult:
        """Run a statement on a named connection.

        Raises:
            ConnectionNotFoundError: If the connection does not exist
            InvalidConnectionError: If the connection string matches no dialect
            QueryExecutionError: On any driver failure (message passed through)
        """
        connection_string = self.connections.resolve_connection_string(connection_name)
        logger.info(f"Running query on '{connection_name}'")
        return self.run_connection_string(connection_string, sql)

    def run_connection_string(self, connection_string: str, sql: str) -> QueryResult:
        try:
            detect_dialect(connection_string)
            engine = get_engine(connection_string)
        except UnsupportedConnectionError as e:
            raise InvalidConnectionError(str(e)) from e

        try:
            # Commits on success, rolls back on error
            with engine.begin() as conn:
                result = conn.execute(text(sql))
                if not result.returns_rows:
                    return QueryResult()
                columns = list(result.keys())
                rows = [dict(zip(columns, row)) for row in result]
                return QueryResult(columns=columns, rows=rows)
        except Exception as e:
            logger.warning(f"Query failed: {e}")
            raise QueryExecutionError(_driver_message(e)) from e
        finally:
            engine.dispose()

    def test_connection(self, connection_string: str) -> None:
        """Connect and disconnect without running a statement.

        Raises:
            UnsupportedConnectionError: If the string matches no dialect
            QueryExecutionError: If the connection cannot be established
        """
        db_test_connection(connection_string)

    def check_connection(self, connection_string: str) -> dict:
        return check_connection(connection_string)


def _driver_message(error: Exception) -> str:
    """Prefer the DBAPI error text over SQLAlchemy's wrapper text."""
    original = getattr(error, "orig", None)
    return str(original) if original is not None else str(error)
