"""Named database connections."""

from snapql.connections.store import ConnectionStore

__all__ = ["ConnectionStore"]
