"""Query history persistence - the last 20 queries run on a connection."""

from __future__ import annotations

from typing import Any

from snapql_models import HistoryEntry

from snapql.storage import StorageLayout
from snapql.storage.collection import QueryCollectionStore
from snapql.storage.layout import HISTORY_FILE

MAX_HISTORY_ENTRIES = 20


class HistoryStore:
    """Bounded, newest-first history per connection."""

    def __init__(self, layout: StorageLayout, max_entries: int = MAX_HISTORY_ENTRIES):
        self._entries = QueryCollectionStore(
            layout, HISTORY_FILE, max_entries=max_entries, kind="history"
        )

    @property
    def max_entries(self) -> int:
        return self._entries.max_entries

    def list(self, connection_name: str) -> list[HistoryEntry]:
        """Return history newest first; empty if nothing was recorded yet."""
        return self._entries.load(connection_name)

    def append(
        self, connection_name: str, entry: HistoryEntry | dict[str, Any]
    ) -> list[HistoryEntry]:
        """Record a query run at the head, evicting the oldest beyond the bound."""
        return self._entries.insert(connection_name, entry)

    def update(self, connection_name: str, entry_id: str, updates: dict[str, Any]) -> bool:
        """Merge fields into an entry by id. Unknown ids are ignored."""
        return self._entries.update(connection_name, entry_id, updates)

    def get(self, connection_name: str, entry_id: str) -> HistoryEntry | None:
        return self._entries.get(connection_name, entry_id)

    def replace(self, connection_name: str, entries: list[HistoryEntry]) -> list[HistoryEntry]:
        """Overwrite the whole history (still bounded)."""
        return self._entries.save(connection_name, entries)
