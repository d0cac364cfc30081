"""Favorites persistence - user-curated saved queries, unbounded."""

from __future__ import annotations

from typing import Any

from snapql_models import FavoriteEntry

from snapql.storage import StorageLayout
from snapql.storage.collection import QueryCollectionStore
from snapql.storage.layout import FAVORITES_FILE


class FavoritesStore:
    """Newest-first favorites per connection."""

    def __init__(self, layout: StorageLayout):
        self._entries = QueryCollectionStore(layout, FAVORITES_FILE, kind="favorites")

    def list(self, connection_name: str) -> list[FavoriteEntry]:
        return self._entries.load(connection_name)

    def add(
        self, connection_name: str, entry: FavoriteEntry | dict[str, Any]
    ) -> list[FavoriteEntry]:
        """Save an entry at the head of the favorites."""
        return self._entries.insert(connection_name, entry)

    def remove(self, connection_name: str, entry_id: str) -> bool:
        """Remove a favorite by id. Unknown ids are ignored."""
        return self._entries.remove(connection_name, entry_id)

    def update(self, connection_name: str, entry_id: str, updates: dict[str, Any]) -> bool:
        """Refresh a favorite in place, e.g. after it is re-run."""
        return self._entries.update(connection_name, entry_id, updates)

    def contains(self, connection_name: str, entry_id: str) -> bool:
        return self._entries.contains(connection_name, entry_id)
