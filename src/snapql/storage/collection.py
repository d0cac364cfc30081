"""Ordered, per-connection collections of query entries.

History and favorites are both a JSON array of entries stored in the
connection directory, newest first. Every mutation reads the whole array,
changes it in memory and writes the whole array back.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from snapql_models import QueryEntry

from snapql.errors import ConnectionNotFoundError
from snapql.storage.json_io import read_json, write_json
from snapql.storage.layout import StorageLayout

logger = logging.getLogger(__name__)


class QueryCollectionStore:
    """Newest-first list of QueryEntry documents, one file per connection.

    Args:
        layout: Storage layout of the configuration root
        file_name: Document name inside the connection directory
        max_entries: Bound applied on every insert, or None for unbounded
        kind: Label used in log messages
    """

    def __init__(
        self,
        layout: StorageLayout,
        file_name: str,
        max_entries: int | None = None,
        kind: str = "collection",
    ):
        self.layout = layout
        self.file_name = file_name
        self.max_entries = max_entries
        self.kind = kind

    def _path(self, name: str) -> Path:
        connection_dir = self.layout.connection_dir(name)
        if not (connection_dir / "settings.json").is_file():
            raise ConnectionNotFoundError(name)
        return connection_dir / self.file_name

    def _bounded(self, entries: list[QueryEntry]) -> list[QueryEntry]:
        if self.max_entries is None:
            return entries
        return entries[: self.max_entries]

    def load(self, name: str) -> list[QueryEntry]:
        """Load the collection, newest first.

        A missing document is initialized to an empty array. A document that
        fails to parse or validate is logged and reset to an empty array.
        """
        path = self._path(name)

        if not path.exists():
            write_json(path, [])
            return []

        try:
            data = read_json(path)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            return [QueryEntry.model_validate(item) for item in data]
        except (ValueError, ValidationError) as e:
            logger.warning(f"Resetting malformed {self.kind} for '{name}' at {path}: {e}")
            write_json(path, [])
            return []

    def save(self, name: str, entries: list[QueryEntry]) -> list[QueryEntry]:
        """Replace the whole collection."""
        entries = self._bounded(list(entries))
        write_json(self._path(name), [entry.to_document() for entry in entries])
        return entries

    def insert(self, name: str, entry: QueryEntry | dict[str, Any]) -> list[QueryEntry]:
        """Insert an entry at the head.

        An existing entry with the same id is replaced so ids stay unique.
        The bound, if any, drops the oldest entries.
        """
        entry = QueryEntry.model_validate(entry)
        current = [e for e in self.load(name) if e.id != entry.id]
        return self.save(name, [entry, *current])

    def update(self, name: str, entry_id: str, updates: dict[str, Any]) -> bool:
        """Merge `updates` into the entry with `entry_id`.

        Keys may be field names or their on-disk aliases. An `id` key is
        ignored so ids stay unique. An unknown id leaves the collection
        untouched.

        Returns:
            True if an entry was updated
        """
        updates = {key: value for key, value in updates.items() if key != "id"}
        entries = self.load(name)
        updated = False
        for index, entry in enumerate(entries):
            if entry.id == entry_id:
                merged = {**entry.model_dump(by_alias=True), **_aliased(updates)}
                entries[index] = QueryEntry.model_validate(merged)
                updated = True

        if not updated:
            logger.debug(f"No {self.kind} entry '{entry_id}' for '{name}', nothing to update")
            return False

        self.save(name, entries)
        return True

    def remove(self, name: str, entry_id: str) -> bool:
        """Remove the entry with `entry_id`. An unknown id is a no-op.

        Returns:
            True if an entry was removed
        """
        entries = self.load(name)
        remaining = [e for e in entries if e.id != entry_id]
        if len(remaining) == len(entries):
            return False
        self.save(name, remaining)
        return True

    def get(self, name: str, entry_id: str) -> QueryEntry | None:
        for entry in self.load(name):
            if entry.id == entry_id:
                return entry
        return None

    def contains(self, name: str, entry_id: str) -> bool:
        return self.get(name, entry_id) is not None


def _aliased(updates: dict[str, Any]) -> dict[str, Any]:
    """Map QueryEntry field names in `updates` to their aliases."""
    result = {}
    for key, value in updates.items():
        field = QueryEntry.model_fields.get(key)
        alias = field.alias if field is not None and field.alias else key
        result[alias] = value
    return result
