"""Per-connection query history."""

from snapql.history.store import MAX_HISTORY_ENTRIES, HistoryStore

__all__ = ["HistoryStore", "MAX_HISTORY_ENTRIES"]
