"""Per-connection favorite queries."""

from snapql.favorites.store import FavoritesStore

__all__ = ["FavoritesStore"]
