"""On-disk layout of the configuration root.

    <root>/settings.json                      global AI settings
    <root>/migrations.yaml                    applied layout migrations
    <root>/connections/<name>/settings.json   connection string, prompt extension
    <root>/connections/<name>/history.json    last 20 queries
    <root>/connections/<name>/favorites.json  saved queries

Before multi-connection support the root held the connection string in
settings.json and history/favorites beside it; those legacy paths are kept
here for the migrations.
"""

import re
from pathlib import Path

from snapql.errors import InvalidConnectionNameError

_VALID_NAME = re.compile(r"^[A-Za-z0-9 _.\-]+$")

SETTINGS_FILE = "settings.json"
HISTORY_FILE = "history.json"
FAVORITES_FILE = "favorites.json"


def validate_connection_name(name: str) -> str:
    """Check that a connection name is usable as a directory name."""
    if not name or name in (".", "..") or not _VALID_NAME.match(name):
        raise InvalidConnectionNameError(name)
    return name


class StorageLayout:
    """Resolves every path under a configuration root."""

    def __init__(self, root_dir: Path | str):
        self.root = Path(root_dir).expanduser()

    def __repr__(self) -> str:
        return f"StorageLayout({str(self.root)!r})"

    @property
    def settings_path(self) -> Path:
        return self.root / SETTINGS_FILE

    @property
    def migrations_path(self) -> Path:
        return self.root / "migrations.yaml"

    @property
    def connections_dir(self) -> Path:
        return self.root / "connections"

    def connection_dir(self, name: str) -> Path:
        return self.connections_dir / validate_connection_name(name)

    def connection_settings_path(self, name: str) -> Path:
        return self.connection_dir(name) / SETTINGS_FILE

    def connection_history_path(self, name: str) -> Path:
        return self.connection_dir(name) / HISTORY_FILE

    def connection_favorites_path(self, name: str) -> Path:
        return self.connection_dir(name) / FAVORITES_FILE

    # Legacy single-connection layout

    @property
    def legacy_history_path(self) -> Path:
        return self.root / HISTORY_FILE

    @property
    def legacy_favorites_path(self) -> Path:
        return self.root / FAVORITES_FILE

    def has_multi_connection_layout(self) -> bool:
        return self.connections_dir.is_dir()
