"""Connection persistence - create, edit, list, delete.

A connection is a directory under connections/ holding settings.json,
history.json and favorites.json. The settings file existing is what makes the
connection exist. Unlike history and favorites, a missing or corrupt settings
file is never replaced with a default: it surfaces as ConnectionNotFoundError.
"""

from __future__ import annotations

import logging
import shutil

from pydantic import ValidationError
from snapql_models import ConnectionSettings, normalize_prompt_extension

from snapql.db.connection import Dialect, detect_dialect
from snapql.errors import ConnectionAlreadyExistsError, ConnectionNotFoundError
from snapql.storage import StorageLayout, read_json, write_json

logger = logging.getLogger(__name__)


class ConnectionStore:
    """CRUD over per-connection settings documents."""

    def __init__(self, layout: StorageLayout):
        self.layout = layout

    def exists(self, name: str) -> bool:
        return self.layout.connection_settings_path(name).is_file()

    def create(self, name: str, settings: ConnectionSettings) -> ConnectionSettings:
        """Create a connection with empty history and favorites.

        Raises:
            ConnectionAlreadyExistsError: If the connection directory exists
        """
        connection_dir = self.layout.connection_dir(name)
        if connection_dir.exists():
            raise ConnectionAlreadyExistsError(name)

        settings = settings.normalized()
        connection_dir.mkdir(parents=True)
        write_json(self.layout.connection_settings_path(name), settings.to_document())
        write_json(self.layout.connection_history_path(name), [])
        write_json(self.layout.connection_favorites_path(name), [])

        logger.info(f"Created connection '{name}'")
        return settings

    def edit(self, name: str, settings: ConnectionSettings) -> ConnectionSettings:
        """Replace a connection's settings. History and favorites are kept.

        Raises:
            ConnectionNotFoundError: If the connection does not exist
        """
        if not self.layout.connection_dir(name).exists():
            raise ConnectionNotFoundError(name)

        settings = settings.normalized()
        write_json(self.layout.connection_settings_path(name), settings.to_document())
        logger.info(f"Updated connection '{name}'")
        return settings

    def get(self, name: str) -> ConnectionSettings:
        """Load a connection's settings.

        Raises:
            ConnectionNotFoundError: If the settings file is missing or invalid
        """
        path = self.layout.connection_settings_path(name)
        try:
            data = read_json(path)
            return ConnectionSettings.model_validate(data)
        except FileNotFoundError:
            raise ConnectionNotFoundError(name) from None
        except (ValueError, ValidationError) as e:
            logger.error(f"Invalid settings for connection '{name}' at {path}: {e}")
            raise ConnectionNotFoundError(name) from e

    def list(self) -> list[str]:
        """List connection names, sorted. Empty if none exist yet."""
        connections_dir = self.layout.connections_dir
        if not connections_dir.is_dir():
            return []
        return sorted(
            entry.name
            for entry in connections_dir.iterdir()
            if entry.is_dir() and (entry / "settings.json").is_file()
        )

    def delete(self, name: str) -> None:
        """Delete a connection together with its history and favorites.

        Raises:
            ConnectionNotFoundError: If the connection does not exist
        """
        connection_dir = self.layout.connection_dir(name)
        if not connection_dir.exists():
            raise ConnectionNotFoundError(name)

        shutil.rmtree(connection_dir)
        logger.info(f"Deleted connection '{name}'")

    # =========================================================================
    # Derived accessors
    # =========================================================================

    def get_prompt_extension(self, name: str) -> str | None:
        return self.get(name).prompt_extension

    def set_prompt_extension(self, name: str, prompt_extension: str | None) -> None:
        """Set the prompt extension; blank input clears it."""
        settings = self.get(name)
        settings.prompt_extension = normalize_prompt_extension(prompt_extension)
        write_json(self.layout.connection_settings_path(name), settings.to_document())

    def resolve_connection_string(self, name: str) -> str:
        return self.get(name).connection_string

    def resolve_dialect(self, name: str) -> Dialect:
        """Detect the dialect of a connection's connection string.

        Raises:
            ConnectionNotFoundError: If the connection does not exist
            UnsupportedConnectionError: If the string matches no dialect
        """
        return detect_dialect(self.resolve_connection_string(name))
