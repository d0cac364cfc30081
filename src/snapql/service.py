"""Application service - the single entry point for UI and CLI callers.

Constructed once per process from Settings and passed to whatever needs it.
CRUD methods raise (ConnectionNotFoundError, ConnectionAlreadyExistsError);
query execution, schema fetch and query generation return an Envelope with
either `data` or an inline-renderable `error`.
"""

import asyncio
import logging
from datetime import UTC, datetime
from functools import partial
from typing import Any, Callable

from pydantic_ai.models import Model
from snapql_models import (
    ConnectionSettings,
    Envelope,
    FavoriteEntry,
    GlobalSettings,
    HistoryEntry,
)

from snapql import ai
from snapql.config import Settings
from snapql.connections import ConnectionStore
from snapql.db import (
    DatabaseError,
    Dialect,
    QueryDispatcher,
    SchemaIntrospector,
)
from snapql.errors import SnapQLError
from snapql.favorites import FavoritesStore
from snapql.global_settings import GlobalSettingsStore
from snapql.history import HistoryStore
from snapql.migrations import run_migrations
from snapql.storage import StorageLayout

logger = logging.getLogger(__name__)


def new_entry_id(now: datetime | None = None) -> str:
    """Millisecond timestamp used as a history entry id."""
    now = now or datetime.now(UTC)
    return str(int(now.timestamp() * 1000))


async def run_blocking(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a blocking store or driver call in the default thread pool."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(fn, *args, **kwargs))


class SnapQLService:
    """Wires the stores, introspector and dispatcher to one configuration root.

    Args:
        settings: Process settings (root directory, defaults)
        model: Optional LLM model to use instead of the configured provider
    """

    def __init__(self, settings: Settings, model: Model | None = None):
        self.settings = settings
        self.layout = StorageLayout(settings.root_dir)
        self._model = model

        if settings.auto_migrate:
            result = run_migrations(self.layout)
            if result["failed"]:
                logger.warning(f"Layout migrations failed: {', '.join(result['failed'])}")

        self.connections = ConnectionStore(self.layout)
        self.history = HistoryStore(self.layout)
        self.favorites = FavoritesStore(self.layout)
        self.global_settings = GlobalSettingsStore(self.layout)
        self.introspector = SchemaIntrospector(self.connections)
        self.dispatcher = QueryDispatcher(self.connections)

    # =========================================================================
    # Connections
    # =========================================================================

    async def create_connection(
        self, name: str, settings: ConnectionSettings | dict[str, Any]
    ) -> ConnectionSettings:
        settings = ConnectionSettings.model_validate(settings)
        return await run_blocking(self.connections.create, name, settings)

    async def edit_connection(
        self, name: str, settings: ConnectionSettings | dict[str, Any]
    ) -> ConnectionSettings:
        settings = ConnectionSettings.model_validate(settings)
        return await run_blocking(self.connections.edit, name, settings)

    async def list_connections(self) -> list[str]:
        return await run_blocking(self.connections.list)

    async def get_connection(self, name: str) -> ConnectionSettings:
        return await run_blocking(self.connections.get, name)

    async def delete_connection(self, name: str) -> None:
        await run_blocking(self.connections.delete, name)

    async def get_prompt_extension(self, name: str) -> str | None:
        return await run_blocking(self.connections.get_prompt_extension, name)

    async def set_prompt_extension(self, name: str, prompt_extension: str | None) -> None:
        await run_blocking(self.connections.set_prompt_extension, name, prompt_extension)

    async def get_connection_dialect(self, name: str) -> Dialect | None:
        """Dialect of a connection, or None if its string matches no dialect."""
        try:
            return await run_blocking(self.connections.resolve_dialect, name)
        except DatabaseError:
            return None

    async def test_connection_string(self, connection_string: str) -> dict[str, Any]:
        try:
            await run_blocking(self.dispatcher.test_connection, connection_string)
            return {"success": True}
        except DatabaseError as e:
            return {"success": False, "error": str(e)}

    # =========================================================================
    # History and favorites
    # =========================================================================

    async def get_history(self, name: str) -> list[HistoryEntry]:
        return await run_blocking(self.history.list, name)

    async def add_to_history(
        self, name: str, entry: HistoryEntry | dict[str, Any]
    ) -> list[HistoryEntry]:
        return await run_blocking(self.history.append, name, entry)

    async def update_history(self, name: str, entry_id: str, updates: dict[str, Any]) -> bool:
        return await run_blocking(self.history.update, name, entry_id, updates)

    async def get_favorites(self, name: str) -> list[FavoriteEntry]:
        return await run_blocking(self.favorites.list, name)

    async def add_favorite(
        self, name: str, entry: FavoriteEntry | dict[str, Any]
    ) -> list[FavoriteEntry]:
        return await run_blocking(self.favorites.add, name, entry)

    async def favorite_from_history(self, name: str, entry_id: str) -> bool:
        """Copy a history entry into favorites. Returns False if the id is unknown."""
        return await run_blocking(self._favorite_from_history, name, entry_id)

    def _favorite_from_history(self, name: str, entry_id: str) -> bool:
        entry = self.history.get(name, entry_id)
        if entry is None:
            return False
        self.favorites.add(name, entry.model_copy(deep=True))
        return True

    async def remove_favorite(self, name: str, entry_id: str) -> bool:
        return await run_blocking(self.favorites.remove, name, entry_id)

    async def update_favorite(self, name: str, entry_id: str, updates: dict[str, Any]) -> bool:
        return await run_blocking(self.favorites.update, name, entry_id, updates)

    # =========================================================================
    # Global settings
    # =========================================================================

    async def get_global_settings(self) -> GlobalSettings:
        return await run_blocking(self.global_settings.read)

    async def update_global_settings(self, **fields: Any) -> GlobalSettings:
        return await run_blocking(self.global_settings.write, **fields)

    # =========================================================================
    # Envelope operations
    # =========================================================================

    async def run_query(self, name: str, sql: str, record_history: bool = True) -> Envelope:
        """Run SQL on a connection and record it in history on success.

        Returns:
            Envelope whose data has columns, rows and the new history_id
        """
        try:
            result = await run_blocking(self.dispatcher.run, name, sql)
        except (DatabaseError, SnapQLError) as e:
            return Envelope.fail(str(e))

        history_id = None
        if record_history:
            now = datetime.now(UTC)
            entry = HistoryEntry(
                id=new_entry_id(now),
                query=sql,
                results=result.rows,
                timestamp=now.isoformat().replace("+00:00", "Z"),
            )
            try:
                await run_blocking(self.history.append, name, entry)
                history_id = entry.id
            except (ValueError, OSError) as e:
                logger.error(f"Failed to record history for '{name}': {e}")

        return Envelope.ok(
            {"columns": result.columns, "rows": result.rows, "history_id": history_id}
        )

    async def get_schema(self, name: str) -> Envelope:
        try:
            tables = await run_blocking(self.introspector.describe, name)
        except (DatabaseError, SnapQLError) as e:
            return Envelope.fail(str(e))
        return Envelope.ok([table.model_dump() for table in tables])

    async def generate_query(self, name: str, prompt: str, existing_query: str = "") -> Envelope:
        """Generate SQL for a natural-language prompt on a connection."""
        try:
            connection, dialect, schema_text, model = await run_blocking(
                self._generation_context, name
            )
            response = await ai.generate_query(
                model,
                dialect,
                schema_text,
                prompt,
                existing_query=existing_query,
                prompt_extension=connection.prompt_extension,
            )
        except (DatabaseError, SnapQLError, ai.QueryGenerationError) as e:
            return Envelope.fail(str(e))
        return Envelope.ok(response.model_dump())

    def _generation_context(self, name: str) -> tuple[ConnectionSettings, Dialect, str, Model]:
        """Load everything generation needs: settings, dialect, schema text and model."""
        connection = self.connections.get(name)
        dialect = self.connections.resolve_dialect(name)
        schema_text = self.introspector.describe_as_create_table_text(connection.connection_string)
        model = self._model or ai.build_model(self.global_settings.read(), self.settings)
        return connection, dialect, schema_text, model
