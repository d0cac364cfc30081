"""Migration: Turn the single legacy connection into connections/default.

Before multi-connection support, settings.json held `connectionString` and
`promptExtension`, with history.json and favorites.json beside it. This
migration:
1. Creates connections/default/settings.json from those keys
2. Moves history.json and favorites.json into connections/default/
   (initializing them empty when absent)

The legacy keys stay in settings.json; the global settings store preserves
keys it does not own. Once connections/ exists this migration does nothing.
"""

import logging
import shutil

from pydantic import ValidationError
from snapql_models import ConnectionSettings

from snapql.migrations import register_migration
from snapql.storage import StorageLayout, read_json, write_json

logger = logging.getLogger(__name__)

LEGACY_CONNECTION_NAME = "default"


@register_migration(
    id="002_single_connection_to_multi",
    description="Move the legacy single connection to connections/default",
)
def migrate_single_connection(layout: StorageLayout) -> bool:
    """Create connections/default from the legacy root layout.

    Args:
        layout: Storage layout of the configuration root

    Returns:
        True if the connection was created, False if there was nothing to do
    """
    if layout.has_multi_connection_layout():
        return False

    if not layout.settings_path.exists():
        return False

    try:
        settings = read_json(layout.settings_path)
        connection = ConnectionSettings.model_validate(settings)
    except (ValueError, ValidationError):
        # No usable connectionString - nothing to migrate
        return False

    if not connection.connection_string.strip():
        return False

    name = LEGACY_CONNECTION_NAME
    connection_dir = layout.connection_dir(name)
    connection_dir.mkdir(parents=True)
    write_json(layout.connection_settings_path(name), connection.normalized().to_document())

    for legacy_path, target in (
        (layout.legacy_history_path, layout.connection_history_path(name)),
        (layout.legacy_favorites_path, layout.connection_favorites_path(name)),
    ):
        if legacy_path.exists():
            shutil.move(str(legacy_path), str(target))
        else:
            write_json(target, [])

    logger.info(f"Migrated legacy connection to {connection_dir}")
    return True
