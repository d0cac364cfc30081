"""Migration: Move query history out of the root settings.json.

The first releases stored history as a `queryHistory` array inside
settings.json. This migration:
1. Writes the entries to <root>/history.json (bounded to 20, invalid entries
   dropped)
2. Removes `queryHistory` from settings.json, leaving every other key alone

It does nothing once the connections/ directory exists, and it never touches
settings.json when history.json is already present.
"""

import logging

from pydantic import ValidationError
from snapql_models import QueryEntry

from snapql.history.store import MAX_HISTORY_ENTRIES
from snapql.migrations import register_migration
from snapql.storage import StorageLayout, read_json, write_json

logger = logging.getLogger(__name__)

LEGACY_HISTORY_KEY = "queryHistory"


@register_migration(
    id="001_embedded_history_to_file",
    description="Move queryHistory from settings.json to history.json",
)
def migrate_embedded_history(layout: StorageLayout) -> bool:
    """Extract embedded history into its own document.

    Args:
        layout: Storage layout of the configuration root

    Returns:
        True if history was moved, False if there was nothing to do
    """
    if layout.has_multi_connection_layout():
        return False

    # Destination exists (already migrated, or written by a later release)
    if layout.legacy_history_path.exists():
        return False

    if not layout.settings_path.exists():
        return False

    try:
        settings = read_json(layout.settings_path)
    except ValueError:
        # Unreadable settings are reset by the settings store on next read
        return False

    if not isinstance(settings, dict) or LEGACY_HISTORY_KEY not in settings:
        return False

    raw_entries = settings.get(LEGACY_HISTORY_KEY) or []
    entries = []
    for item in raw_entries if isinstance(raw_entries, list) else []:
        try:
            entries.append(QueryEntry.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Dropping invalid legacy history entry: {e}")

    entries = entries[:MAX_HISTORY_ENTRIES]
    write_json(layout.legacy_history_path, [e.to_document() for e in entries])

    del settings[LEGACY_HISTORY_KEY]
    write_json(layout.settings_path, settings)

    logger.info(f"Moved {len(entries)} history entries to {layout.legacy_history_path}")
    return True
