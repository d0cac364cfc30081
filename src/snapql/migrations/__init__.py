"""Layout migrations for the configuration root.

Migrations upgrade data written by older releases (a single connection kept
in the root settings.json) to the multi-connection layout. Each one checks
its own preconditions and destination, so running it again is harmless;
applied migrations are additionally tracked in <root>/migrations.yaml:

    applied:
      - id: "001_embedded_history_to_file"
        applied_at: "2026-01-26T10:30:00Z"

Usage:
    from snapql.migrations import run_migrations

    run_migrations(layout)
"""

import logging
from datetime import UTC, datetime
from typing import Callable

import yaml

from snapql.storage import StorageLayout

logger = logging.getLogger(__name__)

# Returns True if it changed something, False if there was nothing to do
MigrationFn = Callable[[StorageLayout], bool]


class Migration:
    """A single migration definition."""

    def __init__(self, id: str, description: str, up: MigrationFn):
        self.id = id
        self.description = description
        self.up = up


# Registry of all migrations (in order)
_MIGRATIONS: list[Migration] = []


def register_migration(id: str, description: str) -> Callable[[MigrationFn], MigrationFn]:
    """Decorator to register a migration function.

    Usage:
        @register_migration("001_embedded_history_to_file", "Move history out of settings")
        def migrate(layout: StorageLayout) -> bool:
            ...
    """

    def decorator(up_fn: MigrationFn) -> MigrationFn:
        _MIGRATIONS.append(Migration(id=id, description=description, up=up_fn))
        return up_fn

    return decorator


def load_applied_migrations(layout: StorageLayout) -> list[dict]:
    """Load the record of applied migrations."""
    migrations_file = layout.migrations_path

    if not migrations_file.exists():
        return []

    try:
        with open(migrations_file) as f:
            data = yaml.safe_load(f) or {}
        return data.get("applied", []) or []
    except Exception as e:
        logger.warning(f"Failed to load migrations file: {e}")
        return []


def save_applied_migrations(layout: StorageLayout, applied: list[dict]) -> None:
    """Save the record of applied migrations."""
    migrations_file = layout.migrations_path
    migrations_file.parent.mkdir(parents=True, exist_ok=True)

    with open(migrations_file, "w") as f:
        yaml.dump({"applied": applied}, f, default_flow_style=False, sort_keys=False)


def is_migration_applied(layout: StorageLayout, migration_id: str) -> bool:
    return any(m.get("id") == migration_id for m in load_applied_migrations(layout))


def mark_migration_applied(layout: StorageLayout, migration_id: str) -> None:
    """Mark a migration as applied."""
    applied = load_applied_migrations(layout)
    if any(m.get("id") == migration_id for m in applied):
        return

    applied.append({"id": migration_id, "applied_at": datetime.now(UTC).isoformat()})
    save_applied_migrations(layout, applied)


def get_pending_migrations(layout: StorageLayout) -> list[Migration]:
    return [m for m in _MIGRATIONS if not is_migration_applied(layout, m.id)]


def run_migrations(layout: StorageLayout) -> dict:
    """Run all pending migrations in order.

    Stops at the first failure; later migrations are reported as skipped.

    Returns:
        Dict with applied, unchanged, failed and skipped migration ids
    """
    result = {"applied": [], "unchanged": [], "failed": [], "skipped": []}

    if not layout.root.exists():
        # Fresh install, nothing written by an older release
        return result

    pending = get_pending_migrations(layout)
    for index, migration in enumerate(pending):
        logger.debug(f"Running migration {migration.id}: {migration.description}")
        try:
            changed = migration.up(layout)
        except Exception as e:
            logger.error(f"Migration {migration.id} failed: {e}")
            result["failed"].append(migration.id)
            result["skipped"] = [m.id for m in pending[index + 1 :]]
            break

        mark_migration_applied(layout, migration.id)
        if changed:
            logger.info(f"Applied migration {migration.id}: {migration.description}")
            result["applied"].append(migration.id)
        else:
            result["unchanged"].append(migration.id)

    return result


def get_all_migrations() -> list[dict]:
    """Get info about all registered migrations."""
    return [{"id": m.id, "description": m.description} for m in _MIGRATIONS]


# Import migration modules to register them
# Each module uses @register_migration decorator
from snapql.migrations import (  # noqa: E402
    m_001_embedded_history_to_file,  # noqa: F401
    m_002_single_connection_to_multi,  # noqa: F401
)
