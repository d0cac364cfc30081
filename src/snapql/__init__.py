"""snapql - multi-connection SQL client core.

Per-connection settings, history and favorites on disk, schema
introspection and query dispatch for PostgreSQL and MySQL, and
AI-assisted query generation.
"""

from snapql.config import Settings
from snapql.service import SnapQLService

__version__ = "0.1.0"

__all__ = ["Settings", "SnapQLService", "__version__"]
