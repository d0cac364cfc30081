"""Shared fixtures: a temporary configuration root and its layout."""

from unittest.mock import MagicMock

import pytest

from snapql.storage import StorageLayout


@pytest.fixture
def layout(tmp_path):
    """Layout rooted at a fresh temporary directory."""
    return StorageLayout(tmp_path / "SnapQL")


@pytest.fixture
def mock_engine():
    """Engine whose connect() and begin() context managers yield a mock connection.

    Returns (engine, conn); set conn.execute.return_value per test.
    """
    engine = MagicMock()
    conn = MagicMock()
    engine.connect.return_value.__enter__ = MagicMock(return_value=conn)
    engine.connect.return_value.__exit__ = MagicMock(return_value=False)
    engine.begin.return_value.__enter__ = MagicMock(return_value=conn)
    engine.begin.return_value.__exit__ = MagicMock(return_value=False)
    return engine, conn
