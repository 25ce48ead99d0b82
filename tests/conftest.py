"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Temporary workspace root holding config, job store and event stream."""
    root = tmp_path / ".scanjob"
    root.mkdir()
    return root
