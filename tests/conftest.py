"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add src to path so tests run without an install.
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))


@pytest.fixture(autouse=True)
def _isolate_logging():
    """Reset global verbosity and log bus subscribers around every test."""
    from tgzpack.core.log_bus import get_log_bus
    from tgzpack.core.logging import VerbosityLevel, set_colors, set_verbosity

    get_log_bus().clear()
    set_verbosity(VerbosityLevel.NORMAL)
    yield
    get_log_bus().clear()
    set_verbosity(VerbosityLevel.NORMAL)
    set_colors(True)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Drop TGZPACK_* variables inherited from the developer's shell."""
    import os

    for key in list(os.environ):
        if key.startswith("TGZPACK_"):
            monkeypatch.delenv(key)


@pytest.fixture
def sample_tree(tmp_path):
    """Source tree with nested dirs, an empty dir, text and binary files.

    Returns:
        Path to the tree root
    """
    root = tmp_path / "src"
    (root / "x" / "1").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "x" / "1" / "file.txt").write_bytes(b"hello")
    (root / "x" / "2.txt").write_bytes(b"two")
    (root / "top.bin").write_bytes(bytes(range(256)) * 8)
    return root
