"""Root test configuration: runtime artifact cleanup and logging isolation"""

import logging
from pathlib import Path

import pytest
import structlog


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["mdcompare.db", "test.db"]


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()


@pytest.fixture(autouse=True)
def restore_logging():
    """configure_logging replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
