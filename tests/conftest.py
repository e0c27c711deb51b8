"""Pytest configuration and fixtures."""

import pytest

from stylematrix.config import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep tests independent of the caller's STYLEMATRIX_* environment."""
    for name in ("MAX_SUBTREE_NODES", "INCLUDE_SUBTREE", "DEBUG_MODE", "LOG_LEVEL"):
        monkeypatch.delenv(f"STYLEMATRIX_{name}", raising=False)
    monkeypatch.setenv("STYLEMATRIX_DISABLE_CONSOLE_LOGGING", "1")
    reset_settings()
    yield
    reset_settings()
