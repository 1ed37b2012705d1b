"""Pytest Configuration and Shared Fixtures

This file is automatically loaded by pytest and makes all fixtures available to all tests.
"""
import sys
from pathlib import Path

import pytest

# Add the repository root to path so tests.fixtures is importable
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))

from pulsestats.utils.config import config as config_module  # noqa: E402

pytest_plugins = [
    "tests.fixtures.stores",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep configuration lookups independent of the developer's shell."""
    for key in ("ENV", "LOG_NAME", "LOG_DIR", "LOG_LEVEL", "LOG_ENCRYPTION_KEY",
                "CONFIG_ENCRYPTION_KEY", "QUERY_TIMEZONE", "QUERY_DEFAULT_INTERVAL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def clean_global_config(monkeypatch):
    """Each test starts without a process-wide Config."""
    monkeypatch.setattr(config_module, "_global_config", None)
