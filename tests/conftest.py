"""
Root conftest.py — sys.path, env vars, shared fixtures.

Sets up the test environment so all production code can be imported
and exercised without emulators, Azure accounts or network access.
"""

import os
import sys

import pytest

# Add project root to sys.path so 'core', 'seeding', 'config', etc. are importable
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture(autouse=True, scope="session")
def set_minimal_env_vars():
    """
    Set minimal environment variables so config loads predictably.

    Emulator mode is the default, which needs no connection strings.
    """
    defaults = {
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "INFO",
        "COSMOS_EMULATOR": "true",
        "STORAGE_EMULATOR": "true",
        "SEED_IMPORTED_BY": "pytest",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


@pytest.fixture(autouse=True)
def reset_config_singleton():
    """Every test sees configuration freshly loaded from its environment."""
    from config import reset_config
    reset_config()
    yield
    reset_config()


@pytest.fixture
def content_root(tmp_path):
    """Writable content root for the import source location."""
    root = tmp_path / "ContentRoot"
    root.mkdir()
    return str(root)


@pytest.fixture
def cancel_token():
    from core.cancellation import CancellationToken
    return CancellationToken()
