"""
Config test fixtures — clean environment via monkeypatch.
"""

import pytest


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all env vars that config modules might read, for isolation."""
    env_vars_to_clear = [
        "ENVIRONMENT", "LOG_LEVEL", "DEBUG_MODE",
        "CONTENT_ROOT", "SEED_RECORD_COUNT", "SEED_IMPORTED_BY",
        "SEED_ROUTINE_RETRIES", "SEED_RETRY_DELAY_SECONDS",
        "READINESS_TIMEOUT_SECONDS", "READINESS_POLL_INTERVAL_SECONDS",
        "SEED_FAKER_LOCALE", "SEED_FAKER_SEED",
        "COSMOS_ACCOUNT_NAME", "COSMOS_CONNECTION_STRING", "COSMOS_EMULATOR",
        "COSMOS_EMULATOR_ENDPOINT", "COSMOS_DATABASE", "COSMOS_CONTAINER",
        "COSMOS_PARTITION_KEY_PATH",
        "STORAGE_ACCOUNT_NAME", "STORAGE_CONNECTION_STRING", "STORAGE_EMULATOR",
        "STORAGE_BLOB_CONTAINER", "STORAGE_QUEUE",
        "AZURITE_BLOB_ENDPOINT", "AZURITE_QUEUE_ENDPOINT",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
