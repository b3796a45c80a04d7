"""
Configuration Package - Domain-Specific Configuration Modules

Structure:
    config/
    ├── __init__.py              # This file - exports and singleton
    ├── app_config.py            # Main config (composes domain configs)
    ├── cosmos_config.py         # Document database + emulator
    ├── storage_config.py        # Blob container, queue + Azurite
    ├── seeding_config.py        # Import routine behaviour
    └── defaults.py              # Default values

Usage:
    from config import get_config
    config = get_config()
    count = config.seeding.record_count

    from config import debug_config
    info = debug_config()  # Connection strings masked
"""

from typing import Optional

from .cosmos_config import CosmosConfig
from .storage_config import StorageConfig
from .seeding_config import SeedingConfig
from .app_config import AppConfig


# ============================================================================
# SINGLETON PATTERN
# ============================================================================

_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get global configuration singleton.

    Returns:
        AppConfig instance loaded from environment
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = AppConfig.from_environment()
    return _config_instance


def reset_config() -> None:
    """Drop the cached singleton (for testing)."""
    global _config_instance
    _config_instance = None


def debug_config() -> dict:
    """
    Get sanitized configuration for debugging (masks sensitive values).

    Returns:
        Dictionary with configuration values, connection strings masked
    """
    try:
        config = get_config()
        return {
            'environment': config.environment,
            'log_level': config.log_level,
            'debug_mode': config.debug_mode,
            'cosmos': config.cosmos.debug_dict(),
            'storage': config.storage.debug_dict(),
            'seeding': config.seeding.model_dump(),
        }
    except Exception as e:
        return {'error': f'Configuration validation failed: {e}'}


__all__ = [
    'AppConfig',
    'CosmosConfig',
    'StorageConfig',
    'SeedingConfig',
    'get_config',
    'reset_config',
    'debug_config',
]
