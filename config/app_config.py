"""
Main Application Configuration.

Composes domain-specific configuration modules:
    - CosmosConfig (document database + emulator)
    - StorageConfig (blob container, queue + Azurite)
    - SeedingConfig (import routine behaviour)

Exports:
    AppConfig: Main configuration class

Pattern:
    Composition over inheritance - domain configs are composed, not inherited.
"""

import os
from pydantic import BaseModel, Field, field_validator

from .cosmos_config import CosmosConfig
from .storage_config import StorageConfig
from .seeding_config import SeedingConfig
from .defaults import AppDefaults


VALID_ENVIRONMENTS = ("dev", "development", "local", "test", "qa", "uat", "staging")


class AppConfig(BaseModel):
    """
    Application configuration - composition of domain configs.
    """

    environment: str = Field(
        default=AppDefaults.ENVIRONMENT,
        description="Environment name; part of the import source location"
    )
    log_level: str = Field(default=AppDefaults.LOG_LEVEL)
    debug_mode: bool = Field(default=AppDefaults.DEBUG_MODE)

    cosmos: CosmosConfig = Field(default_factory=CosmosConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    seeding: SeedingConfig = Field(default_factory=SeedingConfig)

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        # Seeding writes synthetic data; it is never pointed at production
        if v.lower() not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"ENVIRONMENT must be one of {list(VALID_ENVIRONMENTS)}, got: {v!r}"
            )
        return v

    @classmethod
    def from_environment(cls):
        """Load all configs from environment."""
        return cls(
            environment=os.environ.get("ENVIRONMENT", AppDefaults.ENVIRONMENT),
            log_level=os.environ.get("LOG_LEVEL", AppDefaults.LOG_LEVEL),
            debug_mode=os.environ.get("DEBUG_MODE", str(AppDefaults.DEBUG_MODE)).lower() == "true",
            cosmos=CosmosConfig.from_environment(),
            storage=StorageConfig.from_environment(),
            seeding=SeedingConfig.from_environment(),
        )
