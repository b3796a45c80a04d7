"""
Cosmos DB Configuration.

Provides configuration for:
    - Account name and connection string (live or emulator)
    - Database / container names and the container partition key path
    - Emulator endpoint used when COSMOS_EMULATOR=true

Exports:
    CosmosConfig: Pydantic document database configuration model
"""

import os
from typing import Optional
from pydantic import BaseModel, Field, SecretStr, field_validator

from .defaults import CosmosDefaults


class CosmosConfig(BaseModel):
    """
    Document database configuration.

    When `emulator` is true and no connection string is supplied the
    emulator's well-known connection string is used.
    """

    account_name: str = Field(
        default=CosmosDefaults.ACCOUNT_NAME,
        description="Logical name of the Cosmos DB account resource"
    )

    connection_string: Optional[SecretStr] = Field(
        default=None,
        repr=False,
        description="Account connection string (COSMOS_CONNECTION_STRING)"
    )

    emulator: bool = Field(
        default=CosmosDefaults.EMULATOR_ENABLED,
        description="Run against the local Cosmos DB emulator"
    )

    emulator_endpoint: str = Field(
        default=CosmosDefaults.EMULATOR_ENDPOINT,
        description="Local endpoint the client is constrained to in emulator mode"
    )

    database_name: str = Field(default=CosmosDefaults.DATABASE_NAME)
    container_name: str = Field(default=CosmosDefaults.CONTAINER_NAME)
    partition_key_path: str = Field(default=CosmosDefaults.PARTITION_KEY_PATH)

    @field_validator('partition_key_path')
    @classmethod
    def validate_partition_key_path(cls, v):
        if not v.startswith('/') or len(v) < 2:
            raise ValueError(f"Partition key path must look like '/field', got: {v!r}")
        return v

    def effective_connection_string(self) -> Optional[str]:
        """Connection string to use, falling back to the emulator key."""
        if self.connection_string is not None:
            return self.connection_string.get_secret_value()
        if self.emulator:
            return CosmosDefaults.EMULATOR_CONNECTION_STRING
        return None

    def debug_dict(self) -> dict:
        """Sanitized view for logging."""
        return {
            'account_name': self.account_name,
            'connection_string': '***MASKED***' if self.connection_string else None,
            'emulator': self.emulator,
            'emulator_endpoint': self.emulator_endpoint,
            'database_name': self.database_name,
            'container_name': self.container_name,
            'partition_key_path': self.partition_key_path,
        }

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        connection_string = os.environ.get("COSMOS_CONNECTION_STRING")
        return cls(
            account_name=os.environ.get("COSMOS_ACCOUNT_NAME", CosmosDefaults.ACCOUNT_NAME),
            connection_string=SecretStr(connection_string) if connection_string else None,
            emulator=os.environ.get("COSMOS_EMULATOR", str(CosmosDefaults.EMULATOR_ENABLED)).lower() in ("true", "1", "yes"),
            emulator_endpoint=os.environ.get("COSMOS_EMULATOR_ENDPOINT", CosmosDefaults.EMULATOR_ENDPOINT),
            database_name=os.environ.get("COSMOS_DATABASE", CosmosDefaults.DATABASE_NAME),
            container_name=os.environ.get("COSMOS_CONTAINER", CosmosDefaults.CONTAINER_NAME),
            partition_key_path=os.environ.get("COSMOS_PARTITION_KEY_PATH", CosmosDefaults.PARTITION_KEY_PATH),
        )
