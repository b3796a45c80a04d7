"""
Azure Storage Configuration.

Provides configuration for:
    - Storage account name and connection string (live or Azurite)
    - Blob container and queue names seeded at startup
    - Azurite endpoints used in emulator mode

Exports:
    StorageConfig: Pydantic storage account configuration model
"""

import os
from typing import Optional
from pydantic import BaseModel, Field, SecretStr

from .defaults import StorageDefaults


class StorageConfig(BaseModel):
    """
    Storage account configuration (blob container + queue).
    """

    account_name: str = Field(
        default=StorageDefaults.ACCOUNT_NAME,
        description="Logical name of the storage account resource"
    )

    connection_string: Optional[SecretStr] = Field(
        default=None,
        repr=False,
        description="Storage account connection string (STORAGE_CONNECTION_STRING)"
    )

    emulator: bool = Field(
        default=StorageDefaults.EMULATOR_ENABLED,
        description="Run against Azurite"
    )

    blob_container_name: str = Field(default=StorageDefaults.BLOB_CONTAINER_NAME)
    queue_name: str = Field(default=StorageDefaults.QUEUE_NAME)

    azurite_blob_endpoint: str = Field(default=StorageDefaults.AZURITE_BLOB_ENDPOINT)
    azurite_queue_endpoint: str = Field(default=StorageDefaults.AZURITE_QUEUE_ENDPOINT)

    def effective_connection_string(self) -> Optional[str]:
        """Connection string to use, falling back to the Azurite key."""
        if self.connection_string is not None:
            return self.connection_string.get_secret_value()
        if self.emulator:
            return StorageDefaults.EMULATOR_CONNECTION_STRING
        return None

    def debug_dict(self) -> dict:
        """Sanitized view for logging."""
        return {
            'account_name': self.account_name,
            'connection_string': '***MASKED***' if self.connection_string else None,
            'emulator': self.emulator,
            'blob_container_name': self.blob_container_name,
            'queue_name': self.queue_name,
            'azurite_blob_endpoint': self.azurite_blob_endpoint,
            'azurite_queue_endpoint': self.azurite_queue_endpoint,
        }

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        connection_string = os.environ.get("STORAGE_CONNECTION_STRING")
        return cls(
            account_name=os.environ.get("STORAGE_ACCOUNT_NAME", StorageDefaults.ACCOUNT_NAME),
            connection_string=SecretStr(connection_string) if connection_string else None,
            emulator=os.environ.get("STORAGE_EMULATOR", str(StorageDefaults.EMULATOR_ENABLED)).lower() in ("true", "1", "yes"),
            blob_container_name=os.environ.get("STORAGE_BLOB_CONTAINER", StorageDefaults.BLOB_CONTAINER_NAME),
            queue_name=os.environ.get("STORAGE_QUEUE", StorageDefaults.QUEUE_NAME),
            azurite_blob_endpoint=os.environ.get("AZURITE_BLOB_ENDPOINT", StorageDefaults.AZURITE_BLOB_ENDPOINT),
            azurite_queue_endpoint=os.environ.get("AZURITE_QUEUE_ENDPOINT", StorageDefaults.AZURITE_QUEUE_ENDPOINT),
        )
