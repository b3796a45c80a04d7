# ============================================================================
# BLOB CONTAINER NAMESPACE BACKEND
# ============================================================================
# STATUS: Infrastructure - Azure Blob Storage (async SDK)
# PURPOSE: Ensure a blob container, write seed records as JSON blobs
# CREATED: 17 OCT 2026
# ============================================================================
"""
Blob Container Namespace Backend.

Each record becomes one JSON blob named `<id>.json`; the partition key
(import source location) travels as blob metadata so every blob from one
batch can be traced back to it.

Clients are built from the resolved ConnectionTarget. When the target
carries an account name and key the client is pinned to `target.endpoint`
(Azurite in emulator mode); otherwise the connection string is used as is.

Usage:
    backend = BlobNamespaceBackend()
    async with await backend.ensure(target, spec) as container:
        await container.write(item_id, body, partition_key)
"""

import json
import logging
from typing import Any, Callable, Dict, Optional

from azure.core.exceptions import HttpResponseError, ResourceExistsError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient

from core.errors import ErrorCode, NamespaceEnsureError, classify_status_code
from core.models import ConnectionTarget, NamespaceSpec, ResourceKind
from util_logger import LoggerFactory, ComponentType

from .interface_repository import NamespaceBackend, NamespaceHandle

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "BlobNamespaceBackend")


def storage_client_args(target: ConnectionTarget) -> Dict[str, Any]:
    """
    Constructor arguments shared by the blob and queue service clients.

    Returns:
        Dict with either account_url + credential, or conn_str
    """
    kwargs: Dict[str, Any] = {"connection_verify": target.verify_certificate}
    if target.account_key is not None and target.credential_name:
        kwargs["account_url"] = target.endpoint
        kwargs["credential"] = {
            "account_name": target.credential_name,
            "account_key": target.account_key.get_secret_value(),
        }
    else:
        kwargs["conn_str"] = target.connection_string.get_secret_value()
    return kwargs


def create_blob_service_client(target: ConnectionTarget) -> BlobServiceClient:
    """Build an async BlobServiceClient for a resolved target."""
    kwargs = storage_client_args(target)
    if "conn_str" in kwargs:
        return BlobServiceClient.from_connection_string(**kwargs)
    return BlobServiceClient(**kwargs)


class BlobContainerHandle(NamespaceHandle):
    """
    Ensured blob container; owns the service client.
    """

    def __init__(self, spec: NamespaceSpec, service: BlobServiceClient, container: Any):
        super().__init__(spec)
        self._service = service
        self._container = container

    async def write(self, item_id: str, body: Dict[str, Any], partition_key: str) -> None:
        await self._container.upload_blob(
            name=f"{item_id}.json",
            data=json.dumps(body).encode("utf-8"),
            overwrite=False,
            content_settings=ContentSettings(content_type="application/json"),
            metadata={"filePath": partition_key},
        )

    async def close(self) -> None:
        await self._service.close()


class BlobNamespaceBackend(NamespaceBackend):
    """
    Backend for BLOB_CONTAINER resources.
    """

    kind = ResourceKind.BLOB_CONTAINER

    def __init__(
        self,
        client_factory: Optional[Callable[[ConnectionTarget], BlobServiceClient]] = None,
        log: Optional[logging.Logger] = None,
    ):
        self._client_factory = client_factory or create_blob_service_client
        self.logger = log or logger

    async def ensure(self, target: ConnectionTarget, spec: NamespaceSpec) -> NamespaceHandle:
        service = self._client_factory(target)
        container = service.get_container_client(spec.namespace_name)

        try:
            self.logger.info(f"Creating blob container if not exists: {spec.namespace_name}")
            try:
                await container.create_container()
                self.logger.info(f"Created blob container: {spec.namespace_name}")
            except ResourceExistsError:
                self.logger.debug(f"Blob container already exists: {spec.namespace_name}")
            except HttpResponseError as e:
                raise NamespaceEnsureError(
                    f"Could not ensure blob container '{spec.namespace_name}': {e.status_code} {e.reason}",
                    resource_name=spec.resource_name,
                    error_code=classify_status_code(e.status_code, ErrorCode.CONTAINER_ENSURE_FAILED),
                ) from e
        except BaseException:
            await service.close()
            raise

        return BlobContainerHandle(spec, service, container)

    async def ping(self, target: ConnectionTarget) -> None:
        service = self._client_factory(target)
        try:
            await service.get_service_properties()
        finally:
            await service.close()
