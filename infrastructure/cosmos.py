# ============================================================================
# COSMOS DB NAMESPACE BACKEND
# ============================================================================
# STATUS: Infrastructure - Azure Cosmos DB (async SDK)
# PURPOSE: Ensure database + container, write seed documents
# CREATED: 17 OCT 2026
# ============================================================================
"""
Cosmos DB Namespace Backend.

Ensures `database/container` in two ordered steps and writes one
document per create call. The client is built from the resolved
ConnectionTarget:

    - consistency level from the target (always Eventual for seeding)
    - certificate validation off for emulators (self-signed endpoint)
    - endpoint discovery off when the target is limited to its endpoint

The Python SDK only speaks the HTTP gateway protocol, so the target's
transport mode is logged but has no client setting to map to.

Usage:
    backend = CosmosNamespaceBackend()
    async with await backend.ensure(target, spec) as container:
        await container.write(item_id, body, partition_key)
"""

import logging
from typing import Any, Callable, Dict, Optional

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient
from azure.cosmos.exceptions import CosmosHttpResponseError

from core.errors import ErrorCode, NamespaceEnsureError, classify_status_code
from core.models import ConnectionTarget, NamespaceSpec, ResourceKind
from util_logger import LoggerFactory, ComponentType

from .interface_repository import NamespaceBackend, NamespaceHandle

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "CosmosNamespaceBackend")


def create_cosmos_client(target: ConnectionTarget) -> CosmosClient:
    """
    Build an async CosmosClient for a resolved target.

    Args:
        target: Resolved connection target (must carry the account key)

    Returns:
        CosmosClient (caller closes it)
    """
    if target.account_key is None:
        raise NamespaceEnsureError(
            "Cosmos connection string has no AccountKey",
            resource_name=target.resource_name,
            error_code=ErrorCode.CONNECTION_STRING_INVALID,
        )

    return CosmosClient(
        url=target.endpoint,
        credential=target.account_key.get_secret_value(),
        consistency_level=target.consistency_level.value,
        connection_verify=target.verify_certificate,
        enable_endpoint_discovery=not target.limit_to_endpoint,
    )


class CosmosContainerHandle(NamespaceHandle):
    """
    Ensured Cosmos container; owns the client it was opened with.
    """

    def __init__(self, spec: NamespaceSpec, client: CosmosClient, container: Any):
        super().__init__(spec)
        self._client = client
        self._container = container
        # '/filePath' -> 'filePath'; nested paths are not supported for seeding
        self._partition_key_field = (spec.partition_key_path or "/").lstrip("/")

    async def write(self, item_id: str, body: Dict[str, Any], partition_key: str) -> None:
        document = dict(body)
        document["id"] = item_id
        # The async SDK derives the partition key from the document body
        document[self._partition_key_field] = partition_key
        await self._container.create_item(body=document)

    async def close(self) -> None:
        await self._client.close()


class CosmosNamespaceBackend(NamespaceBackend):
    """
    Backend for COSMOS_CONTAINER resources.
    """

    kind = ResourceKind.COSMOS_CONTAINER

    def __init__(
        self,
        client_factory: Optional[Callable[[ConnectionTarget], CosmosClient]] = None,
        log: Optional[logging.Logger] = None,
    ):
        self._client_factory = client_factory or create_cosmos_client
        self.logger = log or logger

    async def ensure(self, target: ConnectionTarget, spec: NamespaceSpec) -> NamespaceHandle:
        client = self._client_factory(target)
        self.logger.debug(
            f"Cosmos client for {target.redacted()}: transport={target.transport_mode.value}, "
            f"verify_certificate={target.verify_certificate}, consistency={target.consistency_level.value}"
        )

        try:
            self.logger.info(f"Creating database if not exists: {spec.database_name}")
            try:
                database = await client.create_database_if_not_exists(id=spec.database_name)
            except CosmosHttpResponseError as e:
                raise NamespaceEnsureError(
                    f"Could not ensure database '{spec.database_name}': {e.status_code} {e.reason}",
                    resource_name=spec.resource_name,
                    error_code=classify_status_code(e.status_code, ErrorCode.DATABASE_ENSURE_FAILED),
                ) from e

            self.logger.info(
                f"Creating container if not exists: {spec.qualified_name} "
                f"(partition key {spec.partition_key_path})"
            )
            try:
                container = await database.create_container_if_not_exists(
                    id=spec.namespace_name,
                    partition_key=PartitionKey(path=spec.partition_key_path),
                )
            except CosmosHttpResponseError as e:
                raise NamespaceEnsureError(
                    f"Could not ensure container '{spec.qualified_name}': {e.status_code} {e.reason}",
                    resource_name=spec.resource_name,
                    error_code=classify_status_code(e.status_code, ErrorCode.CONTAINER_ENSURE_FAILED),
                ) from e
        except BaseException:
            await client.close()
            raise

        return CosmosContainerHandle(spec, client, container)

    async def ping(self, target: ConnectionTarget) -> None:
        client = self._client_factory(target)
        try:
            async for _ in client.list_databases(max_item_count=1):
                break
        finally:
            await client.close()
