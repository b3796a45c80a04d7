# ============================================================================
# QUEUE NAMESPACE BACKEND
# ============================================================================
# STATUS: Infrastructure - Azure Storage Queues (async SDK)
# PURPOSE: Ensure a storage queue, enqueue seed records as messages
# CREATED: 17 OCT 2026
# ============================================================================
"""
Queue Namespace Backend.

Each record becomes one message: the JSON document (id and partition
key included) base64 encoded, which is what queue-triggered consumers
expect by default.

Usage:
    backend = QueueNamespaceBackend()
    async with await backend.ensure(target, spec) as queue:
        await queue.write(item_id, body, partition_key)
"""

import base64
import json
import logging
from typing import Any, Callable, Dict, Optional

from azure.core.exceptions import HttpResponseError, ResourceExistsError
from azure.storage.queue.aio import QueueServiceClient

from core.errors import ErrorCode, NamespaceEnsureError, classify_status_code
from core.models import ConnectionTarget, NamespaceSpec, ResourceKind
from util_logger import LoggerFactory, ComponentType

from .blob import storage_client_args
from .interface_repository import NamespaceBackend, NamespaceHandle

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "QueueNamespaceBackend")

# Storage queue messages are capped at 64 KiB
MAX_MESSAGE_BYTES = 64 * 1024


def create_queue_service_client(target: ConnectionTarget) -> QueueServiceClient:
    """Build an async QueueServiceClient for a resolved target."""
    kwargs = storage_client_args(target)
    if "conn_str" in kwargs:
        return QueueServiceClient.from_connection_string(**kwargs)
    return QueueServiceClient(**kwargs)


class QueueHandle(NamespaceHandle):
    """
    Ensured storage queue; owns the service client.
    """

    def __init__(self, spec: NamespaceSpec, service: QueueServiceClient, queue: Any):
        super().__init__(spec)
        self._service = service
        self._queue = queue

    async def write(self, item_id: str, body: Dict[str, Any], partition_key: str) -> None:
        message = dict(body)
        message["id"] = item_id
        message["filePath"] = partition_key
        encoded = base64.b64encode(json.dumps(message).encode("utf-8")).decode("ascii")
        if len(encoded) > MAX_MESSAGE_BYTES:
            raise ValueError(f"Message for {item_id} is {len(encoded)} bytes, limit is {MAX_MESSAGE_BYTES}")
        await self._queue.send_message(encoded)

    async def close(self) -> None:
        await self._service.close()


class QueueNamespaceBackend(NamespaceBackend):
    """
    Backend for QUEUE resources.
    """

    kind = ResourceKind.QUEUE

    def __init__(
        self,
        client_factory: Optional[Callable[[ConnectionTarget], QueueServiceClient]] = None,
        log: Optional[logging.Logger] = None,
    ):
        self._client_factory = client_factory or create_queue_service_client
        self.logger = log or logger

    async def ensure(self, target: ConnectionTarget, spec: NamespaceSpec) -> NamespaceHandle:
        service = self._client_factory(target)
        queue = service.get_queue_client(spec.namespace_name)

        try:
            self.logger.info(f"Creating queue if not exists: {spec.namespace_name}")
            try:
                await queue.create_queue()
                self.logger.info(f"Created queue: {spec.namespace_name}")
            except ResourceExistsError:
                self.logger.debug(f"Queue already exists: {spec.namespace_name}")
            except HttpResponseError as e:
                raise NamespaceEnsureError(
                    f"Could not ensure queue '{spec.namespace_name}': {e.status_code} {e.reason}",
                    resource_name=spec.resource_name,
                    error_code=classify_status_code(e.status_code, ErrorCode.QUEUE_ENSURE_FAILED),
                ) from e
        except BaseException:
            await service.close()
            raise

        return QueueHandle(spec, service, queue)

    async def ping(self, target: ConnectionTarget) -> None:
        service = self._client_factory(target)
        try:
            await service.get_service_properties()
        finally:
            await service.close()
