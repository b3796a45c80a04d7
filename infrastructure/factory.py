# ============================================================================
# BACKEND FACTORY
# ============================================================================
# STATUS: Infrastructure - Central factory for namespace backends
# PURPOSE: Build the kind -> backend registry the schema ensurer consumes
# CREATED: 17 OCT 2026
# ============================================================================
"""
Backend Factory - Central Creation Point.

Single place that maps every namespace resource kind to its Azure SDK
backend. Tests build their own registry from in-memory backends instead.

Example:
    backends = BackendFactory.create_backends()
    ensurer = SchemaEnsurer(backends)
"""

from typing import Dict

from core.models import ResourceKind
from util_logger import LoggerFactory, ComponentType

from .interface_repository import NamespaceBackend

logger = LoggerFactory.create_logger(ComponentType.FACTORY, "BackendFactory")


class BackendFactory:
    """
    Factory for namespace backends.
    """

    @staticmethod
    def create_cosmos_backend() -> NamespaceBackend:
        from .cosmos import CosmosNamespaceBackend
        return CosmosNamespaceBackend()

    @staticmethod
    def create_blob_backend() -> NamespaceBackend:
        from .blob import BlobNamespaceBackend
        return BlobNamespaceBackend()

    @staticmethod
    def create_queue_backend() -> NamespaceBackend:
        from .queue import QueueNamespaceBackend
        return QueueNamespaceBackend()

    @staticmethod
    def create_backends() -> Dict[ResourceKind, NamespaceBackend]:
        """
        Create one backend per namespace kind.

        Returns:
            Dict keyed by ResourceKind (COSMOS_CONTAINER, BLOB_CONTAINER, QUEUE)
        """
        backends = {
            ResourceKind.COSMOS_CONTAINER: BackendFactory.create_cosmos_backend(),
            ResourceKind.BLOB_CONTAINER: BackendFactory.create_blob_backend(),
            ResourceKind.QUEUE: BackendFactory.create_queue_backend(),
        }
        logger.debug(f"Created backends: {[k.value for k in backends]}")
        return backends
