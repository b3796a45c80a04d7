"""
Infrastructure Package - Lazy Loading Implementation.

Namespace backends for Cosmos DB, Blob Storage and Storage Queues.

Imports are deferred until a name is first accessed so that importing
the package never pulls in the Azure SDKs (tests that only use the
interfaces and in-memory backends stay SDK-free at import time).

Exports:
    NamespaceBackend, NamespaceHandle: Interfaces
    CosmosNamespaceBackend, BlobNamespaceBackend, QueueNamespaceBackend
    BackendFactory: Builds the kind -> backend registry
"""

from typing import TYPE_CHECKING

# For type checking only - doesn't actually import at runtime
if TYPE_CHECKING:
    from .interface_repository import NamespaceBackend as _NamespaceBackend
    from .interface_repository import NamespaceHandle as _NamespaceHandle
    from .cosmos import CosmosNamespaceBackend as _CosmosNamespaceBackend
    from .blob import BlobNamespaceBackend as _BlobNamespaceBackend
    from .queue import QueueNamespaceBackend as _QueueNamespaceBackend
    from .factory import BackendFactory as _BackendFactory


def __getattr__(name: str):
    """
    Lazy import mechanism - only imports when actually accessed.
    """
    # Interfaces
    if name == "NamespaceBackend":
        from .interface_repository import NamespaceBackend
        return NamespaceBackend
    elif name == "NamespaceHandle":
        from .interface_repository import NamespaceHandle
        return NamespaceHandle

    # Factory
    elif name == "BackendFactory":
        from .factory import BackendFactory
        return BackendFactory

    # Azure SDK backends
    elif name == "CosmosNamespaceBackend":
        from .cosmos import CosmosNamespaceBackend
        return CosmosNamespaceBackend
    elif name == "BlobNamespaceBackend":
        from .blob import BlobNamespaceBackend
        return BlobNamespaceBackend
    elif name == "QueueNamespaceBackend":
        from .queue import QueueNamespaceBackend
        return QueueNamespaceBackend

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "NamespaceBackend",
    "NamespaceHandle",
    "BackendFactory",
    "CosmosNamespaceBackend",
    "BlobNamespaceBackend",
    "QueueNamespaceBackend",
]
