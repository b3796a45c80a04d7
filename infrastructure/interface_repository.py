"""
Repository Abstract Base Classes - Single Point of Truth.

Enforces exact method signatures across all namespace backends. The
seeding services only ever talk to these interfaces; the Azure SDK
implementations live next to this file and tests plug in in-memory ones.

Exports:
    NamespaceHandle: Ensured namespace that accepts item writes
    NamespaceBackend: Creates namespaces of one resource kind
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from core.models import ConnectionTarget, NamespaceSpec, ResourceKind


class NamespaceHandle(ABC):
    """
    An ensured namespace (document container, blob container or queue).

    Owned by exactly one routine, which closes it when the batch is done.
    Usable as an async context manager.
    """

    def __init__(self, spec: NamespaceSpec):
        self.spec = spec

    @property
    def name(self) -> str:
        return self.spec.qualified_name

    @abstractmethod
    async def write(self, item_id: str, body: Dict[str, Any], partition_key: str) -> None:
        """Create one item. Must not overwrite an existing item."""
        pass

    async def close(self) -> None:
        """Release the underlying client."""
        return None

    async def __aenter__(self) -> "NamespaceHandle":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class NamespaceBackend(ABC):
    """
    Creates (if absent) and opens namespaces of one resource kind.
    """

    kind: ResourceKind

    @abstractmethod
    async def ensure(self, target: ConnectionTarget, spec: NamespaceSpec) -> NamespaceHandle:
        """
        Create the namespace if it does not exist and return a handle.

        Must be idempotent and tolerate a concurrent creator. For document
        containers the database is confirmed before the container is
        created.

        Raises:
            NamespaceEnsureError: On any failure
        """
        pass

    @abstractmethod
    async def ping(self, target: ConnectionTarget) -> None:
        """
        Cheap round trip proving the account endpoint answers.

        Raises:
            Exception: Whatever the SDK raises while the endpoint is down
        """
        pass
