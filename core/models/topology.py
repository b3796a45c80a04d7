"""
Topology Data Models.

Immutable handles for provisioned resources, the namespace a routine
writes into, and the connection target resolved for it.

Exports:
    ConnectionStringSource: Static string or async provider
    ResourceDescriptor: Declared resource handle (immutable)
    NamespaceSpec: What the ensurer must create for a resource
    ConnectionTarget: Resolved connection settings
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .enums import ResourceKind, TransportMode, ConsistencyLevel


ConnectionStringSource = Union[str, Callable[[], Awaitable[str]]]


@dataclass(frozen=True)
class ResourceDescriptor:
    """
    Handle for one declared resource.

    Built once by the topology builder and never mutated. Only account
    descriptors carry a connection string source; everything below an
    account reaches it through `parent`.
    """

    name: str
    kind: ResourceKind
    parent: Optional["ResourceDescriptor"] = None
    is_emulator: bool = False
    local_endpoint: Optional[str] = None
    namespace_name: Optional[str] = None
    partition_key_path: Optional[str] = None
    connection_string: Optional[ConnectionStringSource] = field(default=None, repr=False, compare=False)

    def chain(self) -> List["ResourceDescriptor"]:
        """This resource followed by its ancestors, nearest first."""
        chain = []
        node: Optional[ResourceDescriptor] = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return chain

    @property
    def account(self) -> Optional["ResourceDescriptor"]:
        """The owning account, or None when the parent chain is incomplete."""
        for node in self.chain():
            if node.kind.is_account:
                return node
        return None

    @property
    def database(self) -> Optional["ResourceDescriptor"]:
        for node in self.chain():
            if node.kind == ResourceKind.COSMOS_DATABASE:
                return node
        return None


@dataclass(frozen=True)
class NamespaceSpec:
    """
    Namespace to ensure for a resource.

    For a document container both `database_name` and
    `partition_key_path` are set; blob containers and queues only need
    `namespace_name`.
    """

    kind: ResourceKind
    resource_name: str
    namespace_name: str
    database_name: Optional[str] = None
    partition_key_path: Optional[str] = None

    @classmethod
    def from_descriptor(cls, resource: ResourceDescriptor) -> "NamespaceSpec":
        """
        Derive the namespace spec from a declared resource.

        Raises:
            ValueError: If the resource is not a namespace or is missing a
                database / partition key it needs
        """
        if not resource.kind.is_namespace:
            raise ValueError(f"{resource.name} ({resource.kind.value}) is not a namespace resource")

        database_name = None
        if resource.kind == ResourceKind.COSMOS_CONTAINER:
            database = resource.database
            if database is None:
                raise ValueError(f"{resource.name} has no parent database")
            if not resource.partition_key_path:
                raise ValueError(f"{resource.name} has no partition key path")
            database_name = database.namespace_name or database.name

        return cls(
            kind=resource.kind,
            resource_name=resource.name,
            namespace_name=resource.namespace_name or resource.name,
            database_name=database_name,
            partition_key_path=resource.partition_key_path,
        )

    @property
    def qualified_name(self) -> str:
        """`database/container` for documents, plain name otherwise."""
        if self.database_name:
            return f"{self.database_name}/{self.namespace_name}"
        return self.namespace_name


class ConnectionTarget(BaseModel):
    """
    Resolved connection settings for one routine.

    Owned by the routine that resolved it; never shared.
    """

    model_config = ConfigDict(frozen=True)

    resource_name: str
    account_name: str
    kind: ResourceKind
    endpoint: str
    connection_string: SecretStr = Field(..., repr=False)
    account_key: Optional[SecretStr] = Field(default=None, repr=False)
    credential_name: Optional[str] = None
    transport_mode: TransportMode
    verify_certificate: bool
    limit_to_endpoint: bool
    consistency_level: ConsistencyLevel = ConsistencyLevel.EVENTUAL
    is_emulator: bool

    def redacted(self) -> str:
        """Identifier that is safe to log at any level."""
        return f"{self.account_name}@{self.endpoint}"
