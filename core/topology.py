# ============================================================================
# TOPOLOGY DECLARATION
# ============================================================================
# STATUS: Core - Static description of the seeded resources
# PURPOSE: Declare accounts, databases, containers and queues once at startup
# CREATED: 17 OCT 2026
# ============================================================================
"""
Topology Declaration.

Builds the immutable set of ResourceDescriptors the host provisions and
the dispatcher binds routines to. Declarations are collected first and
frozen in `build()`, so emulator mode can be switched on after children
are added (the same order the hosting runtime allows).

Usage:
    builder = TopologyBuilder()
    builder.add_cosmos_account("azcosmos", connection_string=conn)
    builder.add_cosmos_database("appimport", account="azcosmos")
    builder.add_cosmos_container("cdbimport", database="appimport",
                                 partition_key_path="/filePath")
    builder.run_as_emulator("azcosmos", local_endpoint="https://localhost:8081/")
    topology = builder.build()
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from config import AppConfig
from core.models import ResourceDescriptor, ResourceKind, ConnectionStringSource
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.FACTORY, "TopologyBuilder")


_ALLOWED_PARENTS = {
    ResourceKind.COSMOS_ACCOUNT: None,
    ResourceKind.STORAGE_ACCOUNT: None,
    ResourceKind.COSMOS_DATABASE: ResourceKind.COSMOS_ACCOUNT,
    ResourceKind.COSMOS_CONTAINER: ResourceKind.COSMOS_DATABASE,
    ResourceKind.BLOB_CONTAINER: ResourceKind.STORAGE_ACCOUNT,
    ResourceKind.QUEUE: ResourceKind.STORAGE_ACCOUNT,
}


@dataclass
class _Declaration:
    name: str
    kind: ResourceKind
    parent: Optional[str] = None
    namespace_name: Optional[str] = None
    partition_key_path: Optional[str] = None
    local_endpoint: Optional[str] = None
    connection_string: Optional[ConnectionStringSource] = None
    is_emulator: bool = False


class Topology:
    """
    Immutable, ordered set of declared resources.
    """

    def __init__(self, resources: List[ResourceDescriptor]):
        self._resources: Dict[str, ResourceDescriptor] = {r.name: r for r in resources}

    def __iter__(self) -> Iterator[ResourceDescriptor]:
        return iter(self._resources.values())

    def __len__(self) -> int:
        return len(self._resources)

    def __contains__(self, name: str) -> bool:
        return name in self._resources

    def get(self, name: str) -> ResourceDescriptor:
        if name not in self._resources:
            raise KeyError(f"Unknown resource: '{name}'. Declared: {list(self._resources)}")
        return self._resources[name]

    def namespaces(self) -> List[ResourceDescriptor]:
        """Resources records can be written into (containers and queues)."""
        return [r for r in self._resources.values() if r.kind.is_namespace]

    def describe(self) -> List[dict]:
        """Secret-free description for dry runs and reports."""
        return [
            {
                "name": r.name,
                "kind": r.kind.value,
                "parent": r.parent.name if r.parent else None,
                "namespace": r.namespace_name,
                "partition_key_path": r.partition_key_path,
                "is_emulator": r.is_emulator,
                "local_endpoint": r.local_endpoint,
            }
            for r in self._resources.values()
        ]


class TopologyBuilder:
    """
    Collects resource declarations and freezes them into a Topology.
    """

    def __init__(self):
        self._declarations: Dict[str, _Declaration] = {}

    def _add(self, declaration: _Declaration) -> "TopologyBuilder":
        if declaration.name in self._declarations:
            raise ValueError(f"Resource '{declaration.name}' already declared")

        expected_parent = _ALLOWED_PARENTS[declaration.kind]
        if expected_parent is not None:
            parent = self._declarations.get(declaration.parent)
            if parent is None:
                raise ValueError(
                    f"Resource '{declaration.name}' references undeclared parent '{declaration.parent}'"
                )
            if parent.kind != expected_parent:
                raise ValueError(
                    f"Resource '{declaration.name}' ({declaration.kind.value}) needs a "
                    f"{expected_parent.value} parent, got {parent.kind.value}"
                )

        self._declarations[declaration.name] = declaration
        logger.debug(f"Declared {declaration.kind.value}: {declaration.name}")
        return self

    def add_cosmos_account(self, name: str, connection_string: Optional[ConnectionStringSource] = None) -> "TopologyBuilder":
        return self._add(_Declaration(name=name, kind=ResourceKind.COSMOS_ACCOUNT,
                                      connection_string=connection_string))

    def add_cosmos_database(self, name: str, account: str, database_name: Optional[str] = None) -> "TopologyBuilder":
        return self._add(_Declaration(name=name, kind=ResourceKind.COSMOS_DATABASE, parent=account,
                                      namespace_name=database_name or name))

    def add_cosmos_container(
        self,
        name: str,
        database: str,
        partition_key_path: str,
        container_name: Optional[str] = None,
    ) -> "TopologyBuilder":
        if not partition_key_path.startswith("/"):
            raise ValueError(f"Partition key path must start with '/': {partition_key_path!r}")
        return self._add(_Declaration(name=name, kind=ResourceKind.COSMOS_CONTAINER, parent=database,
                                      namespace_name=container_name or name,
                                      partition_key_path=partition_key_path))

    def add_storage_account(self, name: str, connection_string: Optional[ConnectionStringSource] = None) -> "TopologyBuilder":
        return self._add(_Declaration(name=name, kind=ResourceKind.STORAGE_ACCOUNT,
                                      connection_string=connection_string))

    def add_blob_container(
        self,
        name: str,
        account: str,
        blob_container_name: Optional[str] = None,
        local_endpoint: Optional[str] = None,
    ) -> "TopologyBuilder":
        return self._add(_Declaration(name=name, kind=ResourceKind.BLOB_CONTAINER, parent=account,
                                      namespace_name=blob_container_name or name,
                                      local_endpoint=local_endpoint))

    def add_queue(
        self,
        name: str,
        account: str,
        queue_name: Optional[str] = None,
        local_endpoint: Optional[str] = None,
    ) -> "TopologyBuilder":
        return self._add(_Declaration(name=name, kind=ResourceKind.QUEUE, parent=account,
                                      namespace_name=queue_name or name,
                                      local_endpoint=local_endpoint))

    def run_as_emulator(self, account: str, local_endpoint: Optional[str] = None) -> "TopologyBuilder":
        """
        Mark an account (and everything under it) as emulated.

        Args:
            account: Account resource name
            local_endpoint: Endpoint the clients are constrained to
        """
        declaration = self._declarations.get(account)
        if declaration is None or not declaration.kind.is_account:
            raise ValueError(f"'{account}' is not a declared account")
        declaration.is_emulator = True
        if local_endpoint:
            declaration.local_endpoint = local_endpoint
        return self

    def _account_of(self, declaration: _Declaration) -> _Declaration:
        node = declaration
        while node.parent is not None:
            node = self._declarations[node.parent]
        return node

    def build(self) -> Topology:
        """Freeze declarations (parents before children) into a Topology."""
        built: Dict[str, ResourceDescriptor] = {}

        # Declaration order already puts parents first (_add enforces it)
        for declaration in self._declarations.values():
            account = self._account_of(declaration)
            built[declaration.name] = ResourceDescriptor(
                name=declaration.name,
                kind=declaration.kind,
                parent=built[declaration.parent] if declaration.parent else None,
                is_emulator=account.is_emulator,
                local_endpoint=declaration.local_endpoint,
                namespace_name=declaration.namespace_name,
                partition_key_path=declaration.partition_key_path,
                connection_string=declaration.connection_string,
            )

        logger.info(f"Topology built with {len(built)} resources: {list(built)}")
        return Topology(list(built.values()))


def default_topology(config: AppConfig) -> Topology:
    """
    The seeded topology: one document container, one blob container, one queue.

    Cosmos account -> database -> container (partition key path from
    config), storage account -> blob container + queue. Each account runs
    as an emulator when its config says so.
    """
    cosmos = config.cosmos
    storage = config.storage

    builder = TopologyBuilder()
    builder.add_cosmos_account(cosmos.account_name, connection_string=cosmos.effective_connection_string())
    builder.add_cosmos_database(cosmos.database_name, account=cosmos.account_name)
    builder.add_cosmos_container(cosmos.container_name, database=cosmos.database_name,
                                 partition_key_path=cosmos.partition_key_path)

    builder.add_storage_account(storage.account_name, connection_string=storage.effective_connection_string())
    builder.add_blob_container(storage.blob_container_name, account=storage.account_name,
                               local_endpoint=storage.azurite_blob_endpoint if storage.emulator else None)
    builder.add_queue(storage.queue_name, account=storage.account_name,
                      local_endpoint=storage.azurite_queue_endpoint if storage.emulator else None)

    if cosmos.emulator:
        builder.run_as_emulator(cosmos.account_name, local_endpoint=cosmos.emulator_endpoint)
    if storage.emulator:
        builder.run_as_emulator(storage.account_name)

    return builder.build()
