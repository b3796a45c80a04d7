"""
Pure Enumeration Types for Core Framework.

Defines valid states for resources, record classification levels and
connection settings. No business logic - pure type definitions only.

Exports:
    ResourceSensitivity: Record classification level
    ResourceKind: Kind of declared topology resource
    ResourceState: Resource lifecycle state enumeration
    SeedPhase: Phase of an import routine
    TransportMode: Client transport mode
    ConsistencyLevel: Document store consistency level
"""

from enum import Enum


class ResourceSensitivity(str, Enum):
    """
    Classification of a record, ordered by increasing protection requirement.

    Purely descriptive - nothing in the pipeline enforces it.

    - PUBLIC: non-proprietary or public-domain information
    - INTERNAL: for distribution inside the company only
    - CONFIDENTIAL: need-to-know inside or outside the company
    - RESTRICTED: highest protection, strict need-to-know only
    """

    PUBLIC = "public"
    INTERNAL = "internal"
    CONFIDENTIAL = "confidential"
    RESTRICTED = "restricted"

    @property
    def protection_level(self) -> int:
        """0 for PUBLIC up to 3 for RESTRICTED."""
        return list(ResourceSensitivity).index(self)


class ResourceKind(str, Enum):
    """
    Kinds of resources a topology can declare.

    Accounts and databases are parents; containers and queues are the
    namespaces records are written into.
    """

    COSMOS_ACCOUNT = "cosmos_account"
    COSMOS_DATABASE = "cosmos_database"
    COSMOS_CONTAINER = "cosmos_container"
    STORAGE_ACCOUNT = "storage_account"
    BLOB_CONTAINER = "blob_container"
    QUEUE = "queue"

    @property
    def is_account(self) -> bool:
        return self in (ResourceKind.COSMOS_ACCOUNT, ResourceKind.STORAGE_ACCOUNT)

    @property
    def is_namespace(self) -> bool:
        return self in (ResourceKind.COSMOS_CONTAINER, ResourceKind.BLOB_CONTAINER, ResourceKind.QUEUE)


class ResourceState(str, Enum):
    """
    Lifecycle states of a declared resource.

    State transitions:
    - DECLARED -> PROVISIONING -> READY -> IMPORTING -> COMPLETED (normal flow)
    - DECLARED -> READY (signal raised without a probe)
    - PROVISIONING -> FAILED (never became ready)
    - IMPORTING -> FAILED (unrecovered connect / ensure error)
    - IMPORTING -> READY (routine retry before any write)
    """

    DECLARED = "declared"
    PROVISIONING = "provisioning"
    READY = "ready"
    IMPORTING = "importing"
    COMPLETED = "completed"
    FAILED = "failed"


class SeedPhase(str, Enum):
    """Phases of one import routine, in execution order."""

    CONNECT = "connect"
    ENSURE = "ensure"
    IMPORT = "import"


class TransportMode(str, Enum):
    """
    Client transport mode.

    GATEWAY routes through the account's HTTP gateway (emulators);
    DIRECT talks to the backend replicas (live accounts).
    """

    GATEWAY = "gateway"
    DIRECT = "direct"


class ConsistencyLevel(str, Enum):
    """Document store consistency levels; seeding always uses EVENTUAL."""

    STRONG = "Strong"
    BOUNDED_STALENESS = "BoundedStaleness"
    SESSION = "Session"
    CONSISTENT_PREFIX = "ConsistentPrefix"
    EVENTUAL = "Eventual"
