"""
Core Data Models Package.

Contains pure data structures without business logic.
All business logic is in the core.logic package.

Exports:
    ResourceSensitivity, ResourceKind, ResourceState, SeedPhase,
    TransportMode, ConsistencyLevel: Enums
    ResourceItem, ResourceHyperlink, ImportDocument: Domain records
    ResourceDescriptor, NamespaceSpec, ConnectionTarget: Topology handles
    ImportSummary, FailedItem, PhaseOutcome, RoutineResult: Result types
"""

# Enums
from .enums import (
    ResourceSensitivity,
    ResourceKind,
    ResourceState,
    SeedPhase,
    TransportMode,
    ConsistencyLevel
)

# Record models
from .records import (
    ResourceItem,
    ResourceHyperlink,
    ImportDocument
)

# Topology models
from .topology import (
    ConnectionStringSource,
    ResourceDescriptor,
    NamespaceSpec,
    ConnectionTarget
)

# Result models
from .results import (
    FailedItem,
    ImportSummary,
    PhaseOutcome,
    RoutineResult
)

__all__ = [
    # Enums
    'ResourceSensitivity',
    'ResourceKind',
    'ResourceState',
    'SeedPhase',
    'TransportMode',
    'ConsistencyLevel',

    # Records
    'ResourceItem',
    'ResourceHyperlink',
    'ImportDocument',

    # Topology
    'ConnectionStringSource',
    'ResourceDescriptor',
    'NamespaceSpec',
    'ConnectionTarget',

    # Results
    'FailedItem',
    'ImportSummary',
    'PhaseOutcome',
    'RoutineResult',
]
