# ============================================================================
# SEEDING MODULE
# ============================================================================
# STATUS: Core - Resource-ready seeding pipeline
# PURPOSE: Wait for readiness, resolve, ensure, import generated records
# CREATED: 17 OCT 2026
# ============================================================================
"""
Seeding Module

Turns a declared topology into seeded namespaces:

    ReadinessProbe ──ready──▶ LifecycleDispatcher ──task──▶ SeedRoutine
                                                             │
                        ConnectionResolver ◀─────────────────┤ connect
                        SchemaEnsurer      ◀─────────────────┤ ensure
                        RecordGenerator + ImportExecutor ◀───┘ import

Components:
    - generator.py:  Faker-backed synthetic records
    - resolver.py:   Resource -> ConnectionTarget (emulator vs live)
    - ensurer.py:    Idempotent namespace creation
    - importer.py:   Per-item isolated batch writes
    - lifecycle.py:  Per-resource state machine
    - dispatcher.py: Ready signal -> routine task, retry policy
    - routines.py:   The seed routine and its signal payload
    - probe.py:      Polls endpoints and raises ready signals

Usage:
    from seeding import LifecycleDispatcher, SeedRoutine, ReadinessSignal
"""

from .generator import RecordGenerator
from .resolver import ConnectionResolver
from .ensurer import SchemaEnsurer
from .importer import ImportExecutor
from .lifecycle import ResourceLifecycle
from .routines import ReadinessSignal, SeedContext, SeedRoutine
from .dispatcher import LifecycleDispatcher
from .probe import ReadinessProbe

__all__ = [
    "RecordGenerator",
    "ConnectionResolver",
    "SchemaEnsurer",
    "ImportExecutor",
    "ResourceLifecycle",
    "ReadinessSignal",
    "SeedContext",
    "SeedRoutine",
    "LifecycleDispatcher",
    "ReadinessProbe",
]
