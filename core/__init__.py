"""
Core Seeding Components.

Contains the building blocks shared by every routine, separated from
the Azure SDK backends and from the routines themselves.

Structure:
    models/: Pure data structures (no business logic)
    logic/: Business logic separated from models
    errors.py: Error codes and exception hierarchy
    cancellation.py: Cooperative cancellation token
    topology.py: Topology declaration
    utils.py: Connection string + import path helpers
"""

from . import models
from . import logic

__all__ = [
    'models',
    'logic',
]
