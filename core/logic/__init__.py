"""
Core Business Logic Package.

Contains business logic that operates on pure data models.
Separated from models to maintain clean architecture.

Exports:
    State transitions: can_resource_transition, is_resource_terminal
"""

from .transitions import (
    can_resource_transition,
    get_resource_terminal_states,
    get_resource_active_states,
    is_resource_terminal
)

__all__ = [
    'can_resource_transition',
    'get_resource_terminal_states',
    'get_resource_active_states',
    'is_resource_terminal',
]
