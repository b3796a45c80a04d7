"""
State Transition Logic for Resource Lifecycles.

Contains business rules for valid resource state transitions.
Separated from data models for clean architecture.

Exports:
    can_resource_transition: Check if a resource state transition is valid
    get_resource_terminal_states: Terminal states
    get_resource_active_states: Non-terminal states
    is_resource_terminal: Check if a resource is in a terminal state

Dependencies:
    core.models.enums: ResourceState
"""

from typing import List

from ..models.enums import ResourceState


def can_resource_transition(current: ResourceState, target: ResourceState) -> bool:
    """
    Check if a resource can transition from current to target state.

    Unlike job statuses, re-entering the same state is NOT a no-op:
    READY -> READY would mean a second ready signal, which must not
    start a second import.

    Args:
        current: Current resource state
        target: Target resource state

    Returns:
        True if transition is valid, False otherwise
    """
    transitions = {
        # -> FAILED before IMPORTING only when shutdown stops the dispatch
        ResourceState.DECLARED: [
            ResourceState.PROVISIONING,
            ResourceState.READY,
            ResourceState.FAILED
        ],
        ResourceState.PROVISIONING: [ResourceState.READY, ResourceState.FAILED],
        ResourceState.READY: [ResourceState.IMPORTING, ResourceState.FAILED],
        # IMPORTING -> READY only for a retry before any write happened
        ResourceState.IMPORTING: [
            ResourceState.COMPLETED,
            ResourceState.FAILED,
            ResourceState.READY
        ],
        ResourceState.COMPLETED: [],  # Terminal state
        ResourceState.FAILED: []  # Terminal state
    }

    return target in transitions.get(current, [])


def get_resource_terminal_states() -> List[ResourceState]:
    """
    Get list of terminal states for resources.

    Returns:
        List of terminal resource states
    """
    return [
        ResourceState.COMPLETED,
        ResourceState.FAILED
    ]


def get_resource_active_states() -> List[ResourceState]:
    """
    Get list of active (non-terminal) states for resources.

    Returns:
        List of active resource states
    """
    return [
        ResourceState.DECLARED,
        ResourceState.PROVISIONING,
        ResourceState.READY,
        ResourceState.IMPORTING
    ]


def is_resource_terminal(state: ResourceState) -> bool:
    """Check if a resource state is terminal."""
    return state in get_resource_terminal_states()
