"""
Resource Lifecycle State Machine.

One ResourceLifecycle per declared resource. All transitions go through
`_transition`, which checks them against core.logic.transitions and
raises LifecycleTransitionError for anything else. The ready transition
is the only one that reports instead of raising: a second ready signal
is expected noise, not a bug.

    DECLARED -> PROVISIONING -> READY -> IMPORTING -> COMPLETED
         |            |           |          |
         +--> READY   +--> FAILED |          +--> FAILED
                                  |          +--> READY (retry)
                                  +--> FAILED (shutdown before dispatch)

DECLARED -> FAILED is also allowed for the same shutdown case.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from core.errors import LifecycleTransitionError
from core.logic import can_resource_transition, is_resource_terminal
from core.models import ResourceDescriptor, ResourceState
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "ResourceLifecycle")


class ResourceLifecycle:
    """
    Explicit state machine for one resource.

    Not thread safe; owned by the dispatcher's event loop.
    """

    def __init__(self, resource: ResourceDescriptor, log: Optional[logging.Logger] = None):
        self.resource = resource
        self.state = ResourceState.DECLARED
        self.history: List[Tuple[ResourceState, datetime]] = [(self.state, datetime.now(timezone.utc))]
        self.failure_reason: Optional[str] = None
        self.logger = log or logger

    @property
    def name(self) -> str:
        return self.resource.name

    @property
    def is_terminal(self) -> bool:
        return is_resource_terminal(self.state)

    def can_transition(self, target: ResourceState) -> bool:
        return can_resource_transition(self.state, target)

    def _transition(self, target: ResourceState) -> None:
        if not can_resource_transition(self.state, target):
            raise LifecycleTransitionError(
                f"Invalid transition {self.state.value} -> {target.value}",
                resource_name=self.name,
            )
        self.logger.debug(f"{self.name}: {self.state.value} -> {target.value}")
        self.state = target
        self.history.append((target, datetime.now(timezone.utc)))

    def notify_provisioning(self) -> None:
        self._transition(ResourceState.PROVISIONING)

    def notify_ready(self) -> bool:
        """
        Move to READY.

        Returns:
            True if the resource just became ready, False if the signal is
            a duplicate (already ready, importing or finished)
        """
        if not self.can_transition(ResourceState.READY) or self.state == ResourceState.IMPORTING:
            self.logger.info(f"Ignoring ready signal for {self.name} in state {self.state.value}")
            return False
        self._transition(ResourceState.READY)
        return True

    def begin_import(self) -> None:
        self._transition(ResourceState.IMPORTING)

    def retry_ready(self) -> None:
        """IMPORTING -> READY, only used for a retry before any write happened."""
        if self.state != ResourceState.IMPORTING:
            raise LifecycleTransitionError(
                f"Retry requires state importing, got {self.state.value}",
                resource_name=self.name,
            )
        self._transition(ResourceState.READY)

    def complete(self) -> None:
        self._transition(ResourceState.COMPLETED)

    def fail(self, reason: Optional[str] = None) -> None:
        self._transition(ResourceState.FAILED)
        self.failure_reason = reason

    def __repr__(self) -> str:
        return f"ResourceLifecycle({self.name!r}, state={self.state.value})"
