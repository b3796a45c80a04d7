# ============================================================================
# LIFECYCLE DISPATCHER
# ============================================================================
# STATUS: Trigger - Ready signal -> routine invocation
# PURPOSE: Run each resource's bound routine at most once, concurrently
# CREATED: 17 OCT 2026
# ============================================================================
"""
Lifecycle Dispatcher.

Owns one ResourceLifecycle per declared resource and the routine bound
to it. A ready notification starts the routine as its own asyncio.Task;
routines for different resources run concurrently, a resource never
runs two. Nothing a routine does (returned failure or raised exception)
reaches the caller or another routine: it ends up in the resource's
RoutineResult and final state.

Retry policy:
    A routine that failed in the connect or ensure phase with a
    retryable error code is run again (IMPORTING -> READY -> IMPORTING)
    up to `max_retries` times. Import-phase outcomes are final, so no
    record is ever written twice for one ready signal.

Usage:
    dispatcher = LifecycleDispatcher(max_retries=2)
    dispatcher.bind(resource, routine)
    dispatcher.notify_ready(ReadinessSignal(resource, context))
    results = await dispatcher.wait_all()
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.cancellation import CancellationToken
from core.errors import SeedingError
from core.models import ResourceDescriptor, ResourceState, RoutineResult, SeedPhase
from util_logger import LoggerFactory, ComponentType

from .lifecycle import ResourceLifecycle
from .routines import ReadinessSignal, Routine

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "LifecycleDispatcher")

_RETRYABLE_PHASES = (SeedPhase.CONNECT, SeedPhase.ENSURE)


class LifecycleDispatcher:
    """
    Dispatches ready signals to bound routines.

    Args:
        max_retries: Extra attempts for retryable connect/ensure failures
        retry_delay_seconds: Pause before the first retry (doubled per attempt)
        log: Optional logger override
    """

    def __init__(
        self,
        max_retries: int = 0,
        retry_delay_seconds: float = 1.0,
        log: Optional[logging.Logger] = None,
    ):
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds
        self.logger = log or logger

        self._lifecycles: Dict[str, ResourceLifecycle] = {}
        self._routines: Dict[str, Routine] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._signals: Dict[str, ReadinessSignal] = {}
        self.results: Dict[str, RoutineResult] = {}
        # Run-level; probes still polling and later ready signals see it
        self.shutdown_token = CancellationToken()

    @property
    def is_shutting_down(self) -> bool:
        return self.shutdown_token.is_cancelled

    # ========================================================================
    # REGISTRATION
    # ========================================================================

    def register(self, resource: ResourceDescriptor) -> ResourceLifecycle:
        """Track a resource (idempotent)."""
        if resource.name not in self._lifecycles:
            self._lifecycles[resource.name] = ResourceLifecycle(resource)
        return self._lifecycles[resource.name]

    def bind(self, resource: ResourceDescriptor, routine: Routine) -> None:
        """
        Bind the routine run when `resource` becomes ready.

        Raises:
            ValueError: If a routine is already bound to the resource
        """
        self.register(resource)
        if resource.name in self._routines:
            raise ValueError(f"A routine is already bound to '{resource.name}'")
        self._routines[resource.name] = routine
        self.logger.debug(f"Bound routine to {resource.name}")

    def lifecycle(self, name: str) -> ResourceLifecycle:
        if name not in self._lifecycles:
            raise KeyError(f"Unknown resource: '{name}'")
        return self._lifecycles[name]

    def state(self, name: str) -> ResourceState:
        return self.lifecycle(name).state

    # ========================================================================
    # NOTIFICATIONS
    # ========================================================================

    def notify_provisioning(self, resource: ResourceDescriptor) -> None:
        self.register(resource).notify_provisioning()

    def notify_failed(self, resource: ResourceDescriptor, reason: str) -> None:
        """Provisioning never finished; the routine will not run."""
        self.register(resource).fail(reason)
        self.logger.error(f"{resource.name} failed before import: {reason}")

    def notify_ready(self, signal: ReadinessSignal) -> Optional[asyncio.Task]:
        """
        Handle a ready signal.

        Must be called from inside the running event loop.

        A signal for a resource with no bound routine leaves its state
        alone, so a later bind + ready still dispatches. After shutdown
        no routine starts and the resource ends FAILED.

        Returns:
            The routine task, or None when the signal is a duplicate, no
            routine is bound, or shutdown was requested
        """
        resource = signal.resource
        lifecycle = self.register(resource)

        if resource.name in self._tasks or lifecycle.is_terminal:
            self.logger.info(f"Duplicate ready signal for {resource.name}; routine not started")
            return None

        routine = self._routines.get(resource.name)
        if routine is None:
            self.logger.warning(f"{resource.name} is ready but has no bound routine")
            return None

        if self.is_shutting_down:
            reason = f"cancelled before dispatch: {self.shutdown_token.reason or 'shutdown'}"
            lifecycle.fail(reason)
            self.logger.warning(f"{resource.name} not dispatched: {reason}")
            return None

        if not lifecycle.notify_ready():
            self.logger.info(f"Duplicate ready signal for {resource.name}; routine not started")
            return None

        self._signals[resource.name] = signal
        task = asyncio.ensure_future(self._run(lifecycle, routine, signal))
        self._tasks[resource.name] = task
        self.logger.info(
            f"Dispatched routine for {resource.name}",
            extra={'custom_dimensions': {
                'resource_name': resource.name,
                'resource_kind': resource.kind.value,
                'correlation_id': signal.context.correlation_id,
            }}
        )
        return task

    # ========================================================================
    # EXECUTION
    # ========================================================================

    async def _run(self, lifecycle: ResourceLifecycle, routine: Routine, signal: ReadinessSignal) -> RoutineResult:
        attempts = 0
        while True:
            attempts += 1
            lifecycle.begin_import()
            result = await self._invoke(routine, signal)
            result.attempts = attempts

            if self._should_retry(result, attempts, signal):
                self.logger.warning(
                    f"Retrying {lifecycle.name} after {result.failed_phase.phase.value} failure "
                    f"(attempt {attempts}/{self.max_retries + 1}): {result.error}"
                )
                lifecycle.retry_ready()
                if await signal.cancel_token.sleep(self.retry_delay_seconds * (2 ** (attempts - 1))):
                    break
                continue
            break

        if result.success:
            lifecycle.complete()
            summary = result.summary
            self.logger.info(
                f"{lifecycle.name} completed: {summary.succeeded_count if summary else 0} written, "
                f"{summary.failed_count if summary else 0} failed"
            )
        else:
            lifecycle.fail(str(result.error))
            self.logger.error(f"{lifecycle.name} failed: {result.error}")

        result.final_state = lifecycle.state
        self.results[lifecycle.name] = result
        return result

    async def _invoke(self, routine: Routine, signal: ReadinessSignal) -> RoutineResult:
        try:
            return await routine(signal)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.exception(f"Routine for {signal.resource.name} raised {type(e).__name__}")
            return RoutineResult(
                resource_name=signal.resource.name,
                finished_at=datetime.now(timezone.utc),
                unhandled_error=e,
            )

    def _should_retry(self, result: RoutineResult, attempts: int, signal: ReadinessSignal) -> bool:
        if result.success or attempts > self.max_retries or signal.cancel_token.is_cancelled:
            return False
        failed = result.failed_phase
        if failed is None or failed.phase not in _RETRYABLE_PHASES:
            return False
        return isinstance(failed.error, SeedingError) and failed.error.retryable

    async def wait_all(self) -> Dict[str, RoutineResult]:
        """
        Wait for every dispatched routine.

        Routines cancelled through asyncio end FAILED without a result.
        """
        while True:
            pending = [t for t in self._tasks.values() if not t.done()]
            if not pending:
                break
            await asyncio.gather(*pending, return_exceptions=True)

        for name, task in self._tasks.items():
            if task.cancelled():
                lifecycle = self._lifecycles[name]
                if not lifecycle.is_terminal:
                    lifecycle.fail("routine task cancelled")
        return dict(self.results)

    def cancel_all(self, reason: str = "shutdown") -> None:
        """
        Request shutdown.

        Running routines stop starting new writes, probes stop polling
        and no further routine is dispatched.
        """
        if not self.is_shutting_down:
            self.logger.warning(f"Shutdown requested: {reason}")
        self.shutdown_token.cancel(reason)
        for name, signal in self._signals.items():
            if not self._tasks[name].done():
                signal.cancel_token.cancel(reason)

    async def shutdown(self, reason: str = "shutdown") -> Dict[str, RoutineResult]:
        self.cancel_all(reason)
        return await self.wait_all()

    # ========================================================================
    # REPORTING
    # ========================================================================

    def report(self) -> List[Dict[str, Any]]:
        """One entry per registered resource, in registration order."""
        entries = []
        for name, lifecycle in self._lifecycles.items():
            result = self.results.get(name)
            entries.append({
                "resource_name": name,
                "kind": lifecycle.resource.kind.value,
                "state": lifecycle.state.value,
                "failure_reason": lifecycle.failure_reason,
                "result": result.to_dict() if result else None,
            })
        return entries
