"""
Readiness Probe.

Local stand-in for the hosting runtime's "resource ready" event. For
each namespace resource it marks the resource PROVISIONING, polls the
resource's backend until the account endpoint answers, and then raises
the ready signal on the dispatcher. A resource whose endpoint never
answers within the timeout ends FAILED and its routine never runs.

Emulators commonly take tens of seconds to accept connections after
their container starts, hence the polling.
"""

import asyncio
import logging
import time
from typing import Dict, Optional

from core.errors import ErrorCode, SeedingError
from core.models import ResourceDescriptor, ResourceKind
from infrastructure.interface_repository import NamespaceBackend
from util_logger import LoggerFactory, ComponentType

from .dispatcher import LifecycleDispatcher
from .resolver import ConnectionResolver
from .routines import ReadinessSignal, SeedContext

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "ReadinessProbe")


class ReadinessProbe:
    """
    Polls resources until reachable, then signals readiness.

    Args:
        dispatcher: Receives provisioning / ready / failed notifications
        backends: ResourceKind -> NamespaceBackend (used for ping)
        resolver: Resolves the target to ping
        timeout_seconds: Give up after this long
        poll_interval_seconds: Pause between pings
    """

    def __init__(
        self,
        dispatcher: LifecycleDispatcher,
        backends: Dict[ResourceKind, NamespaceBackend],
        resolver: Optional[ConnectionResolver] = None,
        timeout_seconds: float = 120.0,
        poll_interval_seconds: float = 2.0,
        log: Optional[logging.Logger] = None,
    ):
        self.dispatcher = dispatcher
        self.backends = backends
        self.resolver = resolver or ConnectionResolver()
        self.timeout_seconds = timeout_seconds
        self.poll_interval_seconds = poll_interval_seconds
        self.logger = log or logger

    async def probe(self, resource: ResourceDescriptor, context: SeedContext) -> Optional[asyncio.Task]:
        """
        Probe one resource and signal it ready.

        Polling stops as soon as the dispatcher's shutdown token fires;
        the resource then ends FAILED without dispatch.

        Returns:
            The routine task started by the dispatcher, or None
        """
        self.dispatcher.notify_provisioning(resource)
        signal = ReadinessSignal(resource=resource, context=context)
        backend = self.backends.get(resource.kind)
        if backend is None:
            self.dispatcher.notify_failed(resource, f"No backend for {resource.kind.value}")
            return None

        shutdown = self.dispatcher.shutdown_token
        deadline = time.monotonic() + self.timeout_seconds
        attempt = 0
        last_error: Optional[str] = None

        while True:
            if shutdown.is_cancelled:
                return self._cancelled(resource, attempt)
            attempt += 1
            try:
                target = await self.resolver.resolve(resource, shutdown)
                await shutdown.guard(backend.ping(target), resource_name=resource.name, phase="probe")
                break
            except SeedingError as e:
                if shutdown.is_cancelled:
                    return self._cancelled(resource, attempt)
                if not e.retryable:
                    self.dispatcher.notify_failed(resource, str(e))
                    return None
                last_error = str(e)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                last_error = f"{type(e).__name__}: {e}"

            if time.monotonic() + self.poll_interval_seconds > deadline:
                reason = (
                    f"{ErrorCode.READINESS_TIMEOUT.value}: {resource.name} not reachable after "
                    f"{self.timeout_seconds}s ({attempt} attempts); last error: {last_error}"
                )
                self.dispatcher.notify_failed(resource, reason)
                return None

            self.logger.debug(f"{resource.name} not ready (attempt {attempt}): {last_error}")
            await shutdown.sleep(self.poll_interval_seconds)

        self.logger.info(f"{resource.name} reachable after {attempt} attempt(s)")
        return self.dispatcher.notify_ready(signal)

    def _cancelled(self, resource: ResourceDescriptor, attempt: int) -> None:
        reason = f"cancelled before dispatch: {self.dispatcher.shutdown_token.reason or 'shutdown'}"
        self.logger.warning(f"Stopped probing {resource.name} after {attempt} attempt(s)")
        self.dispatcher.notify_failed(resource, reason)
        return None

    async def probe_all(self, resources, context: SeedContext) -> Dict[str, Optional[asyncio.Task]]:
        """Probe resources concurrently."""
        resources = list(resources)
        tasks = await asyncio.gather(*(self.probe(r, context) for r in resources))
        return {r.name: t for r, t in zip(resources, tasks)}
