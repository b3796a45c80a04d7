# ============================================================================
# SEED ROUTINES
# ============================================================================
# STATUS: Service - Per-resource import routine
# PURPOSE: resolve -> ensure -> generate -> import, one typed outcome per phase
# CREATED: 17 OCT 2026
# ============================================================================
"""
Seed Routines.

A routine is what the dispatcher runs when a resource signals
readiness. It never raises for expected failures: each phase returns a
PhaseOutcome and the routine stops at the first failed one. The
dispatcher decides what to do with the RoutineResult (retry, complete,
fail).

    connect  ConnectionResolver.resolve       -> ConnectionTarget
    ensure   SchemaEnsurer.ensure             -> NamespaceHandle
    import   RecordGenerator + ImportExecutor -> ImportSummary

The same routine serves document containers, blob containers and
queues; the ensurer's backend registry supplies the kind-specific part.

Exports:
    SeedContext: Host facts every routine needs
    ReadinessSignal: Payload delivered with a ready notification
    SeedRoutine: The routine
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from functools import cached_property
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from config import AppConfig
from core.cancellation import CancellationToken
from core.errors import ErrorCode, NamespaceEnsureError, SeedingError
from core.models import (
    NamespaceSpec,
    PhaseOutcome,
    ResourceDescriptor,
    RoutineResult,
    SeedPhase,
)
from core.utils import resolve_import_path
from util_logger import LoggerFactory, ComponentType

from .ensurer import SchemaEnsurer
from .generator import RecordGenerator
from .importer import ImportExecutor
from .resolver import ConnectionResolver


@dataclass(frozen=True)
class SeedContext:
    """
    Host facts shared by every routine of one run.

    `import_path` is the import source location; it becomes the partition
    key of every record written in the run.
    """

    content_root: str
    environment_name: str
    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])

    @cached_property
    def import_path(self) -> str:
        """Resolved (and created) on first access, then reused."""
        return str(resolve_import_path(self.content_root, self.environment_name))

    @classmethod
    def from_config(cls, config: AppConfig) -> "SeedContext":
        return cls(
            content_root=config.seeding.content_root,
            environment_name=config.environment,
        )


@dataclass
class ReadinessSignal:
    """Ready notification for one resource."""

    resource: ResourceDescriptor
    context: SeedContext
    cancel_token: CancellationToken = field(default_factory=CancellationToken)


Routine = Callable[[ReadinessSignal], Awaitable[RoutineResult]]


class SeedRoutine:
    """
    Seeds one namespace resource with a batch of generated records.

    All collaborators are injected; `from_config` wires the defaults.
    """

    def __init__(
        self,
        resolver: ConnectionResolver,
        ensurer: SchemaEnsurer,
        importer: ImportExecutor,
        generator: RecordGenerator,
        record_count: int,
        log: Optional[logging.Logger] = None,
    ):
        if record_count < 1:
            raise ValueError(f"record_count must be >= 1, got {record_count}")
        self.resolver = resolver
        self.ensurer = ensurer
        self.importer = importer
        self.generator = generator
        self.record_count = record_count
        self._log_override = log

    @classmethod
    def from_config(cls, config: AppConfig, ensurer: SchemaEnsurer) -> "SeedRoutine":
        seeding = config.seeding
        return cls(
            resolver=ConnectionResolver(),
            ensurer=ensurer,
            importer=ImportExecutor(imported_by=seeding.imported_by),
            generator=RecordGenerator(locale=seeding.faker_locale, seed=seeding.faker_seed),
            record_count=seeding.record_count,
        )

    async def __call__(self, signal: ReadinessSignal) -> RoutineResult:
        resource = signal.resource
        token = signal.cancel_token
        result = RoutineResult(resource_name=resource.name)
        partition_key = signal.context.import_path

        log = self._logger_for(resource)
        log.info(
            f"Seeding {resource.kind.value} '{resource.name}' with {self.record_count} records "
            f"from {partition_key}",
            extra={'custom_dimensions': {
                'resource_name': resource.name,
                'resource_kind': resource.kind.value,
                'correlation_id': signal.context.correlation_id,
            }}
        )

        # connect
        outcome = await self._phase(SeedPhase.CONNECT, self.resolver.resolve(resource, token), log, resource.name)
        result.phases.append(outcome)
        if not outcome.success:
            return self._finish(result)
        target = outcome.value

        # ensure
        try:
            spec = NamespaceSpec.from_descriptor(resource)
        except ValueError as e:
            result.phases.append(PhaseOutcome.fail(SeedPhase.ENSURE, NamespaceEnsureError(
                str(e), resource_name=resource.name, error_code=ErrorCode.TOPOLOGY_INCOMPLETE,
            )))
            return self._finish(result)

        outcome = await self._phase(SeedPhase.ENSURE, self.ensurer.ensure(target, spec, token), log, resource.name)
        result.phases.append(outcome)
        if not outcome.success:
            return self._finish(result)

        # import
        async with outcome.value as namespace:
            records = self.generator.generate(self.record_count)
            outcome = await self._phase(
                SeedPhase.IMPORT,
                self.importer.import_all(namespace, records, partition_key, token),
                log,
                resource.name,
            )
        if outcome.success:
            result.summary = outcome.value
            if result.summary.aborted is not None:
                # Written items stay in the summary; the phase still fails
                outcome = PhaseOutcome.fail(SeedPhase.IMPORT, result.summary.aborted, outcome.duration_ms)
        result.phases.append(outcome)
        return self._finish(result)

    async def _phase(
        self, phase: SeedPhase, awaitable: Awaitable, log: logging.Logger, resource_name: str
    ) -> PhaseOutcome:
        start_time = time.time()
        try:
            value = await awaitable
        except SeedingError as e:
            duration_ms = int((time.time() - start_time) * 1000)
            log.error(
                f"Phase {phase.value} failed: {e}",
                extra={'custom_dimensions': {**e.to_dict(), 'duration_ms': duration_ms}}
            )
            return PhaseOutcome.fail(phase, e, duration_ms)
        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            error = SeedingError(
                f"{type(e).__name__}: {e}",
                resource_name=resource_name,
                phase=phase.value,
                error_code=ErrorCode.UNEXPECTED_ERROR,
            )
            error.__cause__ = e
            log.exception(
                f"Phase {phase.value} raised {type(e).__name__}",
                extra={'custom_dimensions': {**error.to_dict(), 'duration_ms': duration_ms}}
            )
            return PhaseOutcome.fail(phase, error, duration_ms)
        return PhaseOutcome.ok(phase, value, int((time.time() - start_time) * 1000))

    def _logger_for(self, resource: ResourceDescriptor) -> logging.Logger:
        """Logger whose lines carry the resource; an injected logger wins."""
        if self._log_override is not None:
            return self._log_override
        return LoggerFactory.create_with_context(
            ComponentType.SERVICE,
            "SeedRoutine",
            resource_name=resource.name,
            resource_kind=resource.kind.value,
        )

    def _finish(self, result: RoutineResult) -> RoutineResult:
        result.finished_at = datetime.now(timezone.utc)
        return result
