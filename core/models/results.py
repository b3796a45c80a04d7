"""
Execution Result Data Models.

Represents the outcome of an import batch, of each routine phase and of
a whole routine. No business logic - pure data structures.

Exports:
    FailedItem: One record that could not be written
    ImportSummary: Result of one import batch
    PhaseOutcome: Typed result of one routine phase
    RoutineResult: Result of one routine invocation
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .enums import ResourceState, SeedPhase
from .records import ResourceItem


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class FailedItem:
    """A record whose write raised, with the cause."""

    record: ResourceItem
    cause: Exception
    item_id: Optional[str] = None


@dataclass
class ImportSummary:
    """
    Result of one import batch.

    `succeeded` holds the ids of written items in write order.
    """

    succeeded: List[str] = field(default_factory=list)
    failed: List[FailedItem] = field(default_factory=list)
    cancelled: bool = False
    # Set when the record source raised and the batch stopped early
    aborted: Optional[Exception] = None

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def attempted_count(self) -> int:
        return self.succeeded_count + self.failed_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": self.succeeded_count,
            "failed": self.failed_count,
            "cancelled": self.cancelled,
            "aborted": str(self.aborted) if self.aborted is not None else None,
            "failures": [
                {
                    "item_id": f.item_id,
                    "title": f.record.title,
                    "error_type": type(f.cause).__name__,
                    "error": str(f.cause),
                }
                for f in self.failed
            ],
        }


@dataclass
class PhaseOutcome:
    """
    Typed result of one routine phase.

    Exactly one of `value` / `error` is meaningful, according to `success`.
    """

    phase: SeedPhase
    success: bool
    value: Any = None
    error: Optional[Exception] = None
    duration_ms: int = 0

    @classmethod
    def ok(cls, phase: SeedPhase, value: Any = None, duration_ms: int = 0) -> "PhaseOutcome":
        return cls(phase=phase, success=True, value=value, duration_ms=duration_ms)

    @classmethod
    def fail(cls, phase: SeedPhase, error: Exception, duration_ms: int = 0) -> "PhaseOutcome":
        return cls(phase=phase, success=False, error=error, duration_ms=duration_ms)


@dataclass
class RoutineResult:
    """
    Result of one routine invocation for one resource.

    A routine that completed with per-item failures is still a success;
    only connect / ensure errors, a record source that raised mid-batch
    or an escaped exception make it fail.
    """

    resource_name: str
    phases: List[PhaseOutcome] = field(default_factory=list)
    summary: Optional[ImportSummary] = None
    attempts: int = 1
    final_state: Optional[ResourceState] = None
    started_at: datetime = field(default_factory=_utc_now)
    finished_at: Optional[datetime] = None
    # Exception that escaped the routine itself (no phase to pin it on)
    unhandled_error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        if self.unhandled_error is not None:
            return False
        return bool(self.phases) and all(p.success for p in self.phases)

    @property
    def failed_phase(self) -> Optional[PhaseOutcome]:
        for phase in self.phases:
            if not phase.success:
                return phase
        return None

    @property
    def error(self) -> Optional[Exception]:
        if self.unhandled_error is not None:
            return self.unhandled_error
        failed = self.failed_phase
        return failed.error if failed else None

    def to_dict(self) -> Dict[str, Any]:
        error = self.error
        return {
            "resource_name": self.resource_name,
            "success": self.success,
            "state": self.final_state.value if self.final_state else None,
            "attempts": self.attempts,
            "phases": [
                {"phase": p.phase.value, "success": p.success, "duration_ms": p.duration_ms}
                for p in self.phases
            ],
            "summary": self.summary.to_dict() if self.summary else None,
            "error": (error.to_dict() if hasattr(error, "to_dict")
                      else {"error_type": type(error).__name__, "message": str(error)}) if error else None,
        }
