"""
Schema Ensurer.

Idempotently creates the namespace a routine writes into. The actual
create calls live in per-kind backends (infrastructure/); the ensurer
picks the backend, races it against the routine's cancellation token
and makes sure every failure surfaces as a NamespaceEnsureError.

Exports:
    SchemaEnsurer: Ensure phase of every seed routine
"""

import asyncio
import logging
import time
from typing import Dict, Optional

from core.cancellation import CancellationToken
from core.errors import (
    CancellationError,
    ErrorCode,
    NamespaceEnsureError,
    SeedingError,
)
from core.models import ConnectionTarget, NamespaceSpec, ResourceKind, SeedPhase
from infrastructure.interface_repository import NamespaceBackend, NamespaceHandle
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "SchemaEnsurer")


class SchemaEnsurer:
    """
    Ensures namespaces through a registry of backends keyed by kind.

    Args:
        backends: ResourceKind -> NamespaceBackend
        log: Optional logger override
    """

    def __init__(self, backends: Dict[ResourceKind, NamespaceBackend], log: Optional[logging.Logger] = None):
        self.backends = dict(backends)
        self.logger = log or logger

    def backend_for(self, kind: ResourceKind) -> NamespaceBackend:
        backend = self.backends.get(kind)
        if backend is None:
            raise NamespaceEnsureError(
                f"No namespace backend registered for {kind.value}",
                error_code=ErrorCode.NAMESPACE_UNSUPPORTED,
            )
        return backend

    async def ensure(
        self,
        target: ConnectionTarget,
        spec: NamespaceSpec,
        cancel_token: Optional[CancellationToken] = None,
    ) -> NamespaceHandle:
        """
        Create `spec` if absent and return a handle to it.

        Calling this twice for the same spec leaves exactly one namespace.

        Raises:
            NamespaceEnsureError: Any failure, cancellation included
        """
        phase = SeedPhase.ENSURE.value
        cancel_token = cancel_token or CancellationToken()
        start_time = time.time()

        try:
            backend = self.backend_for(spec.kind)
        except NamespaceEnsureError as e:
            e.resource_name = spec.resource_name
            raise

        try:
            handle = await cancel_token.guard(
                backend.ensure(target, spec),
                resource_name=spec.resource_name,
                phase=phase,
            )
        except CancellationError as e:
            raise NamespaceEnsureError(
                f"Cancelled while ensuring '{spec.qualified_name}'",
                resource_name=spec.resource_name,
                error_code=ErrorCode.CANCELLED,
            ) from e
        except NamespaceEnsureError:
            raise
        except SeedingError as e:
            raise NamespaceEnsureError(
                e.message,
                resource_name=spec.resource_name,
                error_code=e.error_code,
            ) from e
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise NamespaceEnsureError(
                f"Could not ensure '{spec.qualified_name}': {type(e).__name__}: {e}",
                resource_name=spec.resource_name,
            ) from e

        duration_ms = int((time.time() - start_time) * 1000)
        self.logger.info(
            f"Ensured {spec.kind.value} '{spec.qualified_name}' in {duration_ms}ms",
            extra={'custom_dimensions': {
                'resource_name': spec.resource_name,
                'phase': phase,
                'namespace': spec.qualified_name,
                'duration_ms': duration_ms,
            }}
        )
        return handle
