"""
SchemaEnsurer: idempotence, ordering, backend selection, error wrapping.
"""

import asyncio

import pytest

from core.cancellation import CancellationToken
from core.errors import ConnectionResolutionError, ErrorCode, NamespaceEnsureError
from core.models import NamespaceSpec, ResourceKind
from seeding import ConnectionResolver, SchemaEnsurer
from tests.factories.model_factories import make_cosmos_topology, make_storage_topology


async def _cosmos_target_and_spec(cancel_token):
    _, container = make_cosmos_topology(emulator=True)
    target = await ConnectionResolver().resolve(container, cancel_token)
    return target, NamespaceSpec.from_descriptor(container)


class TestEnsure:
    async def test_database_created_before_container(self, backends, store, cancel_token):
        target, spec = await _cosmos_target_and_spec(cancel_token)
        handle = await SchemaEnsurer(backends).ensure(target, spec, cancel_token)
        assert store.create_calls == [f"database:{spec.database_name}", f"namespace:{spec.qualified_name}"]
        assert handle.name == spec.qualified_name

    async def test_idempotent(self, backends, store, cancel_token):
        target, spec = await _cosmos_target_and_spec(cancel_token)
        ensurer = SchemaEnsurer(backends)
        await ensurer.ensure(target, spec, cancel_token)
        await ensurer.ensure(target, spec, cancel_token)
        assert len(store.create_calls) == 2
        assert list(store.namespaces) == [spec.qualified_name]

    async def test_concurrent_ensures_leave_one_namespace(self, backends, store, cancel_token):
        target, spec = await _cosmos_target_and_spec(cancel_token)
        ensurer = SchemaEnsurer(backends)
        await asyncio.gather(*(ensurer.ensure(target, spec, cancel_token) for _ in range(5)))
        assert list(store.namespaces) == [spec.qualified_name]

    async def test_routes_by_kind(self, backends, cancel_token):
        _, blob, queue = make_storage_topology(emulator=True)
        ensurer = SchemaEnsurer(backends)
        for resource in (blob, queue):
            target = await ConnectionResolver().resolve(resource, cancel_token)
            await ensurer.ensure(target, NamespaceSpec.from_descriptor(resource), cancel_token)
        assert backends[ResourceKind.BLOB_CONTAINER].ensure_calls == 1
        assert backends[ResourceKind.QUEUE].ensure_calls == 1
        assert backends[ResourceKind.COSMOS_CONTAINER].ensure_calls == 0

    async def test_token_optional(self, backends, cancel_token):
        target, spec = await _cosmos_target_and_spec(cancel_token)
        handle = await SchemaEnsurer(backends).ensure(target, spec)
        assert handle.spec == spec


class TestEnsureErrors:
    async def test_unsupported_kind(self, backends, cancel_token):
        target, spec = await _cosmos_target_and_spec(cancel_token)
        del backends[ResourceKind.COSMOS_CONTAINER]
        with pytest.raises(NamespaceEnsureError) as exc_info:
            await SchemaEnsurer(backends).ensure(target, spec, cancel_token)
        assert exc_info.value.error_code == ErrorCode.NAMESPACE_UNSUPPORTED
        assert exc_info.value.resource_name == spec.resource_name

    async def test_backend_ensure_error_passes_through(self, backends, cancel_token):
        target, spec = await _cosmos_target_and_spec(cancel_token)
        backend = backends[ResourceKind.COSMOS_CONTAINER]
        backend.ensure_failures = 1
        backend.ensure_error_code = ErrorCode.THROTTLED
        with pytest.raises(NamespaceEnsureError) as exc_info:
            await SchemaEnsurer(backends).ensure(target, spec, cancel_token)
        assert exc_info.value.error_code == ErrorCode.THROTTLED
        assert exc_info.value.retryable

    async def test_other_seeding_error_rewrapped_with_code(self, backends, cancel_token):
        target, spec = await _cosmos_target_and_spec(cancel_token)

        async def failing_ensure(target, spec):
            raise ConnectionResolutionError("lost", error_code=ErrorCode.AUTHORIZATION_FAILED)

        backends[ResourceKind.COSMOS_CONTAINER].ensure = failing_ensure
        with pytest.raises(NamespaceEnsureError) as exc_info:
            await SchemaEnsurer(backends).ensure(target, spec, cancel_token)
        assert exc_info.value.error_code == ErrorCode.AUTHORIZATION_FAILED
        assert isinstance(exc_info.value.__cause__, ConnectionResolutionError)

    async def test_unexpected_exception_wrapped(self, backends, cancel_token):
        target, spec = await _cosmos_target_and_spec(cancel_token)

        async def failing_ensure(target, spec):
            raise OSError("socket closed")

        backends[ResourceKind.COSMOS_CONTAINER].ensure = failing_ensure
        with pytest.raises(NamespaceEnsureError) as exc_info:
            await SchemaEnsurer(backends).ensure(target, spec, cancel_token)
        assert exc_info.value.error_code == ErrorCode.CONTAINER_ENSURE_FAILED
        assert "OSError" in exc_info.value.message

    async def test_cancelled_while_ensuring(self, backends, store, cancel_token):
        target, spec = await _cosmos_target_and_spec(cancel_token)
        backends[ResourceKind.COSMOS_CONTAINER].ensure_delay = 30
        token = CancellationToken()
        task = asyncio.ensure_future(SchemaEnsurer(backends).ensure(target, spec, token))
        await asyncio.sleep(0.01)
        token.cancel("shutdown")
        with pytest.raises(NamespaceEnsureError) as exc_info:
            await asyncio.wait_for(task, timeout=2)
        assert exc_info.value.error_code == ErrorCode.CANCELLED
        assert store.namespaces == {}
