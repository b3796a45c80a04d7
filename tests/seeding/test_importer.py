"""
ImportExecutor: per-item isolation, cancellation between writes, stamping.
"""

from datetime import datetime, timezone

import pytest

from core.cancellation import CancellationToken
from core.errors import ErrorCode, ItemWriteError
from core.models import NamespaceSpec, ResourceKind
from seeding import ImportExecutor
from tests.factories.model_factories import make_records
from tests.fakes import InMemoryBackend, InMemoryHandle

FIXED_NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)
PARTITION_KEY = "/content/test/import"


@pytest.fixture
def backend(store):
    return InMemoryBackend(ResourceKind.COSMOS_CONTAINER, store)


@pytest.fixture
def handle(backend):
    spec = NamespaceSpec(
        kind=ResourceKind.COSMOS_CONTAINER,
        resource_name="cdbimport",
        namespace_name="cdbimport",
        database_name="appimport",
        partition_key_path="/filePath",
    )
    return InMemoryHandle(spec, backend)


def _executor(**kwargs):
    kwargs.setdefault("imported_by", "importer-host")
    kwargs.setdefault("clock", lambda: FIXED_NOW)
    return ImportExecutor(**kwargs)


class TestImportAll:
    async def test_all_records_written(self, handle, store, cancel_token):
        summary = await _executor().import_all(handle, make_records(10), PARTITION_KEY, cancel_token)
        assert summary.succeeded_count == 10
        assert summary.failed_count == 0
        assert not summary.cancelled
        assert len(store.items(handle.name)) == 10

    async def test_ids_unique_and_in_write_order(self, handle, store, cancel_token):
        summary = await _executor().import_all(handle, make_records(8), PARTITION_KEY, cancel_token)
        assert len(set(summary.succeeded)) == 8
        assert store.write_order == [f"{handle.name}:{item_id}" for item_id in summary.succeeded]

    async def test_documents_stamped(self, handle, store, cancel_token):
        records = make_records(3)
        summary = await _executor().import_all(handle, records, PARTITION_KEY, cancel_token)
        for record, item_id in zip(records, summary.succeeded):
            document = store.items(handle.name)[item_id]
            assert document["id"] == item_id
            assert document["filePath"] == PARTITION_KEY
            assert document["_partition_key"] == PARTITION_KEY
            assert document["importedBy"] == "importer-host"
            assert document["importedOn"].startswith("2026-10-17T12:00:00")
            assert document["title"] == record.title

    async def test_generated_records_not_mutated(self, handle, cancel_token):
        records = make_records(2)
        await _executor().import_all(handle, records, PARTITION_KEY, cancel_token)
        assert all(r.imported_by is None for r in records)

    async def test_one_failure_does_not_stop_batch(self, handle, backend, store, cancel_token):
        backend.fail_writes_at = {3}
        records = make_records(6)
        summary = await _executor().import_all(handle, records, PARTITION_KEY, cancel_token)
        assert summary.succeeded_count == 5
        assert summary.failed_count == 1
        failed = summary.failed[0]
        assert failed.record is records[2]
        assert isinstance(failed.cause, ItemWriteError)
        assert failed.cause.error_code == ErrorCode.ITEM_WRITE_FAILED
        assert failed.cause.record_id == failed.item_id
        assert failed.item_id not in store.items(handle.name)

    async def test_duplicate_id_reported_per_item(self, handle, store, cancel_token):
        ids = iter(["same", "same", "other"])
        summary = await _executor(id_factory=lambda: next(ids)).import_all(
            handle, make_records(3), PARTITION_KEY, cancel_token
        )
        assert summary.succeeded == ["same", "other"]
        assert summary.failed_count == 1

    async def test_status_code_classified(self, handle, backend, cancel_token):
        class ThrottledError(Exception):
            status_code = 429

        def raise_throttled(item_id, body):
            raise ThrottledError("too many requests")

        backend.on_write = raise_throttled
        summary = await _executor().import_all(handle, make_records(2), PARTITION_KEY, cancel_token)
        assert summary.failed_count == 2
        assert all(f.cause.error_code == ErrorCode.THROTTLED for f in summary.failed)
        assert isinstance(summary.failed[0].cause.__cause__, ThrottledError)

    async def test_empty_input(self, handle, cancel_token):
        summary = await _executor().import_all(handle, [], PARTITION_KEY, cancel_token)
        assert summary.attempted_count == 0
        assert not summary.cancelled

    async def test_record_source_failure_stops_batch(self, handle, store, cancel_token):
        def records():
            yield from make_records(3)
            raise ValueError("title too long")

        summary = await _executor().import_all(handle, records(), PARTITION_KEY, cancel_token)

        assert summary.succeeded_count == 3
        assert summary.failed_count == 0
        assert isinstance(summary.aborted, ItemWriteError)
        assert summary.aborted.error_code == ErrorCode.RECORD_SOURCE_FAILED
        assert not summary.aborted.retryable
        assert isinstance(summary.aborted.__cause__, ValueError)
        assert summary.to_dict()["aborted"].endswith("ValueError: title too long")
        assert len(store.items(handle.name)) == 3


class TestCancellation:
    async def test_cancelled_before_first_write(self, handle, backend, store):
        token = CancellationToken()
        token.cancel("shutdown")
        summary = await _executor().import_all(handle, make_records(5), PARTITION_KEY, token)
        assert summary.cancelled
        assert summary.attempted_count == 0
        assert backend.write_attempts == 0
        assert store.items(handle.name) == {}

    async def test_cancel_mid_batch_stops_after_in_flight_write(self, handle, backend, store):
        token = CancellationToken()

        def cancel_on_third(item_id, body):
            if backend.write_attempts == 3:
                token.cancel("shutdown")

        backend.on_write = cancel_on_third
        summary = await _executor().import_all(handle, make_records(10), PARTITION_KEY, token)
        assert summary.cancelled
        assert summary.succeeded_count == 3
        assert backend.write_attempts == 3

    async def test_records_consumed_lazily(self, handle):
        token = CancellationToken()
        produced = []

        def records():
            for record in make_records(5):
                produced.append(record)
                if len(produced) == 2:
                    token.cancel("stop")
                yield record

        await _executor().import_all(handle, records(), PARTITION_KEY, token)
        assert len(produced) == 2
