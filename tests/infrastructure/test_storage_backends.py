"""
Blob container and queue backends against mocked async service clients.
"""

import base64
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core.exceptions import HttpResponseError, ResourceExistsError

from core.errors import ErrorCode, NamespaceEnsureError
from core.models import ConnectionTarget, NamespaceSpec, ResourceKind, TransportMode
from infrastructure.blob import BlobNamespaceBackend, storage_client_args
from infrastructure.queue import MAX_MESSAGE_BYTES, QueueNamespaceBackend

AZURITE_STRING = (
    "DefaultEndpointsProtocol=http;AccountName=devstoreaccount1;AccountKey=ZGV2a2V5;"
    "BlobEndpoint=http://127.0.0.1:10000/devstoreaccount1;"
)
PARTITION_KEY = "/content/test/import"


def _target(kind=ResourceKind.BLOB_CONTAINER, **overrides):
    data = dict(
        resource_name="sabimport",
        account_name="azstorage",
        kind=kind,
        endpoint="http://127.0.0.1:10000/devstoreaccount1",
        connection_string=AZURITE_STRING,
        account_key="ZGV2a2V5",
        credential_name="devstoreaccount1",
        transport_mode=TransportMode.GATEWAY,
        verify_certificate=False,
        limit_to_endpoint=True,
        is_emulator=True,
    )
    data.update(overrides)
    return ConnectionTarget(**data)


def _spec(kind, name):
    return NamespaceSpec(kind=kind, resource_name=name, namespace_name=name)


def _http_error(status_code):
    error = HttpResponseError(message=f"status {status_code}")
    error.status_code = status_code
    return error


@pytest.fixture
def blob_service():
    container = MagicMock()
    container.create_container = AsyncMock()
    container.upload_blob = AsyncMock()
    service = MagicMock()
    service.get_container_client.return_value = container
    service.get_service_properties = AsyncMock(return_value={})
    service.close = AsyncMock()
    service.container = container
    return service


@pytest.fixture
def queue_service():
    queue = MagicMock()
    queue.create_queue = AsyncMock()
    queue.send_message = AsyncMock()
    service = MagicMock()
    service.get_queue_client.return_value = queue
    service.get_service_properties = AsyncMock(return_value={})
    service.close = AsyncMock()
    service.queue = queue
    return service


class TestStorageClientArgs:
    def test_pinned_to_endpoint_with_key(self):
        kwargs = storage_client_args(_target())
        assert kwargs["account_url"] == "http://127.0.0.1:10000/devstoreaccount1"
        assert kwargs["credential"] == {"account_name": "devstoreaccount1", "account_key": "ZGV2a2V5"}
        assert kwargs["connection_verify"] is False
        assert "conn_str" not in kwargs

    def test_falls_back_to_connection_string(self):
        sas = "BlobEndpoint=https://sa.blob.core.windows.net;SharedAccessSignature=sv=2024&sig=abc"
        kwargs = storage_client_args(_target(account_key=None, credential_name=None, connection_string=sas,
                                             verify_certificate=True))
        assert kwargs == {"connection_verify": True, "conn_str": sas}


class TestBlobBackend:
    async def test_creates_container(self, blob_service):
        backend = BlobNamespaceBackend(client_factory=lambda target: blob_service)
        handle = await backend.ensure(_target(), _spec(ResourceKind.BLOB_CONTAINER, "sabimport"))
        blob_service.get_container_client.assert_called_once_with("sabimport")
        blob_service.container.create_container.assert_awaited_once()
        assert handle.name == "sabimport"

    async def test_existing_container_tolerated(self, blob_service):
        blob_service.container.create_container.side_effect = ResourceExistsError(message="exists")
        backend = BlobNamespaceBackend(client_factory=lambda target: blob_service)
        handle = await backend.ensure(_target(), _spec(ResourceKind.BLOB_CONTAINER, "sabimport"))
        assert handle is not None
        blob_service.close.assert_not_awaited()

    @pytest.mark.parametrize("status_code,code", [
        (403, ErrorCode.AUTHORIZATION_FAILED),
        (503, ErrorCode.SERVICE_UNAVAILABLE),
        (500, ErrorCode.CONTAINER_ENSURE_FAILED),
    ])
    async def test_http_errors_classified(self, blob_service, status_code, code):
        blob_service.container.create_container.side_effect = _http_error(status_code)
        backend = BlobNamespaceBackend(client_factory=lambda target: blob_service)
        with pytest.raises(NamespaceEnsureError) as exc_info:
            await backend.ensure(_target(), _spec(ResourceKind.BLOB_CONTAINER, "sabimport"))
        assert exc_info.value.error_code == code
        blob_service.close.assert_awaited_once()

    async def test_write_uploads_json_blob(self, blob_service):
        backend = BlobNamespaceBackend(client_factory=lambda target: blob_service)
        handle = await backend.ensure(_target(), _spec(ResourceKind.BLOB_CONTAINER, "sabimport"))
        await handle.write("item-1", {"id": "item-1", "title": "Seeded"}, PARTITION_KEY)

        kwargs = blob_service.container.upload_blob.await_args.kwargs
        assert kwargs["name"] == "item-1.json"
        assert json.loads(kwargs["data"]) == {"id": "item-1", "title": "Seeded"}
        assert kwargs["overwrite"] is False
        assert kwargs["metadata"] == {"filePath": PARTITION_KEY}
        assert kwargs["content_settings"].content_type == "application/json"

    async def test_close(self, blob_service):
        backend = BlobNamespaceBackend(client_factory=lambda target: blob_service)
        async with await backend.ensure(_target(), _spec(ResourceKind.BLOB_CONTAINER, "sabimport")):
            pass
        blob_service.close.assert_awaited_once()

    async def test_ping(self, blob_service):
        backend = BlobNamespaceBackend(client_factory=lambda target: blob_service)
        await backend.ping(_target())
        blob_service.get_service_properties.assert_awaited_once()
        blob_service.close.assert_awaited_once()


class TestQueueBackend:
    async def test_creates_queue(self, queue_service):
        backend = QueueNamespaceBackend(client_factory=lambda target: queue_service)
        await backend.ensure(_target(ResourceKind.QUEUE), _spec(ResourceKind.QUEUE, "saqimport"))
        queue_service.get_queue_client.assert_called_once_with("saqimport")
        queue_service.queue.create_queue.assert_awaited_once()

    async def test_existing_queue_tolerated(self, queue_service):
        queue_service.queue.create_queue.side_effect = ResourceExistsError(message="exists")
        backend = QueueNamespaceBackend(client_factory=lambda target: queue_service)
        assert await backend.ensure(_target(ResourceKind.QUEUE), _spec(ResourceKind.QUEUE, "saqimport"))

    async def test_http_error_default_code(self, queue_service):
        queue_service.queue.create_queue.side_effect = _http_error(500)
        backend = QueueNamespaceBackend(client_factory=lambda target: queue_service)
        with pytest.raises(NamespaceEnsureError) as exc_info:
            await backend.ensure(_target(ResourceKind.QUEUE), _spec(ResourceKind.QUEUE, "saqimport"))
        assert exc_info.value.error_code == ErrorCode.QUEUE_ENSURE_FAILED
        queue_service.close.assert_awaited_once()

    async def test_write_sends_base64_json(self, queue_service):
        backend = QueueNamespaceBackend(client_factory=lambda target: queue_service)
        handle = await backend.ensure(_target(ResourceKind.QUEUE), _spec(ResourceKind.QUEUE, "saqimport"))
        await handle.write("item-2", {"title": "Seeded"}, PARTITION_KEY)

        encoded = queue_service.queue.send_message.await_args.args[0]
        message = json.loads(base64.b64decode(encoded))
        assert message == {"title": "Seeded", "id": "item-2", "filePath": PARTITION_KEY}

    async def test_oversized_message_rejected(self, queue_service):
        backend = QueueNamespaceBackend(client_factory=lambda target: queue_service)
        handle = await backend.ensure(_target(ResourceKind.QUEUE), _spec(ResourceKind.QUEUE, "saqimport"))
        with pytest.raises(ValueError):
            await handle.write("big", {"description": "x" * MAX_MESSAGE_BYTES}, PARTITION_KEY)
        queue_service.queue.send_message.assert_not_awaited()

    async def test_ping_failure_closes(self, queue_service):
        queue_service.get_service_properties.side_effect = ConnectionRefusedError("azurite down")
        backend = QueueNamespaceBackend(client_factory=lambda target: queue_service)
        with pytest.raises(ConnectionRefusedError):
            await backend.ping(_target(ResourceKind.QUEUE))
        queue_service.close.assert_awaited_once()
