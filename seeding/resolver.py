# ============================================================================
# CONNECTION RESOLVER
# ============================================================================
# STATUS: Service - Connect phase of every seed routine
# PURPOSE: Turn a declared resource into a ConnectionTarget
# CREATED: 17 OCT 2026
# ============================================================================
"""
Connection Resolver.

Walks a resource's parent chain to its account, awaits the account's
connection string and derives the client settings:

    Emulator  -> GATEWAY transport, certificate checks off, client pinned
                 to the nearest declared local endpoint
    Live      -> DIRECT transport, certificate checks on, endpoint from the
                 connection string
    Always    -> Eventual consistency

The connection string is logged only masked and only at DEBUG; INFO
logs use `ConnectionTarget.redacted()`.
"""

import asyncio
import logging
from typing import Dict, Optional

from core.cancellation import CancellationToken
from core.errors import CancellationError, ConnectionResolutionError, ErrorCode
from core.models import (
    ConnectionTarget,
    ConsistencyLevel,
    ResourceDescriptor,
    ResourceKind,
    SeedPhase,
    TransportMode,
)
from core.utils import mask_connection_string, parse_connection_string
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "ConnectionResolver")

# Connection string key holding the service endpoint, per resource kind
_ENDPOINT_KEYS = {
    ResourceKind.COSMOS_ACCOUNT: "accountendpoint",
    ResourceKind.COSMOS_DATABASE: "accountendpoint",
    ResourceKind.COSMOS_CONTAINER: "accountendpoint",
    ResourceKind.STORAGE_ACCOUNT: "blobendpoint",
    ResourceKind.BLOB_CONTAINER: "blobendpoint",
    ResourceKind.QUEUE: "queueendpoint",
}

_STORAGE_SERVICES = {
    ResourceKind.STORAGE_ACCOUNT: "blob",
    ResourceKind.BLOB_CONTAINER: "blob",
    ResourceKind.QUEUE: "queue",
}


def _storage_endpoint(kind: ResourceKind, parts: Dict[str, str]) -> Optional[str]:
    """`<protocol>://<account>.<service>.<suffix>` for storage strings without explicit endpoints."""
    account = parts.get("accountname")
    if not account:
        return None
    protocol = parts.get("defaultendpointsprotocol", "https")
    suffix = parts.get("endpointsuffix", "core.windows.net")
    return f"{protocol}://{account}.{_STORAGE_SERVICES[kind]}.{suffix}"


class ConnectionResolver:
    """
    Resolves ConnectionTargets for declared resources.

    Stateless; one instance may serve every routine.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.logger = log or logger

    async def resolve(self, resource: ResourceDescriptor, cancel_token: CancellationToken) -> ConnectionTarget:
        """
        Resolve the connection target for `resource`.

        Raises:
            ConnectionResolutionError: Incomplete topology, missing or invalid
                connection string, provider failure, or cancellation
        """
        phase = SeedPhase.CONNECT.value
        account = resource.account
        if account is None:
            raise ConnectionResolutionError(
                f"No account in the parent chain of '{resource.name}'",
                resource_name=resource.name,
                error_code=ErrorCode.TOPOLOGY_INCOMPLETE,
            )

        if account.connection_string is None:
            raise ConnectionResolutionError(
                f"Account '{account.name}' has no connection string",
                resource_name=resource.name,
                error_code=ErrorCode.CONNECTION_STRING_MISSING,
            )

        connection_string = await self._await_connection_string(resource, account, cancel_token)
        parts = parse_connection_string(connection_string)
        self.logger.debug(
            f"Connection string for {account.name}: {mask_connection_string(connection_string)}"
        )

        endpoint = self._endpoint(resource, parts)
        if not endpoint:
            raise ConnectionResolutionError(
                f"Connection string for '{account.name}' has no endpoint for {resource.kind.value}",
                resource_name=resource.name,
                error_code=ErrorCode.CONNECTION_STRING_INVALID,
            )

        account_key = parts.get("accountkey")
        if resource.is_emulator:
            target = ConnectionTarget(
                resource_name=resource.name,
                account_name=account.name,
                kind=resource.kind,
                endpoint=endpoint,
                connection_string=connection_string,
                account_key=account_key,
                credential_name=parts.get("accountname"),
                transport_mode=TransportMode.GATEWAY,
                verify_certificate=False,
                limit_to_endpoint=True,
                consistency_level=ConsistencyLevel.EVENTUAL,
                is_emulator=True,
            )
        else:
            target = ConnectionTarget(
                resource_name=resource.name,
                account_name=account.name,
                kind=resource.kind,
                endpoint=endpoint,
                connection_string=connection_string,
                account_key=account_key,
                credential_name=parts.get("accountname"),
                transport_mode=TransportMode.DIRECT,
                verify_certificate=True,
                limit_to_endpoint=False,
                consistency_level=ConsistencyLevel.EVENTUAL,
                is_emulator=False,
            )

        self.logger.info(
            f"Resolved {resource.name} -> {target.redacted()} "
            f"({'emulator' if target.is_emulator else 'live'}, {target.transport_mode.value})",
            extra={'custom_dimensions': {
                'resource_name': resource.name,
                'phase': phase,
                'is_emulator': target.is_emulator,
            }}
        )
        return target

    async def _await_connection_string(
        self,
        resource: ResourceDescriptor,
        account: ResourceDescriptor,
        cancel_token: CancellationToken,
    ) -> str:
        source = account.connection_string
        phase = SeedPhase.CONNECT.value
        try:
            if isinstance(source, str):
                cancel_token.raise_if_cancelled(resource.name, phase)
                value = source
            else:
                value = await cancel_token.guard(source(), resource_name=resource.name, phase=phase)
        except CancellationError as e:
            raise ConnectionResolutionError(
                f"Cancelled while resolving connection for '{resource.name}'",
                resource_name=resource.name,
                error_code=ErrorCode.CANCELLED,
            ) from e
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Provider errors may echo the secret; keep only the type
            raise ConnectionResolutionError(
                f"Connection string provider for '{account.name}' failed: {type(e).__name__}",
                resource_name=resource.name,
                error_code=ErrorCode.CONNECTION_FAILED,
            ) from None

        if not value or not value.strip():
            raise ConnectionResolutionError(
                f"Account '{account.name}' returned an empty connection string",
                resource_name=resource.name,
                error_code=ErrorCode.CONNECTION_STRING_MISSING,
            )
        return value.strip()

    def _endpoint(self, resource: ResourceDescriptor, parts: Dict[str, str]) -> Optional[str]:
        if resource.is_emulator:
            for node in resource.chain():
                if node.local_endpoint:
                    return node.local_endpoint

        endpoint = parts.get(_ENDPOINT_KEYS[resource.kind])
        if endpoint:
            return endpoint
        if resource.kind in _STORAGE_SERVICES:
            return _storage_endpoint(resource.kind, parts)
        return None
