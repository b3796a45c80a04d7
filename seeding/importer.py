# ============================================================================
# IMPORT EXECUTOR
# ============================================================================
# STATUS: Service - Import phase of every seed routine
# PURPOSE: Write a batch of records into an ensured namespace
# CREATED: 17 OCT 2026
# ============================================================================
"""
Import Executor.

Writes records one at a time, in order. Each record is stamped with
provenance, a fresh id and the batch partition key before its single
create call. One bad record never stops the batch: its failure is
recorded and the next record is written.

The cancellation token is checked before every write. A write already
in flight is allowed to finish.

A record source that raises ends the batch; what was written so far
stays in the summary and the error lands in `ImportSummary.aborted`.
"""

import asyncio
import logging
import socket
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from core.cancellation import CancellationToken
from core.errors import ErrorCode, ItemWriteError, SeedingError, classify_status_code
from core.models import FailedItem, ImportDocument, ImportSummary, ResourceItem, SeedPhase
from infrastructure.interface_repository import NamespaceHandle
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "ImportExecutor")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ImportExecutor:
    """
    Writes generated records into a namespace.

    Args:
        imported_by: Provenance stamp (defaults to the host name)
        id_factory: Item id source (uuid4 strings by default)
        clock: Source of `imported_on`
        log: Optional logger override
    """

    def __init__(
        self,
        imported_by: Optional[str] = None,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.imported_by = imported_by or socket.gethostname()
        self.id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self.clock = clock or _utc_now
        self.logger = log or logger

    async def import_all(
        self,
        namespace: NamespaceHandle,
        records: Iterable[ResourceItem],
        partition_key: str,
        cancel_token: CancellationToken,
    ) -> ImportSummary:
        """
        Write every record into `namespace`.

        Args:
            namespace: Ensured namespace handle
            records: Records to write (consumed lazily, in order)
            partition_key: Partition key value shared by the whole batch
            cancel_token: Checked before each write

        Returns:
            ImportSummary (cancelled=True when stopped early; `aborted` set when the
            record source raised)
        """
        resource_name = namespace.spec.resource_name
        summary = ImportSummary()
        source = iter(records)

        while True:
            try:
                record = next(source)
            except StopIteration:
                break
            except Exception as e:
                summary.aborted = self._source_error(e, resource_name, summary.attempted_count)
                self.logger.error(
                    f"Record source for {namespace.name} failed after "
                    f"{summary.attempted_count} records: {type(e).__name__}: {e}",
                    extra={'custom_dimensions': summary.aborted.to_dict()}
                )
                break

            if cancel_token.is_cancelled:
                summary.cancelled = True
                self.logger.warning(
                    f"Import into {namespace.name} cancelled after "
                    f"{summary.attempted_count} records: {cancel_token.reason or 'no reason given'}"
                )
                break

            item_id = self.id_factory()
            try:
                document = ImportDocument.from_record(
                    record,
                    item_id=item_id,
                    partition_key=partition_key,
                    imported_by=self.imported_by,
                    imported_on=self.clock(),
                )
                await namespace.write(item_id, document.to_item(), partition_key)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                error = self._item_error(e, resource_name, item_id)
                summary.failed.append(FailedItem(record=record, cause=error, item_id=item_id))
                self.logger.warning(
                    f"Failed to write {item_id} into {namespace.name}: {error.message}",
                    extra={'custom_dimensions': {
                        'resource_name': resource_name,
                        'phase': SeedPhase.IMPORT.value,
                        'record_id': item_id,
                        'error_code': error.error_code.value,
                    }}
                )
                continue

            summary.succeeded.append(item_id)
            self.logger.debug(f"Wrote {item_id} into {namespace.name}")

        self.logger.info(
            f"Imported {summary.succeeded_count} records into {namespace.name} "
            f"({summary.failed_count} failed, partition key {partition_key})",
            extra={'custom_dimensions': {
                'resource_name': resource_name,
                'phase': SeedPhase.IMPORT.value,
                'succeeded': summary.succeeded_count,
                'failed': summary.failed_count,
                'cancelled': summary.cancelled,
                'aborted': summary.aborted is not None,
            }}
        )
        return summary

    @staticmethod
    def _item_error(error: Exception, resource_name: str, item_id: str) -> ItemWriteError:
        if isinstance(error, ItemWriteError):
            return error
        if isinstance(error, SeedingError):
            code = error.error_code
        else:
            code = classify_status_code(getattr(error, "status_code", None), ErrorCode.ITEM_WRITE_FAILED)
        item_error = ItemWriteError(
            f"{type(error).__name__}: {error}",
            resource_name=resource_name,
            error_code=code,
            record_id=item_id,
        )
        item_error.__cause__ = error
        return item_error

    @staticmethod
    def _source_error(error: Exception, resource_name: str, attempted: int) -> ItemWriteError:
        source_error = ItemWriteError(
            f"Record source failed after {attempted} records: {type(error).__name__}: {error}",
            resource_name=resource_name,
            error_code=ErrorCode.RECORD_SOURCE_FAILED,
        )
        source_error.__cause__ = error
        return source_error
