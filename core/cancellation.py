"""
Cooperative Cancellation Token.

One token travels from the dispatcher through every phase of a routine.
Phases check it before starting new work; network waits that are safe
to abandon (connection resolution, namespace ensure) race against it.
Item writes are never abandoned mid-flight; the importer only checks the
token between writes.

Exports:
    CancellationToken: asyncio.Event backed token
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from .errors import CancellationError

T = TypeVar("T")


class CancellationToken:
    """
    Cooperative cancellation flag with an awaitable signal.

    Usage:
        token = CancellationToken()
        target = await token.guard(resolve(...), resource_name="cdbimport", phase="connect")
        token.cancel("shutdown")
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        """Signal cancellation. Idempotent; the first reason wins."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    async def wait(self) -> None:
        """Block until cancellation is signalled."""
        await self._event.wait()

    async def sleep(self, seconds: float) -> bool:
        """
        Sleep for `seconds`, waking early on cancellation.

        Returns:
            True if the token is cancelled when the sleep ends
        """
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
        return self.is_cancelled

    def raise_if_cancelled(self, resource_name: Optional[str] = None, phase: Optional[str] = None) -> None:
        """Raise CancellationError when the token has been signalled."""
        if self.is_cancelled:
            raise CancellationError(
                f"Cancelled: {self._reason or 'no reason given'}",
                resource_name=resource_name,
                phase=phase,
            )

    async def guard(
        self,
        awaitable: Awaitable[T],
        resource_name: Optional[str] = None,
        phase: Optional[str] = None,
    ) -> T:
        """
        Await `awaitable` unless the token fires first.

        Returns:
            The awaitable's result

        Raises:
            CancellationError: If the token was (or becomes) cancelled before
                the awaitable completes; the awaitable is then cancelled
        """
        if self.is_cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled(resource_name, phase)

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()

        if task in done:
            return task.result()

        try:
            await task
        except asyncio.CancelledError:
            pass
        self.raise_if_cancelled(resource_name, phase)
        raise CancellationError("Cancelled", resource_name=resource_name, phase=phase)
