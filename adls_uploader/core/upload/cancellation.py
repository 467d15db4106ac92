"""
Cooperative cancellation for upload runs.

A token is one-shot: once cancelled it stays cancelled, so every new
upload run must work against a fresh token.
"""
import asyncio
from typing import Awaitable, TypeVar

from ..exceptions import TransferAbortedError

T = TypeVar('T')


class CancellationToken:
    """
    One-shot abort signal shared by everything running in one upload run.

    The engine polls ``cancelled`` at loop boundaries; transfer clients
    wrap their in-flight calls with ``run()`` so they can be preempted.

    Example:
        >>> token = CancellationToken()
        >>> await token.run(client.transfer(...))  # raises TransferAbortedError on cancel()
    """

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        """Returns True once cancel() was called."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Signal abort. Idempotent."""
        self._event.set()

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        await self._event.wait()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` unless the token is cancelled first.

        Args:
            awaitable: Coroutine or future to run

        Returns:
            Result of the awaitable

        Raises:
            TransferAbortedError: If the token fired before the awaitable finished;
                the awaitable is cancelled in that case
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise TransferAbortedError()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task.done():
            return task.result()

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        raise TransferAbortedError()
