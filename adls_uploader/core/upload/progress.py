"""
Progress aggregation.

Turns the cumulative byte counts reported by a transfer client into
per-item and run-wide progress and forwards them to the progress hooks.
"""
import asyncio
import inspect
from typing import Callable, Iterable, Set

from .models import FileItem, ChunkInfo
from ..logging import get_logger

logger = get_logger('upload.progress')


def percentage(done: int, total: int) -> float:
    """Returns done / total * 100, or 0 when total is 0."""
    if total == 0:
        return 0.0
    return done / total * 100


class ProgressAggregator:
    """
    Tracks run-wide uploaded bytes against the size snapshot of the run.

    Progress hooks are called synchronously, once per report, and never
    awaited. A hook returning an awaitable is scheduled as a task.
    """

    def __init__(
        self,
        on_item_progress: Callable[[FileItem], object],
        on_progress: Callable[[float], object]
    ):
        """
        Args:
            on_item_progress: Called with the item after each report
            on_progress: Called with the run-wide percentage after each report
        """
        self._on_item_progress = on_item_progress
        self._on_progress = on_progress
        self._pending: Set[asyncio.Future] = set()
        self.size = 0
        self.uploaded_bytes = 0
        self.progress = 0.0

    def begin_run(self, items: Iterable[FileItem]) -> None:
        """Snapshot size and already-transferred bytes of the run's items."""
        items = list(items)
        self.size = sum(item.file.size for item in items)
        self.uploaded_bytes = sum(item.uploaded_bytes for item in items)
        self.progress = percentage(self.uploaded_bytes, self.size)

    def restart_item(self, item: FileItem) -> None:
        """Withdraw an item's bytes before its remote object is recreated."""
        self.uploaded_bytes -= item.uploaded_bytes
        item.reset()
        self.progress = percentage(self.uploaded_bytes, self.size)

    def reporter(self, item: FileItem, chunk: ChunkInfo) -> Callable[[int], None]:
        """
        Build the on_progress callback for one chunk attempt.

        Args:
            item: Item being transferred
            chunk: Chunk of the current attempt

        Returns:
            Callback taking the cumulative bytes loaded by this attempt
        """
        def on_progress(loaded_bytes: int) -> None:
            self.advance(item, chunk.start + loaded_bytes)
        return on_progress

    def advance(self, item: FileItem, position: int) -> None:
        """
        Move the item forward to an absolute file position.

        Only bytes past the item's last recorded position count, so a
        retried attempt re-reporting from zero is not double counted.
        """
        position = min(position, item.file.size)
        delta = position - item.uploaded_bytes
        if delta <= 0:
            return

        item.uploaded_bytes += delta
        item.progress = percentage(item.uploaded_bytes, item.file.size)

        self.uploaded_bytes += delta
        self.progress = percentage(self.uploaded_bytes, self.size)

        self._emit(self._on_item_progress, item)
        self._emit(self._on_progress, self.progress)

    def _emit(self, hook: Callable, *args) -> None:
        result = hook(*args)
        if inspect.isawaitable(result):
            future = asyncio.ensure_future(result)
            self._pending.add(future)
            future.add_done_callback(self._discard)

    def _discard(self, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if not future.cancelled() and future.exception() is not None:
            logger.warning(f"Progress hook failed: {future.exception()}")
