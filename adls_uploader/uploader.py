"""
ADLSUploader - queue-driven chunked uploads.

Usage:
    >>> from adls_uploader import ADLSUploader, LocalFile
    >>>
    >>> uploader = ADLSUploader(
    ...     get_item_upload_url=lambda item: f"{container_url}/{item.file.name}{sas}",
    ...     on_progress=lambda percent: print(f"{percent:.1f}%"),
    ... )
    >>> uploader.add_files([LocalFile.from_path("a.bin"), LocalFile.from_path("b.bin")])
    >>> await uploader.upload()
"""
import asyncio
import time
from typing import Iterable, List, Optional, Tuple

from .core.exceptions import UploadInProgressError
from .core.logging import get_logger
from .core.utils import maybe_await, format_size
from .core.upload.cancellation import CancellationToken
from .core.upload.coordinator import ItemUploadCoordinator
from .core.upload.models import FileItem, ItemOutcome, UploaderConfig, UploadState
from .core.upload.progress import ProgressAggregator
from .core.upload.protocols import LocalFileProtocol
from .core.upload.queue import FileQueue
from .core.upload.strategies import BaseChunkingStrategy, RetryStrategy

logger = get_logger('uploader')


class ADLSUploader:
    """
    Uploads a queue of files one chunk at a time.

    Files are processed strictly in queue order, chunks in ascending
    offset order. A single instance is reusable across runs; every run
    gets a fresh cancellation token.

    Observable state: ``queue``, ``is_uploading``, ``size``,
    ``uploaded_bytes``, ``progress`` and ``state``.
    """

    def __init__(
        self,
        config: Optional[UploaderConfig] = None,
        *,
        chunking_strategy: Optional[BaseChunkingStrategy] = None,
        retry_strategy: Optional[RetryStrategy] = None,
        **kwargs
    ):
        """
        Initialize the uploader.

        Args:
            config: Uploader configuration; built from kwargs when omitted
            chunking_strategy: Optional custom chunking strategy
            retry_strategy: Optional custom retry strategy
            **kwargs: UploaderConfig fields (get_item_upload_url, chunk_size, hooks...)
        """
        if config is None:
            config = UploaderConfig(**kwargs)
        elif kwargs:
            raise TypeError("Pass either a config or keyword options, not both")

        self._config = config
        self._queue = FileQueue()
        self._aggregator = ProgressAggregator(config.on_item_progress, config.on_progress)
        self._coordinator = ItemUploadCoordinator(
            config,
            self._aggregator,
            chunking_strategy=chunking_strategy,
            retry_strategy=retry_strategy
        )
        self._token = CancellationToken()
        self._is_uploading = False
        self._run_lock = asyncio.Lock()
        self._state = UploadState.IDLE

    @property
    def config(self) -> UploaderConfig:
        """Get current configuration."""
        return self._config

    @property
    def queue(self) -> Tuple[FileItem, ...]:
        """Read-only ordered view of the queue."""
        return self._queue.items

    @property
    def is_uploading(self) -> bool:
        return self._is_uploading

    @property
    def size(self) -> int:
        """Total bytes of the queued files."""
        return self._queue.size

    @property
    def uploaded_bytes(self) -> int:
        """Bytes transferred, relative to the size snapshot of the current run."""
        return self._aggregator.uploaded_bytes

    @property
    def progress(self) -> float:
        """Percentage of the current run's size snapshot transferred."""
        return self._aggregator.progress

    @property
    def state(self) -> UploadState:
        return self._state

    def add_file(self, file: LocalFileProtocol) -> None:
        """Queue a file; ignored if a file with the same name is queued."""
        if self._queue.add_file(file) is None:
            logger.debug(f"Skipping duplicate file: {file.name}")

    def add_files(self, files: Iterable[LocalFileProtocol]) -> None:
        """Queue several files in order, skipping duplicate names."""
        files = list(files)
        added = self._queue.add_files(files)
        if len(added) < len(files):
            logger.debug(f"Skipped {len(files) - len(added)} duplicate files")

    def remove_file(self, file: LocalFileProtocol) -> None:
        """Remove a queued file unless it is uploading."""
        self._queue.remove_file(file)

    def remove_item(self, item: FileItem) -> None:
        """Remove a queue item unless it is uploading."""
        self._queue.remove_item(item)

    def clear_queue(self) -> None:
        """Remove every item that is not uploading."""
        self._queue.clear()

    def cancel(self) -> None:
        """
        Cancel the current run.

        Aborts the in-flight transfer, clears the uploading flags and leaves
        the queue untouched. on_complete is not called for a cancelled run.
        """
        self._token.cancel()
        item = self._queue.uploading_item()
        if item is not None:
            item.is_uploading = False
        if self._is_uploading:
            self._state = UploadState.CANCELLED
            logger.info("Upload cancelled")
        self._is_uploading = False

    async def upload(self) -> None:
        """
        Upload every item queued at call time.

        Items added during the run wait for the next run. Items already at
        100% are skipped. A failing item fires on_item_error and the run
        moves on; hook exceptions propagate.

        A run started right after cancel() waits until the cancelled run
        has unwound, so one item is never driven by two runs.

        Raises:
            UploadInProgressError: If a run is already active
        """
        if self._is_uploading:
            raise UploadInProgressError("An upload is already in progress")

        items = list(self._queue)
        self._token = CancellationToken()
        token = self._token
        self._is_uploading = True
        self._state = UploadState.UPLOADING

        if self._run_lock.locked():
            logger.debug("Waiting for the cancelled upload to finish")
        async with self._run_lock:
            if token.cancelled:
                if self._token is token:
                    await self._release_clients()
                return
            await self._run(items, token)

    async def _run(self, items: List[FileItem], token: CancellationToken) -> None:
        self._aggregator.begin_run(items)
        start = time.time()
        logger.info(f"Uploading {len(items)} files ({format_size(self._aggregator.size)})")
        failed = 0
        try:
            await maybe_await(self._config.on_start)

            for item in items:
                if not self._is_active(token):
                    return
                if item.is_complete:
                    logger.debug(f"Skipping already uploaded file: {item.file.name}")
                    continue
                outcome = await self._coordinator.upload_item(
                    item, token, lambda: self._is_active(token)
                )
                if outcome is ItemOutcome.FAILED:
                    failed += 1

            if not self._is_active(token):
                return

            self._is_uploading = False
            self._state = UploadState.COMPLETED
            elapsed = time.time() - start
            logger.info(f"Upload completed in {elapsed:.2f}s ({failed} failed)")
            await maybe_await(self._config.on_complete)
        finally:
            # a newer run may already own the token and the client session
            if self._token is token:
                self._is_uploading = False
                if self._state is UploadState.UPLOADING:
                    self._state = UploadState.IDLE
                await self._release_clients()

    def _is_active(self, token: CancellationToken) -> bool:
        return self._is_uploading and not token.cancelled

    async def _release_clients(self) -> None:
        factory = self._config.client_factory
        if hasattr(factory, 'close'):
            await factory.close()
