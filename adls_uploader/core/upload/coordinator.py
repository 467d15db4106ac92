"""
Item upload coordinator.

Runs the chunked transfer of one queue item: resolve the upload target,
create the remote file, append chunks with bounded retry, finalize.
Depends on abstractions (transfer client factory, URL resolver, strategies),
not on a concrete store.
"""
from typing import Callable, Optional
import time

from .cancellation import CancellationToken
from .models import FileItem, ItemOutcome, UploaderConfig
from .progress import ProgressAggregator
from .protocols import FileClientProtocol, LoggerProtocol
from .strategies import (
    BaseChunkingStrategy,
    FixedSizeChunkingStrategy,
    RetryStrategy,
    ImmediateRetryStrategy
)
from ..logging import get_logger
from ..utils import maybe_await, format_size


class ItemUploadCoordinator:
    """
    Coordinates the transfer of a single file.

    Uses dependency injection for all components, making it:
    - Testable (mock the client factory and URL resolver)
    - Extensible (swap chunking or retry strategies)

    Failures of the remote calls are contained to the item and reported
    through ``on_item_error``; hook errors are not caught.
    """

    def __init__(
        self,
        config: UploaderConfig,
        aggregator: ProgressAggregator,
        chunking_strategy: Optional[BaseChunkingStrategy] = None,
        retry_strategy: Optional[RetryStrategy] = None,
        logger: Optional[LoggerProtocol] = None
    ):
        """
        Initialize item upload coordinator.

        Args:
            config: Normalized uploader configuration
            aggregator: Progress aggregator of the uploader
            chunking_strategy: Strategy for chunk boundaries
            retry_strategy: Strategy deciding chunk retries
            logger: Logger instance
        """
        self._config = config
        self._aggregator = aggregator
        self._chunking = chunking_strategy or FixedSizeChunkingStrategy(config.chunk_size)
        self._retry = retry_strategy or ImmediateRetryStrategy(config.chunk_upload_retries)
        self._logger = logger or get_logger('upload.coordinator')

    async def upload_item(
        self,
        item: FileItem,
        token: CancellationToken,
        is_active: Callable[[], bool] = lambda: True
    ) -> ItemOutcome:
        """
        Transfer one item.

        Args:
            item: Queue item to transfer
            token: Cancellation token of the current run
            is_active: Returns False once the run was cancelled

        Returns:
            COMPLETED or CANCELLED (on_item_complete fired), or FAILED
            (on_item_error fired)
        """
        self._aggregator.restart_item(item)
        item.is_uploading = True
        try:
            await maybe_await(self._config.on_item_start, item)

            start = time.time()
            self._logger.info(f"Starting upload: {item.file.name} ({format_size(item.file.size)})")
            try:
                outcome = await self._transfer(item, token, is_active)
            except Exception as e:
                if not self._cancelled(token, is_active):
                    item.is_uploading = False
                    self._logger.error(f"Upload of {item.file.name} failed: {e}")
                    await maybe_await(self._config.on_item_error, item, e)
                    return ItemOutcome.FAILED
                outcome = ItemOutcome.CANCELLED

            # a cancelled transfer ends the item cleanly, without finalize
            item.is_uploading = False
            if outcome is ItemOutcome.CANCELLED:
                self._logger.info(f"Upload of {item.file.name} cancelled at {item.uploaded_bytes} bytes")
            else:
                elapsed = time.time() - start
                self._logger.info(f"Upload of {item.file.name} completed in {elapsed:.2f}s")
            await maybe_await(self._config.on_item_complete, item)
            return outcome
        finally:
            item.is_uploading = False

    async def _transfer(
        self,
        item: FileItem,
        token: CancellationToken,
        is_active: Callable[[], bool]
    ) -> ItemOutcome:
        file = item.file

        client = await self._get_client(item, token, is_active)
        if client is None:
            return ItemOutcome.CANCELLED
        await token.run(client.create())

        offset = 0
        index = 0
        while offset < file.size:
            if self._cancelled(token, is_active):
                return ItemOutcome.CANCELLED

            chunk = self._chunking.next_chunk(offset, file.size, index)
            data = await file.read(chunk.start, chunk.end)
            attempt = 1
            while True:
                client = await self._get_client(item, token, is_active)
                if client is None:
                    return ItemOutcome.CANCELLED

                self._logger.debug(
                    f"Chunk {chunk.index} of {file.name}: {chunk.start}-{chunk.end} (attempt {attempt})"
                )
                try:
                    await token.run(client.transfer(
                        data,
                        chunk.start,
                        chunk.size,
                        on_progress=self._aggregator.reporter(item, chunk),
                        abort_signal=token
                    ))
                    break
                except Exception as e:
                    if self._cancelled(token, is_active):
                        return ItemOutcome.CANCELLED
                    if not self._retry.should_retry(attempt):
                        self._logger.error(
                            f"Chunk {chunk.index} of {file.name} failed after {attempt} attempts: {e}"
                        )
                        raise
                    self._logger.warning(f"Chunk {chunk.index} of {file.name} failed (attempt {attempt}): {e}")
                    attempt += 1
                    await self._retry.wait_async(attempt)

            self._aggregator.advance(item, chunk.end)
            offset = chunk.end
            index += 1

        await token.run(client.finalize(file.size, content_type=file.type))
        return ItemOutcome.COMPLETED

    async def _get_client(
        self,
        item: FileItem,
        token: CancellationToken,
        is_active: Callable[[], bool]
    ) -> Optional[FileClientProtocol]:
        """Resolve a fresh upload URL and build a client for it; None if cancelled."""
        if self._cancelled(token, is_active):
            return None
        url = await maybe_await(self._config.get_item_upload_url, item)
        return self._config.client_factory(url)

    @staticmethod
    def _cancelled(token: CancellationToken, is_active: Callable[[], bool]) -> bool:
        return token.cancelled or not is_active()
