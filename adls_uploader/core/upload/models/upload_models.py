"""
Data models for upload module.

Uses dataclasses for type-safe data structures.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, Callable

from ..protocols import LocalFileProtocol, FileClientFactory, UrlResolver
from ...logging import get_logger

logger = get_logger('upload.config')

DEFAULT_CHUNK_SIZE = 100 * 1024 * 1024  # 100 MiB
DEFAULT_CHUNK_UPLOAD_RETRIES = 5


def _noop(*args, **kwargs) -> None:
    return None


def is_positive_integer(value: Any) -> bool:
    """Returns True for ints greater than zero (bools excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class UploadState(Enum):
    """Lifecycle of an upload run."""
    IDLE = 'idle'
    UPLOADING = 'uploading'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class ItemOutcome(Enum):
    """Result of transferring a single queue item."""
    COMPLETED = 'completed'
    FAILED = 'failed'
    CANCELLED = 'cancelled'


@dataclass(eq=False)
class FileItem:
    """
    One queued file.

    Attributes:
        file: Local file handle (name, size, type, range reads)
        uploaded_bytes: Bytes of the file transferred so far
        progress: uploaded_bytes / file.size * 100 (0 for empty files)
        is_uploading: True only while this item is being transferred
        payload: Optional caller-attached value, never touched by the engine

    Items compare by identity; the queue keys them by ``file.name``.
    """
    file: LocalFileProtocol
    uploaded_bytes: int = 0
    progress: float = 0.0
    is_uploading: bool = False
    payload: Any = None

    @property
    def name(self) -> str:
        """Returns the file name (queue identity key)."""
        return self.file.name

    @property
    def size(self) -> int:
        """Returns the file size in bytes."""
        return self.file.size

    @property
    def is_complete(self) -> bool:
        """Returns True if a previous run transferred the whole file."""
        return self.progress == 100

    def reset(self) -> None:
        """Forget transferred bytes (the remote object is recreated empty)."""
        self.uploaded_bytes = 0
        self.progress = 0.0


@dataclass(frozen=True)
class ChunkInfo:
    """
    Information about a file chunk.

    Attributes:
        index: Chunk index
        start: Start position in bytes
        end: End position in bytes (exclusive)
    """
    index: int
    start: int
    end: int

    @property
    def size(self) -> int:
        """Returns chunk size."""
        return self.end - self.start


@dataclass
class TransferClientConfig:
    """
    Configuration for the default Data Lake transfer client.

    Attributes:
        api_version: Value of the x-ms-version header
        timeout: Total timeout per request in seconds
        connect_timeout: Connection timeout in seconds
        progress_block_size: Bytes streamed between progress reports
        extra_headers: Headers added to every request
    """
    api_version: str = '2021-08-06'
    timeout: float = 300.0
    connect_timeout: float = 30.0
    progress_block_size: int = 4 * 1024 * 1024
    extra_headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not is_positive_integer(self.progress_block_size):
            self.progress_block_size = 4 * 1024 * 1024

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(total=self.timeout, connect=self.connect_timeout)


@dataclass
class UploaderConfig:
    """
    Configuration for ADLSUploader.

    Only ``get_item_upload_url`` is required. Invalid numeric options fall
    back to their defaults silently and missing hooks become no-ops, so the
    engine never has to re-check them per call.

    Attributes:
        get_item_upload_url: Resolves the upload URL of an item (sync or async)
        chunk_size: Bytes per transfer call (default 100 MiB)
        chunk_upload_retries: Attempts per chunk before the file fails (default 5)
        on_item_start: Awaited before an item's first network call
        on_item_progress: Called synchronously on every progress report
        on_item_complete: Awaited after an item is finalized
        on_item_error: Awaited with (item, error) when an item fails
        on_start: Awaited when a run starts
        on_progress: Called synchronously with the aggregate percentage
        on_complete: Awaited when a run completes without cancellation
        client_factory: Builds a transfer client for a resolved URL
    """
    get_item_upload_url: UrlResolver
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_upload_retries: int = DEFAULT_CHUNK_UPLOAD_RETRIES

    on_item_start: Optional[Callable] = None
    on_item_progress: Optional[Callable] = None
    on_item_complete: Optional[Callable] = None
    on_item_error: Optional[Callable] = None

    on_start: Optional[Callable] = None
    on_progress: Optional[Callable] = None
    on_complete: Optional[Callable] = None

    client_factory: Optional[FileClientFactory] = None

    def __post_init__(self):
        """Validate and normalize config."""
        if not callable(self.get_item_upload_url):
            raise TypeError("get_item_upload_url must be callable")

        if not is_positive_integer(self.chunk_size):
            logger.debug(f"Invalid chunk_size {self.chunk_size!r}, using {DEFAULT_CHUNK_SIZE}")
            self.chunk_size = DEFAULT_CHUNK_SIZE

        if not is_positive_integer(self.chunk_upload_retries):
            logger.debug(
                f"Invalid chunk_upload_retries {self.chunk_upload_retries!r}, "
                f"using {DEFAULT_CHUNK_UPLOAD_RETRIES}"
            )
            self.chunk_upload_retries = DEFAULT_CHUNK_UPLOAD_RETRIES

        for hook in (
            'on_item_start', 'on_item_progress', 'on_item_complete', 'on_item_error',
            'on_start', 'on_progress', 'on_complete'
        ):
            if getattr(self, hook) is None:
                setattr(self, hook, _noop)

        if self.client_factory is None:
            from ..services.datalake_client import DataLakeClientFactory
            self.client_factory = DataLakeClientFactory(TransferClientConfig())
