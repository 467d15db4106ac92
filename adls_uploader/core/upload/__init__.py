"""
Upload module for chunked file uploads.

This module provides the pieces the uploader is assembled from: the file
queue, progress aggregation, cancellation and the per-item transfer engine.
Chunking and retry behaviour are pluggable strategies.
"""
from .cancellation import CancellationToken
from .coordinator import ItemUploadCoordinator
from .models import (
    FileItem,
    ChunkInfo,
    UploaderConfig,
    TransferClientConfig,
    UploadState,
    ItemOutcome,
)
from .progress import ProgressAggregator
from .protocols import (
    LocalFileProtocol,
    FileClientProtocol,
    FileClientFactory,
    UrlResolver,
)
from .queue import FileQueue
from .services import (
    LocalFile,
    MemoryFile,
    FileValidator,
    DataLakeFileClient,
    DataLakeClientFactory,
)

__all__ = [
    # Main classes
    'ItemUploadCoordinator',
    'FileQueue',
    'ProgressAggregator',
    'CancellationToken',

    # Models
    'FileItem',
    'ChunkInfo',
    'UploaderConfig',
    'TransferClientConfig',
    'UploadState',
    'ItemOutcome',

    # Files and transfer clients
    'LocalFile',
    'MemoryFile',
    'FileValidator',
    'DataLakeFileClient',
    'DataLakeClientFactory',

    # Protocols
    'LocalFileProtocol',
    'FileClientProtocol',
    'FileClientFactory',
    'UrlResolver',
]
