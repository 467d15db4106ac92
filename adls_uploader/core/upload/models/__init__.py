"""Upload models."""
from .upload_models import (
    FileItem,
    ChunkInfo,
    UploaderConfig,
    TransferClientConfig,
    UploadState,
    ItemOutcome,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CHUNK_UPLOAD_RETRIES,
)

__all__ = [
    'FileItem',
    'ChunkInfo',
    'UploaderConfig',
    'TransferClientConfig',
    'UploadState',
    'ItemOutcome',
    'DEFAULT_CHUNK_SIZE',
    'DEFAULT_CHUNK_UPLOAD_RETRIES',
]
