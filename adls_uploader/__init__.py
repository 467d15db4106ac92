"""
adls_uploader - Async chunked uploads to Azure Data Lake Storage.

Usage:
    >>> from adls_uploader import ADLSUploader, LocalFile
    >>>
    >>> uploader = ADLSUploader(get_item_upload_url=lambda item: f"{url}/{item.file.name}{sas}")
    >>> uploader.add_file(LocalFile.from_path("backup.tar"))
    >>> await uploader.upload()
"""
import logging
from .uploader import ADLSUploader
from .core.logging import set_level

from .core.exceptions import (
    UploaderException,
    TransferError,
    TransferAbortedError,
    UploadInProgressError,
    InvalidFileError,
)
from .core.upload import (
    FileItem,
    UploaderConfig,
    TransferClientConfig,
    UploadState,
    CancellationToken,
    LocalFile,
    MemoryFile,
    DataLakeFileClient,
    DataLakeClientFactory,
    LocalFileProtocol,
    FileClientProtocol,
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for adls_uploader modules.
    
    This ensures that all adls_uploader loggers are properly configured
    to show log messages at the specified level.
    
    Args:
        level: Logging level (default: logging.INFO)
    """
    set_level(level)


__all__ = [
    'ADLSUploader',
    'UploaderConfig',
    'TransferClientConfig',
    'FileItem',
    'UploadState',
    'CancellationToken',
    'LocalFile',
    'MemoryFile',
    'DataLakeFileClient',
    'DataLakeClientFactory',
    'LocalFileProtocol',
    'FileClientProtocol',
    'UploaderException',
    'TransferError',
    'TransferAbortedError',
    'UploadInProgressError',
    'InvalidFileError',
    'setup_logging',
]
