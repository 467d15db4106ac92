"""Upload services module."""
from .file_service import FileValidator, LocalFile, MemoryFile, guess_content_type
from .datalake_client import DataLakeFileClient, DataLakeClientFactory

__all__ = [
    'FileValidator',
    'LocalFile',
    'MemoryFile',
    'guess_content_type',
    'DataLakeFileClient',
    'DataLakeClientFactory',
]
