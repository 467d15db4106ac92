"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
"""
import mimetypes
from pathlib import Path
from typing import Tuple, Optional, Union

import aiofiles

from ...exceptions import InvalidFileError
from ...logging import get_logger

DEFAULT_CONTENT_TYPE = 'application/octet-stream'


class FileValidator:
    """
    Validates files before they are queued.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            InvalidFileError: If the file doesn't exist or is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.exists():
            raise InvalidFileError(f"File not found: {path}")

        if not path.is_file():
            raise InvalidFileError(f"Path is not a file: {path}")

        return path, path.stat().st_size


def guess_content_type(name: str) -> str:
    """Guess a MIME type from a file name."""
    content_type, _ = mimetypes.guess_type(name)
    return content_type or DEFAULT_CONTENT_TYPE


class LocalFile:
    """
    File on the local filesystem.

    Uses aiofiles for non-blocking range reads. The size is captured
    when the handle is created.

    Example:
        >>> file = LocalFile.from_path("video.mp4")
        >>> file.name, file.size, file.type
        ('video.mp4', 1048576, 'video/mp4')
    """

    def __init__(
        self,
        path: Union[str, Path],
        name: Optional[str] = None,
        type: Optional[str] = None,
        size: Optional[int] = None
    ):
        """
        Args:
            path: Path to the file
            name: Name used as queue key and remote name (defaults to the file name)
            type: MIME type (guessed from the name when omitted)
            size: Size in bytes (read from the filesystem when omitted)
        """
        self.path = Path(path)
        self.name = name or self.path.name
        self.type = type or guess_content_type(self.name)
        self.size = size if size is not None else self.path.stat().st_size
        self._logger = get_logger('upload.file')

    @classmethod
    def from_path(cls, path: Union[str, Path], **kwargs) -> 'LocalFile':
        """Validate a path and build a handle for it."""
        validated, size = FileValidator().validate(path)
        return cls(validated, size=size, **kwargs)

    async def read(self, start: int, end: int) -> bytes:
        """
        Read the byte range [start, end).

        Args:
            start: Start position in bytes
            end: End position in bytes

        Returns:
            Chunk data
        """
        async with aiofiles.open(self.path, 'rb') as f:
            await f.seek(start)
            data = await f.read(end - start)
        self._logger.debug(f"Read chunk: {start}-{end} ({len(data)} bytes) from {self.name}")
        return data

    def __repr__(self) -> str:
        return f"LocalFile({str(self.path)!r}, size={self.size})"


class MemoryFile:
    """File held in memory; handy for generated content and tests."""

    def __init__(self, name: str, data: bytes, type: Optional[str] = None):
        self.name = name
        self.data = bytes(data)
        self.type = type or guess_content_type(name)

    @property
    def size(self) -> int:
        return len(self.data)

    async def read(self, start: int, end: int) -> bytes:
        return self.data[start:end]

    def __repr__(self) -> str:
        return f"MemoryFile({self.name!r}, size={self.size})"
