"""
Protocol definitions for upload module.

Defines interfaces (protocols) for the collaborators of the upload engine:
local file handles, remote transfer clients and upload URL resolvers.
"""
from typing import Protocol, Callable, Optional, Union, Awaitable, TYPE_CHECKING

if TYPE_CHECKING:
    from .cancellation import CancellationToken
    from .models import FileItem


class LocalFileProtocol(Protocol):
    """
    Protocol for local file handles.

    A handle exposes the file name (queue identity key), its byte size,
    its MIME type and a range-read capability.
    """

    name: str
    size: int
    type: str

    async def read(self, start: int, end: int) -> bytes:
        """
        Read the byte range [start, end) of the file.

        Args:
            start: Start position in bytes
            end: End position in bytes (exclusive)

        Returns:
            The requested bytes
        """
        ...


class FileClientProtocol(Protocol):
    """
    Protocol for remote transfer clients.

    One client is built per resolved upload URL. Implementations perform
    the actual network I/O against the target store.
    """

    async def create(self) -> None:
        """Create (or reset to empty) the remote object."""
        ...

    async def transfer(
        self,
        data: bytes,
        offset: int,
        length: int,
        *,
        on_progress: Optional[Callable[[int], None]] = None,
        abort_signal: Optional['CancellationToken'] = None
    ) -> None:
        """
        Append a byte range to the remote object.

        Args:
            data: Chunk data
            offset: Position of the chunk in the remote object
            length: Number of bytes to transfer
            on_progress: Called with the cumulative bytes sent for this call
            abort_signal: Token that preempts the call when cancelled
        """
        ...

    async def finalize(self, size: int, *, content_type: Optional[str] = None) -> None:
        """
        Commit and close the remote object.

        Args:
            size: Final size of the object
            content_type: MIME type stored on the object
        """
        ...


class FileClientFactory(Protocol):
    """Protocol for callables building a transfer client for a URL."""

    def __call__(self, url: str) -> FileClientProtocol: ...


UrlResolver = Callable[['FileItem'], Union[str, Awaitable[str]]]
"""Resolves a (possibly short-lived) upload URL for an item, sync or async."""


class LoggerProtocol(Protocol):
    """Protocol for logger objects."""

    def debug(self, msg: str) -> None: ...
    def info(self, msg: str) -> None: ...
    def warning(self, msg: str) -> None: ...
    def error(self, msg: str) -> None: ...
