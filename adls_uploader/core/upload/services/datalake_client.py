"""
Azure Data Lake Storage Gen2 transfer client.

Implements the create/append/flush cycle of the ADLS Gen2 path REST API
over aiohttp.
"""
from typing import AsyncIterator, Callable, Dict, Optional
import asyncio
import time

import aiohttp

from ..cancellation import CancellationToken
from ..models import TransferClientConfig
from ...exceptions import TransferError
from ...logging import get_logger


class DataLakeFileClient:
    """
    Transfer client for a single remote file.

    Responsibilities:
    - Create (or truncate) the remote file
    - Append byte ranges with streamed progress
    - Flush and close the file with its content type

    Appends honour an optional abort signal, so cancellation preempts
    an in-flight request.
    """

    def __init__(
        self,
        url: str,
        session: aiohttp.ClientSession,
        config: Optional[TransferClientConfig] = None
    ):
        """
        Initialize the client.

        Args:
            url: Upload URL of the file (may carry a SAS query string)
            session: HTTP session owned by the DataLakeClientFactory
            config: Transfer client configuration
        """
        self._url = url
        self._session = session
        self._config = config or TransferClientConfig()
        self._logger = get_logger('upload.datalake')

    @property
    def url(self) -> str:
        """Returns the upload URL."""
        return self._url

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {'x-ms-version': self._config.api_version, **self._config.extra_headers}
        if extra:
            headers.update(extra)
        return headers

    async def create(self) -> None:
        """Create an empty file, replacing any existing one."""
        await self._call('PUT', {'resource': 'file'}, self._headers({'Content-Length': '0'}))

    async def transfer(
        self,
        data: bytes,
        offset: int,
        length: int,
        *,
        on_progress: Optional[Callable[[int], None]] = None,
        abort_signal: Optional[CancellationToken] = None
    ) -> None:
        """
        Append ``length`` bytes of ``data`` at ``offset``.

        Args:
            data: Chunk data
            offset: Position of the chunk in the remote file
            length: Number of bytes to send
            on_progress: Called with the cumulative bytes sent by this call
            abort_signal: Token that preempts the request when cancelled

        Raises:
            TransferError: If the request fails
            TransferAbortedError: If the abort signal fires first
        """
        body = memoryview(data)[:length]
        await self._call(
            'PATCH',
            {'action': 'append', 'position': str(offset)},
            self._headers({
                'Content-Length': str(len(body)),
                'Content-Type': 'application/octet-stream'
            }),
            data=self._stream(body, on_progress),
            abort_signal=abort_signal
        )

    async def finalize(
        self,
        size: int,
        *,
        content_type: Optional[str] = None
    ) -> None:
        """
        Flush appended data up to ``size`` and close the file.

        Args:
            size: Final size of the file
            content_type: MIME type stored on the file
        """
        extra = {'Content-Length': '0'}
        if content_type:
            extra['x-ms-content-type'] = content_type
        await self._call(
            'PATCH',
            {'action': 'flush', 'position': str(size), 'close': 'true'},
            self._headers(extra)
        )

    async def _stream(
        self,
        body: memoryview,
        on_progress: Optional[Callable[[int], None]]
    ) -> AsyncIterator[bytes]:
        """Yield the body block by block, reporting cumulative bytes sent."""
        block_size = self._config.progress_block_size
        sent = 0
        while sent < len(body):
            block = body[sent:sent + block_size]
            yield block.tobytes()
            sent += len(block)
            if on_progress:
                on_progress(sent)

    async def _call(
        self,
        method: str,
        params: Dict[str, str],
        headers: Dict[str, str],
        data=None,
        abort_signal: Optional[CancellationToken] = None
    ) -> None:
        request = self._request(method, params, headers, data)
        if abort_signal is not None:
            await abort_signal.run(request)
        else:
            await request

    async def _request(
        self,
        method: str,
        params: Dict[str, str],
        headers: Dict[str, str],
        data=None
    ) -> None:
        action = params.get('action') or params.get('resource')
        start = time.time()
        self._logger.debug(f"{method} {action} {params}")

        try:
            async with self._session.request(
                method,
                self._url,
                params=params,
                headers=headers,
                data=data,
                timeout=self._config.to_aiohttp_timeout()
            ) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise TransferError(
                        f"{action} failed with HTTP {response.status}: {text[:200]}",
                        status=response.status
                    )
                await response.read()
        except asyncio.TimeoutError as e:
            elapsed = time.time() - start
            self._logger.error(f"{action} timeout after {elapsed:.2f}s")
            raise TransferError(f"{action} timed out after {elapsed:.2f}s") from e
        except aiohttp.ClientError as e:
            self._logger.error(f"{action} failed: {e}")
            raise TransferError(f"{action} failed: {e}") from e

        elapsed = time.time() - start
        self._logger.debug(f"{action} completed in {elapsed:.2f}s")


class DataLakeClientFactory:
    """
    Builds DataLakeFileClient instances sharing one HTTP session.

    The session is opened lazily and released with close(); the uploader
    closes it at the end of every run.
    """

    def __init__(self, config: Optional[TransferClientConfig] = None):
        self._config = config or TransferClientConfig()
        self._session: Optional[aiohttp.ClientSession] = None

    def __call__(self, url: str) -> DataLakeFileClient:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._config.to_aiohttp_timeout())
        return DataLakeFileClient(url, self._session, self._config)

    async def close(self) -> None:
        """Release the shared session."""
        if self._session is not None:
            await self._session.close()
            self._session = None
